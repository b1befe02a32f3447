"""HTTP client for the nail design webhook.

The remote service owns generation, storage and deletion.  This module wraps
its four endpoints behind :class:`NailDesignClient` and turns every failure
into one of a small family of exceptions so the UI handlers can show a short
message next to the control that triggered the call.

Endpoints
---------
========  ==========================  ==================  =======================
Method    Path                        Body                Success shape
========  ==========================  ==================  =======================
POST      ``nails-creator``           ``{prompt}``        ``{url, prompt, id}``
GET       ``fetch-nails?sort=...``    -                   ``[{data: [...]}]``
POST      ``download-image``          ``{id}``            ``{base64}``
DELETE    ``delete-image``            ``{id}``            any 2xx
========  ==========================  ==================  =======================

Every request carries the static key in an ``apikey`` header.  Nothing is
cached and nothing is retried: a failed call raises and the user decides
whether to try again.

Usage
-----
    from nailstudio.api.client import NailDesignClient
    from nailstudio.core.config import config

    with NailDesignClient.from_config(config) as client:
        design = client.create("french tips with tiny gold stars")
        designs = client.list_designs("desc")
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx
import pydantic

from nailstudio.api.models import (
    CreateDesignRequest,
    DesignIdRequest,
    DownloadPayload,
    GeneratedDesign,
    NailDesign,
)
from nailstudio.core.config import NailStudioConfig
from nailstudio.core.validation import validate_prompt

logger = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")

CREATE_PATH = "nails-creator"
LIST_PATH = "fetch-nails"
DOWNLOAD_PATH = "download-image"
DELETE_PATH = "delete-image"


class ServiceError(Exception):
    """Base class for failures talking to the remote service."""


class RequestError(ServiceError):
    """The service answered with a non-success status, or could not be reached.

    Attributes:
        status_code: HTTP status of the response, or ``None`` when the request
            never produced one (connection refused, timeout, ...).
        detail: Message supplied by the service for a rejected request
            (status 400 with a ``message`` field), else ``None``.
    """

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ResponseShapeError(ServiceError):
    """The service answered 2xx but the body is not shaped as expected."""


class NailDesignClient:
    """Thin wrapper over the four webhook endpoints.

    The client owns a single ``httpx.Client``; use it as a context manager or
    call :meth:`close` when done.

    Args:
        base_url: Webhook base URL, e.g. ``https://api.neoglow.net/webhook/isabela/``.
        api_key: Value sent in the ``apikey`` header.
        timeout: Transport timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url
        self._http = httpx.Client(
            base_url=base_url,
            headers={"apikey": api_key},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, cfg: NailStudioConfig, transport: httpx.BaseTransport | None = None
    ) -> NailDesignClient:
        """Build a client from a :class:`NailStudioConfig`."""
        return cls(
            base_url=cfg.api_base_url,
            api_key=cfg.api_key,
            timeout=cfg.request_timeout,
            transport=transport,
        )

    def __enter__(self) -> NailDesignClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, prompt: str) -> GeneratedDesign:
        """Generate a new design from ``prompt``.

        Args:
            prompt: Free-text description.  Must contain non-whitespace text.

        Returns:
            The generated design (id, prompt and preview URL).

        Raises:
            ValidationError: If the prompt is empty; no request is sent.
            RequestError: On a non-success status.  For status 400 the
                service's own ``message`` is kept in ``detail``.
            ResponseShapeError: If the success body lacks ``id`` or ``url``.
        """
        validate_prompt(prompt)

        logger.info(f"Creating design ({len(prompt)} chars)")
        body = CreateDesignRequest(prompt=prompt).model_dump()
        response = self._send("POST", CREATE_PATH, json=body)
        data = self._json_or_none(response)

        if not response.is_success:
            detail = None
            if response.status_code == 400 and isinstance(data, dict):
                message = data.get("message")
                if isinstance(message, str) and message:
                    detail = message
            logger.warning(f"Create rejected: status {response.status_code}, detail={detail!r}")
            raise RequestError(
                f"Create failed with status {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        try:
            design = GeneratedDesign.model_validate(data)
        except pydantic.ValidationError as e:
            raise ResponseShapeError(f"Unexpected create response: {e}") from e

        logger.info(f"Created design {design.id}")
        return design

    def list_designs(self, sort_order: SortOrder = "desc") -> list[NailDesign]:
        """List every stored design in the order the service returns them.

        Args:
            sort_order: ``"desc"`` for newest first, ``"asc"`` for oldest first.

        Returns:
            Designs in server order.  The service sorts; nothing is re-sorted here.

        Raises:
            ValueError: If ``sort_order`` is not ``"asc"`` or ``"desc"``.
            RequestError: On a non-success status.
            ResponseShapeError: If the body is not ``[{"data": [...]}]``.
        """
        if sort_order not in SORT_ORDERS:
            raise ValueError(f"sort_order must be 'asc' or 'desc', got {sort_order!r}")

        logger.info(f"Listing designs (sort={sort_order})")
        response = self._send("GET", LIST_PATH, params={"sort": sort_order})

        if not response.is_success:
            logger.warning(f"List failed: status {response.status_code}")
            raise RequestError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        payload = self._json_or_none(response)

        # The service wraps results in a single-element array: [{"data": [...]}]
        envelope = payload[0] if isinstance(payload, list) and payload else None
        items = envelope.get("data") if isinstance(envelope, dict) else None
        if not isinstance(items, list):
            logger.warning("List response does not contain a data array")
            raise ResponseShapeError("API response does not contain data array")

        designs = []
        for index, item in enumerate(items):
            try:
                designs.append(NailDesign.model_validate(item))
            except pydantic.ValidationError as e:
                logger.warning(f"Malformed design at position {index}: {e}")
                raise ResponseShapeError(f"Malformed design in listing (item {index})") from e

        logger.info(f"Listed {len(designs)} designs")
        return designs

    def fetch_download_payload(self, design_id: str) -> str:
        """Fetch the full image of a design as a base64 string.

        Args:
            design_id: Design to download.

        Returns:
            The ``base64`` field of the response, possibly data-URL prefixed.

        Raises:
            RequestError: On a non-success status.
            ResponseShapeError: If the body has no ``base64`` string.
        """
        logger.info(f"Fetching download payload for design {design_id}")
        body = DesignIdRequest(id=design_id).model_dump()
        response = self._send("POST", DOWNLOAD_PATH, json=body)

        if not response.is_success:
            logger.warning(f"Download failed for {design_id}: status {response.status_code}")
            raise RequestError(
                f"Failed to download image (status {response.status_code})",
                status_code=response.status_code,
            )

        try:
            payload = DownloadPayload.model_validate(self._json_or_none(response))
        except pydantic.ValidationError as e:
            raise ResponseShapeError(f"Download response has no base64 field: {e}") from e

        return payload.base64

    def delete(self, design_id: str) -> None:
        """Delete a design on the service.

        The service does not return the updated listing; callers drop the id
        from whatever they hold locally.

        Raises:
            RequestError: On a non-success status.
        """
        logger.info(f"Deleting design {design_id}")
        body = DesignIdRequest(id=design_id).model_dump()
        response = self._send("DELETE", DELETE_PATH, json=body)

        if not response.is_success:
            logger.warning(f"Delete failed for {design_id}: status {response.status_code}")
            raise RequestError(
                f"Failed to delete image (status {response.status_code})",
                status_code=response.status_code,
            )

        logger.info(f"Deleted design {design_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Issue one request, wrapping transport failures in RequestError."""
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} could not reach the service: {e}")
            raise RequestError(f"Could not reach the service: {e}") from e

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        """Decode a JSON body, returning None when it is not JSON."""
        try:
            return response.json()
        except ValueError:
            return None
