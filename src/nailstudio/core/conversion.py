"""Base64-to-file conversion for design downloads.

The ``download-image`` endpoint returns the full image as a base64 string,
sometimes prefixed with a ``data:image/<type>;base64,`` header.  This module
turns that string into a file the browser can save as
``nail-design-<id>.png``.

Conversion rules:

- the data-URL prefix is stripped when present
- the payload is decoded strictly (whitespace is ignored, anything else that
  is not base64 is an error)
- the output is always labelled ``image/png``, whatever the source type was
- if decoding or writing fails, the caller gets a ``data:image/png;base64,``
  URL under the same filename instead of a file, so something downloadable is
  always delivered
- written files live in their own temporary folder under the downloads
  directory and are removed by a background timer shortly after the hand-off
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import shutil
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_MIME_TYPE = "image/png"
_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class ConversionError(Exception):
    """The download payload could not be turned into image bytes."""


@dataclass
class DownloadArtifact:
    """Result of preparing a download.

    Exactly one of ``path`` and ``data_url`` is set.

    Attributes:
        filename: Name the browser should save the file as.
        path: File on disk holding the decoded image.
        data_url: Fallback ``data:`` URL when decoding failed.
        mime_type: Always ``image/png``.
    """

    filename: str
    path: Path | None = None
    data_url: str | None = None
    mime_type: str = OUTPUT_MIME_TYPE

    @property
    def is_fallback(self) -> bool:
        """True when the download is served as a data URL instead of a file."""
        return self.path is None


def download_filename(design_id: str) -> str:
    """Return the filename a design is saved under."""
    safe_id = _UNSAFE_FILENAME_CHARS.sub("_", str(design_id))
    return f"nail-design-{safe_id}.png"


def strip_data_url_prefix(payload: str) -> str:
    """Remove a leading ``data:image/<type>;base64,`` header, if any."""
    return _DATA_URL_PREFIX.sub("", payload, count=1)


def to_data_url(payload: str) -> str:
    """Build a PNG data URL from a (possibly prefixed) base64 payload."""
    return f"data:{OUTPUT_MIME_TYPE};base64,{strip_data_url_prefix(payload)}"


def decode_image_payload(payload: str) -> bytes:
    """Decode a base64 image payload into raw bytes.

    Args:
        payload: Base64 text, with or without a data-URL prefix.

    Returns:
        The decoded bytes.

    Raises:
        ConversionError: If the payload is empty or not valid base64.
    """
    body = _WHITESPACE.sub("", strip_data_url_prefix(payload))
    if not body:
        raise ConversionError("Empty image payload")

    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConversionError(f"Invalid base64 payload: {e}") from e


def schedule_cleanup(path: Path, delay: float) -> threading.Timer:
    """Remove ``path`` (file or folder) after ``delay`` seconds.

    Runs on a daemon timer so the caller never waits for it.

    Returns:
        The started timer (tests cancel or join it).
    """
    timer = threading.Timer(delay, _remove_path, args=(path,))
    timer.daemon = True
    timer.start()
    return timer


def _remove_path(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    else:
        path.unlink(missing_ok=True)
    logger.debug(f"Removed download artifact {path}")


def prepare_download(
    design_id: str,
    payload: str,
    downloads_dir: Path,
    cleanup_delay: float = 60.0,
) -> DownloadArtifact:
    """Turn a download payload into something the browser can save.

    Args:
        design_id: Design being downloaded; used in the filename.
        payload: Base64 text returned by the service.
        downloads_dir: Parent folder for the temporary file.
        cleanup_delay: Seconds before the temporary file is removed.

    Returns:
        A file-backed artifact, or a data-URL artifact when conversion failed.
        Never raises for a bad payload.
    """
    filename = download_filename(design_id)
    target_dir: Path | None = None

    try:
        data = decode_image_payload(payload)
        downloads_dir.mkdir(parents=True, exist_ok=True)
        target_dir = Path(tempfile.mkdtemp(prefix="nail-", dir=downloads_dir))
        path = target_dir / filename
        path.write_bytes(data)
    except (ConversionError, OSError) as e:
        logger.warning(f"Could not convert payload for design {design_id}, using data URL: {e}")
        if target_dir is not None:
            shutil.rmtree(target_dir, ignore_errors=True)
        return DownloadArtifact(filename=filename, data_url=to_data_url(payload))

    schedule_cleanup(target_dir, cleanup_delay)
    logger.info(f"Prepared download {path} ({len(data)} bytes)")
    return DownloadArtifact(filename=filename, path=path)
