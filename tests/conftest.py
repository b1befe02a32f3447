"""Shared pytest fixtures for Nail Studio tests."""

import base64
import io
import json
import shutil
import tempfile
import time
from pathlib import Path
from typing import Generator

import httpx
import pytest
from PIL import Image

from nailstudio.api.client import NailDesignClient
from nailstudio.core.config import NailStudioConfig
from nailstudio.ui.models import AppContext, GalleryState, GeneratorState

TEST_BASE_URL = "https://api.test/webhook/isabela/"
TEST_API_KEY = "test-key"


SAMPLE_DESIGNS = [
    {
        "ID": "a1",
        "Prompt": "red french tips",
        "imagenUrl": "https://img.test/a1.png",
        "creadoEn": "2026-10-19T14:05:00Z",
    },
    {
        "ID": "b2",
        "Prompt": "glitter ombre",
        "imagenUrl": "https://img.test/b2.png",
        "creadoEn": "2026-10-18T09:30:00Z",
    },
    {
        "ID": "c3",
        "Prompt": "matte black with gold stars",
        "imagenUrl": "https://img.test/c3.png",
        "creadoEn": "2026-10-17T20:15:00Z",
    },
]


def make_png_base64() -> str:
    """Encode a 1x1 PNG as base64."""
    buffer = io.BytesIO()
    Image.new("RGB", (1, 1), color=(220, 20, 60)).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


class FakeNailService:
    """In-memory stand-in for the nail design webhook.

    Serves sensible defaults for the four endpoints and records every request.
    Use :meth:`respond` to override one endpoint's status and body.
    """

    def __init__(self, designs: list[dict] | None = None):
        self.designs = list(SAMPLE_DESIGNS if designs is None else designs)
        self.download_base64 = make_png_base64()
        self.requests: list[httpx.Request] = []
        self._overrides: dict[str, tuple[int, object]] = {}

    def respond(self, endpoint: str, status_code: int, body: object = None) -> None:
        """Make ``endpoint`` answer with ``status_code`` and JSON ``body``."""
        self._overrides[endpoint] = (status_code, body)

    def reset(self, endpoint: str) -> None:
        self._overrides.pop(endpoint, None)

    def calls(self, endpoint: str) -> list[httpx.Request]:
        """Requests received by ``endpoint`` so far."""
        return [r for r in self.requests if r.url.path.endswith("/" + endpoint)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]

        if endpoint in self._overrides:
            status_code, body = self._overrides[endpoint]
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        if endpoint == "nails-creator":
            prompt = json.loads(request.content)["prompt"]
            return httpx.Response(
                200, json={"url": "https://img.test/new.png", "prompt": prompt, "id": "new-1"}
            )
        if endpoint == "fetch-nails":
            return httpx.Response(200, json=[{"data": self.designs}])
        if endpoint == "download-image":
            return httpx.Response(200, json={"base64": self.download_base64})
        if endpoint == "delete-image":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture(autouse=True)
def utc_timezone(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test with the process time zone set to UTC."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> NailStudioConfig:
    """Create a test configuration pointing at the fake service.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        NailStudioConfig instance for testing
    """
    return NailStudioConfig(
        api_base_url=TEST_BASE_URL,
        api_key=TEST_API_KEY,
        downloads_dir=str(temp_dir / "downloads"),
        download_cleanup_delay=60.0,
        _env_file=None,
    )


@pytest.fixture
def fake_service() -> FakeNailService:
    """Fake webhook with three stored designs."""
    return FakeNailService()


@pytest.fixture
def client(test_config, fake_service) -> Generator[NailDesignClient, None, None]:
    """Client wired to the fake service through httpx.MockTransport."""
    nail_client = NailDesignClient.from_config(
        test_config, transport=httpx.MockTransport(fake_service)
    )
    try:
        yield nail_client
    finally:
        nail_client.close()


@pytest.fixture
def ctx(client, test_config) -> AppContext:
    """App context used by the UI handlers."""
    return AppContext(client=client, config=test_config)


@pytest.fixture
def generator_state() -> GeneratorState:
    """Fresh Generator tab state."""
    return GeneratorState()


@pytest.fixture
def gallery_state() -> GalleryState:
    """Fresh Gallery tab state (newest first)."""
    return GalleryState(sort_order="desc")


@pytest.fixture
def png_base64() -> str:
    """A 1x1 PNG encoded as base64."""
    return make_png_base64()
