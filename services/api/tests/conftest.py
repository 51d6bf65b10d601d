import os
import json
import asyncio

# Must be set before app.settings is imported
os.environ["AI_MODE"] = "mock"
os.environ["FDC_API_KEY"] = "TEST_KEY"

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.parse_recipe import limiter


def ld_json_page(data, body: str = "", title: str = "Test Page") -> str:
    """HTML page with `data` embedded as a JSON-LD script block."""
    return f"""<!DOCTYPE html>
<html><head><title>{title}</title>
<script type="application/ld+json">{json.dumps(data)}</script>
</head><body>{body}</body></html>"""


def html_transport(pages: dict[str, str], status_code: int = 200) -> httpx.MockTransport:
    """Serve canned HTML keyed by URL; unknown URLs get a 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        html = pages.get(str(request.url))
        if html is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(status_code, text=html, headers={"content-type": "text/html"})
    return httpx.MockTransport(handler)


class TrickleStream(httpx.AsyncByteStream):
    """Response body that arrives one small chunk at a time."""

    def __init__(self, chunk: bytes, count: int, delay: float):
        self.chunk = chunk
        self.count = count
        self.delay = delay

    async def __aiter__(self):
        for _ in range(self.count):
            await asyncio.sleep(self.delay)
            yield self.chunk


def trickle_transport(chunk: bytes, count: int = 20, delay: float = 0.1) -> httpx.MockTransport:
    """Every request gets a 200 whose body keeps trickling in, well inside any per-read timeout."""
    return httpx.MockTransport(lambda request: httpx.Response(200, stream=TrickleStream(chunk, count, delay)))


@pytest.fixture(name="ld_json_page")
def ld_json_page_fixture():
    return ld_json_page


@pytest.fixture(name="html_transport")
def html_transport_fixture():
    return html_transport


@pytest.fixture(name="trickle_transport")
def trickle_transport_fixture():
    return trickle_transport


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
