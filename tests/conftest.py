import http.client
import io
import pytest

from castbridge.bridge import MediaStreamBridge
from castbridge.config import BridgeSettings
from castbridge.server.resolver import FileResolver

RESOURCE_SIZE = 1000


def make_payload(size: int = RESOURCE_SIZE) -> bytes:
    """Deterministic bytes where each offset is distinguishable from its neighbours."""
    return bytes((i * 7 + i // 256) % 256 for i in range(size))


class MemoryResolver(FileResolver):
    """Resolver over in-memory blobs keyed by name."""

    def __init__(self, blobs, report_size=True, mime_types=None):
        self.blobs = blobs
        self.report_size = report_size
        self.mime_types = mime_types or {}
        self.opened = []

    def open(self, locator):
        stream = io.BytesIO(self.blobs[locator])
        self.opened.append(stream)
        return stream

    def size(self, locator):
        data = self.blobs[locator]
        return len(data) if self.report_size else -1

    def mime_type(self, locator):
        return self.mime_types.get(locator)


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def audio_file(tmp_path, payload):
    path = tmp_path / "track.mp3"
    path.write_bytes(payload)
    return path


@pytest.fixture
def settings():
    return BridgeSettings(host="127.0.0.1", port=0, advertise_host="127.0.0.1")


@pytest.fixture
def bridge(settings):
    bridge = MediaStreamBridge(settings=settings)
    bridge.start()
    yield bridge
    bridge.stop()
    bridge.clear_registered_files()


def fetch(bridge, path, method="GET", headers=None):
    """Issues one request against a running bridge. Returns (response, body)."""
    conn = http.client.HTTPConnection("127.0.0.1", bridge.server.port, timeout=10)
    try:
        conn.request(method, path, headers=headers or {})
        response = conn.getresponse()
        body = response.read()
        return response, body
    finally:
        conn.close()


def url_path(url: str) -> str:
    """Strips scheme and authority from a stream URL."""
    return "/" + url.split("/", 3)[3]
