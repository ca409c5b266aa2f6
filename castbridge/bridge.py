import logging
import secrets
from typing import Any, Optional
from castbridge.config import BridgeSettings, PATH_ARTWORK, PATH_AUDIO
from castbridge.errors import BridgeError
from castbridge.server.registry import FileRegistry
from castbridge.server.resolver import FileResolver, LocalFileResolver
from castbridge.server.router import EndpointRouter
from castbridge.server.streaming_util import ContentResponder
from castbridge.server.web_server import StreamServer

logger = logging.getLogger(__name__)


class MediaStreamBridge:
    """
    Exposes local file locators to a remote player as plain HTTP URLs.

    A bridge owns one session token for its whole life and one registry that
    is emptied whenever a cast session ends. URLs look like
    `http://{ip}:{port}/{audio|artwork}/{token}/{id}`.
    """
    def __init__(
        self,
        resolver: Optional[FileResolver] = None,
        settings: Optional[BridgeSettings] = None,
        registry: Optional[FileRegistry] = None,
    ):
        self.settings = settings or BridgeSettings()
        self.resolver = resolver or LocalFileResolver()
        self.registry = registry if registry is not None else FileRegistry()
        self._session_token = secrets.token_hex(16)

        responder = ContentResponder(self.resolver, self.settings)
        self.router = EndpointRouter(self.registry, responder, self._session_token)
        self.server = StreamServer(self.router, self.settings)

    @property
    def session_token(self) -> str:
        return self._session_token

    # --- Lifecycle ---

    def start(self) -> int:
        return self.server.start()

    def stop(self) -> None:
        self.server.stop()

    @property
    def is_running(self) -> bool:
        return self.server.is_running

    @property
    def server_url(self) -> str:
        """Base URL such as http://192.168.1.100:8080."""
        return self.server.base_url

    # --- Registration API ---

    def _require_running(self) -> None:
        # URLs embed the bound port, which only exists while serving
        if not self.server.is_running:
            raise BridgeError("Stream server is not running; call start() before registering files")

    def _url_for(self, path_type: str, file_id: str) -> str:
        return f"{self.server_url}/{path_type}/{self._session_token}/{file_id}"

    def register_file(self, locator: Any) -> str:
        """Registers an audio file and returns its stream URL. Requires a running server."""
        self._require_running()
        file_id = self.registry.register(locator, is_artwork=False)
        url = self._url_for(PATH_AUDIO, file_id)
        logger.info(f"🎵 Registered {locator} as {file_id}")
        return url

    def register_artwork(self, locator: Any) -> str:
        """Registers album art and returns its URL. Requires a running server."""
        self._require_running()
        file_id = self.registry.register(locator, is_artwork=True)
        url = self._url_for(PATH_ARTWORK, file_id)
        logger.info(f"🖼️ Registered artwork {locator} as {file_id}")
        return url

    def clear_registered_files(self) -> None:
        self.registry.clear()

    def __enter__(self) -> "MediaStreamBridge":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
        self.clear_registered_files()
