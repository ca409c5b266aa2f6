import logging
import threading
from typing import Any, Optional
from pydantic import BaseModel
from castbridge.bridge import MediaStreamBridge

logger = logging.getLogger(__name__)


class CastMedia(BaseModel):
    """What a cast client needs to load a track."""
    stream_url: str
    content_type: str
    artwork_url: Optional[str] = None


class CastSessionListener:
    """
    Maps remote session callbacks onto the bridge lifecycle.

    The server runs while a session is active. When the session goes away
    the server stops and all registrations are dropped, so the next session
    starts from an empty registry (same token).
    """
    def __init__(self, bridge: MediaStreamBridge):
        self.bridge = bridge
        self.device_name: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self.device_name is not None

    def _activate(self, device_name: Optional[str]):
        with self._lock:
            self.device_name = device_name or "Cast device"
            self.bridge.start()

    def _deactivate(self):
        with self._lock:
            self.device_name = None
            self.bridge.stop()
            self.bridge.clear_registered_files()

    def on_session_started(self, device_name: Optional[str] = None):
        logger.info(f"📡 Session started: {device_name}")
        self._activate(device_name)

    def on_session_resumed(self, device_name: Optional[str] = None):
        logger.info(f"📡 Session resumed: {device_name}")
        self._activate(device_name)

    def on_session_ended(self, error: int = 0):
        logger.info(f"Session ended: {error}")
        self._deactivate()

    def on_session_suspended(self, reason: int = 0):
        logger.info(f"Session suspended: {reason}")
        self._deactivate()

    def on_session_start_failed(self, error: int = 0):
        logger.error(f"❌ Session start failed: {error}")
        self._deactivate()

    def on_session_resume_failed(self, error: int = 0):
        logger.error(f"❌ Session resume failed: {error}")
        self._deactivate()

    def play(self, locator: Any, artwork: Any = None) -> CastMedia:
        """Registers a track (and optional cover) and returns what to load on the device."""
        if not self.is_connected:
            raise RuntimeError("No active cast session")
        stream_url = self.bridge.register_file(locator)
        artwork_url = self.bridge.register_artwork(artwork) if artwork is not None else None
        content_type = (
            self.bridge.resolver.mime_type(locator) or self.bridge.settings.default_audio_mime_type
        )
        logger.info(f"▶️ Streaming URL: {stream_url}")
        return CastMedia(stream_url=stream_url, content_type=content_type, artwork_url=artwork_url)
