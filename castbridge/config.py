import os
import json
import socket
import logging
from typing import Any, Dict, Optional
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# ==============================================================================
# CONSTANTS
# ==============================================================================

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 0  # 0 = let the OS pick a free port
LOOPBACK_ADDRESS = "127.0.0.1"

PATH_AUDIO = "audio"
PATH_ARTWORK = "artwork"

# Size of each read/write when copying a body to the socket
DEFAULT_CHUNK_SIZE = 65536
DEFAULT_IDLE_TIMEOUT = 120.0


def find_free_port(start_port: int) -> int:
    """Finds the next available port starting from start_port."""
    port = start_port
    while port < 65535:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            if sock.connect_ex(("localhost", port)) != 0:
                return port
            port += 1
    return start_port


# ==============================================================================
# SETTINGS MODEL
# ==============================================================================

class BridgeSettings(BaseSettings):
    """
    Pydantic model for bridge settings.
    Loads from env vars (CASTBRIDGE_*) or defaults.
    """
    host: str = Field(DEFAULT_HOST, description="Interface the listener binds to")
    port: int = Field(DEFAULT_PORT, ge=0, le=65535)

    # Overrides address discovery when the LAN address is known up front
    advertise_host: Optional[str] = Field(None)

    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, gt=0)

    # Seconds an idle keep-alive connection (or a stalled write) is kept open
    idle_timeout: float = Field(DEFAULT_IDLE_TIMEOUT, gt=0)

    # Album art extraction always yields a raster image
    artwork_mime_type: str = Field("image/jpeg")
    default_audio_mime_type: str = Field("audio/mpeg")

    log_level: str = Field("INFO")

    class Config:
        env_prefix = "CASTBRIDGE_"
        extra = "ignore"


def load_settings(path: Optional[str] = None, **overrides: Any) -> BridgeSettings:
    """
    Builds settings from an optional JSON file plus explicit overrides.
    Env vars still apply to any key neither source provides.
    """
    file_data: Dict[str, Any] = {}
    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_data = json.load(f)
            if not isinstance(file_data, dict):
                logger.warning(f"⚠️ Ignoring settings file {path}: not a JSON object")
                file_data = {}
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Could not read settings file {path}: {e}")
            file_data = {}

    file_data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BridgeSettings(**file_data)
    except ValidationError as e:
        logger.warning(f"⚠️ Invalid settings, falling back to defaults: {e}")
        return BridgeSettings(**{k: v for k, v in overrides.items() if v is not None})
