# Cast Bridge: stream local files to remote players over HTTP

from .bridge import MediaStreamBridge
from .config import BridgeSettings, load_settings
from .session import CastMedia, CastSessionListener

__version__ = "1.0.0"
