import hmac
import logging
from typing import Mapping, Optional
from urllib.parse import unquote
from castbridge.config import PATH_ARTWORK
from castbridge.models import StreamResponse
from castbridge.server.registry import FileRegistry
from castbridge.server.streaming_util import ContentResponder

logger = logging.getLogger(__name__)

SERVED_METHODS = ("GET", "HEAD")


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name)
    if value is None:
        # Plain dicts are case-sensitive, http.client.HTTPMessage is not
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


class EndpointRouter:
    """
    Maps `/{kind}/{token}/{id}` requests onto registered files.

    Every failure becomes a StreamResponse; `route` never raises.
    """
    def __init__(self, registry: FileRegistry, responder: ContentResponder, session_token: str):
        self.registry = registry
        self.responder = responder
        self._session_token = session_token

    def route(self, method: str, path: str, headers: Optional[Mapping[str, str]] = None) -> StreamResponse:
        try:
            return self._route(method, path, headers)
        except Exception as e:
            logger.exception(f"❌ Error serving {method} {path}")
            return StreamResponse.text(500, f"Error: {e}")

    def _route(self, method: str, path: str, headers: Optional[Mapping[str, str]]) -> StreamResponse:
        parts = [unquote(p) for p in path.split("?", 1)[0].split("/") if p]
        if len(parts) < 3:
            return StreamResponse.text(404, "Not found")

        path_type, token, file_id = parts[0], parts[1], parts[2]

        if not hmac.compare_digest(token.encode("utf-8"), self._session_token.encode("utf-8")):
            logger.warning(f"🚨 Invalid session token on {method} request")
            return StreamResponse.text(403, "Forbidden")

        registration = self.registry.lookup(file_id)
        if registration is None:
            logger.warning(f"⚠️ File not found: {file_id}")
            return StreamResponse.text(404, "Not found")

        if method not in SERVED_METHODS:
            return StreamResponse.text(405, "Method not allowed")

        # Only the exact "artwork" kind gets the image type; any other kind is served as audio
        is_artwork = path_type == PATH_ARTWORK
        if registration.is_artwork != is_artwork:
            registration = registration.model_copy(update={"is_artwork": is_artwork})

        range_header = _header(headers, "Range")
        logger.debug(f"{method} {path_type}/{file_id} range={range_header}")
        return self.responder.respond(registration, range_header)
