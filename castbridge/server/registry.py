import logging
import secrets
import threading
from typing import Any, Dict, Optional
from castbridge.models import Registration

logger = logging.getLogger(__name__)

# 16 bytes = 128-bit IDs, collisions are negligible for a session's worth of files
ID_BYTES = 16


class FileRegistry:
    """
    Session-scoped map from opaque registration IDs to file locators.

    Written by the session controller thread, read by every request worker.
    Entries are never removed one by one; `clear()` drops them all when a
    cast session ends.
    """
    def __init__(self):
        self._files: Dict[str, Registration] = {}  # id -> registration
        self._lock = threading.Lock()

    def register(self, locator: Any, is_artwork: bool = False) -> str:
        """Stores the locator under a fresh random ID and returns the ID."""
        entry = Registration(locator=locator, is_artwork=is_artwork)
        with self._lock:
            file_id = secrets.token_hex(ID_BYTES)
            while file_id in self._files:
                file_id = secrets.token_hex(ID_BYTES)
            self._files[file_id] = entry
        return file_id

    def lookup(self, file_id: str) -> Optional[Registration]:
        """Returns the registration for an ID, or None if unknown or cleared."""
        with self._lock:
            return self._files.get(file_id)

    def clear(self) -> int:
        """Drops every registration. Returns how many were dropped."""
        with self._lock:
            dropped = len(self._files)
            self._files = {}
        if dropped:
            logger.info(f"🧹 Cleared {dropped} registered file(s)")
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._files
