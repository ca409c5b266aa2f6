"""
File locator resolvers.

A resolver is the only thing that knows how to turn an opaque locator into
bytes. The bridge never touches the storage layer directly, so hosts with
their own storage (archives, content providers, remote mounts) plug in a
subclass of FileResolver.
"""

import mimetypes
import os
from typing import Any, BinaryIO, Optional
from castbridge.errors import ResolverError

UNKNOWN_SIZE = -1


class FileResolver:
    """Interface the bridge uses to read registered locators."""

    def open(self, locator: Any) -> BinaryIO:
        """Opens a fresh read-only binary stream positioned at byte 0."""
        raise NotImplementedError

    def size(self, locator: Any) -> int:
        """
        Returns the total size in bytes, or a value <= 0 when it cannot be known.
        Raises ResolverError when the locator cannot be opened at all.
        """
        raise NotImplementedError

    def mime_type(self, locator: Any) -> Optional[str]:
        """Returns the content type if the storage layer knows it."""
        return None


class LocalFileResolver(FileResolver):
    """Treats locators as filesystem paths (str or os.PathLike)."""

    def open(self, locator: Any) -> BinaryIO:
        try:
            return open(os.fspath(locator), "rb")
        except (OSError, TypeError) as e:
            raise ResolverError(f"Cannot open {locator}: {e}") from e

    def size(self, locator: Any) -> int:
        # Pipes and character devices report 0, which means "unknown" here
        try:
            with open(os.fspath(locator), "rb") as f:
                return os.fstat(f.fileno()).st_size or UNKNOWN_SIZE
        except (OSError, TypeError) as e:
            raise ResolverError(f"Cannot open {locator}: {e}") from e

    def mime_type(self, locator: Any) -> Optional[str]:
        try:
            mime_type, _ = mimetypes.guess_type(os.fspath(locator))
        except TypeError:
            return None
        return mime_type
