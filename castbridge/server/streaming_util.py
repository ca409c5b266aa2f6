import io
import logging
from typing import BinaryIO, Optional
from castbridge.config import BridgeSettings
from castbridge.errors import RangeNotSatisfiable, ResolverError
from castbridge.models import Registration, StreamResponse
from castbridge.server.range_parser import parse_range
from castbridge.server.resolver import FileResolver

logger = logging.getLogger(__name__)

# Errors raised when the remote player hangs up mid-response
CLIENT_GONE_ERRORS = (ConnectionResetError, BrokenPipeError, ConnectionAbortedError)


class LimitedReader(io.RawIOBase):
    """
    Read-only wrapper that stops after `limit` bytes.
    Reads past the cap return EOF even if the wrapped stream has more data.
    """
    def __init__(self, wrapped: BinaryIO, limit: int):
        super().__init__()
        self._wrapped = wrapped
        self._remaining = max(0, limit)

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if self._remaining <= 0:
            return b""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._wrapped.read(size)
        if data:
            self._remaining -= len(data)
        return data or b""

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        buffer[:len(data)] = data
        return len(data)

    def close(self) -> None:
        try:
            self._wrapped.close()
        finally:
            super().close()


def skip_to(stream: BinaryIO, offset: int, chunk_size: int) -> None:
    """Advances a freshly opened stream to `offset`, seeking when possible."""
    if offset <= 0:
        return
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        stream.seek(offset)
        return
    remaining = offset
    while remaining > 0:
        data = stream.read(min(remaining, chunk_size))
        if not data:
            break
        remaining -= len(data)


class ContentResponder:
    """
    Builds full (200) or partial (206) responses for a registered file.
    Nothing is written here; the request handler copies the body out.
    """
    def __init__(self, resolver: FileResolver, settings: BridgeSettings):
        self.resolver = resolver
        self.settings = settings

    def mime_type_for(self, registration: Registration) -> str:
        # Artwork is never sniffed from the container
        if registration.is_artwork:
            return self.settings.artwork_mime_type
        try:
            mime_type = self.resolver.mime_type(registration.locator)
        except Exception as e:
            logger.debug(f"MIME lookup failed for {registration.locator}: {e}")
            mime_type = None
        return mime_type or self.settings.default_audio_mime_type

    def respond(self, registration: Registration, range_header: Optional[str] = None) -> StreamResponse:
        try:
            return self._respond(registration, range_header)
        except (ResolverError, OSError) as e:
            logger.error(f"❌ Cannot read {registration.locator}: {e}")
            return StreamResponse.text(500, f"Error: {e}")

    def _respond(self, registration: Registration, range_header: Optional[str]) -> StreamResponse:
        locator = registration.locator
        file_size = self.resolver.size(locator)
        mime_type = self.mime_type_for(registration)

        if range_header and file_size > 0:
            try:
                byte_range = parse_range(range_header, file_size)
            except RangeNotSatisfiable:
                byte_range = None
            if byte_range is not None:
                stream = self.resolver.open(locator)
                try:
                    skip_to(stream, byte_range.start, self.settings.chunk_size)
                except Exception:
                    stream.close()
                    raise
                return StreamResponse(
                    status=206,
                    content_type=mime_type,
                    content_length=byte_range.length,
                    headers={
                        "Content-Range": byte_range.content_range,
                        "Accept-Ranges": "bytes",
                    },
                    body=LimitedReader(stream, byte_range.length),
                )

        stream = self.resolver.open(locator)
        if file_size > 0:
            return StreamResponse(
                status=200,
                content_type=mime_type,
                content_length=file_size,
                headers={"Accept-Ranges": "bytes"},
                body=stream,
            )

        # Unknown length: streamed until EOF, no range support for this request
        return StreamResponse(status=200, content_type=mime_type, body=stream)


def copy_body(source: BinaryIO, wfile, chunk_size: int, chunked: bool = False) -> int:
    """
    Blocking read-then-write loop. Returns the number of body bytes written.
    Client disconnects propagate as CLIENT_GONE_ERRORS for the caller to swallow.
    """
    written = 0
    while True:
        data = source.read(chunk_size)
        if not data:
            break
        if chunked:
            wfile.write(f"{len(data):X}\r\n".encode("ascii"))
            wfile.write(data)
            wfile.write(b"\r\n")
        else:
            wfile.write(data)
        written += len(data)
    if chunked:
        wfile.write(b"0\r\n\r\n")
    return written
