from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

MIME_PLAINTEXT = "text/plain; charset=utf-8"


class StreamResponse(BaseModel):
    """
    An HTTP response produced by the router, written to the socket by the handler.

    `body` is either a fixed bytes payload or a readable binary stream.
    A `content_length` of None means the length is unknown and the body is
    streamed until EOF.
    """
    status: int
    content_type: str = MIME_PLAINTEXT
    content_length: Optional[int] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = b""

    class Config:
        arbitrary_types_allowed = True

    @classmethod
    def text(cls, status: int, message: str) -> "StreamResponse":
        """Minimal plain-text response used for every error status."""
        data = message.encode("utf-8")
        return cls(status=status, content_length=len(data), body=data)

    @property
    def is_stream(self) -> bool:
        return not isinstance(self.body, (bytes, bytearray))

    def close(self) -> None:
        """Releases the underlying stream, if any."""
        if self.is_stream:
            close = getattr(self.body, "close", None)
            if close is not None:
                close()
