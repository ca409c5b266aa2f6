import time
from typing import Any
from pydantic import BaseModel, Field


class Registration(BaseModel):
    """A file locator exposed under an opaque ID for HTTP retrieval."""
    # Held, not owned: the registry never reads or copies the content
    locator: Any = Field(..., description="Opaque reference understood by the file resolver")
    is_artwork: bool = Field(False, description="Serve with the image MIME type instead of sniffing")
    created_at: float = Field(default_factory=time.time)

    class Config:
        frozen = True
        arbitrary_types_allowed = True
