from pydantic import BaseModel, Field, model_validator


class ByteRange(BaseModel):
    """
    A concrete, clamped byte interval of a resource.
    `end` is inclusive, matching the HTTP Content-Range notation.
    """
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    total: int = Field(..., gt=0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "ByteRange":
        if not (self.start <= self.end <= self.total - 1):
            raise ValueError(f"invalid range {self.start}-{self.end} for size {self.total}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total}"
