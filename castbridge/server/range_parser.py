from typing import Optional
from castbridge.errors import RangeNotSatisfiable
from castbridge.models import ByteRange

RANGE_PREFIX = "bytes="


def _parse_int(token: str) -> Optional[int]:
    try:
        return int(token.strip())
    except ValueError:
        return None


def parse_range(header_value: str, total_size: int) -> ByteRange:
    """
    Turns a `Range: bytes=<start>-[<end>]` value into a clamped ByteRange.

    Deliberately permissive so a remote player can always seek: an
    unparsable start becomes 0, a missing or unparsable end becomes the last
    byte, and both are clamped into the resource. Only an empty or unknown
    resource is rejected, with RangeNotSatisfiable, so the caller can fall
    back to a full response.
    """
    if total_size <= 0:
        raise RangeNotSatisfiable(f"Cannot serve a range of a resource with size {total_size}")

    last = total_size - 1
    spec = (header_value or "").strip().replace(RANGE_PREFIX, "", 1)
    parts = spec.split("-")

    start = _parse_int(parts[0])
    if start is None:
        start = 0

    end = None
    if len(parts) > 1 and parts[1].strip():
        end = _parse_int(parts[1])
    if end is None:
        end = last

    end = max(0, min(end, last))
    start = max(0, min(start, end))

    return ByteRange(start=start, end=end, total=total_size)
