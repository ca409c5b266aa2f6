from .byte_range import ByteRange
from .registration import Registration
from .stream_response import StreamResponse, MIME_PLAINTEXT

__all__ = [
    'ByteRange',
    'Registration',
    'StreamResponse',
    'MIME_PLAINTEXT'
]
