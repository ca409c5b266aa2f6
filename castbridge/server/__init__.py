from .range_parser import parse_range
from .registry import FileRegistry
from .resolver import FileResolver, LocalFileResolver
from .streaming_util import ContentResponder, LimitedReader
from .router import EndpointRouter
from .network import resolve_local_address
from .web_server import StreamServer

__all__ = [
    'parse_range',
    'FileRegistry',
    'FileResolver',
    'LocalFileResolver',
    'ContentResponder',
    'LimitedReader',
    'EndpointRouter',
    'resolve_local_address',
    'StreamServer'
]
