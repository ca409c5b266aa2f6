"""
Exception types raised inside the bridge.

Every one of these is converted to an HTTP response at the router boundary;
none of them is allowed to reach the serving loop.
"""


class BridgeError(Exception):
    """Base class for bridge failures."""
    pass


class RangeNotSatisfiable(BridgeError):
    """Raised when a Range header cannot produce a partial response (unknown or empty resource)."""
    pass


class ResolverError(BridgeError):
    """Raised when a file locator cannot be opened or sized."""
    pass
