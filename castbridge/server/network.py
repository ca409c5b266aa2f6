"""
Local address discovery for externally visible stream URLs.

The remote player has to reach us over the LAN, so `localhost` is useless in
a URL. Each strategy below is tried in order and a failure simply moves on
to the next one. The last resort, 127.0.0.1, only works when the player runs
on this machine; it is a degraded result, not an error.
"""

import ipaddress
import logging
import socket
from typing import Callable, Iterable, Optional
import psutil
from castbridge.config import LOOPBACK_ADDRESS

logger = logging.getLogger(__name__)

# Never contacted: connecting a UDP socket only selects the outgoing route
PROBE_ADDRESS = ("10.255.255.255", 1)

# Virtual interfaces a cast device on the LAN cannot reach
SKIPPED_INTERFACE_PREFIXES = ("lo", "docker", "br-", "veth", "virbr")


def _usable(ip: Optional[str]) -> bool:
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.version == 4 and not address.is_loopback and not address.is_unspecified


def address_from_route() -> Optional[str]:
    """Asks the OS which local IPv4 it would use for LAN traffic."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.settimeout(0)
            s.connect(PROBE_ADDRESS)
            ip = s.getsockname()[0]
    except OSError as e:
        logger.debug(f"Route lookup failed: {e}")
        return None
    return ip if _usable(ip) else None


def address_from_interfaces() -> Optional[str]:
    """Returns the first non-loopback IPv4 address bound to any interface."""
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        logger.debug(f"Interface enumeration failed: {e}")
        return None

    fallback = None
    for name, addrs in interfaces.items():
        for addr in addrs:
            if addr.family != socket.AF_INET or not _usable(addr.address):
                continue
            if not name.lower().startswith(SKIPPED_INTERFACE_PREFIXES):
                return addr.address
            if fallback is None:
                fallback = addr.address
    return fallback


DEFAULT_STRATEGIES = (address_from_route, address_from_interfaces)


def resolve_local_address(
    advertise_host: Optional[str] = None,
    strategies: Iterable[Callable[[], Optional[str]]] = DEFAULT_STRATEGIES,
) -> str:
    """
    Returns the IPv4 address to embed in stream URLs. Never raises.
    An explicit `advertise_host` wins over discovery.
    """
    if advertise_host:
        return advertise_host

    for strategy in strategies:
        try:
            ip = strategy()
        except Exception as e:
            logger.debug(f"Address strategy {getattr(strategy, '__name__', strategy)} failed: {e}")
            continue
        if ip:
            return ip

    logger.warning(f"⚠️ No LAN address found, falling back to {LOOPBACK_ADDRESS} (local playback only)")
    return LOOPBACK_ADDRESS
