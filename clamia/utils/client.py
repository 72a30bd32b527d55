"""
Client address helpers.
"""

from typing import Mapping, Optional, Sequence


def client_ip(headers: Mapping[str, str], peer: Optional[Sequence] = None) -> str:
    """
    Resolve the caller's address.

    Args:
        headers: Request headers with lower-case names
        peer: ASGI ``client`` tuple (host, port), if known

    Returns:
        First X-Forwarded-For entry, else the socket peer host, else "unknown"
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if peer:
        return str(peer[0])
    return "unknown"
