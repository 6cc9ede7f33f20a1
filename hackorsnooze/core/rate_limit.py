"""
Rate limiting for the unauthenticated endpoints (signup and SMS recovery).

Clients are keyed by IP. X-Forwarded-For is only honoured when the direct
peer is one of the proxies listed in HACKORSNOOZE_TRUSTED_PROXIES
(comma-separated addresses or CIDR ranges), otherwise any client could pick
its own rate limit bucket.
"""
import ipaddress
import os
from functools import lru_cache

from fastapi import Request
from slowapi import Limiter

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


@lru_cache(maxsize=1)
def trusted_proxy_networks() -> tuple[IPNetwork, ...]:
    """Parse HACKORSNOOZE_TRUSTED_PROXIES once; invalid entries are skipped."""
    networks = []
    for entry in os.getenv("HACKORSNOOZE_TRUSTED_PROXIES", "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def is_trusted_proxy(address: str) -> bool:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False
    return any(ip in network for network in trusted_proxy_networks())


def get_client_ip(request: Request) -> str:
    """
    Address used as the rate limit key.

    Behind trusted proxies this is the rightmost X-Forwarded-For hop that is
    not itself a trusted proxy.
    """
    peer = request.client.host if request.client else "unknown"
    if not is_trusted_proxy(peer):
        return peer

    forwarded = request.headers.get("X-Forwarded-For")
    if not forwarded:
        return peer

    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if not is_trusted_proxy(hop):
            return hop
    return hops[0] if hops else peer


limiter = Limiter(key_func=get_client_ip)
