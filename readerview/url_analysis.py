import ipaddress
import logging
import socket
from typing import Optional, Union
from urllib.parse import urlparse

from .config import (
    ALLOWED_SCHEMES,
    BLOCKED_HOSTNAMES,
    BLOCKED_NETWORKS,
    DEMO_DOMAIN,
    DEMO_URL_MARKER,
)
from .errors import TransportFailure, ValidationError

logger = logging.getLogger("readerview.url_analysis")

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _as_ip(host: str) -> Optional[IPAddress]:
    try:
        ip = ipaddress.ip_address(host.split("%", 1)[0])
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_blocked_ip(ip: IPAddress) -> bool:
    return any(ip.version == net.version and ip in net for net in BLOCKED_NETWORKS)


def is_blocked_host(hostname: str) -> bool:
    """Lexical check on the hostname string; no DNS lookup."""
    host = hostname.strip().strip("[]").rstrip(".").lower()
    if host in BLOCKED_HOSTNAMES:
        return True
    ip = _as_ip(host)
    return ip is not None and is_blocked_ip(ip)


def validate_url(raw_url: str) -> str:
    """Return the trimmed URL or raise ValidationError."""
    url = (raw_url or "").strip()
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        # Out-of-range or non-numeric ports raise here
        parsed.port
    except ValueError as exc:
        raise ValidationError("invalid format") from exc
    if not parsed.scheme:
        raise ValidationError("invalid format")
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise ValidationError("scheme not allowed")
    if not parsed.netloc or not hostname:
        raise ValidationError("invalid format")
    if is_blocked_host(hostname):
        raise ValidationError("target not allowed")
    return url


def is_demo_url(url: str) -> bool:
    if DEMO_URL_MARKER in url.lower():
        return True
    hostname = (urlparse(url).hostname or "").lower()
    return hostname == DEMO_DOMAIN or hostname.endswith("." + DEMO_DOMAIN)


def check_resolved_host(hostname: str, port: Optional[int] = None) -> None:
    """Resolve ``hostname`` and reject it if any address is in a blocked network.

    Closes the gap left by the lexical check, where a public name resolves to a
    private address. Resolution failures are transport failures, not
    validation errors.
    """
    try:
        infos = socket.getaddrinfo(hostname, port or 0, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise TransportFailure(f"Could not resolve {hostname}: {exc}") from exc
    for _family, _, _, _, sockaddr in infos:
        ip = _as_ip(str(sockaddr[0]))
        if ip is not None and is_blocked_ip(ip):
            logger.warning("Blocked %s: resolves to private address %s", hostname, ip)
            raise ValidationError("target not allowed")
