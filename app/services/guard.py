"""SSRF guard: scheme validation and DNS-resolved address filtering.

The guard only performs a DNS lookup; it never opens a connection to the
target.  The addresses it approves are handed to the fetcher, which connects
to them directly instead of resolving the hostname a second time.
"""

import asyncio
import logging
import socket
from typing import Awaitable, Callable, List, NamedTuple, Optional, Tuple
from urllib.parse import urlparse

from app.services.errors import (
    InvalidURLError,
    PrivateNetworkDeniedError,
    ResolutionFailedError,
    SchemeNotAllowedError,
)
from app.services.ip_classifier import is_private_ip

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_PORTS = {"http": 80, "https": 443}
DNS_TIMEOUT = 2.0  # seconds

Resolver = Callable[[str], Awaitable[List[str]]]


class AuthorizedTarget(NamedTuple):
    url: str
    scheme: str
    hostname: str
    port: int
    addresses: Tuple[str, ...]


async def resolve_host(hostname: str) -> List[str]:
    """Resolve *hostname* to every IPv4 and IPv6 address, in resolver order."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM)
    addresses: List[str] = []
    for info in infos:
        raw_ip = info[4][0]
        if raw_ip not in addresses:
            addresses.append(raw_ip)
    return addresses


def _parse(url: str) -> Tuple[str, str, int]:
    """Return ``(scheme, hostname, port)`` or raise on a malformed/disallowed URL."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL must be a non-empty string.")

    try:
        parsed = urlparse(url.strip())
        port = parsed.port
    except ValueError as exc:
        raise InvalidURLError(f"Could not parse URL {url!r}: {exc}") from exc

    if not parsed.scheme:
        raise InvalidURLError(f"URL {url!r} is not absolute.")

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise SchemeNotAllowedError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not parsed.netloc or not hostname:
        raise InvalidURLError(f"URL {url!r} has no hostname.")

    # Same IDNA encoding getaddrinfo applies; rejects empty or over-long labels.
    try:
        hostname.encode("idna")
    except UnicodeError as exc:
        raise InvalidURLError(f"Hostname {hostname!r} is not a valid DNS name: {exc}") from exc

    return scheme, hostname, port or DEFAULT_PORTS[scheme]


async def authorize(
    url: str,
    *,
    resolver: Optional[Resolver] = None,
    dns_timeout: float = DNS_TIMEOUT,
) -> AuthorizedTarget:
    """Validate *url* and return the target with its approved addresses.

    Raises:
        InvalidURLError: if *url* is not an absolute URL with a hostname.
        SchemeNotAllowedError: if the scheme is not http/https (no DNS lookup is made).
        ResolutionFailedError: if the hostname cannot be resolved in time.
        PrivateNetworkDeniedError: if *any* resolved address is private.
    """
    scheme, hostname, port = _parse(url)
    resolver = resolver or resolve_host

    try:
        addresses = await asyncio.wait_for(resolver(hostname), timeout=dns_timeout)
    except asyncio.TimeoutError as exc:
        raise ResolutionFailedError(f"Resolving {hostname} timed out after {dns_timeout}s.") from exc
    except OSError as exc:
        raise ResolutionFailedError(f"Resolving {hostname} failed: {exc}") from exc

    if not addresses:
        raise ResolutionFailedError(f"{hostname} did not resolve to any address.")
    logger.debug("Resolved %s to %s", hostname, addresses)

    # One private answer is enough to reject, even if the others are public.
    private = [address for address in addresses if is_private_ip(address)]
    if private:
        raise PrivateNetworkDeniedError(f"{hostname} resolves to private address(es) {private}.")

    return AuthorizedTarget(
        url=url.strip(),
        scheme=scheme,
        hostname=hostname,
        port=port,
        addresses=tuple(addresses),
    )
