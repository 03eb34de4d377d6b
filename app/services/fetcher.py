import asyncio
import ipaddress
import logging
from typing import NamedTuple, Optional
from urllib.parse import urljoin

import httpx

from app.config import FetchLimits
from app.services.errors import (
    ContentTooLargeError,
    FetchTimeoutError,
    InvalidURLError,
    TooManyRedirectsError,
    UpstreamNetworkError,
    UpstreamStatusError,
)
from app.services.guard import AuthorizedTarget, Resolver, authorize

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; ArticleImporter/1.0)",
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
}


class FetchResult(NamedTuple):
    raw_bytes: bytes
    byte_length: int
    final_url: str
    content_type: str


def _is_ip_literal(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def _pinned_request(client: httpx.AsyncClient, target: AuthorizedTarget) -> httpx.Request:
    """Build a request that connects to the approved address instead of re-resolving.

    The original hostname is kept for the ``Host`` header and, over TLS, for
    SNI and certificate verification.
    """
    try:
        original = httpx.URL(target.url)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"Could not parse URL {target.url!r}: {exc}") from exc

    address = target.addresses[0]
    pinned_host = f"[{address}]" if ":" in address else address
    pinned = original.copy_with(host=pinned_host)

    extensions = {}
    if target.scheme == "https" and not _is_ip_literal(target.hostname):
        extensions["sni_hostname"] = target.hostname

    return client.build_request(
        "GET",
        pinned,
        headers={"Host": original.netloc.decode("ascii")},
        extensions=extensions,
    )


async def _read_limited(response: httpx.Response, max_bytes: int) -> bytes:
    content_length = response.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_bytes:
        raise ContentTooLargeError(
            f"Advertised Content-Length {content_length} exceeds {max_bytes} bytes."
        )

    chunks = []
    total = 0
    async for chunk in response.aiter_bytes():
        total += len(chunk)
        if total > max_bytes:
            raise ContentTooLargeError(f"Response body exceeds {max_bytes} bytes.")
        chunks.append(chunk)
    return b"".join(chunks)


async def _fetch(
    url: str,
    limits: FetchLimits,
    resolver: Optional[Resolver],
    transport: Optional[httpx.AsyncBaseTransport],
) -> FetchResult:
    current_url = url
    async with httpx.AsyncClient(
        follow_redirects=False,
        timeout=limits.timeout_seconds,
        headers=_DEFAULT_HEADERS,
        transport=transport,
    ) as client:
        for _ in range(limits.max_redirects + 1):
            target = await authorize(
                current_url, resolver=resolver, dns_timeout=limits.dns_timeout_seconds
            )
            request = _pinned_request(client, target)
            logger.debug("Fetching %s via %s", current_url, target.addresses[0])

            response = await client.send(request, stream=True)
            try:
                if response.has_redirect_location:
                    location = response.headers["location"]
                    current_url = urljoin(current_url, location)
                    logger.info("Following redirect to %s", current_url)
                    continue

                if not response.is_success:
                    raise UpstreamStatusError(
                        f"{current_url} returned HTTP {response.status_code}.",
                        response.status_code,
                    )

                body = await _read_limited(response, limits.max_bytes)
                return FetchResult(
                    raw_bytes=body,
                    byte_length=len(body),
                    final_url=current_url,
                    content_type=response.headers.get("content-type", ""),
                )
            finally:
                await response.aclose()

    raise TooManyRedirectsError(f"More than {limits.max_redirects} redirects starting at {url}.")


async def fetch_url(
    url: str,
    limits: FetchLimits = FetchLimits(),
    *,
    resolver: Optional[Resolver] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchResult:
    """Fetch *url* and return its raw body, bounded in time and size.

    Redirects are followed manually so that every hop passes the SSRF guard
    before a connection is made, and each connection goes to the address the
    guard approved.  One attempt only; failures are never retried.

    Raises:
        InvalidInputError: if a URL (the initial one or a redirect target) is malformed or not http/https.
        PrivateNetworkDeniedError: if any hop resolves to a private address.
        ResolutionFailedError: if a hostname cannot be resolved.
        FetchTimeoutError: if the whole retrieval exceeds ``limits.timeout_seconds``.
        ContentTooLargeError: if the body exceeds ``limits.max_bytes``.
        TooManyRedirectsError: after ``limits.max_redirects`` redirect hops.
        UpstreamStatusError: if the final response is not 2xx.
        UpstreamNetworkError: on connection, TLS or protocol errors.
    """
    try:
        return await asyncio.wait_for(
            _fetch(url, limits, resolver, transport), timeout=limits.timeout_seconds
        )
    except asyncio.TimeoutError as exc:
        raise FetchTimeoutError(f"Fetching {url} took longer than {limits.timeout_seconds}s.") from exc
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError(f"Fetching {url} timed out: {exc}") from exc
    except httpx.RequestError as exc:
        raise UpstreamNetworkError(f"Fetching {url} failed: {exc!r}") from exc
