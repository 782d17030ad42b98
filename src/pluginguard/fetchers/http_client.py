"""Shared async HTTP client utilities for manifest fetchers.

Provides a thin wrapper around ``httpx.AsyncClient`` with standardised
timeouts, user-agent headers, and error handling. All fetchers use this
module so that HTTP behaviour is consistent and testable.

Raises ``FetchError`` (a subclass of ``PluginGuardError``) on every HTTP
failure: timeouts, non-2xx responses, transport errors, and bodies that are
not JSON.
"""

from __future__ import annotations

import logging
import ssl
from typing import Any

import httpx

from pluginguard import __version__
from pluginguard.exceptions import FetchError

logger = logging.getLogger(__name__)

# Timeout for all manifest HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"PluginGuard/{__version__}"

_TLS_MARKERS = ("CERTIFICATE_VERIFY_FAILED", "SSL", "certificate")


def _is_tls_failure(exc: BaseException) -> bool:
    """Return True if ``exc`` was caused by a failed TLS handshake."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return any(marker in str(exc) for marker in _TLS_MARKERS)


async def _get(
    url: str,
    *,
    params: dict[str, str] | None,
    timeout: float,
    verify: bool,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    async with httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        verify=verify,
        transport=transport,
    ) as client:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp


async def fetch_json(
    url: str,
    *,
    params: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    insecure: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:  # noqa: ANN401
    """Fetch a URL and parse the response as JSON.

    Args:
        url: The URL to fetch.
        params: Optional query parameters.
        timeout: Request timeout in seconds.
        insecure: Retry once without certificate validation if the TLS
            handshake fails. This makes the request vulnerable to
            man-in-the-middle attacks.
        transport: Optional custom transport (used by tests).

    Returns:
        Parsed JSON response.

    Raises:
        FetchError: On HTTP errors, timeouts, transport errors, or invalid
            JSON.
    """
    try:
        try:
            resp = await _get(
                url, params=params, timeout=timeout, verify=True, transport=transport,
            )
        except httpx.ConnectError as exc:
            if not (insecure and _is_tls_failure(exc)):
                raise
            logger.warning(
                "TLS verification failed for %s, retrying without certificate validation",
                url,
            )
            resp = await _get(
                url, params=params, timeout=timeout, verify=False, transport=transport,
            )
        return resp.json()
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", url)
        raise FetchError(f"Timed out fetching {url}.", url=url) from exc
    except httpx.HTTPStatusError as exc:
        code = exc.response.status_code
        logger.warning("HTTP %d from %s", code, url)
        raise FetchError(
            f"Couldn't fetch response from {url} (HTTP code {code}).",
            url=url,
            status_code=code,
        ) from exc
    except (httpx.RequestError, ValueError) as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise FetchError(f"Couldn't fetch response from {url}: {exc}", url=url) from exc
