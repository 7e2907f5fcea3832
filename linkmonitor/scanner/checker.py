"""Liveness probes for affiliate URLs.

A probe is a single ``HEAD`` request with redirects *not* followed: affiliate
links legitimately bounce through tracking domains, so any redirect that names
a ``Location`` counts as healthy and the destination is never re-checked.

Neither function in this module raises for network problems.  Connection,
DNS and TLS failures, timeouts and bad status codes all come back as a
:class:`CheckOutcome` with ``ok=False``.
"""

from __future__ import annotations

import asyncio

import httpx

from linkmonitor.models import CheckOutcome

DEFAULT_USER_AGENT = "AffiliateLinkMonitor/1.0"

# Delay before retry N is N × this many seconds.
RETRY_DELAY_SECONDS = 1.0

_REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})


def make_client(user_agent: str = DEFAULT_USER_AGENT) -> httpx.AsyncClient:
    """Return an ``AsyncClient`` configured for probing (no redirect following)."""
    return httpx.AsyncClient(
        headers={"User-Agent": user_agent},
        follow_redirects=False,
    )


def classify_response(response: httpx.Response) -> CheckOutcome:
    """Map an HTTP response onto a :class:`CheckOutcome`."""
    status = response.status_code
    if status in _REDIRECT_CODES:
        location = response.headers.get("location")
        if location:
            return CheckOutcome(ok=True, http_status=status, redirect_target=location)
        return CheckOutcome(ok=False, http_status=status)
    return CheckOutcome(ok=200 <= status < 400, http_status=status)


async def _head(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    # wait_for cancels the in-flight request once the deadline passes.
    return await asyncio.wait_for(client.head(url, timeout=timeout), timeout)


async def check_once(
    url: str,
    timeout_ms: int,
    client: httpx.AsyncClient | None = None,
) -> CheckOutcome:
    """Probe *url* once with a *timeout_ms* deadline.

    The transport (http or https) follows the URL's own scheme.  When no
    *client* is supplied a short-lived one is opened for this probe.
    """
    timeout = timeout_ms / 1000
    try:
        if client is None:
            async with make_client() as own_client:
                response = await _head(own_client, url, timeout)
        else:
            response = await _head(client, url, timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        return CheckOutcome(ok=False, http_status=0, error_message="timeout")
    except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as exc:
        # ValueError covers hosts the IDNA codec rejects.
        return CheckOutcome(
            ok=False,
            http_status=0,
            error_message=str(exc) or exc.__class__.__name__,
        )
    return classify_response(response)


async def check_with_retry(
    url: str,
    timeout_ms: int,
    retries: int,
    client: httpx.AsyncClient | None = None,
) -> CheckOutcome:
    """Probe *url* up to ``retries + 1`` times, stopping at the first success.

    After failed attempt *n* (when another attempt remains) the coroutine
    sleeps ``n × RETRY_DELAY_SECONDS``.  The timeout applies to each attempt
    separately.  If every attempt fails, the last outcome is returned as-is.
    """
    outcome = CheckOutcome(ok=False, http_status=0)
    for attempt in range(1, retries + 2):
        outcome = await check_once(url, timeout_ms, client=client)
        if outcome.ok:
            return outcome
        if attempt <= retries:
            await asyncio.sleep(RETRY_DELAY_SECONDS * attempt)
    return outcome
