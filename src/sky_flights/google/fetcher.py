"""HTTP transports for Google Flights pages (httpx, or primp impersonation)."""

from __future__ import annotations

import asyncio
import http
import logging
from collections.abc import Mapping

import httpx

from sky_flights.base import BaseTransport, HttpResponse
from sky_flights.exceptions import ProtocolError
from sky_flights.retry import retry_call

logger = logging.getLogger(__name__)

GOOGLE_FLIGHTS_URL = "https://www.google.com/travel/flights"


class HttpxTransport(BaseTransport):
    """Async transport on ``httpx.AsyncClient`` with retries on network errors.

    Only connection-level failures are retried; any HTTP status is handed back
    to the caller untouched.
    """

    def __init__(
        self,
        *,
        timeout: int = 30,
        proxy_url: str = "",
        max_retries: int = 2,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._max_retries = max_retries
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            proxy=proxy_url or None,
            follow_redirects=True,
        )

    async def _send(
        self, method: str, url: str, headers: Mapping[str, str]
    ) -> httpx.Response:
        return await self._client.request(method, url, headers=dict(headers))

    async def fetch(
        self, method: str, url: str, headers: Mapping[str, str]
    ) -> HttpResponse:
        try:
            resp = await retry_call(
                self._send,
                method,
                url,
                headers,
                max_retries=self._max_retries,
                max_delay=10.0,
                exceptions=(httpx.TransportError,),
            )
        except httpx.TransportError as exc:
            msg = f"HTTP request to Google Flights failed: {exc}"
            raise ProtocolError(msg) from exc
        return HttpResponse(
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            text=resp.text,
        )

    async def close(self) -> None:
        """Shut down the underlying HTTPX client."""
        await self._client.aclose()


def _sync_fetch(
    method: str,
    url: str,
    headers: dict[str, str],
    proxy_url: str,
    timeout: int,
) -> HttpResponse:
    """Synchronous fetch using primp Client (run inside asyncio.to_thread)."""
    from primp import Client  # type: ignore[import-untyped]

    client_kwargs: dict[str, object] = {
        "impersonate": "chrome_126",
        "timeout": timeout,
    }
    if proxy_url:
        client_kwargs["proxy"] = proxy_url

    client = Client(**client_kwargs)  # type: ignore[arg-type]
    res = client.request(method, url, headers=headers)
    try:
        reason = http.HTTPStatus(res.status_code).phrase
    except ValueError:
        reason = ""
    return HttpResponse(status_code=res.status_code, reason=reason, text=res.text)


class PrimpTransport(BaseTransport):
    """Browser-impersonating transport for when plain clients get blocked."""

    def __init__(self, *, timeout: int = 30, proxy_url: str = "") -> None:
        self._timeout = timeout
        self._proxy_url = proxy_url

    async def fetch(
        self, method: str, url: str, headers: Mapping[str, str]
    ) -> HttpResponse:
        try:
            return await asyncio.to_thread(
                _sync_fetch,
                method,
                url,
                dict(headers),
                self._proxy_url,
                self._timeout,
            )
        except Exception as exc:
            # primp raises its own exception types from the native client
            msg = f"HTTP request to Google Flights failed: {exc}"
            raise ProtocolError(msg) from exc
