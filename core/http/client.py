"""
HTTP Client

Async HTTP client used by the network evidence sources.
"""

from __future__ import annotations

import json as jsonlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON."""
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        """Raise HttpError if status is not 2xx."""
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code} from {self.url}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """HTTP request error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    Async HTTP client.

    Usage:
        async with HttpClient(timeout=10) as client:
            response = await client.get("https://api.example.com/data")
            response.raise_for_status()
            data = response.json()

    A client created with transport= uses it for every request, which is
    how tests substitute httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.default_headers,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Raises:
            HttpError: On transport failure or timeout. Non-2xx statuses are
                returned, not raised; call raise_for_status().
        """
        client = self._get_client()
        start = time.monotonic()
        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=timeout or self.timeout,
            )
        except httpx.HTTPError as e:
            raise HttpError(f"{method} {url} failed: {e}") from e

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug("%s %s -> %d (%.0f ms)", method, url, response.status_code, elapsed_ms)
        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=elapsed_ms,
        )

    async def get(self, url: str, **kwargs: Any) -> HttpResponse:
        """Make a GET request."""
        return await self.request("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET a URL, require a 2xx status, and parse the body as JSON."""
        response = await self.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
