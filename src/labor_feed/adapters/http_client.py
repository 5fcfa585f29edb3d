"""Single-attempt HTTP fetching shared by all sources."""

import asyncio
from enum import Enum
from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "labor-feed/1.0 (+regulatory update aggregator)"

JSON_ACCEPT = "application/json"
ANY_ACCEPT = "*/*"


class FetchErrorKind(str, Enum):
    """Why a fetch failed."""

    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"
    TRANSPORT = "transport"


class FetchError(Exception):
    """Raised when a resource could not be fetched or decoded."""

    def __init__(
        self, kind: FetchErrorKind, url: str, status: Optional[int] = None, detail: str = ""
    ) -> None:
        self.kind = kind
        self.url = url
        self.status = status
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is FetchErrorKind.HTTP_STATUS:
            return f"GET {self.url} -> {self.status}"
        if self.kind is FetchErrorKind.TIMEOUT:
            return f"GET {self.url} timed out"
        message = f"GET {self.url} failed ({self.kind.value})"
        return f"{message}: {self.detail}" if self.detail else message


class HttpFetcher:
    """Fetch resources with a hard timeout and fixed identifying headers.

    Every call makes exactly one attempt. Retrying is left to the caller.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def get_json(self, url: str) -> Any:
        """GET `url` and decode the body as JSON."""
        response = await self._get(url, accept=JSON_ACCEPT)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(FetchErrorKind.PARSE_ERROR, url, detail=str(e)) from e

    async def get_text(self, url: str) -> str:
        """GET `url` and return the body as text."""
        response = await self._get(url, accept=ANY_ACCEPT)
        return response.text

    async def _get(self, url: str, accept: str) -> httpx.Response:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": accept,
        }

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            try:
                # Deadline for the whole exchange; httpx alone limits each read
                async with asyncio.timeout(self.timeout):
                    response = await client.get(url, headers=headers)
            except (httpx.TimeoutException, TimeoutError) as e:
                raise FetchError(FetchErrorKind.TIMEOUT, url) from e
            except httpx.HTTPError as e:
                raise FetchError(FetchErrorKind.TRANSPORT, url, detail=str(e)) from e

        if not response.is_success:
            raise FetchError(FetchErrorKind.HTTP_STATUS, url, status=response.status_code)

        return response
