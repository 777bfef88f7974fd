"""HTTP fetcher that reports its outcome as a value instead of raising.

:meth:`PageFetcher.fetch` stops after the response headers have arrived so
callers can decide on status code and ``X-Robots-Tag`` alone; the body is
only downloaded when :meth:`FetchSuccess.read_text` is awaited.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

import httpx

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
TIMEOUT = 50  # seconds, per request
MAX_REDIRECTS = 10

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    OTHER = "other"


@dataclass(frozen=True)
class FetchFailure:
    """The request never produced a response."""

    kind: FailureKind
    message: str


class FetchSuccess:
    """A response whose headers have arrived but whose body is still unread.

    The owner must call :meth:`aclose` once done with it.
    """

    def __init__(self, response: httpx.Response, deadline: float):
        self._response = response
        self._deadline = deadline

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def header_values(self, name: str) -> List[str]:
        """Return every value of header *name* (a response may repeat it)."""
        return self._response.headers.get_list(name)

    async def read_text(self) -> Optional[str]:
        """Download and decode the body, or return None if that fails.

        Reading stops after ``MAX_CONTENT_SIZE`` bytes; the truncated prefix
        is decoded.  The read shares the request's overall deadline.
        """
        remaining = self._deadline - asyncio.get_running_loop().time()
        try:
            raw = await asyncio.wait_for(self._read_bytes(), timeout=max(remaining, 0))
        except (httpx.HTTPError, asyncio.TimeoutError):
            return None

        encoding = self._response.charset_encoding or "utf-8"
        try:
            return raw.decode(encoding, errors="replace")
        except LookupError:
            # Unknown charset declared by the server
            return None

    async def _read_bytes(self) -> bytes:
        chunks = []
        total = 0
        async for chunk in self._response.aiter_bytes():
            chunks.append(chunk)
            total += len(chunk)
            if total >= MAX_CONTENT_SIZE:
                break
        return b"".join(chunks)[:MAX_CONTENT_SIZE]

    async def aclose(self) -> None:
        await self._response.aclose()


FetchOutcome = Union[FetchSuccess, FetchFailure]


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def create_client(
    timeout: float = TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the client shared by all fetches of one validation run."""
    return httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        timeout=timeout,
        transport=transport,
    )


class PageFetcher:
    """Issues one GET per URL with a fixed browser-like header profile."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = TIMEOUT):
        self._client = client
        self.timeout = timeout

    async def fetch(self, url: str) -> FetchOutcome:
        """GET *url* and return as soon as the response headers are in.

        Never raises for network problems: timeouts, connection errors and
        anything else httpx reports come back as a :class:`FetchFailure`.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        try:
            request = self._client.build_request("GET", url, headers=REQUEST_HEADERS)
            response = await asyncio.wait_for(
                self._client.send(request, stream=True), timeout=self.timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return FetchFailure(FailureKind.TIMEOUT, "Request timed out")
        except httpx.TransportError as exc:
            return FetchFailure(FailureKind.CONNECTION, _describe(exc))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return FetchFailure(FailureKind.OTHER, _describe(exc))

        return FetchSuccess(response, deadline)
