"""HTTP client used for probing the target."""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlsplit

import httpx

DEFAULT_TIMEOUT = 10.0


@dataclass
class HTTPResponse:
    """Represents an HTTP response."""

    url: str
    status_code: int
    headers: dict[str, str]
    body: str
    cookies: dict[str, str] = field(default_factory=dict)
    set_cookies: list[str] = field(default_factory=list)
    response_time: float = 0.0
    content_type: str = ""
    server: str = ""

    @property
    def path(self) -> str:
        """Path of the request that produced this response."""
        return urlsplit(self.url).path or "/"

    def header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def json(self) -> Any:
        return json.loads(self.body)


class HTTPRequester(Protocol):
    """Minimal capability every HTTP client handed to checks must offer."""

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> HTTPResponse:
        """Send one request relative to the client's base URL."""
        ...


class HTTPClient:
    """Async HTTP client bound to one target origin.

    Non-2xx statuses are returned, never raised. Transport failures surface as
    ``httpx.HTTPError`` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        verify_ssl: bool = False,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.headers = dict(headers or {})
        self._transport = transport
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            verify=self.verify_ssl,
            headers=self.headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> HTTPResponse:
        """Make an HTTP request."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        kwargs: dict[str, Any] = {"headers": headers, "params": params}
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif isinstance(body, (str, bytes)):
            kwargs["content"] = body

        start = time.time()
        response = await self.client.request(method.upper(), path, **kwargs)
        elapsed = time.time() - start

        return HTTPResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
            cookies=dict(response.cookies),
            set_cookies=response.headers.get_list("set-cookie"),
            response_time=elapsed,
            content_type=response.headers.get("content-type", ""),
            server=response.headers.get("server", ""),
        )

    async def get(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        """Make a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a POST request."""
        return await self.request("POST", path, body=body, headers=headers)

    async def head(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        return await self.request("HEAD", path, headers=headers)

    async def options(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        return await self.request("OPTIONS", path, headers=headers)
