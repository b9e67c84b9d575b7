"""Test configuration and fixtures for Vibetest."""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from vibetest.core.http import HTTPResponse
from vibetest.core.models import CheckContext, Route, ScanConfig
from vibetest.core.route_cache import RouteCache

BASE_URL = "http://localhost:3000"


def make_response(
    status_code: int = 200,
    body: str = "",
    headers: dict[str, str] | None = None,
    path: str = "/",
    set_cookies: list[str] | None = None,
    base_url: str = BASE_URL,
) -> HTTPResponse:
    """Build an HTTPResponse the way HTTPClient would."""
    headers = headers or {}
    lowered = {key.lower(): value for key, value in headers.items()}
    return HTTPResponse(
        url=f"{base_url}{path}",
        status_code=status_code,
        headers=headers,
        body=body,
        set_cookies=list(set_cookies or []),
        content_type=lowered.get("content-type", ""),
        server=lowered.get("server", ""),
    )


class FakeClient:
    """Scripted HTTPRequester.

    ``responses`` maps ``(method, path)`` or ``path`` to an HTTPResponse, an
    exception to raise, or a callable ``(method, path, body, headers, params)``
    returning either. Unmatched requests get ``default`` (a 404 unless given).
    """

    def __init__(
        self,
        responses: dict[Any, Any] | None = None,
        default: Any = None,
        base_url: str = BASE_URL,
    ):
        self.responses = responses or {}
        self.default = default
        self.base_url = base_url
        self.calls: list[tuple[str, str, Any, dict[str, str] | None, dict[str, Any] | None]] = []

    @property
    def requested(self) -> list[tuple[str, str]]:
        return [(method, path) for method, path, *_ in self.calls]

    async def request(self, method, path, body=None, headers=None, params=None):
        self.calls.append((method, path, body, headers, params))
        handler = self.responses.get((method, path), self.responses.get(path, self.default))
        if callable(handler) and not isinstance(handler, HTTPResponse):
            handler = handler(method, path, body, headers, params)
        if handler is None:
            handler = make_response(404, "Not Found", path=path, base_url=self.base_url)
        if isinstance(handler, Exception):
            raise handler
        return handler


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cache_file(temp_dir: Path) -> Path:
    """Return a route cache path inside the temp directory."""
    return temp_dir / ".vibetest-cache.json"


@pytest.fixture
def route_cache(cache_file: Path) -> RouteCache:
    """Create an empty route cache."""
    return RouteCache(cache_file)


@pytest.fixture
def scan_config() -> ScanConfig:
    """A safe-mode scan configuration for the default local target."""
    return ScanConfig(base_url=BASE_URL, port=3000)


@pytest.fixture
def make_context(scan_config: ScanConfig) -> Callable[..., CheckContext]:
    """Return a factory building a CheckContext around scripted clients."""

    def _make(
        routes: list[Route] | tuple[Route, ...] = (),
        frontend: FakeClient | None = None,
        api: FakeClient | None = None,
        safe_mode: bool = True,
    ) -> CheckContext:
        scan_config.safe_mode = safe_mode
        frontend = frontend or FakeClient()
        return CheckContext(
            config=scan_config,
            frontend_client=frontend,
            api_client=api or frontend,
            discovered_routes=tuple(routes),
        )

    return _make


@pytest.fixture
def isolated_env(temp_dir: Path, monkeypatch) -> Path:
    """Run with a clean working directory, home and VIBETEST_* environment."""
    home = temp_dir / "home"
    work = temp_dir / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in (
        "VIBETEST_CACHE_FILE",
        "VIBETEST_LOG_DIR",
        "VIBETEST_RATE_LIMIT_THRESHOLD",
        "VIBETEST_RATE_LIMIT_BASE_WAIT",
        "VIBETEST_REQUEST_TIMEOUT",
        "VIBETEST_AUTO_CONTINUE",
    ):
        monkeypatch.delenv(key, raising=False)
    return work
