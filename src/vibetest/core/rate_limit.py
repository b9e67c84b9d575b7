"""Rate-limit aware HTTP client factory.

Every response is inspected for throttling signals before it reaches the
caller. Detected hits pause the caller with a linear, capped delay. When the
hit count reaches the escalation threshold the operator decides whether the
scan continues. Requests are never retried.
"""

import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import typer

from .http import DEFAULT_TIMEOUT, HTTPClient, HTTPRequester, HTTPResponse
from .models import AuthConfig

logger = logging.getLogger(__name__)

RATE_LIMIT_INDICATORS: tuple[str, ...] = (
    "/blocked",
    "/rate-limit",
    "/too-many-requests",
    "rate limit exceeded",
    "too many requests",
)

DEFAULT_THRESHOLD = 5
DEFAULT_BASE_WAIT = 3.0
DEFAULT_MAX_MULTIPLIER = 3


def is_rate_limited(response: HTTPResponse) -> bool:
    """Return True when a response looks like throttling or blocking."""
    if response.status_code == 429:
        return True
    path = response.path
    body = (response.body or "").lower()
    return any(indicator in path or indicator in body for indicator in RATE_LIMIT_INDICATORS)


@dataclass
class RateLimitState:
    """Consecutive throttling hits seen by one client instance."""

    threshold: int = DEFAULT_THRESHOLD
    base_wait: float = DEFAULT_BASE_WAIT
    max_multiplier: int = DEFAULT_MAX_MULTIPLIER
    hits: int = 0
    consented: bool = False

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError("threshold must be at least 1")
        if self.base_wait < 0:
            raise ValueError("base_wait must not be negative")

    @property
    def max_pause(self) -> float:
        return self.base_wait * self.max_multiplier

    def record_hit(self) -> int:
        """Count one detected hit and return the new total."""
        self.hits += 1
        return self.hits

    def pause_for(self, hits: int) -> float:
        """Pause length after ``hits`` detections; pinned at the cap past the threshold."""
        if hits <= 0:
            return 0.0
        if hits > self.threshold:
            return self.max_pause
        return min(self.base_wait * hits, self.max_pause)

    @property
    def current_pause(self) -> float:
        return self.pause_for(self.hits)

    @property
    def reached_threshold(self) -> bool:
        """True exactly when the latest hit is the escalation hit."""
        return self.hits == self.threshold

    @property
    def escalated(self) -> bool:
        return self.hits > self.threshold


def _exit_scan() -> None:
    sys.exit(0)


class RateLimitPolicy:
    """Decide whether to keep scanning once the escalation threshold is hit."""

    def __init__(
        self,
        auto_continue: bool = False,
        interactive: bool | None = None,
        confirm: Callable[[str], bool] | None = None,
        on_abort: Callable[[], None] | None = None,
        exit_process: Callable[[], None] = _exit_scan,
    ):
        self.auto_continue = auto_continue
        self.interactive = sys.stdin.isatty() if interactive is None else interactive
        self._confirm = confirm or (lambda message: typer.confirm(message, default=False))
        self._on_abort = on_abort
        self._exit_process = exit_process

    def decide(self) -> bool:
        """Return True to continue scanning."""
        if self.auto_continue:
            logger.warning("Auto-continuing with capped delays (auto-continue enabled).")
            return True
        if not self.interactive:
            logger.warning("Non-interactive session; continuing with increased delays.")
            return True
        return bool(self._confirm("Continue testing? (This may take significantly longer)"))

    def abort(self) -> None:
        """Stop the whole scan process."""
        logger.warning("Testing aborted by user.")
        if self._on_abort:
            self._on_abort()
        self._exit_process()


class RateLimitedClient:
    """HTTP client wrapper that intercepts responses to apply politeness pauses."""

    def __init__(
        self,
        inner: HTTPRequester,
        state: RateLimitState | None = None,
        policy: RateLimitPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        base_url: str = "",
    ):
        self.inner = inner
        self.state = state or RateLimitState()
        self.policy = policy or RateLimitPolicy()
        self._sleep = sleep
        self.base_url = base_url or getattr(inner, "base_url", "")

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> HTTPResponse:
        response = await self.inner.request(method, path, body=body, headers=headers, params=params)
        await self._intercept(response)
        return response

    async def get(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> HTTPResponse:
        return await self.request("POST", path, body=body, headers=headers)

    async def head(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        return await self.request("HEAD", path, headers=headers)

    async def options(self, path: str, headers: dict[str, str] | None = None) -> HTTPResponse:
        return await self.request("OPTIONS", path, headers=headers)

    async def _intercept(self, response: HTTPResponse) -> None:
        if not is_rate_limited(response):
            return

        hits = self.state.record_hit()
        pause = self.state.pause_for(hits)
        if hits <= self.state.threshold:
            logger.warning(
                "Rate limit hit: %s. Pausing for %.0fs... (%d/%s)",
                response.path,
                pause,
                hits,
                "∞" if self.policy.auto_continue else self.state.threshold,
            )
        else:
            logger.warning(
                "Rate limit hit: %s. Pausing for %.0fs... (hit #%d)",
                response.path,
                pause,
                hits,
            )
        await self._sleep(pause)

        if hits == self.state.threshold:
            logger.warning(
                "Hit %d rate limits. The target application is heavily rate-limiting requests.",
                self.state.threshold,
            )
            if self.policy.decide():
                self.state.consented = True
            else:
                self.policy.abort()


def create_client(
    base_url: str,
    *,
    auth: AuthConfig | None = None,
    threshold: int = DEFAULT_THRESHOLD,
    base_wait: float = DEFAULT_BASE_WAIT,
    policy: RateLimitPolicy | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> tuple[HTTPClient, RateLimitedClient]:
    """Build an unopened HTTP client and its rate-limit wrapper.

    The caller owns the returned ``HTTPClient`` and must open it as an async
    context manager; ``client_factory`` does that for you.
    """
    inner = HTTPClient(
        base_url,
        timeout=timeout,
        headers=auth.to_headers() if auth else None,
    )
    wrapped = RateLimitedClient(
        inner,
        state=RateLimitState(threshold=threshold, base_wait=base_wait),
        policy=policy,
        sleep=sleep,
        base_url=inner.base_url,
    )
    return inner, wrapped


@asynccontextmanager
async def client_factory(base_url: str, **kwargs: Any) -> AsyncIterator[RateLimitedClient]:
    """Open a rate-limit aware client for the lifetime of the block."""
    inner, wrapped = create_client(base_url, **kwargs)
    async with inner:
        yield wrapped
