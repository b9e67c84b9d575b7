"""Base contract for check plugins."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from vibetest.core.http import HTTPRequester, HTTPResponse
from vibetest.core.models import CheckContext, Finding

logger = logging.getLogger(__name__)


class Check(ABC):
    """Plugin interface for vulnerability checks."""

    id: str
    name: str
    description: str

    @abstractmethod
    async def run(self, context: CheckContext) -> list[Finding]:
        """Probe the target through the context and return findings."""

    async def send(
        self,
        client: HTTPRequester,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> HTTPResponse | None:
        """Issue one request, returning None when it fails at the network level."""
        try:
            return await client.request(method, path, body=body, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.debug("[%s] %s %s failed: %s", self.id, method, path, exc)
            return None


def client_base_url(client: HTTPRequester) -> str:
    """Best-effort base URL of a client, used in reproduction steps."""
    return str(getattr(client, "base_url", "")).rstrip("/")
