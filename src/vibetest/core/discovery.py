"""Wordlist-driven route discovery with caching and single-hop link extraction."""

import asyncio
import logging
import re
from collections.abc import Sequence

import httpx
from bs4 import BeautifulSoup

from .http import DEFAULT_TIMEOUT, HTTPClient, HTTPRequester, HTTPResponse
from .models import CacheEntry, Route, utc_timestamp
from .route_cache import RouteCache
from .wordlists import DISCOVERY_PATHS

logger = logging.getLogger(__name__)

CHUNK_SIZE = 10
ROBOTS_PATH = "/robots.txt"

_ROBOTS_RULE = re.compile(r"^(?:Allow|Disallow):\s*(\S+)", re.IGNORECASE)


def parse_robots_routes(body: str) -> list[Route]:
    """Return GET routes declared by Allow/Disallow lines."""
    routes: list[Route] = []
    for line in body.split("\n"):
        match = _ROBOTS_RULE.match(line)
        if match and match.group(1).startswith("/"):
            routes.append(Route(path=match.group(1)))
    return routes


def extract_link_routes(html: str, wordlist: Sequence[str]) -> list[Route]:
    """Return GET routes for root-relative anchors that are not in the wordlist."""
    known = set(wordlist)
    soup = BeautifulSoup(html, "html.parser")
    routes: list[Route] = []
    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if isinstance(href, str) and href.startswith("/") and href not in known:
            routes.append(Route(path=href))
    return routes


def dedupe_routes(routes: Sequence[Route]) -> list[Route]:
    """Keep one route per path; the most recently added route wins."""
    unique: dict[str, Route] = {}
    for route in routes:
        unique[route.path] = route
    return list(unique.values())


class RouteDiscovery:
    """Probe a target with a wordlist and collect the routes that answer."""

    def __init__(
        self,
        base_url: str,
        cache: RouteCache,
        wordlist: Sequence[str] = DISCOVERY_PATHS,
        chunk_size: int = CHUNK_SIZE,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.base_url = base_url
        self.cache = cache
        self.wordlist = tuple(wordlist)
        self.chunk_size = chunk_size
        self.probed: list[str] = []

    async def discover(self, client: HTTPRequester | None = None) -> list[Route]:
        """Run discovery, opening a plain client when none is supplied."""
        if client is not None:
            return await self._discover(client)
        async with HTTPClient(self.base_url, timeout=DEFAULT_TIMEOUT) as owned:
            return await self._discover(owned)

    async def _discover(self, client: HTTPRequester) -> list[Route]:
        routes: list[Route] = [
            Route(path=entry.path) for entry in self.cache.get_cached_existing_paths(self.base_url)
        ]
        cached_paths = self.cache.get_cached_paths(self.base_url)
        paths_to_search = [path for path in self.wordlist if path not in cached_paths]
        logger.debug(
            "Discovery for %s: %d cached routes, %d paths to probe",
            self.base_url,
            len(routes),
            len(paths_to_search),
        )

        new_entries: list[CacheEntry] = []
        for start in range(0, len(paths_to_search), self.chunk_size):
            chunk = paths_to_search[start : start + self.chunk_size]
            results = await asyncio.gather(
                *(self._probe(client, path, routes, new_entries) for path in chunk),
                return_exceptions=True,
            )
            for path, result in zip(chunk, results):
                if isinstance(result, Exception):
                    logger.warning("Probe for %s failed unexpectedly: %s", path, result)

        if new_entries:
            self.cache.update_cache(self.base_url, new_entries)

        return dedupe_routes(routes)

    async def _probe(
        self,
        client: HTTPRequester,
        path: str,
        routes: list[Route],
        new_entries: list[CacheEntry],
    ) -> None:
        self.probed.append(path)
        try:
            response = await client.request("GET", path)
        except httpx.HTTPError as exc:
            logger.debug("Probe %s failed: %s", path, exc)
            new_entries.append(CacheEntry(path=path, exists=False, last_checked=utc_timestamp()))
            return

        exists = response.status_code != 404
        new_entries.append(
            CacheEntry(
                path=path,
                exists=exists,
                status=response.status_code,
                last_checked=utc_timestamp(),
            )
        )
        if not exists:
            return

        routes.append(Route(path=path))
        routes.extend(self._linked_routes(path, response))

    def _linked_routes(self, path: str, response: HTTPResponse) -> list[Route]:
        found: list[Route] = []
        if path == ROBOTS_PATH and response.body:
            found.extend(parse_robots_routes(response.body))
        if "text/html" in response.content_type.lower():
            found.extend(extract_link_routes(response.body, self.wordlist))
        return found


async def discover_routes(
    base_url: str,
    cache: RouteCache | None = None,
    client: HTTPRequester | None = None,
    wordlist: Sequence[str] = DISCOVERY_PATHS,
) -> list[Route]:
    """Discover reachable routes on a target."""
    discovery = RouteDiscovery(base_url, cache or RouteCache(), wordlist=wordlist)
    return await discovery.discover(client)
