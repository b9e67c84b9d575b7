"""Discovery engine and execution pipeline."""

from .discovery import CHUNK_SIZE, RouteDiscovery, discover_routes
from .http import HTTPClient, HTTPRequester, HTTPResponse
from .models import (
    AuthConfig,
    CacheEntry,
    CheckContext,
    Finding,
    Route,
    ScanConfig,
)
from .rate_limit import (
    RateLimitedClient,
    RateLimitPolicy,
    RateLimitState,
    client_factory,
    create_client,
    is_rate_limited,
)
from .route_cache import CacheStats, RouteCache, hash_base_url
from .scheduler import CheckError, CheckEvent, CheckScheduler

__all__ = [
    "AuthConfig",
    "CHUNK_SIZE",
    "CacheEntry",
    "CacheStats",
    "CheckContext",
    "CheckError",
    "CheckEvent",
    "CheckScheduler",
    "Finding",
    "HTTPClient",
    "HTTPRequester",
    "HTTPResponse",
    "RateLimitPolicy",
    "RateLimitState",
    "RateLimitedClient",
    "Route",
    "RouteCache",
    "RouteDiscovery",
    "ScanConfig",
    "client_factory",
    "create_client",
    "discover_routes",
    "hash_base_url",
    "is_rate_limited",
]
