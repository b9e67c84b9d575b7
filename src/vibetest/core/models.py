"""Data models shared by discovery, the execution pipeline and checks."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from .http import HTTPRequester

HTTPMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
RiskLevel = Literal["low", "medium", "high", "critical"]
FindingCategory = Literal["frontend", "backend", "config", "logic"]

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")
RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high", "critical")
FINDING_CATEGORIES: tuple[str, ...] = ("frontend", "backend", "config", "logic")


def utc_timestamp() -> str:
    """Return the current time as an ISO-8601 UTC string."""
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class Route:
    """One discovered (path, method) pair believed to be reachable."""

    path: str
    method: HTTPMethod = "GET"
    inputs: dict[str, Any] | None = None
    auth_required: bool | None = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported route method: {self.method}")


@dataclass
class CacheEntry:
    """Last known probe outcome for one path against one target."""

    path: str
    exists: bool
    status: int | None = None
    last_checked: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "exists": self.exists}
        if self.status is not None:
            data["status"] = self.status
        data["lastChecked"] = self.last_checked
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        """Build an entry from its cache-file representation."""
        status = data.get("status")
        return cls(
            path=str(data["path"]),
            exists=bool(data["exists"]),
            status=int(status) if status is not None else None,
            last_checked=str(data.get("lastChecked", "")),
        )


@dataclass(frozen=True)
class Finding:
    """One reported potential issue produced by a check."""

    id: str
    check_id: str
    name: str
    endpoint: str
    risk: RiskLevel
    description: str
    assumption: str
    reproduction: str
    fix: str
    category: FindingCategory | None = None

    def __post_init__(self) -> None:
        if self.risk not in RISK_LEVELS:
            raise ValueError(f"Unknown risk level: {self.risk}")
        if self.category is not None and self.category not in FINDING_CATEGORIES:
            raise ValueError(f"Unknown finding category: {self.category}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the report wire format."""
        return {
            "id": self.id,
            "checkId": self.check_id,
            "category": self.category,
            "name": self.name,
            "endpoint": self.endpoint,
            "risk": self.risk,
            "description": self.description,
            "assumption": self.assumption,
            "reproduction": self.reproduction,
            "fix": self.fix,
        }


@dataclass
class AuthConfig:
    """Credentials used to authenticate requests against the target."""

    token: str | None = None
    username: str | None = None
    password: str | None = None
    cookies: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    def to_headers(self) -> dict[str, str]:
        """Return the request headers carrying these credentials."""
        headers = dict(self.headers)
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.cookies:
            headers["Cookie"] = "; ".join(f"{name}={value}" for name, value in self.cookies.items())
        return headers

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthConfig":
        return cls(
            token=data.get("token"),
            username=data.get("username"),
            password=data.get("password"),
            cookies=dict(data.get("cookies") or {}),
            headers=dict(data.get("headers") or {}),
        )


@dataclass
class ScanConfig:
    """Configuration for one scan run."""

    base_url: str
    port: int
    api_url: str | None = None
    api_port: int | None = None
    auth: AuthConfig | None = None
    safe_mode: bool = True
    auto_continue: bool = False

    @property
    def effective_api_url(self) -> str:
        """Backend origin, which is the frontend origin when no API port is set."""
        return self.api_url or self.base_url


@dataclass(frozen=True)
class CheckContext:
    """Shared, read-mostly context handed to every check."""

    config: ScanConfig
    frontend_client: "HTTPRequester"
    api_client: "HTTPRequester"
    discovered_routes: tuple[Route, ...] = ()

    def client_for(self, path: str) -> "HTTPRequester":
        """Pick the API client for /api paths and the frontend client otherwise."""
        if path.startswith("/api"):
            return self.api_client
        return self.frontend_client
