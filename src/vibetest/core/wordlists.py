"""Candidate paths probed during route discovery."""

_PATH_GROUPS: tuple[tuple[str, ...], ...] = (
    # Roots
    ("/", "/home", "/index.html", "/app", "/api", "/api/v1", "/api/v2", "/v1", "/v2"),
    # API docs
    (
        "/api-docs",
        "/docs",
        "/documentation",
        "/swagger",
        "/swagger.json",
        "/swagger.yaml",
        "/swagger-ui",
        "/swagger-ui.html",
        "/redoc",
        "/openapi.json",
        "/openapi.yaml",
        "/api/openapi.json",
        "/api/swagger.json",
        "/api/docs",
    ),
    # GraphQL
    ("/graphql", "/api/graphql", "/api/v1/graphql", "/graphiql", "/playground"),
    # Auth and session
    (
        "/auth",
        "/auth/login",
        "/auth/logout",
        "/auth/register",
        "/auth/signup",
        "/auth/forgot-password",
        "/auth/reset-password",
        "/auth/callback",
        "/api/auth",
        "/api/auth/login",
        "/api/auth/logout",
        "/api/auth/register",
        "/api/auth/me",
        "/api/login",
        "/api/register",
        "/api/signup",
        "/api/logout",
        "/api/session",
        "/login",
        "/logout",
        "/register",
        "/signup",
        "/session",
        "/account",
        "/me",
        "/api/whoami",
        "/oauth/authorize",
        "/oauth/token",
        "/sso",
    ),
    # Users and profiles
    (
        "/user",
        "/users",
        "/profile",
        "/api/user",
        "/api/users",
        "/api/profile",
        "/api/me",
        "/api/v1/user",
        "/api/v1/users",
        "/api/account",
        "/api/accounts",
    ),
    # Admin
    (
        "/admin",
        "/administrator",
        "/admin/login",
        "/admin/dashboard",
        "/api/admin",
        "/api/admin/users",
        "/api/admin/settings",
        "/api/v1/admin",
        "/dashboard",
        "/manage",
        "/console",
        "/backend",
    ),
    # Health and monitoring
    (
        "/health",
        "/healthz",
        "/status",
        "/info",
        "/ping",
        "/ready",
        "/api/health",
        "/api/status",
        "/actuator",
        "/actuator/health",
        "/actuator/env",
        "/metrics",
        "/prometheus",
        "/debug",
        "/debug/vars",
        "/debug/pprof",
        "/server-status",
    ),
    # Config and secrets
    (
        "/config",
        "/config.json",
        "/api/config",
        "/api/settings",
        "/settings",
        "/.env",
        "/.env.local",
        "/.env.production",
        "/.env.backup",
        "/.git",
        "/.git/config",
        "/.gitignore",
        "/.htaccess",
        "/.htpasswd",
        "/secret",
        "/secrets",
        "/credentials",
        "/.well-known/security.txt",
        "/.well-known/openid-configuration",
        "/.well-known/jwks.json",
    ),
    # Files and uploads
    (
        "/upload",
        "/uploads",
        "/api/upload",
        "/files",
        "/api/files",
        "/assets",
        "/static",
        "/public",
        "/download",
        "/export",
        "/import",
        "/backup",
        "/backups",
    ),
    # Common REST resources
    (
        "/api/posts",
        "/api/articles",
        "/api/items",
        "/api/products",
        "/api/orders",
        "/api/cart",
        "/api/checkout",
        "/api/payments",
        "/api/notifications",
        "/api/messages",
        "/api/comments",
        "/api/search",
        "/api/logs",
        "/api/coupon",
        "/api/coupons",
        "/api/vote",
        "/api/redeem",
        "/api/transfer",
        "/api/v1/orders",
        "/api/v1/products",
    ),
    # Webhooks and realtime
    ("/webhook", "/webhooks", "/api/webhooks", "/ws", "/socket.io"),
    # Well-known site files
    ("/robots.txt", "/sitemap.xml", "/humans.txt", "/crossdomain.xml", "/favicon.ico"),
    # Database and admin tools
    ("/phpmyadmin", "/adminer", "/database", "/db", "/phpinfo.php"),
    # Development and internal
    (
        "/dev",
        "/staging",
        "/test",
        "/sandbox",
        "/internal",
        "/internal/api",
        "/_internal",
        "/__health__",
        "/_next/static",
        "/install",
        "/setup",
    ),
    # Framework and CMS
    ("/wp-admin", "/wp-login.php", "/wp-json"),
    # Misc
    ("/search", "/help", "/contact", "/error", "/logs", "/hidden", "/private", "/rate-limit"),
)


def _flatten(groups: tuple[tuple[str, ...], ...]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for group in groups:
        for path in group:
            if path not in seen:
                seen.add(path)
                ordered.append(path)
    return tuple(ordered)


DISCOVERY_PATHS: tuple[str, ...] = _flatten(_PATH_GROUPS)
