"""Anonymous state-changing request check."""

import re

from vibetest.core.models import CheckContext, Finding, Route

from .base import Check, client_base_url

SAFE_KEYWORDS = (
    "login",
    "signin",
    "register",
    "signup",
    "forgot-password",
    "reset",
    "contact",
    "webhook",
    "public",
)
STATE_CHANGING = ("POST", "PUT", "DELETE", "PATCH")
_TRAILING_ID = re.compile(r"\d+$")


def candidate_routes(routes: tuple[Route, ...]) -> list[Route]:
    """Mapped state-changing routes plus guesses derived from GET /api routes."""
    candidates = [route for route in routes if route.method in STATE_CHANGING]
    for route in routes:
        if route.method != "GET" or not route.path.startswith("/api"):
            continue
        candidates.append(Route(path=route.path, method="POST"))
        if _TRAILING_ID.search(route.path):
            candidates.append(Route(path=route.path, method="DELETE"))

    unique: dict[tuple[str, str], Route] = {}
    for route in candidates:
        unique.setdefault((route.method, route.path), route)
    return [
        route
        for route in unique.values()
        if not any(keyword in route.path.lower() for keyword in SAFE_KEYWORDS)
    ]


class UnsafeMethodsCheck(Check):
    id = "unsafe-methods"
    name = "Unprotected State Change"
    description = (
        "Checks for state-changing methods (POST/PUT/DELETE) that accept anonymous requests"
    )

    async def run(self, context: CheckContext) -> list[Finding]:
        findings: list[Finding] = []
        for route in candidate_routes(context.discovered_routes):
            if context.config.safe_mode and route.method == "DELETE":
                continue
            client = context.client_for(route.path)
            response = await self.send(client, route.method, route.path, body={})
            if response is None:
                continue

            status = response.status_code
            # Auth middleware normally runs first, so 2xx or a crash means no guard.
            if not (status < 300 or status == 500):
                continue

            name = "Unprotected State Change"
            description = (
                f"The endpoint {route.method} {route.path} responded with {status}, "
                "suggesting it processed the request without authentication."
            )
            if status == 500:
                name = "Crash on Unauth Request (Likely Missing Guard)"
                description += (
                    " A 500 error suggests the code tried to access a user object that "
                    "wasn't present, causing a crash."
                )

            findings.append(
                Finding(
                    id=f"unsafe-method-{route.method}-{route.path}",
                    check_id=self.id,
                    category="backend",
                    name=name,
                    endpoint=f"{route.method} {route.path}",
                    risk="medium" if status == 500 else "high",
                    description=description,
                    assumption=(
                        "Developer assumed this method was protected because the route group "
                        "is, or forgot it entirely."
                    ),
                    reproduction=f"curl -X {route.method} {client_base_url(client)}{route.path}",
                    fix=(
                        "Ensure authentication middleware runs before any request processing "
                        "or validation."
                    ),
                )
            )
        return findings
