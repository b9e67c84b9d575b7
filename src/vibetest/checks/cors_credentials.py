"""CORS misconfiguration checks involving credentialed requests."""

import re

from vibetest.core.models import CheckContext, Finding, Route

from .base import Check, client_base_url

TEST_ORIGINS = (
    "https://evil.com",
    "https://attacker.com",
    "null",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
)
MAX_ROUTES = 10
MAX_PREFLIGHT_ROUTES = 5


def _slug(value: str) -> str:
    return re.sub(r"\W", "", value)


class CorsCredentialsCheck(Check):
    id = "cors-credentials"
    name = "CORS Credential Abuse"
    description = (
        "Tests for CORS misconfiguration with credentials including wildcard origins, "
        "credential reflection, and preflight bypass"
    )

    async def run(self, context: CheckContext) -> list[Finding]:
        findings: list[Finding] = []
        for route in context.discovered_routes[:MAX_ROUTES]:
            for origin in TEST_ORIGINS:
                findings.extend(await self._probe_origin(context, route, origin))

        for route in context.discovered_routes[:MAX_PREFLIGHT_ROUTES]:
            if route.method != "GET":
                findings.extend(await self._probe_preflight(context, route))
        return findings

    async def _probe_origin(self, context: CheckContext, route: Route, origin: str) -> list[Finding]:
        client = context.client_for(route.path)
        response = await self.send(client, route.method, route.path, headers={"Origin": origin})
        if response is None:
            return []

        allow_origin = response.header("access-control-allow-origin")
        allow_credentials = response.header("access-control-allow-credentials")
        if allow_credentials != "true" or not allow_origin:
            return []

        base_url = client_base_url(client)
        endpoint = f"{route.method} {route.path}"
        reproduction = f'curl -H "Origin: {origin}" {base_url}{route.path}'
        findings: list[Finding] = []

        if allow_origin == "*":
            findings.append(
                Finding(
                    id=f"cors-wildcard-creds-{route.path}",
                    check_id=self.id,
                    category="config",
                    name="Wildcard Origin with Credentials Enabled",
                    endpoint=endpoint,
                    risk="critical",
                    description=(
                        "Endpoint allows credentials with wildcard origin "
                        "(technically invalid but dangerous if implemented)."
                    ),
                    assumption=(
                        "Server misconfiguration allows wildcard CORS with credentials which "
                        "browsers reject but which may expose internal APIs."
                    ),
                    reproduction=reproduction,
                    fix=(
                        "Never use wildcard (*) origin with credentials: true. "
                        "Specify exact origins or disable credentials."
                    ),
                )
            )

        if allow_origin == origin:
            findings.append(
                Finding(
                    id=f"cors-reflected-creds-{route.path}-{_slug(origin)}",
                    check_id=self.id,
                    category="config",
                    name="Attacker Origin Accepted with Credentials",
                    endpoint=endpoint,
                    risk="high",
                    description=(
                        f"Server reflects untrusted origin ({origin}) and allows credentials. "
                        "This enables cross-origin attacks."
                    ),
                    assumption=(
                        "Server blindly reflects the Origin header with credentials enabled."
                    ),
                    reproduction=reproduction,
                    fix=(
                        "Maintain a strict allowlist of trusted origins. Never reflect "
                        "arbitrary origins with credentials enabled."
                    ),
                )
            )

        if allow_origin != base_url:
            findings.append(
                Finding(
                    id=f"cors-creds-nonce-origin-{route.path}-{_slug(allow_origin)}",
                    check_id=self.id,
                    category="config",
                    name="Credentials Enabled with Non-Same-Origin",
                    endpoint=endpoint,
                    risk="medium",
                    description=f"Endpoint allows credentials from origin: {allow_origin}",
                    assumption=(
                        "CORS credentials allow requests from a non-same origin, potentially "
                        "exposing user data across origins."
                    ),
                    reproduction=f'curl -H "Origin: {allow_origin}" {base_url}{route.path}',
                    fix=(
                        "Review CORS configuration. Ensure only trusted origins can make "
                        "credentialed requests."
                    ),
                )
            )
        return findings

    async def _probe_preflight(self, context: CheckContext, route: Route) -> list[Finding]:
        client = context.client_for(route.path)
        response = await self.send(
            client,
            "OPTIONS",
            route.path,
            headers={
                "Origin": "https://evil.com",
                "Access-Control-Request-Method": route.method,
            },
        )
        if response is None:
            return []

        base_url = client_base_url(client)
        allow_origin = response.header("access-control-allow-origin")
        if (
            not allow_origin
            or allow_origin == base_url
            or response.header("access-control-allow-credentials") != "true"
        ):
            return []

        return [
            Finding(
                id=f"cors-preflight-creds-{route.path}",
                check_id=self.id,
                category="config",
                name="Preflight Allows Untrusted Origin with Credentials",
                endpoint=f"OPTIONS {route.path}",
                risk="high",
                description="Preflight (OPTIONS) request allows attacker origin with credentials.",
                assumption=(
                    "Preflight responses let attackers make credentialed cross-origin requests."
                ),
                reproduction=(
                    f'curl -X OPTIONS -H "Origin: https://evil.com" '
                    f'-H "Access-Control-Request-Method: {route.method}" {base_url}{route.path}'
                ),
                fix="Restrict preflight responses to trusted origins only.",
            )
        ]
