"""Set-Cookie flag analysis across discovered routes."""

import re

from vibetest.core.models import CheckContext, Finding

from .base import Check

_COOKIE_NAME = re.compile(r"^([^=]+)=")


class CookieSecurityCheck(Check):
    id = "cookie-security"
    name = "Cookie Security & Scope"
    description = "Analyzes Set-Cookie headers for security flags and potential scope issues."

    async def run(self, context: CheckContext) -> list[Finding]:
        findings: list[Finding] = []
        processed: set[str] = set()

        for route in context.discovered_routes:
            response = await self.send(context.frontend_client, "HEAD", route.path)
            if response is None:
                continue

            for cookie in response.set_cookies:
                match = _COOKIE_NAME.match(cookie)
                cookie_name = match.group(1).strip() if match else "unknown"
                if cookie_name in processed:
                    continue
                processed.add(cookie_name)
                findings.extend(self._inspect(cookie, cookie_name, route.path))

        return findings

    def _inspect(self, cookie: str, cookie_name: str, path: str) -> list[Finding]:
        lowered = cookie.lower()
        findings: list[Finding] = []
        reproduction = f"Inspect the Set-Cookie headers returned by {path}"

        if "httponly" not in lowered:
            findings.append(
                Finding(
                    id=f"cookie-httponly-{cookie_name}",
                    check_id=self.id,
                    category="backend",
                    name=f"Missing HttpOnly Flag on {cookie_name}",
                    endpoint=path,
                    risk="medium",
                    description=(
                        f"The cookie {cookie_name} is not marked HttpOnly, "
                        "allowing JavaScript (XSS) to steal it."
                    ),
                    assumption="Cookie contains sensitive session data.",
                    reproduction=reproduction,
                    fix="Set the HttpOnly flag when creating the cookie.",
                )
            )
        if "secure" not in lowered:
            findings.append(
                Finding(
                    id=f"cookie-secure-{cookie_name}",
                    check_id=self.id,
                    category="config",
                    name=f"Missing Secure Flag on {cookie_name}",
                    endpoint=path,
                    risk="low",
                    description=(
                        f"The cookie {cookie_name} is not marked Secure. "
                        "It will be sent over plain HTTP."
                    ),
                    assumption="App will be deployed to HTTPS.",
                    reproduction=reproduction,
                    fix="Set the Secure flag in production environments.",
                )
            )
        if "samesite" not in lowered:
            findings.append(
                Finding(
                    id=f"cookie-samesite-{cookie_name}",
                    check_id=self.id,
                    category="config",
                    name=f"Missing SameSite Attribute on {cookie_name}",
                    endpoint=path,
                    risk="medium",
                    description=(
                        f"The cookie {cookie_name} does not specify SameSite behavior, "
                        "exposing it to CSRF."
                    ),
                    assumption="Modern browsers default to Lax, but explicit is better.",
                    reproduction=reproduction,
                    fix="Set SameSite=Lax or SameSite=Strict.",
                )
            )
        return findings
