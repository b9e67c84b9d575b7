"""Security header and technology disclosure check."""

from vibetest.core.models import CheckContext, Finding

from .base import Check

IMPORTANT_HEADERS = (
    "content-security-policy",
    "x-content-type-options",
    "x-frame-options",
)


class SecurityHeadersCheck(Check):
    """Inspect the landing page for missing hardening headers."""

    id = "security-headers"
    name = "Security Configuration & Headers"
    description = "Checks for missing security headers and leaked technology info"

    async def run(self, context: CheckContext) -> list[Finding]:
        response = await self.send(context.frontend_client, "GET", "/")
        if response is None:
            return []

        base_url = context.config.base_url
        findings: list[Finding] = []
        powered_by = response.header("x-powered-by")
        if powered_by:
            findings.append(
                Finding(
                    id="header-powered-by",
                    check_id=self.id,
                    category="config",
                    name="Leaked Tech Stack",
                    endpoint="/",
                    risk="low",
                    description=f'Server broadcasts "X-Powered-By: {powered_by}".',
                    assumption="It is harmless to tell attackers which framework version runs here.",
                    reproduction=f"curl -I {base_url}",
                    fix="Disable the X-Powered-By header in the framework or reverse proxy.",
                )
            )

        for header in IMPORTANT_HEADERS:
            if response.header(header):
                continue
            findings.append(
                Finding(
                    id=f"missing-{header}",
                    check_id=self.id,
                    category="config",
                    name=f"Missing {header} Header",
                    endpoint="/",
                    risk="medium" if header == "content-security-policy" else "low",
                    description=f"The response is missing the {header} header.",
                    assumption="Defaults are secure enough.",
                    reproduction=f"curl -I {base_url}",
                    fix="Set secure headers with Helmet.js or the equivalent for your stack.",
                )
            )
        return findings
