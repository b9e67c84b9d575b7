"""Verbose error and internal detail leakage check."""

import re

from vibetest.core.http import HTTPResponse
from vibetest.core.models import CheckContext, Finding

from .base import Check

ERROR_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"SyntaxError:.+at", re.IGNORECASE), "Stack Trace (Syntax)"),
    (re.compile(r"ReferenceError:.+at", re.IGNORECASE), "Stack Trace (Reference)"),
    (re.compile(r"TypeError:.+at", re.IGNORECASE), "Stack Trace (Type)"),
    (re.compile(r"Traceback \(most recent call last\)"), "Stack Trace (Python)"),
    (re.compile(r"node_modules/"), "File Path Leak (node_modules)"),
    (re.compile(r"/var/www/"), "File Path Leak (Linux)"),
    (re.compile(r"[A-Z]:\\\w+\\"), "File Path Leak (Windows)"),
    (re.compile(r"SQL syntax", re.IGNORECASE), "Database Error (SQL)"),
    (re.compile(r"MongoError"), "Database Error (Mongo)"),
    (re.compile(r"Sequelize"), "Database Error (Sequelize)"),
    (re.compile(r"PrismaClient"), "Database Error (Prisma)"),
)
MAX_ROUTES = 10
MALFORMED_JSON = '{ "broken": json, }'
BAD_QUERY = {"id": "NaN", "page": "-1", "sort": "INVALID"}


class ErrorHandlingCheck(Check):
    id = "error-handling"
    name = "Broken Error Handling & Info Leakage"
    description = "Triggers errors to check for leaked stack traces or database info"

    async def run(self, context: CheckContext) -> list[Finding]:
        findings: list[Finding] = []
        for route in context.discovered_routes[:MAX_ROUTES]:
            client = context.client_for(route.path)
            if route.method in ("POST", "PUT"):
                response = await self.send(
                    client,
                    route.method,
                    route.path,
                    body=MALFORMED_JSON,
                    headers={"Content-Type": "application/json"},
                )
                findings.extend(self._inspect(response, route.path, "Malformed JSON"))

            response = await self.send(client, "GET", route.path, params=BAD_QUERY)
            findings.extend(self._inspect(response, route.path, "Invalid Query Params"))
        return findings

    def _inspect(self, response: HTTPResponse | None, endpoint: str, vector: str) -> list[Finding]:
        if response is None or response.status_code < 400:
            return []
        for pattern, label in ERROR_PATTERNS:
            if not pattern.search(response.body):
                continue
            # One leak per endpoint and vector keeps the report readable.
            return [
                Finding(
                    id=f"info-leak-{endpoint}-{label}",
                    check_id=self.id,
                    category="config",
                    name=f"Information Leakage: {label}",
                    endpoint=endpoint,
                    risk="medium",
                    description=(
                        "The endpoint returned a verbose error containing internal details "
                        f"when sent '{vector}'. Match: {label}"
                    ),
                    assumption=(
                        "Developer enabled verbose logging for debugging and forgot to "
                        "disable it in this environment."
                    ),
                    reproduction=f"Trigger an error on {endpoint} using {vector}.",
                    fix="Run in production mode and make error handlers sanitize output.",
                )
            ]
        return []
