"""Concurrency-control probe for one-time actions."""

import asyncio

import httpx

from vibetest.core.http import HTTPResponse
from vibetest.core.models import CheckContext, Finding

from .base import Check

RACE_KEYWORDS = ("coupon", "vote", "gift", "claim", "transfer", "redeem")
REQUEST_COUNT = 10


class RaceConditionCheck(Check):
    """Fire parallel requests at claim-like endpoints and count the successes.

    The burst is deliberately unbounded within one endpoint; it tests
    atomicity, not throughput. Skipped entirely in safe mode since every
    request may create data.
    """

    id = "race-condition"
    name = "Race Conditions"
    description = "Checks for lack of concurrency controls on state-changing endpoints"

    def __init__(self, request_count: int = REQUEST_COUNT):
        self.request_count = request_count

    async def run(self, context: CheckContext) -> list[Finding]:
        if context.config.safe_mode:
            return []

        candidates = [
            route
            for route in context.discovered_routes
            if route.method in ("POST", "PUT")
            and any(keyword in route.path.lower() for keyword in RACE_KEYWORDS)
        ]

        findings: list[Finding] = []
        for route in candidates:
            client = context.client_for(route.path)
            results = await asyncio.gather(
                *(
                    client.request(route.method, route.path, body={})
                    for _ in range(self.request_count)
                ),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Exception) and not isinstance(result, httpx.HTTPError):
                    raise result

            successes = sum(
                1
                for result in results
                if isinstance(result, HTTPResponse) and 200 <= result.status_code < 300
            )
            if successes <= 1:
                continue
            findings.append(
                Finding(
                    id=f"race-condition-{route.path}",
                    check_id=self.id,
                    category="logic",
                    name="Potential Race Condition",
                    endpoint=route.path,
                    risk="medium",
                    description=(
                        f"Sent {self.request_count} parallel requests, and {successes} "
                        "succeeded. If this action should be atomic (like claiming a one-time "
                        "code), this is a vulnerability."
                    ),
                    assumption="Database transactions or logic are atomic without explicit locking.",
                    reproduction=(
                        f"Send {self.request_count} simultaneous requests to the endpoint using "
                        "Burp Intruder or a script."
                    ),
                    fix="Use database transactions with FOR UPDATE locking or distributed locks.",
                )
            )
        return findings
