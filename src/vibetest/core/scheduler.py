"""Sequential, fault-isolating execution of check plugins."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from .models import CheckContext, Finding

if TYPE_CHECKING:
    from vibetest.checks.base import Check

logger = logging.getLogger(__name__)

CheckStatus = Literal["started", "succeeded", "failed"]


@dataclass(frozen=True)
class CheckEvent:
    """Status update for one check, consumed by reporters."""

    check_id: str
    check_name: str
    status: CheckStatus
    findings: int = 0
    error: str | None = None
    elapsed: float = 0.0


@dataclass(frozen=True)
class CheckError:
    """A check failure captured during a run."""

    check_id: str
    message: str


class CheckScheduler:
    """Run checks one at a time, in order, against a shared context."""

    def __init__(
        self,
        checks: Iterable["Check"],
        reporter: Callable[[CheckEvent], None] | None = None,
    ):
        self.checks: list["Check"] = list(checks)
        self._reporter = reporter

    async def run(self, context: CheckContext) -> list[Finding]:
        """Run every check and return findings in check order."""
        findings, _ = await self.run_with_diagnostics(context)
        return findings

    async def run_with_diagnostics(
        self, context: CheckContext
    ) -> tuple[list[Finding], list[CheckError]]:
        """Run every check and return findings plus the failures encountered."""
        findings: list[Finding] = []
        errors: list[CheckError] = []
        for check in self.checks:
            started = time.perf_counter()
            self._emit(CheckEvent(check.id, check.name, "started"))
            try:
                check_findings = list(await check.run(context))
            except Exception as exc:
                elapsed = time.perf_counter() - started
                logger.warning("Check %s failed to complete: %s", check.name, exc)
                errors.append(CheckError(check_id=check.id, message=str(exc)))
                self._emit(
                    CheckEvent(check.id, check.name, "failed", error=str(exc), elapsed=elapsed)
                )
                continue

            findings.extend(check_findings)
            self._emit(
                CheckEvent(
                    check.id,
                    check.name,
                    "succeeded",
                    findings=len(check_findings),
                    elapsed=time.perf_counter() - started,
                )
            )
        return findings, errors

    def _emit(self, event: CheckEvent) -> None:
        if not self._reporter:
            return
        try:
            self._reporter(event)
        except Exception as exc:
            logger.warning("Check reporter raised on %s event: %s", event.status, exc)
