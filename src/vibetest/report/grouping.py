"""Finding grouping and prioritisation helpers."""

from collections.abc import Sequence

from vibetest.core.models import RISK_LEVELS, Finding

RISK_SCORES = {"critical": 100, "high": 75, "medium": 50, "low": 25}
INJECTION_MARKERS = ("injection", "xss", "sql")


def overall_risk(findings: Sequence[Finding]) -> str:
    """Return the highest risk present, capitalised; "Low" when nothing stands out."""
    for risk in reversed(RISK_LEVELS):
        if any(finding.risk == risk for finding in findings):
            return risk.capitalize()
    return "Low"


def group_by_severity(findings: Sequence[Finding]) -> dict[str, list[Finding]]:
    groups: dict[str, list[Finding]] = {risk: [] for risk in reversed(RISK_LEVELS)}
    for finding in findings:
        groups[finding.risk].append(finding)
    return groups


def group_by_check(findings: Sequence[Finding]) -> dict[str, list[Finding]]:
    groups: dict[str, list[Finding]] = {}
    for finding in findings:
        groups.setdefault(finding.check_id, []).append(finding)
    return groups


def remediation_priority(findings: Sequence[Finding]) -> list[Finding]:
    """Order findings by remediation urgency, injection classes boosted."""

    def score(finding: Finding) -> int:
        value = RISK_SCORES[finding.risk]
        if any(marker in finding.check_id for marker in INJECTION_MARKERS):
            value += 10
        return value

    return sorted(findings, key=score, reverse=True)
