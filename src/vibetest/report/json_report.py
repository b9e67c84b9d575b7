"""JSON report rendering."""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from vibetest.core.models import FINDING_CATEGORIES, Finding

from .grouping import group_by_severity, overall_risk


def build_json_report(findings: Sequence[Finding], metadata: dict[str, Any]) -> dict[str, Any]:
    """Assemble the report document."""
    by_severity = group_by_severity(findings)
    return {
        "metadata": metadata,
        "summary": {
            "totalIssues": len(findings),
            "overallRisk": overall_risk(findings),
            "bySeverity": {risk: len(items) for risk, items in by_severity.items()},
            "byCategory": {
                category: sum(1 for finding in findings if finding.category == category)
                for category in FINDING_CATEGORIES
            },
        },
        "findings": [finding.to_dict() for finding in findings],
    }


def export_json_report(
    findings: Sequence[Finding],
    metadata: dict[str, Any],
    output_dir: Path,
) -> Path:
    """Write a timestamped JSON report and return its path."""
    generated_at = datetime.now()
    output_dir.mkdir(parents=True, exist_ok=True)
    report_file = output_dir / f"vibetest-report-{generated_at.strftime('%Y%m%d_%H%M%S')}.json"
    report_file.write_text(
        json.dumps(build_json_report(findings, metadata), indent=2), encoding="utf-8"
    )
    return report_file
