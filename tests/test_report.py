"""Tests for report grouping, console summary and JSON export."""

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from vibetest.core.models import Finding
from vibetest.report import (
    build_json_report,
    export_json_report,
    group_by_check,
    group_by_severity,
    overall_risk,
    print_report,
    remediation_priority,
)


def _finding(check_id: str, risk: str, name: str = "Issue", category: str | None = "config") -> Finding:
    return Finding(
        id=f"{check_id}-{risk}-{name}",
        check_id=check_id,
        name=name,
        endpoint="/api/[id]",
        risk=risk,
        description="desc",
        assumption="assumption",
        reproduction="curl",
        fix="fix it",
        category=category,
    )


class TestFindingModel:
    def test_rejects_unknown_risk(self):
        with pytest.raises(ValueError):
            _finding("x", "severe")

    def test_wire_keys(self):
        data = _finding("cors-credentials", "high").to_dict()
        assert data["checkId"] == "cors-credentials"
        assert set(data) == {
            "id",
            "checkId",
            "category",
            "name",
            "endpoint",
            "risk",
            "description",
            "assumption",
            "reproduction",
            "fix",
        }


class TestGrouping:
    """Test risk aggregation helpers."""

    def test_overall_risk(self):
        assert overall_risk([]) == "Low"
        assert overall_risk([_finding("a", "medium"), _finding("b", "high")]) == "High"
        assert overall_risk([_finding("a", "critical")]) == "Critical"

    def test_group_by_severity_order(self):
        groups = group_by_severity([_finding("a", "low"), _finding("b", "critical")])
        assert list(groups) == ["critical", "high", "medium", "low"]
        assert len(groups["critical"]) == 1
        assert groups["high"] == []

    def test_group_by_check(self):
        groups = group_by_check([_finding("a", "low"), _finding("a", "high"), _finding("b", "low")])
        assert {key: len(items) for key, items in groups.items()} == {"a": 2, "b": 1}

    def test_remediation_priority(self):
        """Higher risk first; injection-class checks edge ahead of equal risk."""
        findings = [
            _finding("security-headers", "low", "first-low"),
            _finding("cookie-security", "high", "plain-high"),
            _finding("sql-injection", "high", "injection-high"),
            _finding("error-handling", "low", "second-low"),
        ]
        ordered = [finding.name for finding in remediation_priority(findings)]
        assert ordered == ["injection-high", "plain-high", "first-low", "second-low"]


class TestConsoleReport:
    """Test the rich summary output."""

    def _render(self, findings) -> str:
        buffer = io.StringIO()
        print_report(findings, Console(file=buffer, width=160, color_system=None))
        return buffer.getvalue()

    def test_no_findings(self):
        assert "Good vibes only" in self._render([])

    def test_summary_sections(self):
        output = self._render(
            [
                _finding("cors-credentials", "critical", "Wildcard Origin"),
                _finding("race-condition", "medium", "Race", category="logic"),
            ]
        )
        assert "Overall Risk Level: Critical" in output
        assert "Total Issues Found: 2" in output
        assert "Business Logic" in output
        assert "Remediation Priority" in output
        assert "/api/[id]" in output
        assert "[CRITICAL]" in output


class TestJsonReport:
    """Test the JSON export."""

    def test_build_summary(self):
        report = build_json_report(
            [_finding("a", "high", category="backend"), _finding("b", "low", category=None)],
            {"target": "http://localhost:3000"},
        )
        assert report["metadata"] == {"target": "http://localhost:3000"}
        assert report["summary"]["totalIssues"] == 2
        assert report["summary"]["overallRisk"] == "High"
        assert report["summary"]["bySeverity"]["high"] == 1
        assert report["summary"]["byCategory"]["backend"] == 1
        assert len(report["findings"]) == 2

    def test_export_writes_file(self, temp_dir: Path):
        path = export_json_report([_finding("a", "medium")], {"target": "t"}, temp_dir / "out")

        assert path.parent == temp_dir / "out"
        assert path.name.startswith("vibetest-report-")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["findings"][0]["checkId"] == "a"
