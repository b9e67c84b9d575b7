"""Reporting helpers for scan results."""

from .grouping import group_by_check, group_by_severity, overall_risk, remediation_priority
from .json_report import build_json_report, export_json_report
from .summary import print_report

__all__ = [
    "build_json_report",
    "export_json_report",
    "group_by_check",
    "group_by_severity",
    "overall_risk",
    "print_report",
    "remediation_priority",
]
