"""Console report rendering."""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vibetest.core.models import Finding

from .grouping import group_by_check, group_by_severity, overall_risk, remediation_priority

RISK_STYLES = {
    "critical": "bold white on red",
    "high": "red",
    "medium": "yellow",
    "low": "blue",
}
CATEGORY_TITLES = {
    "backend": "Backend API & Auth",
    "frontend": "Frontend & Client Assets",
    "logic": "Business Logic",
    "config": "Configuration & Headers",
    None: "General / Uncategorized",
}


def print_report(findings: Sequence[Finding], console: Console | None = None) -> None:
    """Print the end-of-scan summary."""
    console = console or Console()
    if not findings:
        console.print("\n[green]No obvious vulnerabilities found. Good vibes only![/green]\n")
        return

    console.rule("[bold]VIBETEST SECURITY SCAN REPORT")
    risk = overall_risk(findings)
    console.print(
        f"\n[bold]Overall Risk Level:[/bold] [{RISK_STYLES[risk.lower()]}]{risk}[/]"
    )
    console.print(f"[bold]Total Issues Found:[/bold] {len(findings)}\n")

    for severity, items in group_by_severity(findings).items():
        if items:
            console.print(
                f"[{RISK_STYLES[severity]}]{len(items)} {severity.upper()}[/] severity issues found"
            )

    console.print("\n[bold cyan]Top Vulnerability Types:[/bold cyan]")
    top_checks = sorted(group_by_check(findings).items(), key=lambda item: -len(item[1]))[:5]
    for check_id, items in top_checks:
        console.print(f"[dim]  - {check_id}: {len(items)} issue(s)[/dim]")

    for category, title in CATEGORY_TITLES.items():
        scoped = [finding for finding in findings if finding.category == category]
        if not scoped:
            continue
        table = Table(title=f"{title} ({len(scoped)})", show_lines=False)
        table.add_column("Risk")
        table.add_column("Finding")
        table.add_column("Endpoint")
        table.add_column("Fix")
        for finding in remediation_priority(scoped):
            table.add_row(
                f"[{RISK_STYLES[finding.risk]}]{finding.risk.upper()}[/]",
                escape(finding.name),
                escape(finding.endpoint),
                escape(finding.fix),
            )
        console.print(table)

    console.print("\n[bold cyan]Remediation Priority (Top 10)[/bold cyan]")
    for index, finding in enumerate(remediation_priority(findings)[:10], start=1):
        console.print(
            f"  {index}. [{RISK_STYLES[finding.risk]}]{escape(f'[{finding.risk.upper()}]')}[/] "
            f"{escape(finding.name)} - [dim]{escape(finding.endpoint)}[/dim]",
            highlight=False,
        )
    console.rule()
