"""End-to-end scan pipeline: connectivity, discovery, check execution, reporting."""

from collections.abc import Sequence
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from rich.console import Console
from rich.markup import escape

from vibetest.checks import Check, default_checks
from vibetest.report import export_json_report, print_report
from vibetest.utils.debug import debug_print

from .attempt_log import log_test_attempt
from .discovery import RouteDiscovery
from .http import DEFAULT_TIMEOUT, HTTPClient
from .models import CheckContext, Finding, Route, ScanConfig, utc_timestamp
from .rate_limit import DEFAULT_BASE_WAIT, DEFAULT_THRESHOLD, RateLimitPolicy, client_factory
from .route_cache import RouteCache
from .scheduler import CheckError, CheckEvent, CheckScheduler


class TargetUnreachableError(RuntimeError):
    """The target did not answer the initial connectivity probe."""


@dataclass
class ScanOutcome:
    """Everything a scan produced."""

    routes: list[Route] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    errors: list[CheckError] = field(default_factory=list)
    report_path: Path | None = None


@dataclass
class ScanOptions:
    """Tunables for one scan run that are not part of the target description."""

    cache: RouteCache | None = None
    checks: Sequence[Check] | None = None
    policy: RateLimitPolicy | None = None
    threshold: int = DEFAULT_THRESHOLD
    base_wait: float = DEFAULT_BASE_WAIT
    timeout: float = DEFAULT_TIMEOUT
    log_dir: Path | None = None
    # None disables the JSON export.
    report_dir: Path | None = field(default_factory=Path.cwd)


def _config_summary(config: ScanConfig) -> dict[str, str | None]:
    return {"baseUrl": config.base_url, "apiUrl": config.api_url}


def console_reporter(console: Console):
    """Render scheduler events as progress lines."""

    def report(event: CheckEvent) -> None:
        name = escape(event.check_name)
        if event.status == "started":
            console.print(f"[dim]● Running: {name}[/dim]")
        elif event.status == "failed":
            console.print(f"[yellow]! Check {name} failed to complete: {escape(event.error or '')}[/yellow]")
        elif event.findings:
            console.print(f"[red]✗ {name} found {event.findings} issue(s) ({event.elapsed:.1f}s)[/red]")
        else:
            console.print(f"[green]✓ {name}[/green] [dim]({event.elapsed:.1f}s)[/dim]")

    return report


async def check_connectivity(client: HTTPClient, config: ScanConfig, log_dir: Path | None) -> None:
    """Fail fast when the target does not answer at all."""
    try:
        await client.get("/")
    except httpx.HTTPError as exc:
        log_test_attempt(
            {
                "status": "connectivity_failed",
                "error": str(exc),
                "config": _config_summary(config),
                "timestamp": utc_timestamp(),
            },
            log_dir,
        )
        raise TargetUnreachableError(f"Could not connect to {config.base_url}: {exc}") from exc


async def run_vibe_test(
    config: ScanConfig,
    options: ScanOptions | None = None,
    console: Console | None = None,
) -> ScanOutcome:
    """Run a full scan against ``config.base_url``."""
    options = options or ScanOptions()
    console = console or Console()
    cache = options.cache or RouteCache()
    outcome = ScanOutcome()

    async with HTTPClient(config.base_url, timeout=options.timeout) as plain_client:
        await check_connectivity(plain_client, config, options.log_dir)
        console.print(f"[green]Connected to {config.base_url}[/green]")

        console.print("[blue]Mapping application topology...[/blue]")
        discovery = RouteDiscovery(config.base_url, cache)
        outcome.routes = await discovery.discover(plain_client)

    console.print(f"[green]Discovered {len(outcome.routes)} potential endpoints[/green]")
    if not outcome.routes:
        console.print("[yellow]  No routes found. Is the app running?[/yellow]")
    for route in outcome.routes[:5]:
        console.print(f"[dim]  - {route.method} {escape(route.path)}[/dim]")
    if len(outcome.routes) > 5:
        console.print(f"[dim]  ...and {len(outcome.routes) - 5} more[/dim]")
    debug_print("discovery", "Probed paths", console, Paths=discovery.probed)

    def on_abort() -> None:
        log_test_attempt(
            {
                "status": "aborted_by_user_rate_limit",
                "config": _config_summary(config),
                "discoveredRoutesCount": len(outcome.routes),
                "timestamp": utc_timestamp(),
            },
            options.log_dir,
        )

    policy = options.policy or RateLimitPolicy(
        auto_continue=config.auto_continue, on_abort=on_abort
    )
    client_kwargs = {
        "auth": config.auth,
        "threshold": options.threshold,
        "base_wait": options.base_wait,
        "policy": policy,
        "timeout": options.timeout,
    }

    console.print("\n[bold blue]Starting Vulnerability Analysis[/bold blue]\n")
    checks = list(options.checks) if options.checks is not None else default_checks()
    async with AsyncExitStack() as stack:
        frontend = await stack.enter_async_context(client_factory(config.base_url, **client_kwargs))
        api = frontend
        if config.api_url:
            api = await stack.enter_async_context(client_factory(config.api_url, **client_kwargs))
            console.print(f"[dim]  Frontend: {config.base_url}[/dim]")
            console.print(f"[dim]  Backend API: {config.api_url}[/dim]")

        context = CheckContext(
            config=config,
            frontend_client=frontend,
            api_client=api,
            discovered_routes=tuple(outcome.routes),
        )
        scheduler = CheckScheduler(checks, reporter=console_reporter(console))
        outcome.findings, outcome.errors = await scheduler.run_with_diagnostics(context)

    print_report(outcome.findings, console)

    if outcome.findings and options.report_dir is not None:
        metadata = {
            "target": config.base_url,
            "scanDate": utc_timestamp(),
            "routesTested": len(outcome.routes),
            "checksRun": len(checks),
        }
        try:
            outcome.report_path = export_json_report(
                outcome.findings, metadata, options.report_dir
            )
            console.print(f"[green]JSON report saved: {outcome.report_path}[/green]")
        except OSError as exc:
            console.print(f"[yellow]Could not export reports: {exc}[/yellow]")

    log_test_attempt(
        {
            "status": "completed",
            "config": _config_summary(config),
            "discoveredRoutesCount": len(outcome.routes),
            "findings": [finding.to_dict() for finding in outcome.findings],
            "timestamp": utc_timestamp(),
        },
        options.log_dir,
    )
    return outcome
