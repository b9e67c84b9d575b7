"""Scan CLI command."""

from pathlib import Path

import typer

from vibetest.config import (
    get_auto_continue,
    get_cache_file,
    get_log_dir,
    get_rate_limit_base_wait,
    get_rate_limit_threshold,
    get_request_timeout,
)
from vibetest.core.models import ScanConfig
from vibetest.core.route_cache import RouteCache
from vibetest.core.runner import ScanOptions, TargetUnreachableError
from vibetest.utils.async_utils import safe_async_run
from vibetest.utils.debug import debug_print, set_debug_enabled

from .deps import cli_module
from .shared import app, build_base_url, console, resolve_auth, warn_if_remote


@app.command()
def scan(
    port: int = typer.Option(..., "--port", "-p", help="Port the frontend is running on"),
    api_port: int | None = typer.Option(None, "--api-port", help="Port of a separate backend API"),
    host: str = typer.Option("localhost", "--host", help="Target host"),
    token: str | None = typer.Option(None, "--token", help="Bearer token for authenticated checks"),
    safe: bool = typer.Option(
        True,
        "--safe/--unsafe",
        help="Safe mode skips destructive requests (DELETE, race bursts)",
    ),
    auto_continue: bool = typer.Option(
        False,
        "--auto-continue",
        help="Keep scanning past the rate-limit threshold without asking",
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Forget cached routes before discovery"),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Directory for the JSON report (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose scan output"),
) -> None:
    """Scan a locally running web application."""
    cli = cli_module()
    set_debug_enabled(verbose)
    warn_if_remote(host)

    base_url = build_base_url(host, port)
    api_url = build_base_url(host, api_port) if api_port else None
    config = ScanConfig(
        base_url=base_url,
        port=port,
        api_url=api_url,
        api_port=api_port,
        auth=resolve_auth(token),
        safe_mode=safe,
        auto_continue=auto_continue or get_auto_continue(),
    )

    cache = RouteCache(get_cache_file())
    if no_cache:
        cache.clear_cache(base_url)
        console.print("[dim]Route cache cleared for this target.[/dim]")

    options = ScanOptions(
        cache=cache,
        threshold=get_rate_limit_threshold(),
        base_wait=get_rate_limit_base_wait(),
        timeout=get_request_timeout(),
        log_dir=get_log_dir(),
        report_dir=output_dir or Path.cwd(),
    )
    debug_print(
        "config",
        "Scan configuration",
        console,
        Target=base_url,
        API=api_url,
        SafeMode=safe,
        Threshold=options.threshold,
        BaseWait=options.base_wait,
        CacheFile=str(cache.cache_file),
    )

    console.print(f"[bold blue]Vibetest scanning {base_url}[/bold blue]")
    if not safe:
        console.print("[yellow]Unsafe mode: destructive requests are enabled.[/yellow]")

    try:
        outcome = safe_async_run(cli.run_vibe_test(config, options, console))
    except TargetUnreachableError as exc:
        console.print(f"[red]{exc}[/red]")
        console.print("[dim]Make sure your application is running and accessible.[/dim]")
        raise typer.Exit(1)

    if outcome.errors:
        console.print(f"[yellow]{len(outcome.errors)} check(s) did not complete.[/yellow]")
