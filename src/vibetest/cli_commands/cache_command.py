"""Route cache CLI commands."""

import typer

from vibetest.config import get_cache_file
from vibetest.core.route_cache import RouteCache

from .shared import build_base_url, cache_app, console


@cache_app.command("stats")
def cache_stats(
    port: int = typer.Option(..., "--port", "-p", help="Port of the cached target"),
    host: str = typer.Option("localhost", "--host", help="Host of the cached target"),
) -> None:
    """Show cached discovery results for a target."""
    cache = RouteCache(get_cache_file())
    base_url = build_base_url(host, port)
    stats = cache.get_cache_stats(base_url)

    console.print(f"[bold]Route cache for {base_url}[/bold] [dim]({cache.cache_file})[/dim]")
    console.print(f"  Total cached: {stats.total_cached}")
    console.print(f"  [green]Existing paths:[/green] {stats.existing_paths}")
    console.print(f"  [dim]Not found:[/dim] {stats.not_found_paths}")


@cache_app.command("clear")
def cache_clear(
    port: int | None = typer.Option(None, "--port", "-p", help="Only clear this target's entries"),
    host: str = typer.Option("localhost", "--host", help="Host of the cached target"),
) -> None:
    """Clear the route cache for one target, or entirely."""
    cache = RouteCache(get_cache_file())
    if port is None:
        cache.clear_cache()
        console.print("[green]Route cache cleared.[/green]")
        return

    base_url = build_base_url(host, port)
    cache.clear_cache(base_url)
    console.print(f"[green]Route cache cleared for {base_url}.[/green]")
