"""Vibetest CLI - security scanner for locally running web applications."""

from vibetest.cli_commands import cache_command, scan_command  # noqa: F401
from vibetest.cli_commands.shared import app, console
from vibetest.core.runner import run_vibe_test

__all__ = ["app", "console", "main", "run_vibe_test"]


@app.command()
def version() -> None:
    """Show the installed Vibetest version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("vibetest")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"Vibetest {current_version}")


def main():
    """Entry point for the CLI."""
    app()
