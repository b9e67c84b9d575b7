"""Shared CLI app objects and target helpers."""

import typer
from rich.console import Console

from vibetest.config import load_auth_file
from vibetest.core.models import AuthConfig

app = typer.Typer(
    name="vibetest",
    help="Security scanner for locally running web applications",
    no_args_is_help=True,
)
cache_app = typer.Typer(help="Inspect or clear the route discovery cache", no_args_is_help=True)
app.add_typer(cache_app, name="cache")
console = Console()

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1"})


def build_base_url(host: str, port: int) -> str:
    """Return the http origin for a host and port."""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}"


def warn_if_remote(host: str) -> None:
    """Remind the operator that only local targets are expected."""
    if host not in LOCAL_HOSTS:
        console.print(
            "[yellow]Warning: Testing against non-localhost targets. "
            "Ensure you have permission.[/yellow]"
        )


def resolve_auth(token: str | None) -> AuthConfig | None:
    """Prefer an explicit bearer token, then saved credentials in .vibetest.json."""
    if token:
        return AuthConfig(token=token)
    auth = load_auth_file()
    if auth:
        console.print("[dim]Loaded credentials from .vibetest.json[/dim]")
    return auth
