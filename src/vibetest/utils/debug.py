"""Debug utilities for scan visibility.

Thread-safe debug output with rich formatting, enabled by ``--verbose``.
"""

import json
import threading
from typing import Any

from rich.console import Console
from rich.syntax import Syntax

# Thread-local storage for debug state
_debug_state = threading.local()


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread/session."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread/session."""
    return getattr(_debug_state, "enabled", False)


def debug_print(category: str, message: str, console: Console | None = None, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (discovery, ratelimit, check, config)
        message: Main message to display
        console: Console to print to (a fresh stderr console by default)
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = console or Console(stderr=True)
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan")
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                json_str = json.dumps(value, indent=2)
                console.print(f"  {key}:", style="dim")
                console.print(Syntax(json_str, "json", theme="monokai", line_numbers=False))
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim")
        elif isinstance(value, (list, tuple, set)):
            console.print(f"  {key}: {', '.join(str(v) for v in value)}", style="dim")
        elif isinstance(value, str) and len(value) > 100:
            # Truncate long strings
            console.print(f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim")
        else:
            console.print(f"  {key}: {value}", style="dim")
