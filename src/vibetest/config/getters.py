"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from vibetest.core.attempt_log import DEFAULT_LOG_DIR
from vibetest.core.http import DEFAULT_TIMEOUT
from vibetest.core.rate_limit import DEFAULT_BASE_WAIT, DEFAULT_THRESHOLD
from vibetest.core.route_cache import DEFAULT_CACHE_FILE

from .env_loader import load_global_config, load_project_config

_TRUTHY = {"1", "true", "yes", "on"}


def get_config(key: str, project_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Project .env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        project_dir: Optional project directory
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check project .env file
    project_config = load_project_config(project_dir)
    if key in project_config:
        return project_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    # 4. Return default
    return default


def _get_number(key: str, default: float, project_dir: Path | None, cast: type) -> Any:
    value = get_config(key, project_dir)
    if value is None:
        return default
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def get_cache_file(project_dir: Path | None = None) -> Path:
    """Get the route cache file location."""
    value = get_config("VIBETEST_CACHE_FILE", project_dir)
    if value:
        return Path(value)
    return (project_dir or Path.cwd()) / DEFAULT_CACHE_FILE


def get_log_dir(project_dir: Path | None = None) -> Path:
    """Get the directory scan attempt logs are written to."""
    value = get_config("VIBETEST_LOG_DIR", project_dir)
    if value:
        return Path(value)
    return (project_dir or Path.cwd()) / DEFAULT_LOG_DIR


def get_rate_limit_threshold(project_dir: Path | None = None) -> int:
    """Get the number of rate-limit hits before the operator is asked (default: 5)."""
    return _get_number("VIBETEST_RATE_LIMIT_THRESHOLD", DEFAULT_THRESHOLD, project_dir, int)


def get_rate_limit_base_wait(project_dir: Path | None = None) -> float:
    """Get the base pause in seconds applied per rate-limit hit (default: 3.0)."""
    return _get_number("VIBETEST_RATE_LIMIT_BASE_WAIT", DEFAULT_BASE_WAIT, project_dir, float)


def get_request_timeout(project_dir: Path | None = None) -> float:
    """Get the per-request timeout in seconds (default: 10.0)."""
    return _get_number("VIBETEST_REQUEST_TIMEOUT", DEFAULT_TIMEOUT, project_dir, float)


def get_auto_continue(project_dir: Path | None = None) -> bool:
    """Whether to continue past the rate-limit threshold without asking."""
    value = get_config("VIBETEST_AUTO_CONTINUE", project_dir, default=False)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY
