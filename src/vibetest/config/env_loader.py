"""Environment variable and configuration file loading."""

import json
from pathlib import Path
from typing import Any

import yaml

from vibetest.core.models import AuthConfig

AUTH_FILE_NAME = ".vibetest.json"


def global_config_dir() -> Path:
    """Return the global ~/.vibetest config directory."""
    return Path.home() / ".vibetest"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.vibetest/config.yml."""
    config_path = global_config_dir() / "config.yml"
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return data if isinstance(data, dict) else {}
    return {}


def load_project_config(project_dir: Path | None = None) -> dict[str, str]:
    """Load project-specific configuration from ./.vibetest/.env."""
    project_dir = project_dir or Path.cwd()
    return load_env_file(project_dir / ".vibetest" / ".env")


def load_auth_file(path: Path | None = None) -> AuthConfig | None:
    """Load saved credentials from .vibetest.json, if present and valid."""
    auth_path = path or Path.cwd() / AUTH_FILE_NAME
    if not auth_path.exists():
        return None
    try:
        with auth_path.open(encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    auth = AuthConfig.from_dict(data)
    if not (auth.token or auth.cookies or auth.headers or auth.username):
        return None
    return auth
