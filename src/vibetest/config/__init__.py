"""
Configuration management for Vibetest.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Project .env file (./.vibetest/.env)
3. Global config file (~/.vibetest/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    AUTH_FILE_NAME,
    global_config_dir,
    load_auth_file,
    load_env_file,
    load_global_config,
    load_project_config,
)
from .getters import (
    get_auto_continue,
    get_cache_file,
    get_config,
    get_log_dir,
    get_rate_limit_base_wait,
    get_rate_limit_threshold,
    get_request_timeout,
)

__all__ = [
    # env_loader
    "AUTH_FILE_NAME",
    "global_config_dir",
    "load_auth_file",
    "load_env_file",
    "load_global_config",
    "load_project_config",
    # getters
    "get_auto_continue",
    "get_cache_file",
    "get_config",
    "get_log_dir",
    "get_rate_limit_base_wait",
    "get_rate_limit_threshold",
    "get_request_timeout",
]
