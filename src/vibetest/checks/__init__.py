"""Vulnerability check plugins and the default ordered registry."""

from .base import Check
from .cookies import CookieSecurityCheck
from .cors_credentials import CorsCredentialsCheck
from .error_handling import ErrorHandlingCheck
from .race_condition import RaceConditionCheck
from .security_headers import SecurityHeadersCheck
from .unsafe_methods import UnsafeMethodsCheck


def default_checks() -> list[Check]:
    """Return the built-in checks, highest-impact first."""
    return [
        # High: auth & authorization
        CorsCredentialsCheck(),
        UnsafeMethodsCheck(),
        # Medium: config & headers
        SecurityHeadersCheck(),
        CookieSecurityCheck(),
        # Low: logic & detection
        RaceConditionCheck(),
        ErrorHandlingCheck(),
    ]


__all__ = [
    "Check",
    "CookieSecurityCheck",
    "CorsCredentialsCheck",
    "ErrorHandlingCheck",
    "RaceConditionCheck",
    "SecurityHeadersCheck",
    "UnsafeMethodsCheck",
    "default_checks",
]
