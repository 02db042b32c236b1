"""Centralized environment configuration management for scaffold-audit.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> threshold = get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE)  # int
    >>>
    >>> # Override at runtime
    >>> threshold = get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE, override=70)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SCAFFOLD_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, list).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by scaffold-audit.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - logging: Log output configuration
        - scoring: Pass/fail thresholds
        - layout: Viewports and layout heuristics
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    SCAFFOLD_LOG_LEVEL = EnvConfig(
        name="SCAFFOLD_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the command-line entry point",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------
    SCAFFOLD_MIN_OVERALL_SCORE = EnvConfig(
        name="SCAFFOLD_MIN_OVERALL_SCORE",
        default=85,
        var_type=int,
        description="Minimum overall score required to pass",
        category="scoring",
    )

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------
    SCAFFOLD_PRIMARY_DETECTION = EnvConfig(
        name="SCAFFOLD_PRIMARY_DETECTION",
        default="role",
        var_type=str,
        description="How the primary action is found for the fold check (role, id)",
        category="layout",
    )
    SCAFFOLD_DEFAULT_BREAKPOINTS = EnvConfig(
        name="SCAFFOLD_DEFAULT_BREAKPOINTS",
        default=["320x640", "768x1024", "1280x800"],
        var_type=list,
        description="Comma-separated viewports used when a scaffold declares none",
        category="layout",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _split_list(value: str) -> list[str]:
    """Split a comma-separated string, dropping blank entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type (str, int or list).
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is list:
        return _split_list(value) or default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: list[str]) -> list[str]: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int or list).

    Example:
        >>> get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE)
        85
        >>> get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE, override=70)
        70
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased."""
    return str(get_environment(EnvVar.SCAFFOLD_LOG_LEVEL, override=override)).upper()


def get_min_overall_score(override: int | None = None) -> int:
    """Get the minimum overall score a scaffold needs to pass."""
    return get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE, override=override)


def get_primary_detection(override: str | None = None) -> str:
    """Get the primary-action detection strategy.

    Returns:
        "role" (first Button with roleHint primary) or "id" (first frame
        whose id contains "primary"). Unknown values fall back to "role".
    """
    value = str(
        get_environment(EnvVar.SCAFFOLD_PRIMARY_DETECTION, override=override)
    ).strip().lower()
    if value not in ("role", "id"):
        return "role"
    return value


def get_default_breakpoints(override: str | list[str] | None = None) -> list[str]:
    """Get the default viewport list.

    Args:
        override: Either a list of "WxH" strings or a comma-separated string.

    Returns:
        List of "WxH" viewport strings, in declaration order.
    """
    if isinstance(override, str):
        override = _split_list(override)
    return list(get_environment(EnvVar.SCAFFOLD_DEFAULT_BREAKPOINTS, override=override))


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, scoring, layout).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_log_level",
    "get_min_overall_score",
    "get_primary_detection",
    "get_default_breakpoints",
    # Introspection
    "list_environment_variables",
]
