"""Centralized configuration management for scaffold-audit.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> score = get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE)  # int: 85
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("layout"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: Log output configuration
    scoring: Pass/fail thresholds
    layout: Default viewports and primary-action detection
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Convenience functions
    get_default_breakpoints,
    # Main interface
    get_environment,
    get_environment_info,
    get_log_level,
    get_min_overall_score,
    get_primary_detection,
    # Introspection
    list_environment_variables,
)

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
