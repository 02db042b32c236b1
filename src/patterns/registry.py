"""Pattern registry.

Patterns are looked up by canonical name or alias, case-insensitively.

Example:
    >>> get_pattern("wizard").name
    'Guided.Flow'
    >>> find_pattern("unknown") is None
    True
"""

from __future__ import annotations

from .form_basic import FORM_BASIC
from .guided_flow import GUIDED_FLOW
from .lib import Pattern
from .progressive_disclosure import PROGRESSIVE_DISCLOSURE
from .table_simple import TABLE_SIMPLE

PATTERNS: dict[str, Pattern] = {
    pattern.name: pattern
    for pattern in (FORM_BASIC, TABLE_SIMPLE, PROGRESSIVE_DISCLOSURE, GUIDED_FLOW)
}

PATTERN_ALIASES: dict[str, str] = {
    "form": "Form.Basic",
    "form-basic": "Form.Basic",
    "table": "Table.Simple",
    "table-simple": "Table.Simple",
    "pd": "Progressive.Disclosure",
    "progressive-disclosure": "Progressive.Disclosure",
    "wizard": "Guided.Flow",
    "guided-flow": "Guided.Flow",
    "flow-wizard": "Guided.Flow",
}

_LOOKUP: dict[str, str] = {
    **{name.lower(): name for name in PATTERNS},
    **{alias.lower(): name for alias, name in PATTERN_ALIASES.items()},
}


def find_pattern(name: str) -> Pattern | None:
    """Return the pattern registered under ``name`` or an alias, or None."""
    canonical = _LOOKUP.get(name.strip().lower())
    return PATTERNS.get(canonical) if canonical else None


def get_pattern(name: str) -> Pattern:
    """Return a registered pattern.

    Raises:
        KeyError: If no pattern or alias matches ``name``. The message lists
            close matches and every known name.
    """
    pattern = find_pattern(name)
    if pattern is not None:
        return pattern

    needle = name.strip().lower()
    suggestions = [
        key
        for key in list_pattern_names()
        if needle and (key.lower().startswith(needle) or needle in key.lower())
    ]
    message = f"Unknown pattern '{name}'."
    if suggestions:
        message += f" Did you mean: {', '.join(suggestions)}?"
    message += f" Available: {', '.join(list_pattern_names())}"
    raise KeyError(message)


def list_pattern_names() -> list[str]:
    """Canonical names followed by aliases."""
    return list(PATTERNS) + list(PATTERN_ALIASES)


def get_all_patterns() -> list[Pattern]:
    """Return each registered pattern once."""
    return list(PATTERNS.values())


def has_pattern(name: str) -> bool:
    return find_pattern(name) is not None


__all__ = [
    "PATTERNS",
    "PATTERN_ALIASES",
    "find_pattern",
    "get_pattern",
    "list_pattern_names",
    "get_all_patterns",
    "has_pattern",
]
