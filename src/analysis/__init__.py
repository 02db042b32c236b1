"""Analysis driver: one call runs every engine and scores the result.

Example:
    >>> from src.analysis import analyze_scaffold
    >>> report = analyze_scaffold(raw, patterns=["form"])
    >>> report.to_dict()["score"]["pass"]
    True
"""

from .lib import (
    AnalysisReport,
    analyze_scaffold,
    contextualize_patterns,
    resolve_viewports,
    smallest_viewport,
)

__all__ = [
    "AnalysisReport",
    "analyze_scaffold",
    "contextualize_patterns",
    "resolve_viewports",
    "smallest_viewport",
]
