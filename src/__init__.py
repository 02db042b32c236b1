"""scaffold-audit: static analysis of UI scaffolds.

Computes per-viewport layouts, keyboard flow, design-pattern compliance
and a weighted quality score for a scaffold node tree.
"""

from src.analysis import AnalysisReport, analyze_scaffold
from src.schema import Scaffold, parse_scaffold
from src.scoring import PassCriteria, ScoreWeights

__all__ = [
    # Schema
    "Scaffold",
    "parse_scaffold",
    # Analysis
    "AnalysisReport",
    "analyze_scaffold",
    # Scoring
    "ScoreWeights",
    "PassCriteria",
]
