"""Pattern validation: MUST/SHOULD rule sets checked against the node tree.

Registered patterns:
- Form.Basic (GOV.UK Design System)
- Table.Simple (IBM Carbon)
- Progressive.Disclosure (NN/g, GOV.UK, USWDS)
- Guided.Flow (multi-step wizards)

Example:
    >>> from src.patterns import get_pattern, validate_patterns
    >>> flow = validate_patterns([get_pattern("form")], scaffold.screen.root)
    >>> flow.has_must_failures
    False
"""

from .form_basic import FORM_BASIC, needs_help_text
from .guided_flow import (
    GUIDED_FLOW,
    GuidedFlowScope,
    GuidedFlowStep,
    build_guided_flow,
    classify_button,
    detect_actions,
    find_progress_node,
    resolve_guided_flow_scopes,
)
from .lib import (
    FlowOutput,
    Pattern,
    PatternResult,
    Rule,
    RuleLevel,
    pattern_issue,
    validate_pattern,
    validate_patterns,
)
from .progressive_disclosure import PROGRESSIVE_DISCLOSURE, disclosure_suggestion
from .registry import (
    PATTERN_ALIASES,
    find_pattern,
    get_all_patterns,
    get_pattern,
    has_pattern,
    list_pattern_names,
)
from .suggestions import (
    HIGH_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
    Confidence,
    CoverageGap,
    CoverageResult,
    PatternSuggestion,
    compute_coverage,
    has_disclosure_hints,
    has_guided_flow_hints,
    select_patterns,
    suggest_patterns,
)
from .table_simple import TABLE_SIMPLE, build_table_simple

__all__ = [
    # Model
    "Rule",
    "RuleLevel",
    "Pattern",
    "pattern_issue",
    "PatternResult",
    "FlowOutput",
    # Validation
    "validate_pattern",
    "validate_patterns",
    # Patterns
    "FORM_BASIC",
    "TABLE_SIMPLE",
    "PROGRESSIVE_DISCLOSURE",
    "GUIDED_FLOW",
    "build_table_simple",
    "build_guided_flow",
    "needs_help_text",
    "disclosure_suggestion",
    # Guided flow
    "GuidedFlowStep",
    "GuidedFlowScope",
    "resolve_guided_flow_scopes",
    "detect_actions",
    "classify_button",
    "find_progress_node",
    # Registry
    "PATTERN_ALIASES",
    "find_pattern",
    "get_pattern",
    "list_pattern_names",
    "get_all_patterns",
    "has_pattern",
    # Suggestions
    "HIGH_CONFIDENCE_THRESHOLD",
    "MEDIUM_CONFIDENCE_THRESHOLD",
    "Confidence",
    "PatternSuggestion",
    "CoverageGap",
    "CoverageResult",
    "suggest_patterns",
    "has_disclosure_hints",
    "has_guided_flow_hints",
    "select_patterns",
    "compute_coverage",
]
