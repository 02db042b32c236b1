"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Scaffold builders and sample scaffolds shared across test modules
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from dotenv import load_dotenv

from src.schema import Scaffold, parse_scaffold

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Scaffold Builders
# =============================================================================


def build_scaffold(root: dict[str, Any], **settings: Any) -> Scaffold:
    """Wrap a raw root node into a typed scaffold.

    Args:
        root: Raw root node mapping.
        **settings: Raw settings keys (spacingScale, minTouchTarget, breakpoints).

    Returns:
        Parsed Scaffold.
    """
    data: dict[str, Any] = {
        "schemaVersion": "1.0.0",
        "screen": {"id": "screen", "title": "Test Screen", "root": root},
    }
    if settings:
        data["settings"] = settings
    return parse_scaffold(data)


@pytest.fixture
def make_scaffold() -> Callable[..., Scaffold]:
    """Factory fixture building scaffolds from raw root nodes."""
    return build_scaffold


# =============================================================================
# Sample Scaffolds
# =============================================================================


@pytest.fixture
def login_scaffold() -> Scaffold:
    """A well-formed sign-in screen with a single Form.

    Returns:
        Scaffold whose Form passes Form.Basic and the keyboard flow rules.
    """
    return build_scaffold(
        {
            "type": "Stack",
            "id": "root",
            "direction": "vertical",
            "gap": 16,
            "padding": 16,
            "children": [
                {"type": "Text", "id": "title", "text": "Sign in", "fontSize": 24},
                {
                    "type": "Form",
                    "id": "login-form",
                    "title": "Sign in",
                    "states": ["default", "error"],
                    "fields": [
                        {
                            "type": "Field",
                            "id": "email",
                            "label": "Email address",
                            "inputType": "email",
                            "required": True,
                        },
                        {
                            "type": "Field",
                            "id": "password",
                            "label": "Password",
                            "inputType": "password",
                            "required": True,
                        },
                    ],
                    "actions": [
                        {
                            "type": "Button",
                            "id": "submit",
                            "text": "Sign in",
                            "roleHint": "primary",
                        },
                        {
                            "type": "Button",
                            "id": "cancel",
                            "text": "Cancel",
                            "roleHint": "secondary",
                        },
                    ],
                },
            ],
        }
    )


def _wizard_step(index: int, title: str, buttons: list[dict[str, Any]], field: bool = True):
    children: list[dict[str, Any]] = [
        {"type": "Text", "id": f"step-{index}-title", "text": title},
    ]
    if field:
        children.append(
            {"type": "Field", "id": f"step-{index}-field", "label": f"{title} details"}
        )
    children.append(
        {
            "type": "Stack",
            "id": f"step-{index}-actions",
            "direction": "horizontal",
            "gap": 8,
            "children": buttons,
        }
    )
    return {
        "type": "Stack",
        "id": f"step-{index}",
        "direction": "vertical",
        "gap": 8,
        "behaviors": {"guidedFlow": {"role": "step", "stepIndex": index}},
        "children": children,
    }


@pytest.fixture
def wizard_scaffold() -> Scaffold:
    """A well-formed three step sign-up wizard.

    Returns:
        Scaffold whose wizard passes every Guided.Flow rule.
    """
    return build_scaffold(
        {
            "type": "Stack",
            "id": "signup-wizard",
            "direction": "vertical",
            "gap": 16,
            "padding": 16,
            "behaviors": {
                "guidedFlow": {"role": "wizard", "totalSteps": 3, "hasProgress": True}
            },
            "children": [
                {"type": "Text", "id": "progress", "text": "Step 1 of 3"},
                _wizard_step(
                    1,
                    "Account",
                    [{"type": "Button", "id": "next-1", "text": "Next", "roleHint": "primary"}],
                ),
                _wizard_step(
                    2,
                    "Profile",
                    [
                        {"type": "Button", "id": "back-2", "text": "Back"},
                        {"type": "Button", "id": "next-2", "text": "Next", "roleHint": "primary"},
                    ],
                ),
                _wizard_step(
                    3,
                    "Review",
                    [
                        {"type": "Button", "id": "back-3", "text": "Back"},
                        {
                            "type": "Button",
                            "id": "finish-3",
                            "text": "Finish",
                            "roleHint": "primary",
                        },
                    ],
                    field=False,
                ),
            ],
        }
    )


@pytest.fixture
def table_scaffold() -> Scaffold:
    """A titled table with a scroll strategy and an adjacent filter control."""
    return build_scaffold(
        {
            "type": "Stack",
            "id": "root",
            "direction": "vertical",
            "gap": 16,
            "padding": 16,
            "children": [
                {"type": "Field", "id": "filter", "label": "Filter orders"},
                {
                    "type": "Table",
                    "id": "orders",
                    "title": "Orders",
                    "columns": ["Id", "Customer", "Total", "Status"],
                    "rows": 5,
                    "responsive": {"strategy": "scroll"},
                    "states": ["default", "empty", "loading"],
                },
            ],
        }
    )
