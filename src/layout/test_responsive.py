"""Unit tests for the responsive override cascade."""

import pytest

from src.schema import StackNode, TextNode, parse_node

from .responsive import (
    apply_responsive_overrides,
    apply_responsive_overrides_recursive,
    ordered_overrides,
    parse_at_key,
    shallow_merge,
)


def _text(at):
    return parse_node({"type": "Text", "id": "t", "text": "Hello", "at": at})


class TestParseAtKey:
    """Tests for override key parsing."""

    @pytest.mark.unit
    def test_valid_keys(self):
        """Both operators parse."""
        assert parse_at_key(">=768") == (">=", 768)
        assert parse_at_key("<=320") == ("<=", 320)

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["768", ">768", "=>768", ">= 768", "<=abc", ""])
    def test_malformed_keys(self, key):
        """Anything else is ignored."""
        assert parse_at_key(key) is None


class TestShallowMerge:
    """Tests for one-block merging."""

    @pytest.mark.unit
    def test_nested_mapping_merges(self):
        """Nested mappings merge one level deep."""
        base = {"minSize": {"w": 50, "h": 44}, "text": "a"}
        merged = shallow_merge(base, {"minSize": {"w": 100}})
        assert merged["minSize"] == {"w": 100, "h": 44}
        assert base["minSize"] == {"w": 50, "h": 44}

    @pytest.mark.unit
    def test_lists_replace(self):
        """Lists replace instead of concatenating."""
        merged = shallow_merge({"affordances": ["a", "b"]}, {"affordances": ["c"]})
        assert merged["affordances"] == ["c"]

    @pytest.mark.unit
    def test_none_block_and_values_ignored(self):
        """None leaves the base untouched."""
        base = {"text": "a", "fontSize": 16}
        assert shallow_merge(base, None) == base
        assert shallow_merge(base, {"fontSize": None}) == base


class TestApplyOverrides:
    """Tests for cascade precedence."""

    @pytest.mark.unit
    def test_max_width_beats_min_width(self):
        """Both apply at 640 and the <= block wins."""
        node = _text({">=320": {"fontSize": 18, "maxLines": 3}, "<=768": {"fontSize": 14, "maxLines": 4}})
        resolved = apply_responsive_overrides(node, 640)
        assert resolved.font_size == 14
        assert resolved.max_lines == 4
        assert resolved.at is None

    @pytest.mark.unit
    def test_only_min_width_applies(self):
        """Above the <= threshold only >= applies."""
        node = _text({">=320": {"fontSize": 18, "maxLines": 3}, "<=768": {"fontSize": 14, "maxLines": 4}})
        resolved = apply_responsive_overrides(node, 1024)
        assert resolved.font_size == 18
        assert resolved.max_lines == 3

    @pytest.mark.unit
    def test_min_width_ascending(self):
        """Larger >= thresholds apply later."""
        node = _text({">=768": {"fontSize": 20}, ">=320": {"fontSize": 18}})
        assert apply_responsive_overrides(node, 1024).font_size == 20

    @pytest.mark.unit
    def test_max_width_descending(self):
        """Smaller <= thresholds apply later."""
        node = _text({"<=480": {"fontSize": 12}, "<=768": {"fontSize": 14}})
        assert apply_responsive_overrides(node, 400).font_size == 12
        assert [key for key, _ in ordered_overrides(node.at, 400)] == ["<=768", "<=480"]

    @pytest.mark.unit
    def test_threshold_boundaries_inclusive(self):
        """Thresholds equal to the width apply."""
        node = _text({">=768": {"fontSize": 20}, "<=320": {"fontSize": 12}})
        assert apply_responsive_overrides(node, 768).font_size == 20
        assert apply_responsive_overrides(node, 320).font_size == 12

    @pytest.mark.unit
    def test_malformed_key_ignored(self):
        """Malformed keys never apply but at is still dropped."""
        resolved = apply_responsive_overrides(_text({"wide": {"fontSize": 30}}), 1024)
        assert resolved.font_size is None
        assert resolved.at is None

    @pytest.mark.unit
    def test_no_overrides_returns_same_node(self):
        """Nodes without at are returned unchanged."""
        node = TextNode(id="t", text="x")
        assert apply_responsive_overrides(node, 320) is node

    @pytest.mark.unit
    def test_idempotent(self):
        """Resolving a resolved node changes nothing."""
        node = _text({">=320": {"fontSize": 18}})
        once = apply_responsive_overrides(node, 640)
        assert apply_responsive_overrides(once, 640) is once


class TestApplyOverridesRecursive:
    """Tests for subtree resolution."""

    @pytest.mark.unit
    def test_children_resolved(self):
        """Overrides apply at every depth."""
        root = parse_node(
            {
                "type": "Stack",
                "id": "root",
                "at": {">=768": {"direction": "horizontal"}},
                "children": [
                    {"type": "Text", "id": "a", "text": "x", "at": {"<=480": {"visible": False}}},
                ],
            }
        )
        wide = apply_responsive_overrides_recursive(root, 1024)
        narrow = apply_responsive_overrides_recursive(root, 320)
        assert wide.direction == "horizontal"
        assert wide.children[0].visible is True
        assert narrow.direction == "vertical"
        assert narrow.children[0].visible is False
        assert narrow.children[0].at is None

    @pytest.mark.unit
    def test_override_replaces_children(self):
        """Children introduced by an override are parsed and resolved."""
        root = parse_node(
            {
                "type": "Stack",
                "id": "root",
                "children": [],
                "at": {
                    "<=480": {
                        "children": [
                            {"type": "Text", "id": "mobile", "text": "m", "at": {">=0": {"fontSize": 12}}}
                        ]
                    }
                },
            }
        )
        resolved = apply_responsive_overrides_recursive(root, 320)
        assert [c.id for c in resolved.children] == ["mobile"]
        assert resolved.children[0].font_size == 12

    @pytest.mark.unit
    def test_form_slots_resolved(self):
        """Form fields and actions are resolved."""
        root = parse_node(
            {
                "type": "Form",
                "id": "f",
                "fields": [{"type": "Field", "id": "a", "label": "A", "at": {"<=480": {"label": "Short"}}}],
                "actions": [{"type": "Button", "id": "b", "text": "Go", "at": {"<=480": {"widthPolicy": "fill"}}}],
            }
        )
        resolved = apply_responsive_overrides_recursive(root, 320)
        assert resolved.fields[0].label == "Short"
        assert resolved.actions[0].width_policy == "fill"

    @pytest.mark.unit
    def test_tree_without_overrides_untouched(self):
        """A tree with no at anywhere comes back as the same object."""
        root = StackNode(id="root", children=[TextNode(id="a", text="x")])
        assert apply_responsive_overrides_recursive(root, 320) is root

    @pytest.mark.unit
    def test_recursive_idempotent(self):
        """A resolved tree resolves to itself."""
        root = parse_node(
            {
                "type": "Stack",
                "id": "root",
                "children": [{"type": "Text", "id": "a", "text": "x", "at": {">=0": {"fontSize": 12}}}],
            }
        )
        once = apply_responsive_overrides_recursive(root, 320)
        assert apply_responsive_overrides_recursive(once, 320) is once
