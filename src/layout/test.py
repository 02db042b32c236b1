"""Unit tests for the layout engine."""

import logging

import pytest

from src.layout import (
    LayoutOptions,
    PrimaryDetection,
    Viewport,
    compute_layout,
    compute_layouts,
    format_viewport,
    parse_viewport,
)


def _button(node_id, **extra):
    return {"type": "Button", "id": node_id, "text": "OK", **extra}


def _fixed_button(node_id, width):
    return _button(node_id, widthPolicy="fixed", minSize={"w": width})


class TestViewport:
    """Tests for viewport parsing."""

    @pytest.mark.unit
    def test_parse_and_format(self):
        """WxH strings round-trip."""
        viewport = parse_viewport("320x640")
        assert viewport == Viewport(width=320, height=640)
        assert format_viewport(viewport) == "320x640"
        assert str(viewport) == "320x640"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["320", "320x", "x640", "0x640", "wide"])
    def test_malformed(self, value):
        """Malformed viewports raise ValueError."""
        with pytest.raises(ValueError):
            parse_viewport(value)

    @pytest.mark.unit
    def test_compute_layout_rejects_bad_viewport(self, login_scaffold):
        """Configuration errors surface before layout runs."""
        with pytest.raises(ValueError):
            compute_layout(login_scaffold, "large")


class TestVerticalStack:
    """Tests for vertical Stack placement."""

    @pytest.mark.unit
    def test_children_stack_with_gap_and_padding(self, make_scaffold):
        """Children stack along y inside the padding."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "gap": 8,
                "padding": 16,
                "children": [{"type": "Text", "id": "t", "text": "Hello"}, _button("b")],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert [f.id for f in output.frames] == ["root", "t", "b"]

        text, button = output.frame_for("t"), output.frame_for("b")
        assert (text.x, text.y) == (16, 16)
        assert text.w == pytest.approx(44)
        assert button.x == 16
        assert button.y == pytest.approx(16 + 22.4 + 8)

        root = output.frame_for("root")
        assert root.w == 320
        assert root.h == pytest.approx(16 + 22.4 + 8 + 44 + 16)
        assert output.issues == []

    @pytest.mark.unit
    def test_stretch_widens_non_fixed_children(self, make_scaffold):
        """Stretch alignment fills the content width except for fixed children."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "padding": 16,
                "align": "stretch",
                "children": [_button("hug"), _fixed_button("fixed", 100)],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert output.frame_for("hug").w == 288
        assert output.frame_for("fixed").w == 100

    @pytest.mark.unit
    def test_center_and_end(self, make_scaffold):
        """Center and end alignment offset x."""
        for align, expected_x in (("center", 138), ("end", 276)):
            scaffold = make_scaffold(
                {"type": "Stack", "id": "root", "align": align, "children": [_button("b")]}
            )
            assert compute_layout(scaffold, "320x640").frame_for("b").x == expected_x

    @pytest.mark.unit
    def test_hidden_children_excluded(self, make_scaffold):
        """Hidden subtrees produce no frames and take no space."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Stack", "id": "hidden", "visible": False, "children": [_button("inner")]},
                    _button("shown"),
                ],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert [f.id for f in output.frames] == ["root", "shown"]
        assert output.frame_for("shown").y == 0

    @pytest.mark.unit
    def test_empty_stack_height_is_padding(self, make_scaffold):
        """An empty Stack is as tall as its padding."""
        scaffold = make_scaffold({"type": "Stack", "id": "root", "padding": 8})
        assert compute_layout(scaffold, "320x640").frame_for("root").h == 16


class TestSpacingScale:
    """Tests for spacing-off-scale detection."""

    @pytest.mark.unit
    def test_off_scale_gap_warns(self, make_scaffold):
        """A gap outside the scale is reported with the viewport."""
        scaffold = make_scaffold({"type": "Stack", "id": "root", "gap": 10, "children": []})
        issues = compute_layout(scaffold, "320x640").issues
        assert len(issues) == 1
        issue = issues[0]
        assert issue.id == "spacing-off-scale"
        assert issue.severity == "warn"
        assert issue.node_id == "root"
        assert issue.viewport == "320x640"
        assert issue.json_pointer == "/screen/root"

    @pytest.mark.unit
    def test_zero_always_allowed(self, make_scaffold):
        """Zero spacing passes even when absent from a custom scale."""
        scaffold = make_scaffold(
            {"type": "Stack", "id": "root", "gap": 0, "padding": 0, "children": []},
            spacingScale=[4, 8],
        )
        assert compute_layout(scaffold, "320x640").issues == []

    @pytest.mark.unit
    def test_custom_scale(self, make_scaffold):
        """Values on a custom scale pass."""
        scaffold = make_scaffold(
            {"type": "Box", "id": "root", "padding": 10}, spacingScale=[0, 5, 10]
        )
        assert compute_layout(scaffold, "320x640").issues == []


class TestHorizontalStack:
    """Tests for horizontal Stack placement and overflow."""

    @pytest.mark.unit
    def test_overflow_reported_per_child(self, make_scaffold):
        """Only the child passing the container edge overflows."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "row",
                "direction": "horizontal",
                "gap": 8,
                "children": [_fixed_button(f"b{i}", 100) for i in range(4)],
            }
        )
        output = compute_layout(scaffold, "320x640")
        overflow = [i for i in output.issues if i.id == "overflow-x"]
        assert [i.node_id for i in overflow] == ["b3"]
        assert overflow[0].severity == "error"
        assert [output.frame_for(f"b{i}").x for i in range(4)] == [0, 108, 216, 324]
        assert output.frame_for("row").h == 44

    @pytest.mark.unit
    def test_wrap_moves_to_next_row(self, make_scaffold):
        """Wrapping starts a new row instead of overflowing."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "row",
                "direction": "horizontal",
                "wrap": True,
                "gap": 8,
                "children": [_fixed_button(f"b{i}", 100) for i in range(4)],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert not [i for i in output.issues if i.id == "overflow-x"]
        last = output.frame_for("b3")
        assert (last.x, last.y) == (0, 52)
        assert output.frame_for("row").h == 96

    @pytest.mark.unit
    def test_cross_axis_center(self, make_scaffold):
        """Shorter children center on the row height."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "row",
                "direction": "horizontal",
                "align": "center",
                "children": [
                    {"type": "Text", "id": "label", "text": "Hi"},
                    _button("b"),
                ],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert output.frame_for("label").y == pytest.approx((44 - 22.4) / 2)
        assert output.frame_for("b").y == 0


class TestGrid:
    """Tests for Grid placement."""

    @pytest.mark.unit
    def test_cell_width(self, make_scaffold):
        """Three columns with gap 16 in 320px give 96px cells."""
        scaffold = make_scaffold(
            {
                "type": "Grid",
                "id": "grid",
                "columns": 3,
                "gap": 16,
                "children": [{"type": "Text", "id": f"c{i}", "text": "A"} for i in range(4)],
            }
        )
        output = compute_layout(scaffold, "320x640")
        assert [output.frame_for(f"c{i}").x for i in range(3)] == [0, 112, 224]
        fourth = output.frame_for("c3")
        assert fourth.x == 0
        assert fourth.y == pytest.approx(22.4 + 16)
        assert output.frame_for("grid").h == pytest.approx(2 * 22.4 + 16)

    @pytest.mark.unit
    def test_column_reduction(self, make_scaffold):
        """minColWidth reduces four columns to two at 250px."""
        scaffold = make_scaffold(
            {
                "type": "Grid",
                "id": "grid",
                "columns": 4,
                "gap": 8,
                "minColWidth": 100,
                "children": [{"type": "Text", "id": f"c{i}", "text": "A"} for i in range(3)],
            }
        )
        output = compute_layout(scaffold, "250x600")
        assert output.frame_for("c1").x == pytest.approx(121 + 8)
        assert output.frame_for("c2").x == 0
        assert output.frame_for("c2").y > 0

    @pytest.mark.unit
    def test_child_wider_than_cell_overflows(self, make_scaffold):
        """A fixed child wider than its cell is reported."""
        scaffold = make_scaffold(
            {
                "type": "Grid",
                "id": "grid",
                "columns": 3,
                "gap": 16,
                "children": [_fixed_button("wide", 150), _button("ok")],
            }
        )
        issues = compute_layout(scaffold, "320x640").issues
        assert [(i.id, i.node_id) for i in issues] == [("overflow-x", "wide")]
        assert issues[0].found == 150

    @pytest.mark.unit
    def test_empty_grid(self, make_scaffold):
        """An empty grid has zero height."""
        scaffold = make_scaffold({"type": "Grid", "id": "grid", "columns": 2})
        assert compute_layout(scaffold, "320x640").frame_for("grid").h == 0


class TestBoxAndForm:
    """Tests for Box insets and Form columns."""

    @pytest.mark.unit
    def test_box_insets_child(self, make_scaffold):
        """The child sits inside the padding."""
        scaffold = make_scaffold(
            {"type": "Box", "id": "box", "padding": 16, "child": {"type": "Text", "id": "t", "text": "Hi"}}
        )
        output = compute_layout(scaffold, "320x640")
        child = output.frame_for("t")
        assert (child.x, child.y) == (16, 16)
        assert output.frame_for("box").h == pytest.approx(22.4 + 32)

    @pytest.mark.unit
    def test_empty_box(self, make_scaffold):
        """A Box without a visible child is zero height."""
        scaffold = make_scaffold(
            {"type": "Box", "id": "box", "padding": 16, "child": {"type": "Text", "id": "t", "text": "x", "visible": False}}
        )
        output = compute_layout(scaffold, "320x640")
        assert output.frame_for("box").h == 0
        assert output.frame_for("t") is None

    @pytest.mark.unit
    def test_form_fields_then_actions(self, login_scaffold):
        """Form lays out fields then actions in one column."""
        output = compute_layout(login_scaffold, "320x640")
        ids = [f.id for f in output.frames]
        assert ids == ["root", "title", "login-form", "email", "password", "submit", "cancel"]
        form = output.frame_for("login-form")
        assert output.frame_for("password").y == pytest.approx(form.y + 44)
        assert output.frame_for("submit").y == pytest.approx(form.y + 88)
        assert form.h == pytest.approx(4 * 44)


class TestTouchTargets:
    """Tests for touch-target checks."""

    @pytest.mark.unit
    def test_small_button_warns(self, make_scaffold):
        """A button clamped below the minimum height is reported."""
        scaffold = make_scaffold(
            {"type": "Stack", "id": "root", "children": [_button("b", maxSize={"h": 30})]}
        )
        issues = compute_layout(scaffold, "320x640").issues
        assert [(i.id, i.node_id, i.severity) for i in issues] == [
            ("touch-target-too-small", "b", "warn")
        ]
        assert issues[0].found == {"w": 44, "h": 30}

    @pytest.mark.unit
    def test_non_focusable_button_skipped(self, make_scaffold):
        """Buttons marked non-focusable are exempt."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [_button("b", maxSize={"h": 30}, focusable=False)],
            }
        )
        assert compute_layout(scaffold, "320x640").issues == []

    @pytest.mark.unit
    def test_custom_minimum(self, make_scaffold):
        """The minimum comes from settings."""
        scaffold = make_scaffold(
            {"type": "Stack", "id": "root", "children": [_button("b", maxSize={"h": 40})]},
            minTouchTarget={"w": 24, "h": 24},
        )
        assert compute_layout(scaffold, "320x640").issues == []


class TestPrimaryBelowFold:
    """Tests for the primary-below-fold check."""

    @staticmethod
    def _tall(make_scaffold, button):
        return make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [{"type": "Table", "id": "table", "rows": 20}, button],
            }
        )

    @pytest.mark.unit
    def test_primary_below_fold(self, make_scaffold):
        """A primary button past the viewport height is reported."""
        scaffold = self._tall(make_scaffold, _button("save", roleHint="primary"))
        issues = compute_layout(scaffold, "320x640").issues
        assert [(i.id, i.node_id, i.viewport) for i in issues] == [
            ("primary-below-fold", "save", "320x640")
        ]
        assert issues[0].found == 892

    @pytest.mark.unit
    def test_tall_viewport_passes(self, make_scaffold):
        """No issue when the primary fits."""
        scaffold = self._tall(make_scaffold, _button("save", roleHint="primary"))
        assert compute_layout(scaffold, "1280x1000").issues == []

    @pytest.mark.unit
    def test_id_substring_detection(self, make_scaffold):
        """The id heuristic finds buttons without a role hint."""
        scaffold = self._tall(make_scaffold, _button("primary-action"))
        by_role = compute_layout(
            scaffold, "320x640", LayoutOptions(primary_detection=PrimaryDetection.ROLE_HINT)
        )
        by_id = compute_layout(
            scaffold, "320x640", LayoutOptions(primary_detection=PrimaryDetection.ID_SUBSTRING)
        )
        assert by_role.issues == []
        assert [i.node_id for i in by_id.issues] == ["primary-action"]

    @pytest.mark.unit
    def test_detection_from_environment(self, make_scaffold, monkeypatch):
        """Configuration selects the detection strategy when no option is given."""
        monkeypatch.setenv("SCAFFOLD_PRIMARY_DETECTION", "id")
        scaffold = self._tall(make_scaffold, _button("primary-action"))
        assert [i.id for i in compute_layout(scaffold, "320x640").issues] == [
            "primary-below-fold"
        ]


class TestResponsiveLayout:
    """Tests for viewport-dependent layout."""

    @pytest.mark.unit
    def test_overrides_apply_per_viewport(self, make_scaffold):
        """A Stack switching direction lays out differently per viewport."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "at": {">=768": {"direction": "horizontal", "gap": 16}},
                "children": [_button("a"), _button("b")],
            }
        )
        narrow, wide = compute_layouts(scaffold, ["320x640", "1024x768"])
        assert narrow.frame_for("b").y == 44
        assert wide.frame_for("b").y == 0
        assert wide.frame_for("b").x == 44 + 16

    @pytest.mark.unit
    def test_default_viewports_from_settings(self, login_scaffold):
        """Breakpoints default to the scaffold settings."""
        outputs = compute_layouts(login_scaffold)
        assert [o.viewport for o in outputs] == ["320x640", "768x1024", "1280x800"]

    @pytest.mark.unit
    def test_output_wire_shape(self, login_scaffold):
        """to_dict emits camelCase issues and plain frames."""
        wire = compute_layout(login_scaffold, "320x640").to_dict()
        assert wire["viewport"] == "320x640"
        assert wire["frames"][0] == {"id": "root", "x": 0, "y": 0, "w": 320, "h": wire["frames"][0]["h"]}
        assert wire["issues"] == []


class TestLayoutLogging:
    """Tests for engine debug logging."""

    @pytest.mark.unit
    def test_layout_summary_logged(self, login_scaffold, caplog):
        """The per-viewport summary is logged as a formatted message."""
        with caplog.at_level(logging.DEBUG, logger="scaffold-audit.layout"):
            output = compute_layout(login_scaffold, "390x844")
        (record,) = [r for r in caplog.records if r.getMessage().startswith("Layout 390x844")]
        assert record.getMessage() == (
            f"Layout 390x844: {len(output.frames)} frames, {len(output.issues)} issues"
        )
        assert not record.args

    @pytest.mark.unit
    def test_override_application_logged(self, make_scaffold, caplog):
        scaffold = make_scaffold(
            {"type": "Stack", "id": "root", "at": {">=320": {"gap": 8}}, "children": []}
        )
        with caplog.at_level(logging.DEBUG, logger="scaffold-audit.layout"):
            compute_layout(scaffold, "390x844")
        messages = [r.getMessage() for r in caplog.records if not r.args]
        assert "Node root at 390px: applied >=320" in messages
