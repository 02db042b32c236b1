"""Unit tests for leaf measurement."""

import pytest

from src.schema import ButtonNode, FieldNode, Size, TableNode, TextNode, TouchTarget

from .measure import (
    estimate_text_width,
    measure_button,
    measure_field,
    measure_leaf,
    measure_table,
    measure_text,
)

TOUCH = TouchTarget(w=44, h=44)


class TestMeasureText:
    """Tests for text width estimation and wrapping."""

    @pytest.mark.unit
    def test_single_line(self):
        """Text that fits stays on one line."""
        extent = measure_text(TextNode(id="t", text="Hello"), 320)
        assert extent.w == pytest.approx(44.0)
        assert extent.h == pytest.approx(22.4)

    @pytest.mark.unit
    def test_wraps_when_narrow(self):
        """Narrow space wraps onto ceil(single/available) lines."""
        node = TextNode(id="t", text="x" * 40, font_size=10)
        extent = measure_text(node, 100)
        assert extent.w == pytest.approx(100)
        assert extent.h == pytest.approx(3 * 14)

    @pytest.mark.unit
    def test_intrinsic_width_overrides_estimate(self):
        """intrinsicTextWidth replaces the character estimate."""
        node = TextNode(id="t", text="Hi", intrinsic_text_width=300)
        extent = measure_text(node, 200)
        assert extent.w == pytest.approx(200)
        assert extent.h == pytest.approx(2 * 22.4)

    @pytest.mark.unit
    def test_zero_available_width(self):
        """No space yields zero width and one line."""
        extent = measure_text(TextNode(id="t", text="Hello"), 0)
        assert extent.w == 0
        assert extent.h == pytest.approx(22.4)

    @pytest.mark.unit
    def test_estimate_scales_with_font(self):
        """Width is fontSize x 0.55 x characters."""
        assert estimate_text_width("abcd", 20) == pytest.approx(44.0)


class TestMeasureControls:
    """Tests for Button and Field sizing."""

    @pytest.mark.unit
    def test_hug_floors_at_touch_target(self):
        """Short labels still reach the touch-target width."""
        extent = measure_button(ButtonNode(id="b", text="OK"), 320, TOUCH)
        assert extent.w == 44
        assert extent.h == 44

    @pytest.mark.unit
    def test_hug_uses_label_plus_padding(self):
        """Hug width is label width plus horizontal padding."""
        extent = measure_button(ButtonNode(id="b", text="Continue"), 320, TOUCH)
        assert extent.w == pytest.approx(94.4)

    @pytest.mark.unit
    def test_hug_capped_by_available(self):
        """Hug never exceeds the available width, above the touch floor."""
        extent = measure_button(ButtonNode(id="b", text="Continue"), 60, TOUCH)
        assert extent.w == pytest.approx(60)

    @pytest.mark.unit
    def test_fill_takes_available(self):
        """Fill policy takes the available width."""
        node = ButtonNode(id="b", text="Go", width_policy="fill")
        assert measure_button(node, 288, TOUCH).w == 288

    @pytest.mark.unit
    def test_fixed_uses_min_size(self):
        """Fixed policy uses minSize.w."""
        node = ButtonNode(id="b", text="Go", width_policy="fixed", min_size=Size(w=120))
        assert measure_button(node, 320, TOUCH).w == 120

    @pytest.mark.unit
    def test_max_size_clamps(self):
        """maxSize clamps width before the touch floor, and height after."""
        node = ButtonNode(id="b", text="Continue", max_size=Size(w=60, h=30))
        extent = measure_button(node, 320, TOUCH)
        assert extent.w == 60
        assert extent.h == 30

    @pytest.mark.unit
    def test_fixed_height(self):
        """Fixed height uses minSize.h."""
        node = ButtonNode(id="b", text="Go", height_policy="fixed", min_size=Size(h=56))
        assert measure_button(node, 320, TOUCH).h == 56

    @pytest.mark.unit
    def test_field_measures_label(self):
        """Fields size from their label."""
        extent = measure_field(FieldNode(id="f", label="Email address"), 320, TOUCH)
        assert extent.w == pytest.approx(16 * 0.55 * 13 + 24)
        assert extent.h == 44


class TestMeasureTable:
    """Tests for table sizing."""

    @pytest.mark.unit
    def test_rows(self):
        """Height is header plus rows."""
        extent = measure_table(TableNode(id="t", rows=3), 500)
        assert extent.w == 500
        assert extent.h == 168

    @pytest.mark.unit
    def test_default_rows(self):
        """Five rows are assumed when unspecified."""
        assert measure_table(TableNode(id="t"), 320).h == 248


class TestMeasureLeaf:
    """Tests for measurement dispatch."""

    @pytest.mark.unit
    def test_dispatch(self):
        """Leaves dispatch by type."""
        assert measure_leaf(TableNode(id="t", rows=1), 100, TOUCH).h == 88

    @pytest.mark.unit
    def test_container_rejected(self):
        """Containers cannot be measured as leaves."""
        from src.schema import StackNode

        with pytest.raises(TypeError):
            measure_leaf(StackNode(id="s"), 100, TOUCH)
