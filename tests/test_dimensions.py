#!/usr/bin/env python3
"""
Tests for the dimension annotator.

Tests cover:
- Label formatting (3 decimals, Ø prefix)
- Arrowhead construction and rotation invariance
- Linear and diameter dimension layout
- Isometric projection helpers
"""

import math

import numpy as np
import pytest

from tooldraw.drawing.dimensions import (
    DIAMETER_SYMBOL,
    DimensionStyle,
    add_diameter_dimension,
    add_linear_dimension,
    approximate_text_width,
    arrowhead,
    expand_annotation,
    format_diameter,
    format_length,
    with_diameter_prefix,
)
from tooldraw.drawing.isometric import axis_indicator, iso, iso_many
from tooldraw.drawing.scene import (
    DiameterDimension,
    DimensionLine,
    FilledPath,
    Polyline,
    Text,
)


def _rotate(vec, theta):
    c, s = math.cos(theta), math.sin(theta)
    return (vec[0] * c - vec[1] * s, vec[0] * s + vec[1] * c)


# =============================================================================
# LABELS
# =============================================================================


class TestLabels:
    """Test dimension label formatting."""

    @pytest.mark.parametrize("value, expected", [
        (109.1, "109.100 mm"),
        (0.063, "0.063 mm"),
        (53, "53.000 mm"),
    ])
    def test_format_length(self, value, expected):
        assert format_length(value) == expected

    def test_format_diameter(self):
        assert format_diameter(10.503) == "Ø10.503 mm"

    def test_prefix_never_doubled(self):
        label = with_diameter_prefix(with_diameter_prefix("10.000 mm"))
        assert label == "Ø10.000 mm"
        assert label.count(DIAMETER_SYMBOL) == 1

    def test_approximate_width(self):
        assert approximate_text_width("abcde", 10) == pytest.approx(30.0)


# =============================================================================
# ARROWHEADS
# =============================================================================


class TestArrowhead:
    """Test the atan2-based arrowhead."""

    def test_tip_and_stroke_length(self):
        head = arrowhead((0, 0), (100, 0))
        left, tip, right = head.points
        assert tip == (100, 0)
        assert math.dist(left, tip) == pytest.approx(10.0)
        assert math.dist(right, tip) == pytest.approx(10.0)

    def test_strokes_at_thirty_degrees(self):
        left, tip, right = arrowhead((0, 0), (100, 0)).points
        for end in (left, right):
            angle = math.degrees(math.atan2(end[1] - tip[1], tip[0] - end[0]))
            assert abs(angle) == pytest.approx(30.0)

    @pytest.mark.parametrize("theta", [0.3, 1.0, math.pi / 2, 2.5, math.pi, -2.0])
    def test_rotation_invariance(self, theta):
        """Rotating the line rotates both strokes by the same angle."""
        base = arrowhead((0, 0), (50, 0))
        end = _rotate((50, 0), theta)
        rotated = arrowhead((0, 0), end)

        for base_point, rot_point in zip(base.points, rotated.points):
            expected = _rotate(base_point, theta)
            assert rot_point[0] == pytest.approx(expected[0], abs=1e-9)
            assert rot_point[1] == pytest.approx(expected[1], abs=1e-9)

    def test_style_controls_size(self):
        style = DimensionStyle(arrow_length=4, arrow_half_angle=45)
        left, tip, _ = arrowhead((0, 0), (10, 0), style).points
        assert math.dist(left, tip) == pytest.approx(4.0)


# =============================================================================
# LINEAR DIMENSIONS
# =============================================================================


class TestLinearDimension:
    """Test horizontal dimension layout."""

    def test_parts(self):
        parts = add_linear_dimension((100, 300), (400, 300), "109.100 mm")
        roles = [p.role for p in parts]
        assert roles == [
            "dimension_line",
            "extension_line",
            "extension_line",
            "arrowhead",
            "arrowhead",
            "label_background",
            "dimension_label",
        ]

    def test_line_and_ticks(self):
        parts = add_linear_dimension((100, 300), (400, 300), "x")
        line, tick1, tick2 = parts[:3]
        assert line.points == ((100, 300), (400, 300))
        assert tick1.points == ((100, 295), (100, 305))
        assert tick2.points == ((400, 295), (400, 305))

    def test_arrow_tips_on_ends_pointing_inward(self):
        parts = add_linear_dimension((400, 300), (100, 300), "x")
        left_arrow, right_arrow = parts[3], parts[4]
        assert left_arrow.points[1] == (100, 300)
        assert right_arrow.points[1] == (400, 300)
        # Strokes trail outside the span
        assert all(p[0] < 100 for p in (left_arrow.points[0], left_arrow.points[2]))
        assert all(p[0] > 400 for p in (right_arrow.points[0], right_arrow.points[2]))

    def test_label_background_sized_to_text(self):
        def measure(text, size):
            return 50.0

        parts = add_linear_dimension((100, 300), (400, 300), "53.000 mm", measure=measure)
        background, text = parts[5], parts[6]
        assert isinstance(background, FilledPath)
        xs = [p[0] for p in background.points]
        assert max(xs) - min(xs) == pytest.approx(50.0 + 2 * 4)
        assert text.x == pytest.approx(250.0)
        assert text.align == "center"
        assert text.content == "53.000 mm"


# =============================================================================
# DIAMETER DIMENSIONS
# =============================================================================


class TestDiameterDimension:
    """Test vertical diameter dimension layout."""

    def test_line_extends_past_radius(self):
        parts = add_diameter_dimension((200, 200), 30, "10.503 mm")
        line = parts[0]
        assert line.points == ((200, 160), (200, 240))

    def test_arrows_on_radius_edges(self):
        parts = add_diameter_dimension((200, 200), 30, "10.503 mm")
        top_arrow, bottom_arrow = parts[1], parts[2]
        assert top_arrow.points[1] == (200, 170)
        assert bottom_arrow.points[1] == (200, 230)

    def test_label_above_with_prefix(self):
        parts = add_diameter_dimension((200, 200), 30, "Ø10.503 mm")
        text = parts[-1]
        assert isinstance(text, Text)
        assert text.content == "Ø10.503 mm"
        assert text.y < 160

    def test_expand_annotation_dispatch(self):
        linear = expand_annotation(DimensionLine((0, 0), (10, 0), "a"))
        diameter = expand_annotation(DiameterDimension((0, 0), 5, "b"))
        assert len(linear) == 7
        assert len(diameter) == 5
        assert diameter[-1].content == "Øb"

    def test_expand_annotation_rejects_other_primitives(self):
        with pytest.raises(TypeError):
            expand_annotation(Text(0, 0, "x"))


# =============================================================================
# ISOMETRIC HELPERS
# =============================================================================


class TestIsometric:
    """Test the axonometric transform and the axis triad."""

    def test_iso_formula(self):
        x, y, z = 10.0, 4.0, 3.0
        cos30 = math.cos(math.radians(30))
        sin30 = math.sin(math.radians(30))
        sx, sy = iso(x, y, z, origin=(100, 50))
        assert sx == pytest.approx(100 + (x - z) * cos30)
        assert sy == pytest.approx(50 + (x + z) * sin30 - y)

    def test_iso_many_matches_iso(self):
        points = np.array([[0, 0, 0], [10, 0, 0], [0, 5, 0], [0, 0, 7]])
        projected = iso_many(points, origin=(20, 30))
        for (x, y, z), (sx, sy) in zip(points, projected):
            assert (sx, sy) == pytest.approx(iso(x, y, z, origin=(20, 30)))

    def test_axis_indicator(self):
        parts = axis_indicator((80, 350))
        labels = [p.content for p in parts if isinstance(p, Text)]
        assert labels == ["X", "Y", "Z"]
        lines = [p for p in parts if isinstance(p, Polyline) and len(p.points) == 2]
        assert all(line.points[0] == (80, 350) for line in lines)
