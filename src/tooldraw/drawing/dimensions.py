"""
Dimension annotator for tool drawings.

Every view dimensions its geometry through the functions in this module:

- arrowhead: the canonical two-stroke arrowhead built from atan2
- add_linear_dimension: horizontal length dimension with extension ticks
- add_diameter_dimension: vertical diameter dimension with a Ø label

The functions are pure: they take points and a label and return scene
primitives. The renderer calls ``expand_annotation`` for the DimensionLine
and DiameterDimension primitives in a scene, passing its own text
measurement so label backgrounds match the font actually used.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from .constants import DIMENSION_COLOR, FONT_FAMILY, LABEL_FONT_SIZE
from .scene import (
    DiameterDimension,
    DimensionLine,
    FilledPath,
    Point,
    Polyline,
    Primitive,
    Text,
)

DIAMETER_SYMBOL = "Ø"

TextMeasure = Callable[[str, float], float]


# =============================================================================
# DIMENSION STYLING
# =============================================================================

@dataclass(frozen=True)
class DimensionStyle:
    """
    Styling for dimension annotations.

    Attributes:
        line_color: Stroke color for dimension, extension and arrow lines
        line_width: Stroke width for dimension lines
        arrow_length: Length of each arrowhead stroke
        arrow_half_angle: Angle between each stroke and the line (degrees)
        tick_length: Half-length of the extension ticks at each end
        overhang: How far a diameter line extends past each radius edge
        font_family: Label font family
        font_size: Label font size
        label_padding: Horizontal padding around a label, each side
        label_background: Opaque fill behind labels
    """
    line_color: str = DIMENSION_COLOR
    line_width: float = 0.75
    arrow_length: float = 10.0
    arrow_half_angle: float = 30.0
    tick_length: float = 5.0
    overhang: float = 10.0
    font_family: str = FONT_FAMILY
    font_size: float = LABEL_FONT_SIZE
    label_padding: float = 4.0
    label_background: str = "#ffffff"


DEFAULT_STYLE = DimensionStyle()


def approximate_text_width(text: str, size: float) -> float:
    """Estimate rendered text width (0.6 em per glyph)."""
    return len(text) * size * 0.6


# =============================================================================
# LABEL FORMATTING
# =============================================================================

def format_length(value_mm: float) -> str:
    """Format a length label, e.g. ``"109.100 mm"``."""
    return f"{value_mm:.3f} mm"


def with_diameter_prefix(label: str) -> str:
    """Prefix a label with Ø unless it already starts with it."""
    if label.startswith(DIAMETER_SYMBOL):
        return label
    return f"{DIAMETER_SYMBOL}{label}"


def format_diameter(value_mm: float) -> str:
    """Format a diameter label, e.g. ``"Ø10.503 mm"``."""
    return with_diameter_prefix(format_length(value_mm))


# =============================================================================
# PRIMITIVE BUILDERS
# =============================================================================

def arrowhead(
    start: Point,
    end: Point,
    style: DimensionStyle = DEFAULT_STYLE,
    role: str = "arrowhead",
) -> Polyline:
    """
    Arrowhead at ``end`` for a line drawn from ``start`` to ``end``.

    The two strokes leave the tip at ``atan2(dy, dx) ± half_angle`` and run
    back along the line for ``arrow_length``. Rotating the line rotates both
    strokes by the same angle.

    Returns:
        Polyline (stroke_end_1, tip, stroke_end_2)
    """
    x1, y1 = start
    x2, y2 = end
    angle = math.atan2(y2 - y1, x2 - x1)
    spread = math.radians(style.arrow_half_angle)
    length = style.arrow_length

    left = (x2 - length * math.cos(angle - spread), y2 - length * math.sin(angle - spread))
    right = (x2 - length * math.cos(angle + spread), y2 - length * math.sin(angle + spread))

    return Polyline(
        points=(left, (x2, y2), right),
        color=style.line_color,
        width=style.line_width,
        role=role,
    )


def _label(
    x: float,
    center_y: float,
    content: str,
    style: DimensionStyle,
    measure: TextMeasure,
) -> list[Primitive]:
    """Label centered on (x, center_y) over an opaque background box."""
    text_width = measure(content, style.font_size)
    half_w = text_width / 2 + style.label_padding
    half_h = style.font_size / 2 + 2

    background = FilledPath(
        points=(
            (x - half_w, center_y - half_h),
            (x + half_w, center_y - half_h),
            (x + half_w, center_y + half_h),
            (x - half_w, center_y + half_h),
        ),
        fill_color=style.label_background,
        stroke_color=None,
        width=0,
        role="label_background",
    )
    text = Text(
        x=x,
        y=center_y + style.font_size * 0.35,  # baseline for vertical centering
        content=content,
        align="center",
        size=style.font_size,
        color=style.line_color,
        role="dimension_label",
    )
    return [background, text]


def add_linear_dimension(
    start: Point,
    end: Point,
    label: str,
    style: DimensionStyle | None = None,
    measure: TextMeasure | None = None,
) -> list[Primitive]:
    """
    Primitives for a horizontal linear dimension.

    The dimension line runs at ``start``'s y between the x positions of
    ``start`` and ``end``. Extension ticks extend ``tick_length`` above and
    below each end; the arrowheads sit outside the span with their tips on
    the ends, pointing inward.

    Args:
        start: Left end (its y sets the dimension line height)
        end: Right end (only its x is used)
        label: Dimension text
        style: DimensionStyle configuration
        measure: Text width function; defaults to approximate_text_width

    Returns:
        [line, tick, tick, arrow, arrow, label background, label text]
    """
    if style is None:
        style = DEFAULT_STYLE
    if measure is None:
        measure = approximate_text_width

    y = start[1]
    x1, x2 = start[0], end[0]
    if x1 > x2:
        x1, x2 = x2, x1

    tick = style.tick_length
    arrow = style.arrow_length

    parts: list[Primitive] = [
        Polyline(((x1, y), (x2, y)), color=style.line_color,
                 width=style.line_width, role="dimension_line"),
        Polyline(((x1, y - tick), (x1, y + tick)), color=style.line_color,
                 width=style.line_width, role="extension_line"),
        Polyline(((x2, y - tick), (x2, y + tick)), color=style.line_color,
                 width=style.line_width, role="extension_line"),
        arrowhead((x1 - arrow, y), (x1, y), style),
        arrowhead((x2 + arrow, y), (x2, y), style),
    ]
    parts.extend(_label((x1 + x2) / 2, y, label, style, measure))
    return parts


def add_diameter_dimension(
    center: Point,
    radius: float,
    label: str,
    style: DimensionStyle | None = None,
    measure: TextMeasure | None = None,
) -> list[Primitive]:
    """
    Primitives for a vertical diameter dimension.

    The line spans ``[cy - radius - overhang, cy + radius + overhang]``.
    Both arrowheads have their tips on the radius edges and point toward
    the center. The label (prefixed with Ø) sits above the line.

    Returns:
        [line, arrow, arrow, label background, label text]
    """
    if style is None:
        style = DEFAULT_STYLE
    if measure is None:
        measure = approximate_text_width

    cx, cy = center
    radius = abs(radius)
    top = cy - radius - style.overhang
    bottom = cy + radius + style.overhang

    parts: list[Primitive] = [
        Polyline(((cx, top), (cx, bottom)), color=style.line_color,
                 width=style.line_width, role="dimension_line"),
        arrowhead((cx, top), (cx, cy - radius), style),
        arrowhead((cx, bottom), (cx, cy + radius), style),
    ]
    label_center_y = top - style.label_padding - style.font_size / 2
    parts.extend(_label(cx, label_center_y, with_diameter_prefix(label), style, measure))
    return parts


def expand_annotation(
    primitive: DimensionLine | DiameterDimension,
    style: DimensionStyle | None = None,
    measure: TextMeasure | None = None,
) -> list[Primitive]:
    """Expand a DimensionLine or DiameterDimension into drawable primitives."""
    if isinstance(primitive, DimensionLine):
        return add_linear_dimension(primitive.start, primitive.end, primitive.label, style, measure)
    if isinstance(primitive, DiameterDimension):
        return add_diameter_dimension(primitive.center, primitive.radius, primitive.label, style, measure)
    raise TypeError(f"Not a dimension primitive: {type(primitive).__name__}")
