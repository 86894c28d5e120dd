"""
Isometric projection helpers and the 3D axis indicator.

Tool coordinate system for the isometric view:
    X = tool axis (shank toward tip)
    Y = up
    Z = toward the viewer's lower-left

Standard axonometric transform (y flipped for canvas coordinates):
    screen_x = cx + (x - z) * cos(30)
    screen_y = cy + (x + z) * sin(30) - y
"""

from __future__ import annotations

import math

import numpy as np

from .constants import AXIS_COLORS, ISO_AXIS_SIZE
from .dimensions import DimensionStyle, arrowhead
from .scene import Point, Polyline, Primitive, Text

_COS30 = math.cos(math.radians(30))
_SIN30 = math.sin(math.radians(30))

# Rows: screen_x, screen_y coefficients for (x, y, z)
ISO_MATRIX = np.array([
    [_COS30, 0.0, -_COS30],
    [_SIN30, -1.0, _SIN30],
])


def iso(x: float, y: float, z: float, origin: Point = (0.0, 0.0)) -> Point:
    """Project a 3D point to canvas coordinates around ``origin``."""
    sx, sy = ISO_MATRIX @ np.array([x, y, z], dtype=float)
    return (origin[0] + float(sx), origin[1] + float(sy))


def iso_many(points: np.ndarray, origin: Point = (0.0, 0.0)) -> np.ndarray:
    """Project an (N, 3) array of points; returns an (N, 2) array."""
    projected = np.asarray(points, dtype=float) @ ISO_MATRIX.T
    return projected + np.asarray(origin, dtype=float)


def axis_indicator(origin: Point, size: float = ISO_AXIS_SIZE) -> list[Primitive]:
    """
    Axis triad for the isometric view.

    Draws the tool X axis, the vertical Y axis and the receding Z axis as
    they appear after projection, each with an arrowhead and a letter.

    Args:
        origin: Canvas position of the triad origin
        size: Length of each axis in canvas units

    Returns:
        Polyline + arrowhead + Text per axis
    """
    primitives: list[Primitive] = []
    ends = iso_many(np.eye(3) * size, origin=origin)
    arrow_len = size * 0.25

    for name, (ex, ey), color in zip("XYZ", ends, AXIS_COLORS):
        end = (float(ex), float(ey))
        style = DimensionStyle(line_color=color, line_width=0.6, arrow_length=arrow_len)
        primitives.append(Polyline((origin, end), color=color, width=0.6, role="axis"))
        primitives.append(arrowhead(origin, end, style, role="axis"))

        # Letter just beyond the arrow tip, along the axis direction
        dx, dy = end[0] - origin[0], end[1] - origin[1]
        length = math.hypot(dx, dy) or 1.0
        primitives.append(Text(
            x=end[0] + 6 * dx / length,
            y=end[1] + 6 * dy / length + 4,
            content=name,
            size=10,
            color=color,
            bold=True,
            role="axis_label",
        ))

    return primitives
