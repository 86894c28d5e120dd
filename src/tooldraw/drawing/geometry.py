"""
Derived drawing geometry.

Turns a ToolParameters record plus a zoom factor into the pixel quantities
the projection builders need: scale, radii, section x-positions and the
drill tip length. Nothing here is cached; every build recomputes it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..errors import InvalidGeometryError
from ..parameters import ToolParameters
from .constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    MARGIN,
    ZOOM_DEFAULT,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_STEP,
)
from .view_area import ViewArea

logger = logging.getLogger(__name__)


def clamp_zoom(zoom: float) -> float:
    """
    Clamp a zoom factor to [ZOOM_MIN, ZOOM_MAX], rounded to one decimal.

    Raises:
        InvalidGeometryError: zoom is NaN or infinite
    """
    if not math.isfinite(zoom):
        raise InvalidGeometryError(f"zoom must be a finite number, got {zoom!r}")
    return round(min(max(zoom, ZOOM_MIN), ZOOM_MAX), 1)


@dataclass(frozen=True)
class Scale:
    """
    User zoom on top of the fitted drawing scale.

    Zoom operations return new Scale values and never touch the parameters.
    """
    zoom: float = ZOOM_DEFAULT

    def __post_init__(self):
        object.__setattr__(self, "zoom", clamp_zoom(float(self.zoom)))

    def zoom_in(self) -> "Scale":
        return Scale(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> "Scale":
        return Scale(self.zoom - ZOOM_STEP)

    def reset(self) -> "Scale":
        return Scale(ZOOM_DEFAULT)

    def factor(self, overall_length: float, usable_width: float) -> float:
        """
        Pixels per millimeter for a tool of ``overall_length``.

        Raises:
            InvalidGeometryError: overall_length is zero, negative or not finite
        """
        if not math.isfinite(overall_length) or overall_length <= 0:
            raise InvalidGeometryError(
                f"overall length must be a positive finite number, got {overall_length!r}"
            )
        return usable_width / overall_length * self.zoom


def tip_length_mm(cutting_diameter: float, point_angle: float) -> float:
    """
    Axial length of a drill point.

    ``(d / 2) / tan(point_angle / 2)``. A point angle of 180 degrees or more
    is a flat end and gives 0.

    Raises:
        InvalidGeometryError: point_angle is not positive
    """
    if not math.isfinite(point_angle) or point_angle <= 0:
        raise InvalidGeometryError(f"point angle must be in (0, 180], got {point_angle!r}")
    if point_angle >= 180:
        return 0.0
    half_angle = math.radians(point_angle / 2)
    return (cutting_diameter / 2) / math.tan(half_angle)


def _non_negative(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidGeometryError(f"{name} must be finite, got {value!r}")
    if value < 0:
        logger.warning("%s is negative (%g); clamping to 0", name, value)
        return 0.0
    return value


@dataclass(frozen=True)
class ToolGeometry:
    """
    Pixel-space measurements of a tool for one canvas and zoom.

    Attributes:
        scale: Pixels per millimeter
        center_y: Y of the tool axis
        shank_start_x: X where the shank begins
        shank_end_x: X where the shank ends and the flute begins
        flute_end_x: X of the tool end (tip)
        shank_radius: Shank radius in pixels
        flute_radius: Cutting radius in pixels
        tip_length: Axial drill-point length in pixels (0 for non-drills)
    """
    scale: float
    center_y: float
    shank_start_x: float
    shank_end_x: float
    flute_end_x: float
    shank_radius: float
    flute_radius: float
    tip_length: float = 0.0

    @property
    def shank_span(self) -> float:
        return self.shank_end_x - self.shank_start_x

    @property
    def flute_span(self) -> float:
        return self.flute_end_x - self.shank_end_x

    @property
    def tip_base_x(self) -> float:
        """X where the drill point starts."""
        return self.flute_end_x - self.tip_length

    @property
    def max_radius(self) -> float:
        return max(self.shank_radius, self.flute_radius)

    @classmethod
    def from_parameters(
        cls,
        params: ToolParameters,
        scale: Scale | None = None,
        canvas: ViewArea | None = None,
        margin: float = MARGIN,
    ) -> "ToolGeometry":
        """
        Compute pixel geometry for ``params`` on ``canvas``.

        The scale derives from overall_length alone; the shank and flute are
        laid out from their own lengths even when they do not add up to it.

        Raises:
            InvalidGeometryError: overall_length is zero/negative/non-finite,
                or a drill has a non-positive point angle
        """
        if scale is None:
            scale = Scale()
        if canvas is None:
            canvas = ViewArea(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT)

        usable = canvas.inset_sides(left=margin, right=margin)
        px_per_mm = scale.factor(params.overall_length, usable.width)

        if params.length_mismatch > 1e-6:
            logger.warning(
                "overall length %.3f does not equal shank + flute %.3f; "
                "using overall length as scale reference only",
                params.overall_length, params.section_length,
            )

        shank_length = _non_negative("shank_length", params.shank_length)
        flute_length = _non_negative("flute_length", params.flute_length)
        shank_diameter = _non_negative("shank_diameter", params.shank_diameter)
        cutting_diameter = _non_negative("cutting_diameter", params.cutting_diameter)

        shank_start_x = usable.left
        shank_end_x = shank_start_x + shank_length * px_per_mm
        flute_end_x = shank_end_x + flute_length * px_per_mm

        tip_length = 0.0
        if params.is_drill:
            tip_length = tip_length_mm(cutting_diameter, params.point_angle) * px_per_mm
            # The point cannot be longer than the flute it is ground on
            tip_length = min(tip_length, flute_end_x - shank_end_x)

        return cls(
            scale=px_per_mm,
            center_y=canvas.center_y,
            shank_start_x=shank_start_x,
            shank_end_x=shank_end_x,
            flute_end_x=flute_end_x,
            shank_radius=shank_diameter * px_per_mm / 2,
            flute_radius=cutting_diameter * px_per_mm / 2,
            tip_length=tip_length,
        )
