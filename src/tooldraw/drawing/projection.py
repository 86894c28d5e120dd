"""
Projection builders for tool drawings.

Each builder turns a ToolParameters record and a Scale into a SceneGraph for
one fixed view of the tool:

- front: outline, flute detail, linear and diameter dimensions, callouts
- side: shank and cutting cross-sections side by side
- top: end view with cutting-edge strokes
- isometric: shank and flute as cylinders in axonometric projection

All views share the same canvas (800 x 400 by default) and margin. The
front, side and isometric views derive their size from the fitted scale;
the top view uses a fixed multiplier of the largest diameter.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import ClassVar

from ..config import DrawingConfig
from ..parameters import ToolParameters
from .constants import (
    BACK_TAPER_LEADER_RISE,
    BACK_TAPER_LEADER_RUN,
    CUTTING_DIAMETER_POSITION,
    DETAIL_COLOR,
    DETAIL_WIDTH,
    DIMENSION_COLOR,
    ENDMILL_EDGE_COUNT,
    FLUTE_DIMENSION_OFFSET,
    ISO_AXIS_SIZE,
    ISO_ELLIPSE_RATIO,
    ISO_SCALE_FACTOR,
    LABEL_COLOR,
    LABEL_FONT_SIZE,
    OUTLINE_COLOR,
    OUTLINE_WIDTH,
    OVERALL_DIMENSION_OFFSET,
    POINT_ANGLE_ARC_RADIUS,
    POINT_ANGLE_ARC_STEPS,
    REAMER_EDGE_RADIUS_FRACTION,
    REAMER_FLUTE_COUNT,
    REAMER_HELIX_ANGLE,
    REAMER_HELIX_STEPS,
    SHANK_DIAMETER_POSITION,
    SHANK_DIMENSION_OFFSET,
    TIP_FILL,
    TITLE_COLOR,
    TITLE_FONT_SIZE,
    TITLE_Y,
    TOP_VIEW_RADIUS_MULTIPLIER,
)
from .dimensions import format_diameter, format_length
from .geometry import Scale, ToolGeometry, tip_length_mm
from .isometric import axis_indicator, iso
from .scene import (
    DiameterDimension,
    DimensionLine,
    Ellipse,
    FilledPath,
    Point,
    Polyline,
    SceneGraph,
    Text,
)
from .view_area import ViewArea

logger = logging.getLogger(__name__)


# =============================================================================
# FRONT VIEW OUTLINES
# =============================================================================

OutlineFunction = Callable[[ToolGeometry], tuple[Point, ...]]


def endmill_outline(g: ToolGeometry) -> tuple[Point, ...]:
    """Shank, flute edge running to one flute radius short of the end, then the tip."""
    cy = g.center_y
    chamfer_x = max(g.shank_end_x, g.flute_end_x - g.flute_radius)
    return (
        (g.shank_start_x, cy - g.shank_radius),
        (g.shank_end_x, cy - g.shank_radius),
        (chamfer_x, cy - g.flute_radius),
        (g.flute_end_x, cy),
        (chamfer_x, cy + g.flute_radius),
        (g.shank_end_x, cy + g.shank_radius),
        (g.shank_start_x, cy + g.shank_radius),
    )


def drill_outline(g: ToolGeometry) -> tuple[Point, ...]:
    """Shank, flute shortened by the point length, then the point."""
    cy = g.center_y
    return (
        (g.shank_start_x, cy - g.shank_radius),
        (g.shank_end_x, cy - g.shank_radius),
        (g.shank_end_x, cy - g.flute_radius),
        (g.tip_base_x, cy - g.flute_radius),
        (g.flute_end_x, cy),
        (g.tip_base_x, cy + g.flute_radius),
        (g.shank_end_x, cy + g.flute_radius),
        (g.shank_end_x, cy + g.shank_radius),
        (g.shank_start_x, cy + g.shank_radius),
    )


def flat_outline(g: ToolGeometry) -> tuple[Point, ...]:
    """Shank and flute rectangles with a flat end (reamers)."""
    cy = g.center_y
    return (
        (g.shank_start_x, cy - g.shank_radius),
        (g.shank_end_x, cy - g.shank_radius),
        (g.shank_end_x, cy - g.flute_radius),
        (g.flute_end_x, cy - g.flute_radius),
        (g.flute_end_x, cy + g.flute_radius),
        (g.shank_end_x, cy + g.flute_radius),
        (g.shank_end_x, cy + g.shank_radius),
        (g.shank_start_x, cy + g.shank_radius),
    )


OUTLINES: dict[str, OutlineFunction] = {
    "endmill": endmill_outline,
    "drill": drill_outline,
    "reamer": flat_outline,
}


def outline_for(tool_type: str) -> OutlineFunction:
    """Outline function for a tool type; unknown types get the flat end."""
    return OUTLINES.get(tool_type, flat_outline)


# =============================================================================
# FLUTE DETAIL
# =============================================================================

def endmill_edges(g: ToolGeometry) -> list[Polyline]:
    """Evenly spaced cutting-edge strokes across the straight flute."""
    straight_end = max(g.shank_end_x, g.flute_end_x - g.flute_radius)
    spacing = (straight_end - g.shank_end_x) / (ENDMILL_EDGE_COUNT + 1)
    if spacing <= 0:
        return []
    cy = g.center_y
    return [
        Polyline(
            ((x, cy - g.flute_radius), (x, cy + g.flute_radius)),
            color=DETAIL_COLOR,
            width=DETAIL_WIDTH,
            role="flute_detail",
        )
        for x in (g.shank_end_x + i * spacing for i in range(1, ENDMILL_EDGE_COUNT + 1))
    ]


def helical_flute(g: ToolGeometry, start_angle: float) -> Polyline:
    """
    One helical flute as seen from the side.

    The flute winds through five times the helix angle over the flute
    length; its height is the sine of the winding angle times the radius.
    """
    sweep = math.radians(REAMER_HELIX_ANGLE) * 5
    points = []
    for i in range(REAMER_HELIX_STEPS + 1):
        t = i / REAMER_HELIX_STEPS
        angle = start_angle + t * sweep
        points.append((
            g.shank_end_x + t * g.flute_span,
            g.center_y + math.sin(angle) * g.flute_radius,
        ))
    return Polyline(tuple(points), color=DETAIL_COLOR, width=DETAIL_WIDTH, role="flute_detail")


def reamer_flutes(g: ToolGeometry) -> list[Polyline]:
    if g.flute_span <= 0:
        return []
    return [
        helical_flute(g, i / REAMER_FLUTE_COUNT * 2 * math.pi)
        for i in range(REAMER_FLUTE_COUNT)
    ]


FLUTE_DETAIL: dict[str, Callable[[ToolGeometry], list[Polyline]]] = {
    "endmill": endmill_edges,
    "reamer": reamer_flutes,
}


# =============================================================================
# BUILDERS
# =============================================================================

class ProjectionBuilder:
    """
    Base class for the view builders.

    Subclasses set ``view`` and implement ``populate``. ``build`` computes
    the shared geometry, creates an empty scene and lets the subclass fill it.
    """

    view: ClassVar[str] = ""
    label: ClassVar[str] = ""

    def __init__(self, config: DrawingConfig | None = None):
        self.config = config or DrawingConfig()

    @property
    def canvas(self) -> ViewArea:
        return ViewArea(0, 0, self.config.canvas_width, self.config.canvas_height)

    def build(self, params: ToolParameters, scale: Scale | None = None) -> SceneGraph:
        """
        Build the scene for ``params``.

        Raises:
            InvalidGeometryError: overall_length is not positive and finite, or
                a drill has a non-positive point angle
        """
        if scale is None:
            scale = Scale(self.config.zoom)
        geometry = ToolGeometry.from_parameters(
            params, scale, canvas=self.canvas, margin=self.config.margin
        )
        scene = SceneGraph(
            view=self.view,
            width=self.config.canvas_width,
            height=self.config.canvas_height,
            scale=geometry.scale,
            params=params,
        )
        self.populate(scene, params, geometry)
        logger.debug(
            "Built %s view for %s: %d primitives at %.3f px/mm",
            self.view, params.tool_type, len(scene), scene.scale,
            extra={"tool_type": params.tool_type, "view": self.view},
        )
        return scene

    def populate(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        raise NotImplementedError

    def title(self, params: ToolParameters) -> Text:
        return Text(
            x=self.config.canvas_width / 2,
            y=TITLE_Y,
            content=params.title,
            align="center",
            size=TITLE_FONT_SIZE,
            color=TITLE_COLOR,
            bold=True,
            role="title",
        )

    def view_label(self) -> Text:
        """Small caption under the title naming the view."""
        return Text(
            x=self.config.canvas_width / 2,
            y=TITLE_Y + LABEL_FONT_SIZE + 6,
            content=self.label,
            align="center",
            size=LABEL_FONT_SIZE,
            color=LABEL_COLOR,
            role="view_label",
        )


class FrontViewBuilder(ProjectionBuilder):
    """Primary view: dimensioned side outline of the tool."""

    view = "front"
    label = "FRONT VIEW"

    def populate(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        outline = outline_for(params.tool_type)(g)
        scene.add(FilledPath(
            points=outline,
            fill_color=self.config.outline_fill,
            stroke_color=OUTLINE_COLOR,
            width=OUTLINE_WIDTH,
            role="outline",
        ))

        if params.is_drill:
            self._add_drill_point(scene, params, g)

        if self.config.show_flute_detail:
            detail = FLUTE_DETAIL.get(params.tool_type)
            if detail is not None:
                scene.extend(detail(g))

        self._add_dimensions(scene, params, g)
        scene.add(self.title(params))

        if params.back_taper > 0:
            self._add_back_taper(scene, params, g)

    def _add_drill_point(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        cy = g.center_y
        if g.tip_length > 0:
            scene.add(FilledPath(
                points=(
                    (g.tip_base_x, cy - g.flute_radius),
                    (g.flute_end_x, cy),
                    (g.tip_base_x, cy + g.flute_radius),
                ),
                fill_color=TIP_FILL,
                stroke_color=OUTLINE_COLOR,
                width=OUTLINE_WIDTH,
                role="tip",
            ))

            # Arc between the two cutting lips, centered on the point
            half = math.atan2(g.flute_radius, g.tip_length)
            radius = min(POINT_ANGLE_ARC_RADIUS, math.hypot(g.flute_radius, g.tip_length))
            arc = []
            for i in range(POINT_ANGLE_ARC_STEPS + 1):
                theta = math.pi - half + 2 * half * i / POINT_ANGLE_ARC_STEPS
                arc.append((g.flute_end_x + radius * math.cos(theta),
                            cy + radius * math.sin(theta)))
            scene.add(Polyline(tuple(arc), color=DIMENSION_COLOR, width=DETAIL_WIDTH,
                               role="point_angle_arc"))

        scene.add(Text(
            x=g.flute_end_x,
            y=cy - g.flute_radius - 30,
            content=f"POINT ANGLE: {params.point_angle:g}°",
            align="right",
            size=LABEL_FONT_SIZE,
            color=DIMENSION_COLOR,
            role="point_angle",
        ))

    def _add_dimensions(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        bottom = g.center_y + g.max_radius
        bands = (
            (OVERALL_DIMENSION_OFFSET, g.shank_start_x, g.flute_end_x, params.overall_length, "overall_length"),
            (SHANK_DIMENSION_OFFSET, g.shank_start_x, g.shank_end_x, params.shank_length, "shank_length"),
            (FLUTE_DIMENSION_OFFSET, g.shank_end_x, g.flute_end_x, params.flute_length, "flute_length"),
        )
        for offset, x1, x2, value, role in bands:
            y = bottom + offset
            scene.add(DimensionLine((x1, y), (x2, y), format_length(value), role=role))

        shank_x = g.shank_start_x + g.shank_span * SHANK_DIAMETER_POSITION
        cutting_x = g.shank_end_x + g.flute_span * CUTTING_DIAMETER_POSITION
        if params.is_drill:
            # Keep the cutting diameter on the full-diameter part of the flute
            cutting_x = min(cutting_x, g.tip_base_x)

        scene.add(
            DiameterDimension((shank_x, g.center_y), g.shank_radius,
                              format_diameter(params.shank_diameter), role="shank_diameter"),
            DiameterDimension((cutting_x, g.center_y), g.flute_radius,
                              format_diameter(params.cutting_diameter), role="cutting_diameter"),
        )

    def _add_back_taper(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        start_x = g.shank_end_x + g.flute_span / 2
        start_y = g.center_y - g.flute_radius
        elbow = (start_x + BACK_TAPER_LEADER_RUN, start_y - BACK_TAPER_LEADER_RISE)
        shelf = (elbow[0] + 10, elbow[1])

        scene.add(
            Polyline(((start_x, start_y), elbow, shelf), color=DIMENSION_COLOR,
                     width=DETAIL_WIDTH, role="back_taper_leader"),
            Text(
                x=shelf[0] + 4,
                y=shelf[1] + 4,
                content=f"BACK TAPER: {params.back_taper:.3f} mm",
                align="left",
                size=LABEL_FONT_SIZE,
                color=DIMENSION_COLOR,
                role="back_taper",
            ),
        )


class SideViewBuilder(ProjectionBuilder):
    """Shank and cutting cross-sections side by side at the front-view scale."""

    view = "side"
    label = "SIDE VIEW"

    def populate(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        width = self.config.canvas_width
        sections = (
            ("SHANK", width / 3, g.shank_radius, params.shank_diameter),
            ("CUTTING", 2 * width / 3, g.flute_radius, params.cutting_diameter),
        )
        for name, cx, radius, diameter in sections:
            scene.add(
                Ellipse(cx, g.center_y, radius, radius, color=OUTLINE_COLOR,
                        width=OUTLINE_WIDTH, fill_color=self.config.outline_fill,
                        role="section"),
                Text(cx, g.center_y - radius - 12, name, size=LABEL_FONT_SIZE,
                     color=LABEL_COLOR, bold=True, role="section_name"),
                Text(cx, g.center_y + radius + 20, format_diameter(diameter),
                     size=LABEL_FONT_SIZE, color=DIMENSION_COLOR, role="section_diameter"),
            )

        scene.add(self.title(params), self.view_label())


class TopViewBuilder(ProjectionBuilder):
    """End view of the cutting face with tool-type specific edge strokes."""

    view = "top"
    label = "TOP VIEW"

    def populate(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        # Fixed visual multiplier, independent of the front-view scale
        scene.scale = 0.0
        diameter = max(params.shank_diameter, params.cutting_diameter, 0.0)
        radius = diameter * TOP_VIEW_RADIUS_MULTIPLIER
        cx, cy = self.canvas.center

        scene.add(Ellipse(cx, cy, radius, radius, color=OUTLINE_COLOR, width=OUTLINE_WIDTH,
                          fill_color=self.config.outline_fill, role="outline"))
        scene.extend(self._edges(params.tool_type, (cx, cy), radius))
        scene.add(
            DiameterDimension((cx, cy), radius, format_diameter(diameter), role="diameter"),
            self.title(params),
            self.view_label(),
        )

    @staticmethod
    def _edges(tool_type: str, center: Point, radius: float) -> list[Polyline]:
        cx, cy = center
        if tool_type == "drill":
            return [Polyline(((cx - radius, cy), (cx + radius, cy)), color=DETAIL_COLOR,
                             width=OUTLINE_WIDTH, role="cutting_edge")]

        if tool_type == "endmill":
            count, reach = 4, radius
        else:
            count, reach = REAMER_FLUTE_COUNT, radius * REAMER_EDGE_RADIUS_FRACTION

        edges = []
        for i in range(count):
            theta = 2 * math.pi * i / count
            end = (cx + reach * math.cos(theta), cy + reach * math.sin(theta))
            edges.append(Polyline(((cx, cy), end), color=DETAIL_COLOR,
                                  width=OUTLINE_WIDTH, role="cutting_edge"))
        return edges


class IsometricViewBuilder(ProjectionBuilder):
    """Shank and flute as open cylinders in isometric projection."""

    view = "isometric"
    label = "ISOMETRIC VIEW"

    def populate(self, scene: SceneGraph, params: ToolParameters, g: ToolGeometry) -> None:
        s = g.scale * ISO_SCALE_FACTOR
        shank_len = g.shank_span * ISO_SCALE_FACTOR
        flute_len = g.flute_span * ISO_SCALE_FACTOR
        total = shank_len + flute_len
        shank_r = g.shank_radius * ISO_SCALE_FACTOR
        flute_r = g.flute_radius * ISO_SCALE_FACTOR

        # Center the projected axis on the canvas
        cx, cy = self.canvas.center
        half_dx, half_dy = iso(total / 2, 0, 0)
        origin = (cx - half_dx, cy - half_dy)

        tip_len = 0.0
        if params.is_drill:
            tip_len = min(tip_length_mm(max(params.cutting_diameter, 0.0), params.point_angle) * s,
                          flute_len)

        scene.add(self._cap(iso(0, 0, 0, origin), shank_r, "end_cap"))
        scene.extend(self._cylinder(origin, 0.0, shank_len, shank_r))
        if not math.isclose(shank_r, flute_r):
            # Shoulder between shank and flute
            scene.add(self._cap(iso(shank_len, 0, 0, origin), shank_r, "end_cap"))
        scene.add(self._cap(iso(shank_len, 0, 0, origin), flute_r, "end_cap"))

        if params.is_drill:
            base = shank_len + flute_len - tip_len
            scene.extend(self._cylinder(origin, shank_len, base, flute_r))
            tip = iso(total, 0, 0, origin)
            for sign in (-1, 1):
                edge_start = iso(base, sign * flute_r * ISO_ELLIPSE_RATIO, 0, origin)
                scene.add(Polyline((edge_start, tip), color=OUTLINE_COLOR,
                                   width=OUTLINE_WIDTH, role="tip_edge"))
        else:
            scene.extend(self._cylinder(origin, shank_len, total, flute_r))
            scene.add(self._cap(iso(total, 0, 0, origin), flute_r, "far_cap"))

        axis_origin = (self.config.margin + ISO_AXIS_SIZE, self.config.canvas_height - self.config.margin)
        scene.extend(axis_indicator(axis_origin))
        scene.add(self.title(params), self.view_label())

    @staticmethod
    def _cap(center: Point, radius: float, role: str) -> Ellipse:
        return Ellipse(
            center[0], center[1], radius, radius * ISO_ELLIPSE_RATIO,
            color=OUTLINE_COLOR, width=OUTLINE_WIDTH, role=role,
        )

    @staticmethod
    def _cylinder(origin: Point, x0: float, x1: float, radius: float) -> list[Polyline]:
        """
        Top and bottom silhouette lines of a cylinder along the tool axis.

        The lines meet the end caps at the top and bottom of their ellipses.
        """
        offset = radius * ISO_ELLIPSE_RATIO
        return [
            Polyline((iso(x0, sign * offset, 0, origin), iso(x1, sign * offset, 0, origin)),
                     color=OUTLINE_COLOR, width=OUTLINE_WIDTH, role="silhouette")
            for sign in (1, -1)
        ]


BUILDERS: dict[str, type[ProjectionBuilder]] = {
    cls.view: cls
    for cls in (FrontViewBuilder, SideViewBuilder, TopViewBuilder, IsometricViewBuilder)
}

VIEWS = tuple(BUILDERS)


def build_projection(
    view: str,
    params: ToolParameters,
    scale: Scale | None = None,
    config: DrawingConfig | None = None,
) -> SceneGraph:
    """
    Build the scene graph for one view of a tool.

    Args:
        view: One of "front", "side", "top", "isometric"
        params: Tool parameters
        scale: Zoom state; defaults to the configured zoom
        config: Canvas and styling settings

    Returns:
        Freshly built SceneGraph

    Raises:
        ValueError: Unknown view name
        InvalidGeometryError: Parameters cannot be drawn
    """
    try:
        builder_cls = BUILDERS[view]
    except KeyError:
        raise ValueError(f"Unknown view name: {view}. Valid names: {list(BUILDERS)}") from None
    return builder_cls(config).build(params, scale)
