"""
Scene renderer.

``render`` walks a SceneGraph and paints it onto a Surface:

1. clear the surface
2. paint the background fill and the 20-unit grid
3. paint primitives in scene order, expanding dimension annotations through
   the dimension annotator with the surface's own text measurement

Two surfaces are provided:

- RasterSurface: Pillow image, optionally supersampled
- SvgSurface: ElementTree SVG document, one top-level element per primitive
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager

from PIL import Image, ImageDraw, ImageFont

from .constants import (
    BACKGROUND_COLOR,
    FONT_FAMILY,
    GRID_COLOR,
    GRID_LINE_WIDTH,
    GRID_SPACING,
)
from .dimensions import DimensionStyle, approximate_text_width, expand_annotation
from .scene import (
    ANNOTATION_TYPES,
    Ellipse,
    FilledPath,
    Point,
    Polyline,
    Primitive,
    SceneGraph,
    Text,
)

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


# =============================================================================
# SURFACES
# =============================================================================

class Surface:
    """
    Drawing target for the renderer.

    A surface remembers the last scene rendered onto it in ``scene``; it is
    None until the first render, which is how exporters detect a surface
    that was never initialized.
    """

    def __init__(self, font_family: str = FONT_FAMILY):
        self.font_family = font_family
        self.width = 0.0
        self.height = 0.0
        self.scene: SceneGraph | None = None

    def clear(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.scene = None

    def measure_text(self, text: str, size: float) -> float:
        return approximate_text_width(text, size)

    @contextmanager
    def primitive(self, kind: str, role: str = "", composite: bool = False) -> Iterator[None]:
        """Bracket the drawing calls that make up one scene primitive."""
        yield

    def background(self, color: str) -> None:
        self.filled_path(
            ((0, 0), (self.width, 0), (self.width, self.height), (0, self.height)),
            fill_color=color, stroke_color=None, width=0,
        )

    def grid(self, spacing: float, color: str, width: float) -> None:
        x = 0.0
        while x <= self.width:
            self.polyline(((x, 0), (x, self.height)), color, width)
            x += spacing
        y = 0.0
        while y <= self.height:
            self.polyline(((0, y), (self.width, y)), color, width)
            y += spacing

    def polyline(self, points, color: str, width: float, closed: bool = False) -> None:
        raise NotImplementedError

    def filled_path(self, points, fill_color: str, stroke_color: str | None, width: float) -> None:
        raise NotImplementedError

    def ellipse(self, cx, cy, rx, ry, color: str, width: float, fill_color: str | None = None) -> None:
        raise NotImplementedError

    def text(self, x, y, content: str, align: str, size: float, color: str, bold: bool = False) -> None:
        raise NotImplementedError


class RasterSurface(Surface):
    """
    Pillow-backed raster surface.

    Drawing happens at ``pixel_ratio`` times the logical canvas size;
    ``snapshot`` downsamples back to 1:1.
    """

    def __init__(self, font_family: str = FONT_FAMILY, font_path: str | None = None,
                 pixel_ratio: int = 1):
        super().__init__(font_family)
        self.font_path = font_path
        self.pixel_ratio = max(1, int(pixel_ratio))
        self.image: Image.Image | None = None
        self._draw: ImageDraw.ImageDraw | None = None
        self._fonts: dict[tuple[int, bool], ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}

    def clear(self, width: float, height: float) -> None:
        super().clear(width, height)
        r = self.pixel_ratio
        self.image = Image.new("RGB", (round(width * r), round(height * r)), "#ffffff")
        self._draw = ImageDraw.Draw(self.image)

    def _font(self, size: float, bold: bool = False):
        px = max(1, round(size * self.pixel_ratio))
        key = (px, bold)
        if key not in self._fonts:
            candidates = [self.font_path] if self.font_path else []
            candidates.append("DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf")
            font = None
            for candidate in candidates:
                try:
                    font = ImageFont.truetype(candidate, px)
                    break
                except OSError:
                    continue
            if font is None:
                logger.debug("No TrueType font found; using Pillow default font")
                font = ImageFont.load_default(px)
            self._fonts[key] = font
        return self._fonts[key]

    def _px(self, points) -> list[tuple[float, float]]:
        r = self.pixel_ratio
        return [(x * r, y * r) for x, y in points]

    def _stroke(self, width: float) -> int:
        return max(1, round(width * self.pixel_ratio))

    def measure_text(self, text: str, size: float) -> float:
        font = self._font(size)
        return font.getlength(text) / self.pixel_ratio

    def polyline(self, points, color, width, closed=False):
        pts = self._px(points)
        if closed and pts:
            pts.append(pts[0])
        self._draw.line(pts, fill=color, width=self._stroke(width))

    def filled_path(self, points, fill_color, stroke_color, width):
        pts = self._px(points)
        if stroke_color is None:
            self._draw.polygon(pts, fill=fill_color)
        else:
            self._draw.polygon(pts, fill=fill_color, outline=stroke_color, width=self._stroke(width))

    def ellipse(self, cx, cy, rx, ry, color, width, fill_color=None):
        r = self.pixel_ratio
        box = [(cx - rx) * r, (cy - ry) * r, (cx + rx) * r, (cy + ry) * r]
        if box[2] < box[0] or box[3] < box[1]:
            return
        self._draw.ellipse(box, fill=fill_color, outline=color, width=self._stroke(width))

    def text(self, x, y, content, align, size, color, bold=False):
        font = self._font(size, bold)
        r = self.pixel_ratio
        if isinstance(font, ImageFont.FreeTypeFont):
            anchor = {"left": "ls", "center": "ms", "right": "rs"}[align]
            self._draw.text((x * r, y * r), content, fill=color, font=font, anchor=anchor)
            return

        # Bitmap fonts have no anchors; place the top-left corner by hand
        text_w = font.getlength(content)
        left = x * r - {"left": 0, "center": text_w / 2, "right": text_w}[align]
        self._draw.text((left, y * r - size * r), content, fill=color, font=font)

    def snapshot(self) -> Image.Image:
        """Rendered image at the logical canvas size."""
        if self.image is None:
            raise RuntimeError("Surface has not been rendered")
        if self.pixel_ratio == 1:
            return self.image.copy()
        size = (round(self.width), round(self.height))
        return self.image.resize(size, Image.Resampling.LANCZOS)

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.snapshot().save(buffer, format="PNG")
        return buffer.getvalue()


def _fmt(value: float) -> str:
    return f"{value:.3f}"


def _points_attr(points) -> str:
    return " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)


class SvgSurface(Surface):
    """
    SVG document surface.

    Every scene primitive becomes one element directly under the root with
    a ``data-primitive`` attribute naming its kind; dimension annotations
    become a ``<g>`` holding their parts. Background and grid live in a
    separate group without that attribute.
    """

    def __init__(self, font_family: str = FONT_FAMILY):
        super().__init__(font_family)
        self.root: ET.Element | None = None
        self._parent: ET.Element | None = None
        self._tag_next: dict[str, str] | None = None

    def clear(self, width, height):
        super().clear(width, height)
        self.root = ET.Element("svg", {
            "xmlns": SVG_NS,
            "width": _fmt(width),
            "height": _fmt(height),
            "viewBox": f"0 0 {_fmt(width)} {_fmt(height)}",
            "font-family": self.font_family,
        })
        self._parent = self.root
        self._tag_next = None

    def _append(self, tag: str, attrs: dict[str, str]) -> ET.Element:
        if self._tag_next is not None:
            attrs = {**self._tag_next, **attrs}
            self._tag_next = None
        return ET.SubElement(self._parent, tag, attrs)

    @contextmanager
    def primitive(self, kind, role="", composite=False):
        attrs = {"data-primitive": kind}
        if role:
            attrs["class"] = role
        if not composite:
            self._tag_next = attrs
            try:
                yield
            finally:
                self._tag_next = None
            return

        parent = self._parent
        self._parent = ET.SubElement(parent, "g", attrs)
        try:
            yield
        finally:
            self._parent = parent

    @contextmanager
    def _group(self, css_class: str) -> Iterator[None]:
        parent = self._parent
        self._parent = ET.SubElement(parent, "g", {"class": css_class})
        try:
            yield
        finally:
            self._parent = parent

    def background(self, color):
        with self._group("background"):
            super().background(color)

    def grid(self, spacing, color, width):
        with self._group("grid"):
            super().grid(spacing, color, width)

    def polyline(self, points, color, width, closed=False):
        self._append("polygon" if closed else "polyline", {
            "points": _points_attr(points),
            "fill": "none",
            "stroke": color,
            "stroke-width": _fmt(width),
        })

    def filled_path(self, points, fill_color, stroke_color, width):
        attrs = {"points": _points_attr(points), "fill": fill_color}
        if stroke_color is None:
            attrs["stroke"] = "none"
        else:
            attrs["stroke"] = stroke_color
            attrs["stroke-width"] = _fmt(width)
        self._append("polygon", attrs)

    def ellipse(self, cx, cy, rx, ry, color, width, fill_color=None):
        self._append("ellipse", {
            "cx": _fmt(cx),
            "cy": _fmt(cy),
            "rx": _fmt(rx),
            "ry": _fmt(ry),
            "fill": fill_color or "none",
            "stroke": color,
            "stroke-width": _fmt(width),
        })

    def text(self, x, y, content, align, size, color, bold=False):
        attrs = {
            "x": _fmt(x),
            "y": _fmt(y),
            "text-anchor": {"left": "start", "center": "middle", "right": "end"}[align],
            "font-size": _fmt(size),
            "fill": color,
        }
        if bold:
            attrs["font-weight"] = "bold"
        element = self._append("text", attrs)
        element.text = content

    def to_svg(self) -> str:
        if self.root is None:
            raise RuntimeError("Surface has not been rendered")
        return ET.tostring(self.root, encoding="unicode")


# =============================================================================
# RENDERING
# =============================================================================

def _paint(surface: Surface, primitive: Primitive) -> None:
    if isinstance(primitive, Polyline):
        surface.polyline(primitive.points, primitive.color, primitive.width, primitive.closed)
    elif isinstance(primitive, FilledPath):
        surface.filled_path(primitive.points, primitive.fill_color,
                            primitive.stroke_color, primitive.width)
    elif isinstance(primitive, Ellipse):
        surface.ellipse(primitive.cx, primitive.cy, primitive.rx, primitive.ry,
                        primitive.color, primitive.width, primitive.fill_color)
    elif isinstance(primitive, Text):
        surface.text(primitive.x, primitive.y, primitive.content, primitive.align,
                     primitive.size, primitive.color, primitive.bold)
    else:
        raise TypeError(f"Cannot paint primitive: {type(primitive).__name__}")


def render(scene: SceneGraph, surface: Surface, style: DimensionStyle | None = None) -> Surface:
    """
    Paint ``scene`` onto ``surface``.

    The surface is cleared first, so rendering twice never accumulates.

    Args:
        scene: Scene graph to paint
        surface: Target surface
        style: Dimension styling; defaults to DimensionStyle()

    Returns:
        The surface, for chaining
    """
    surface.clear(scene.width, scene.height)
    surface.background(BACKGROUND_COLOR)
    surface.grid(GRID_SPACING, GRID_COLOR, GRID_LINE_WIDTH)

    for primitive in scene:
        if isinstance(primitive, ANNOTATION_TYPES):
            with surface.primitive(primitive.kind, primitive.role, composite=True):
                for part in expand_annotation(primitive, style, surface.measure_text):
                    _paint(surface, part)
        else:
            with surface.primitive(primitive.kind, primitive.role):
                _paint(surface, primitive)

    surface.scene = scene
    logger.debug("Rendered %s view (%d primitives) on %s",
                 scene.view, len(scene), type(surface).__name__)
    return surface


def parse_svg_primitives(svg: str | bytes) -> list[str]:
    """
    Primitive kinds recorded in an SVG produced by SvgSurface, in order.

    Raises:
        ValueError: The document is not well-formed XML
    """
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid SVG document: {exc}") from exc
    return [el.get("data-primitive") for el in root if el.get("data-primitive")]


def points_of(element: ET.Element) -> list[Point]:
    """Parse the ``points`` attribute of a polyline/polygon element."""
    pairs = element.get("points", "").split()
    return [(float(x), float(y)) for x, y in (p.split(",") for p in pairs)]
