"""
Scene graph primitives.

A SceneGraph is an ordered list of drawable primitives describing one view.
Later primitives paint over earlier ones; there is no other relationship
between them. Coordinates are canvas units with y pointing down.

Every primitive carries an optional ``role`` naming what it depicts
("outline", "tip", "title", ...). Roles are emitted as SVG classes and are
how tests and callers find specific parts of a view.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Literal, Union

if TYPE_CHECKING:
    from ..parameters import ToolParameters

Point = tuple[float, float]
TextAlign = Literal["left", "center", "right"]


@dataclass(frozen=True)
class Polyline:
    """Open (or closed) stroked line through ``points``."""
    kind: ClassVar[str] = "polyline"

    points: tuple[Point, ...]
    color: str = "#000000"
    width: float = 1.0
    closed: bool = False
    role: str = ""


@dataclass(frozen=True)
class FilledPath:
    """Closed polygon, filled and stroked."""
    kind: ClassVar[str] = "filledPath"

    points: tuple[Point, ...]
    fill_color: str = "#ffffff"
    stroke_color: str | None = "#000000"
    width: float = 1.0
    role: str = ""


@dataclass(frozen=True)
class Ellipse:
    """Axis-aligned ellipse centered at (cx, cy)."""
    kind: ClassVar[str] = "ellipse"

    cx: float
    cy: float
    rx: float
    ry: float
    color: str = "#000000"
    width: float = 1.0
    fill_color: str | None = None
    role: str = ""


@dataclass(frozen=True)
class Text:
    """
    Single line of text.

    ``(x, y)`` is the baseline anchor; ``align`` says whether x is the left
    edge, the center or the right edge of the text.
    """
    kind: ClassVar[str] = "text"

    x: float
    y: float
    content: str
    align: TextAlign = "center"
    size: float = 12
    color: str = "#000000"
    bold: bool = False
    role: str = ""


@dataclass(frozen=True)
class DimensionLine:
    """Horizontal linear dimension between ``start`` and ``end`` at start's y."""
    kind: ClassVar[str] = "dimensionLine"

    start: Point
    end: Point
    label: str
    role: str = ""


@dataclass(frozen=True)
class DiameterDimension:
    """Vertical diameter dimension across a circle or section."""
    kind: ClassVar[str] = "diameterDimension"

    center: Point
    radius: float
    label: str
    role: str = ""


Primitive = Union[Polyline, FilledPath, Ellipse, Text, DimensionLine, DiameterDimension]

# Primitives the renderer expands through the dimension annotator
ANNOTATION_TYPES = (DimensionLine, DiameterDimension)


@dataclass
class SceneGraph:
    """
    Ordered primitives for one projection of one tool.

    Attributes:
        view: Projection name ("front", "side", "top", "isometric")
        width: Canvas width in logical units
        height: Canvas height in logical units
        scale: Pixels per millimeter used by the builder (0 for views that
            do not use the shared scale)
        params: Parameters the scene was built from
        primitives: Drawable primitives in paint order
    """
    view: str
    width: float
    height: float
    scale: float = 0.0
    params: "ToolParameters | None" = None
    primitives: list[Primitive] = field(default_factory=list)

    def add(self, *primitives: Primitive) -> None:
        """Append primitives in paint order."""
        self.primitives.extend(primitives)

    def extend(self, primitives: list[Primitive]) -> None:
        self.primitives.extend(primitives)

    def with_role(self, role: str) -> list[Primitive]:
        """Return all primitives tagged with ``role``."""
        return [p for p in self.primitives if p.role == role]

    def of_kind(self, kind: type) -> list[Primitive]:
        return [p for p in self.primitives if isinstance(p, kind)]

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def __len__(self) -> int:
        return len(self.primitives)


def polygon_bounds(points: tuple[Point, ...] | list[Point]) -> tuple[float, float, float, float]:
    """Bounds of a point list as (min_x, min_y, max_x, max_y)."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))
