"""
ViewArea class for rectangular regions of a canvas or sheet.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ViewArea:
    """
    A rectangular area in canvas units (y grows downward).

    Used for the canvas of a single projection, the usable width between
    the dimension margins, and the cells of the four-view sheet.

    Attributes:
        x: Left edge position
        y: Top edge position
        width: Width of the area
        height: Height of the area
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Tuple[float, float]:
        """Center point as (x, y) tuple."""
        return (self.center_x, self.center_y)

    def inset(self, margin: float) -> 'ViewArea':
        """Return a new ViewArea inset by the given margin on all sides."""
        return self.inset_sides(margin, margin, margin, margin)

    def inset_sides(self, left: float = 0, top: float = 0,
                    right: float = 0, bottom: float = 0) -> 'ViewArea':
        """Return a new ViewArea inset by different amounts on each side."""
        return ViewArea(
            x=self.x + left,
            y=self.y + top,
            width=self.width - left - right,
            height=self.height - top - bottom
        )

    def split_grid(self, rows: int, cols: int, spacing: float = 0) -> list[list['ViewArea']]:
        """
        Split the area into a rows x cols grid of equal cells.

        Returns:
            cells[row][col], row 0 at the top
        """
        cell_w = (self.width - spacing * (cols - 1)) / cols
        cell_h = (self.height - spacing * (rows - 1)) / rows
        return [
            [
                ViewArea(
                    x=self.x + c * (cell_w + spacing),
                    y=self.y + r * (cell_h + spacing),
                    width=cell_w,
                    height=cell_h,
                )
                for c in range(cols)
            ]
            for r in range(rows)
        ]

    def fit_scale(self, width: float, height: float) -> float:
        """Uniform scale that fits a width x height box inside this area."""
        if width <= 0 or height <= 0:
            return 1.0
        return min(self.width / width, self.height / height)
