"""
Four-view drawing sheet.

Lays out the top, isometric, front and side views of one tool on a single
landscape sheet with a border and title block:

    +-----------+-----------+
    |    TOP    |    ISO    |
    +-----------+-----------+
    |   FRONT   |   SIDE    |
    +-----------+-----------+
                  [title block]
"""

from __future__ import annotations

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from reportlab.graphics import renderPDF
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas as pdf_canvas
from svglib.svglib import svg2rlg

from ..config import DrawingConfig
from ..errors import ExportError
from ..parameters import ToolParameters
from ..templates import DrawingTemplate
from .constants import (
    BORDER_COLOR,
    BORDER_WIDTH,
    SHEET_CELL_SPACING,
    SHEET_HEIGHT,
    SHEET_MARGIN,
    SHEET_WIDTH,
    TITLE_BLOCK_HEIGHT,
    TITLE_BLOCK_WIDTH,
)
from .geometry import Scale
from .projection import build_projection
from .renderer import SvgSurface, render
from .title_block import TitleBlock, TitleBlockInfo
from .view_area import ViewArea

logger = logging.getLogger(__name__)

# (row, col) of each view in the 2 x 2 grid
SHEET_LAYOUT = {
    "top": (0, 0),
    "isometric": (0, 1),
    "front": (1, 0),
    "side": (1, 1),
}


@dataclass
class DrawingSheet:
    """
    Four-view sheet for one tool.

    Attributes:
        params: Tool parameters
        template: Template named in the title block
        scale: Zoom applied to every view
        config: Canvas and styling settings for the views
    """
    params: ToolParameters
    template: DrawingTemplate | None = None
    scale: Scale = field(default_factory=Scale)
    config: DrawingConfig = field(default_factory=DrawingConfig)

    width: float = SHEET_WIDTH
    height: float = SHEET_HEIGHT

    @property
    def frame(self) -> ViewArea:
        return ViewArea(0, 0, self.width, self.height).inset(SHEET_MARGIN)

    @property
    def title_block_area(self) -> ViewArea:
        f = self.frame
        return ViewArea(f.right - TITLE_BLOCK_WIDTH, f.bottom - TITLE_BLOCK_HEIGHT,
                        TITLE_BLOCK_WIDTH, TITLE_BLOCK_HEIGHT)

    @property
    def view_area(self) -> ViewArea:
        """Area above the title block shared by the four views."""
        return self.frame.inset_sides(
            left=SHEET_CELL_SPACING, top=SHEET_CELL_SPACING, right=SHEET_CELL_SPACING,
            bottom=TITLE_BLOCK_HEIGHT + SHEET_CELL_SPACING,
        )

    def view_cells(self) -> dict[str, ViewArea]:
        cells = self.view_area.split_grid(2, 2, spacing=SHEET_CELL_SPACING)
        return {view: cells[row][col] for view, (row, col) in SHEET_LAYOUT.items()}

    def _view_svg(self, view: str, cell: ViewArea) -> str:
        scene = build_projection(view, self.params, self.scale, self.config)
        surface = render(scene, SvgSurface(self.config.font_family))

        fit = cell.fit_scale(scene.width, scene.height)
        offset_x = cell.x + (cell.width - scene.width * fit) / 2
        offset_y = cell.y + (cell.height - scene.height * fit) / 2

        group = ET.Element("g", {
            "id": f"view-{view}",
            "transform": f"translate({offset_x:.3f},{offset_y:.3f}) scale({fit:.5f})",
            "font-family": self.config.font_family,
        })
        group.extend(list(surface.root))
        ET.SubElement(group, "rect", {
            "x": "0", "y": "0",
            "width": f"{scene.width:.3f}", "height": f"{scene.height:.3f}",
            "fill": "none", "stroke": BORDER_COLOR, "stroke-width": "1",
        })
        return ET.tostring(group, encoding="unicode")

    def generate(self) -> str:
        """Build the sheet and return it as an SVG document."""
        svg_header = (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}">'
        )
        f = self.frame
        svg_content = [
            f'<rect x="0" y="0" width="{self.width}" height="{self.height}" fill="#ffffff"/>',
            f'<rect x="{f.x}" y="{f.y}" width="{f.width}" height="{f.height}" '
            f'fill="none" stroke="{BORDER_COLOR}" stroke-width="{BORDER_WIDTH}"/>',
        ]

        for view, cell in self.view_cells().items():
            svg_content.append(self._view_svg(view, cell))

        template_name = self.template.name if self.template else ""
        info = TitleBlockInfo(
            title=self.params.title,
            template_name=template_name,
            tool_type=self.params.tool_type,
            coating=self.params.coating,
            scale_text=f"ZOOM {self.scale.zoom:.1f}x",
        )
        svg_content.append(TitleBlock(info=info, area=self.title_block_area).generate_svg())

        logger.debug("Generated drawing sheet for %s", self.params.tool_type)
        return svg_header + "\n".join(svg_content) + "\n</svg>"

    def export_svg(self, filepath: str | os.PathLike) -> None:
        """Export the sheet as an SVG file."""
        svg = self.generate()
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(svg)
        logger.info("Exported SVG: %s", filepath)

    def export_pdf(self, filepath: str | os.PathLike) -> None:
        """
        Export the sheet as a single-page A4 landscape PDF using svglib + reportlab.

        Raises:
            ExportError: svglib or reportlab could not convert the sheet
        """
        svg = self.generate()

        # svglib reads from a file
        with tempfile.NamedTemporaryFile(mode="w", suffix=".svg",
                                         encoding="utf-8", delete=False) as tmp:
            tmp.write(svg)
            tmp_path = tmp.name

        try:
            drawing = svg2rlg(tmp_path)
            if drawing is None:
                raise ExportError("Failed to parse sheet SVG")

            page_width, page_height = landscape(A4)
            fit = min(page_width / drawing.width, page_height / drawing.height)
            drawing.width *= fit
            drawing.height *= fit
            drawing.scale(fit, fit)

            c = pdf_canvas.Canvas(str(filepath), pagesize=(page_width, page_height))
            c.setTitle(f"{self.params.title} - Technical Drawing")
            renderPDF.draw(drawing, c, 0, 0)
            c.showPage()
            c.save()
        except (ExportError, OSError):
            raise
        except Exception as exc:
            raise ExportError(f"Failed to export sheet PDF: {exc}") from exc
        finally:
            os.unlink(tmp_path)

        logger.info("Exported PDF: %s", filepath)
