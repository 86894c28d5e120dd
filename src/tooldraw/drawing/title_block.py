"""
Title block for the four-view drawing sheet.
"""

from dataclasses import dataclass, field
from datetime import date
from xml.sax.saxutils import escape

from .constants import BORDER_COLOR, BORDER_WIDTH, THIN_LINE_WIDTH, TITLE_COLOR
from .view_area import ViewArea


@dataclass
class TitleBlockInfo:
    """Information displayed in the title block."""
    title: str = "TOOL DRAWING"
    template_name: str = ""
    tool_type: str = ""
    coating: str = ""
    scale_text: str = "ZOOM 1.0x"
    drawn_date: str | None = None
    footer: str = "Precision Drawing Generator"

    def __post_init__(self):
        if self.drawn_date is None:
            self.drawn_date = date.today().strftime("%Y-%m-%d")


@dataclass
class TitleBlock:
    """
    Title block in the lower-right corner of the sheet.

    Left column holds the drawing title and footer; the right column holds
    four metadata rows (template, tool, coating, date + scale).
    """
    info: TitleBlockInfo = field(default_factory=TitleBlockInfo)
    area: ViewArea = field(default_factory=lambda: ViewArea(0, 0, 480, 100))

    def _metadata_rows(self, x: float, y: float, width: float, row_height: float) -> list[str]:
        info = self.info
        rows = [
            ("TEMPLATE", info.template_name),
            ("TOOL", info.tool_type.upper()),
            ("COATING", info.coating or "NONE"),
            ("DATE", f"{info.drawn_date}    SCALE: {info.scale_text}"),
        ]
        parts = []
        for i, (label, value) in enumerate(rows):
            row_y = y + i * row_height
            if i > 0:
                parts.append(
                    f'<line x1="{x:.3f}" y1="{row_y:.3f}" x2="{x + width:.3f}" y2="{row_y:.3f}" '
                    f'stroke="{BORDER_COLOR}" stroke-width="{THIN_LINE_WIDTH}"/>'
                )
            parts.append(
                f'<text x="{x + 6:.3f}" y="{row_y + row_height * 0.65:.3f}" '
                f'font-size="11">{label}: {escape(value)}</text>'
            )
        return parts

    def generate_svg(self) -> str:
        """SVG group for the title block."""
        a = self.area
        info = self.info
        left_width = a.width * 0.5
        mid_x = a.x + left_width
        row_height = a.height / 4

        svg_parts = [
            '<g id="title-block" font-family="Arial, sans-serif">',
            f'<rect x="{a.x:.3f}" y="{a.y:.3f}" width="{a.width:.3f}" height="{a.height:.3f}" '
            f'fill="#ffffff" stroke="{BORDER_COLOR}" stroke-width="{BORDER_WIDTH}"/>',
            f'<line x1="{mid_x:.3f}" y1="{a.y:.3f}" x2="{mid_x:.3f}" y2="{a.bottom:.3f}" '
            f'stroke="{BORDER_COLOR}" stroke-width="{THIN_LINE_WIDTH}"/>',
            f'<text x="{a.x + left_width / 2:.3f}" y="{a.y + a.height * 0.45:.3f}" '
            f'text-anchor="middle" font-size="16" font-weight="bold" fill="{TITLE_COLOR}">'
            f'{escape(info.title)}</text>',
            f'<text x="{a.x + left_width / 2:.3f}" y="{a.bottom - 10:.3f}" '
            f'text-anchor="middle" font-size="9" fill="#6b7280">{escape(info.footer)}</text>',
        ]
        svg_parts.extend(self._metadata_rows(mid_x, a.y, a.width - left_width, row_height))
        svg_parts.append('</g>')
        return '\n'.join(svg_parts)
