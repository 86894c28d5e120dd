"""
Export rendered surfaces as downloadable artifacts.

Supported formats:
- png: raster snapshot at the logical canvas size
- svg: vector document
- pdf: single A4 landscape page with the raster snapshot, a title line and
  a generation-date footer
- dxf: placeholder holding one LINE the length of the tool (not real CAD
  output)

Any rendered surface can be exported to any format; when the surface type
does not match the format the scene it last rendered is painted again on a
surface of the right type.
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import ezdxf
from ezdxf import units
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from ..errors import ExportError, SurfaceUnavailableError, UnsupportedFormatError
from .renderer import RasterSurface, Surface, SvgSurface, render
from .scene import SceneGraph

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("png", "svg", "pdf", "dxf")

MEDIA_TYPES = {
    "png": "image/png",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "dxf": "image/vnd.dxf",
}

PDF_MARGIN_FRACTION = 0.10


@dataclass(frozen=True)
class ExportArtifact:
    """
    An exported drawing.

    Attributes:
        filename: Suggested file name, e.g. "drill-front.png"
        media_type: MIME type of ``data``
        data: Encoded file contents
    """
    filename: str
    media_type: str
    data: bytes

    def write(self, directory: str | Path) -> Path:
        """Write the artifact into ``directory`` and return the file path."""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        logger.info("Exported %s", path)
        return path

    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


def _rendered_scene(surface: Surface | None) -> SceneGraph:
    if surface is None or surface.scene is None:
        raise SurfaceUnavailableError("Nothing has been rendered to export")
    return surface.scene


def _raster(surface: Surface) -> RasterSurface:
    if isinstance(surface, RasterSurface):
        return surface
    raster = RasterSurface(font_family=surface.font_family)
    render(surface.scene, raster)
    return raster


def _vector(surface: Surface) -> SvgSurface:
    if isinstance(surface, SvgSurface):
        return surface
    vector = SvgSurface(font_family=surface.font_family)
    render(surface.scene, vector)
    return vector


def _tool_type(scene: SceneGraph) -> str:
    return scene.params.tool_type if scene.params is not None else "tool"


# =============================================================================
# FORMAT WRITERS
# =============================================================================

def export_png(surface: Surface) -> ExportArtifact:
    scene = _rendered_scene(surface)
    data = _raster(surface).to_png()
    return ExportArtifact(f"{_tool_type(scene)}-{scene.view}.png", MEDIA_TYPES["png"], data)


def export_svg(surface: Surface) -> ExportArtifact:
    scene = _rendered_scene(surface)
    document = '<?xml version="1.0" encoding="UTF-8"?>\n' + _vector(surface).to_svg()
    return ExportArtifact(
        f"{_tool_type(scene)}-{scene.view}.svg", MEDIA_TYPES["svg"], document.encode("utf-8")
    )


def export_pdf(surface: Surface) -> ExportArtifact:
    """
    Single landscape A4 page.

    The raster snapshot is scaled to fit inside a 10% margin and centered;
    the title line sits above it and the generation date below.
    """
    scene = _rendered_scene(surface)
    tool_type = _tool_type(scene)
    image = _raster(surface).snapshot()

    page_w, page_h = landscape(A4)
    margin_x = page_w * PDF_MARGIN_FRACTION
    margin_y = page_h * PDF_MARGIN_FRACTION
    box_w = page_w - 2 * margin_x
    box_h = page_h - 2 * margin_y
    fit = min(box_w / image.width, box_h / image.height)
    draw_w = image.width * fit
    draw_h = image.height * fit

    buffer = io.BytesIO()
    c = pdf_canvas.Canvas(buffer, pagesize=(page_w, page_h))
    c.setTitle(f"{tool_type.upper()} - Technical Drawing")

    c.setFont("Helvetica-Bold", 16)
    c.drawString(margin_x, page_h - margin_y / 2, f"{tool_type.upper()} - Technical Drawing")

    c.drawImage(
        ImageReader(image),
        (page_w - draw_w) / 2,
        (page_h - draw_h) / 2,
        width=draw_w,
        height=draw_h,
    )

    c.setFont("Helvetica", 10)
    c.drawString(margin_x, margin_y / 2, f"Generated: {date.today().isoformat()}")
    c.showPage()
    c.save()

    return ExportArtifact(f"{tool_type}-technical-drawing.pdf", MEDIA_TYPES["pdf"], buffer.getvalue())


def export_dxf(surface: Surface) -> ExportArtifact:
    """Placeholder DXF: one LINE from (0, 0) to (overall_length, 0) in millimeters."""
    scene = _rendered_scene(surface)
    length = scene.params.overall_length if scene.params is not None else 0.0

    doc = ezdxf.new("R2010")
    doc.units = units.MM
    doc.modelspace().add_line((0, 0), (length, 0))

    stream = io.StringIO()
    doc.write(stream)
    return ExportArtifact(
        f"{_tool_type(scene)}-{scene.view}.dxf", MEDIA_TYPES["dxf"], stream.getvalue().encode("utf-8")
    )


WRITERS = {
    "png": export_png,
    "svg": export_svg,
    "pdf": export_pdf,
    "dxf": export_dxf,
}


def export(surface: Surface | None, fmt: str) -> ExportArtifact:
    """
    Export the scene last rendered on ``surface``.

    Args:
        surface: Rendered surface
        fmt: One of "png", "svg", "pdf", "dxf"

    Returns:
        ExportArtifact

    Raises:
        UnsupportedFormatError: ``fmt`` is not a known format
        SurfaceUnavailableError: The surface is missing or was never rendered
        ExportError: Encoding the artifact failed
    """
    fmt = fmt.lower()
    writer = WRITERS.get(fmt)
    if writer is None:
        raise UnsupportedFormatError(
            f"Unsupported export format: {fmt}. Valid formats: {list(EXPORT_FORMATS)}"
        )
    _rendered_scene(surface)

    try:
        artifact = writer(surface)
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(f"Failed to export {fmt}: {exc}") from exc

    logger.debug("Encoded %s (%d bytes)", artifact.filename, len(artifact.data))
    return artifact
