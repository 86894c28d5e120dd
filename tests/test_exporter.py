#!/usr/bin/env python3
"""
Tests for artifact export.

Tests cover:
- PNG, SVG, PDF and DXF encoding and file names
- Cross-surface export (raster surface to SVG and back)
- Error handling for unknown formats and unrendered surfaces
"""

import base64
import io
from datetime import date

import ezdxf
import pytest
from pypdf import PdfReader

from tooldraw.drawing import exporter
from tooldraw.drawing.exporter import EXPORT_FORMATS, ExportArtifact, export
from tooldraw.drawing.projection import build_projection
from tooldraw.drawing.renderer import RasterSurface, SvgSurface, parse_svg_primitives, render
from tooldraw.errors import (
    ExportError,
    SurfaceUnavailableError,
    ToolDrawError,
    UnsupportedFormatError,
)


@pytest.fixture
def raster(drill):
    surface = RasterSurface()
    render(build_projection("front", drill), surface)
    return surface


@pytest.fixture
def vector(drill):
    surface = SvgSurface()
    render(build_projection("isometric", drill), surface)
    return surface


def _image_box(page):
    """(x, y, width, height) of the first image drawn on ``page``."""
    transforms = []
    for operands, operator in page.get_contents().operations:
        if operator == b"cm":
            transforms.append([float(v) for v in operands])
        elif operator == b"Do":
            translate, scale = transforms[-2], transforms[-1]
            return translate[4], translate[5], scale[0], scale[3]
    raise AssertionError("no image on page")


# =============================================================================
# FORMATS
# =============================================================================


class TestFormats:
    """Test each export format."""

    def test_png(self, raster):
        artifact = export(raster, "png")
        assert artifact.filename == "drill-front.png"
        assert artifact.media_type == "image/png"
        assert artifact.data.startswith(b"\x89PNG\r\n\x1a\n")

    def test_svg(self, vector, drill):
        artifact = export(vector, "svg")
        assert artifact.filename == "drill-isometric.svg"
        assert artifact.media_type == "image/svg+xml"
        assert artifact.data.startswith(b"<?xml")
        scene = build_projection("isometric", drill)
        assert parse_svg_primitives(artifact.data) == [p.kind for p in scene]

    def test_pdf(self, raster):
        artifact = export(raster, "pdf")
        assert artifact.filename == "drill-technical-drawing.pdf"
        assert artifact.media_type == "application/pdf"
        assert artifact.data.startswith(b"%PDF")

    def test_pdf_is_a4_landscape(self, raster):
        reader = PdfReader(io.BytesIO(export(raster, "pdf").data))
        assert len(reader.pages) == 1
        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(841.89, abs=0.01)
        assert float(box.height) == pytest.approx(595.28, abs=0.01)

    def test_pdf_title_and_date(self, raster):
        reader = PdfReader(io.BytesIO(export(raster, "pdf").data))
        text = reader.pages[0].extract_text()
        assert "DRILL - Technical Drawing" in text
        assert f"Generated: {date.today().isoformat()}" in text
        assert reader.metadata.title == "DRILL - Technical Drawing"

    def test_pdf_image_centered_in_margin(self, raster):
        reader = PdfReader(io.BytesIO(export(raster, "pdf").data))
        page = reader.pages[0]
        page_w, page_h = float(page.mediabox.width), float(page.mediabox.height)
        x, y, w, h = _image_box(page)

        assert x + w / 2 == pytest.approx(page_w / 2, abs=0.01)
        assert y + h / 2 == pytest.approx(page_h / 2, abs=0.01)
        assert x >= page_w * exporter.PDF_MARGIN_FRACTION - 0.01
        assert y >= page_h * exporter.PDF_MARGIN_FRACTION - 0.01
        # Fitted: one side fills its margin box
        assert (w == pytest.approx(page_w * 0.8, abs=0.01)
                or h == pytest.approx(page_h * 0.8, abs=0.01))

    def test_dxf(self, raster, drill):
        artifact = export(raster, "dxf")
        assert artifact.filename == "drill-front.dxf"

        doc = ezdxf.read(io.StringIO(artifact.data.decode("utf-8")))
        lines = list(doc.modelspace().query("LINE"))
        assert len(lines) == 1
        assert lines[0].dxf.start.x == pytest.approx(0.0)
        assert lines[0].dxf.end.x == pytest.approx(drill.overall_length)

    @pytest.mark.parametrize("fmt", ["PNG", "Svg"])
    def test_format_is_case_insensitive(self, raster, fmt):
        assert export(raster, fmt).filename.endswith(fmt.lower())

    def test_raster_surface_exports_svg(self, raster, drill):
        artifact = export(raster, "svg")
        scene = build_projection("front", drill)
        assert parse_svg_primitives(artifact.data) == [p.kind for p in scene]

    def test_vector_surface_exports_png(self, vector):
        assert export(vector, "png").data.startswith(b"\x89PNG")

    @pytest.mark.parametrize("fmt", EXPORT_FORMATS)
    def test_every_format_for_every_tool(self, make_params, fmt):
        for tool_type in ("endmill", "drill", "reamer"):
            surface = SvgSurface()
            render(build_projection("side", make_params(tool_type=tool_type)), surface)
            assert export(surface, fmt).filename.startswith(tool_type)


# =============================================================================
# ARTIFACTS
# =============================================================================


class TestExportArtifact:
    """Test writing and embedding artifacts."""

    def test_write(self, raster, tmp_path):
        path = export(raster, "png").write(tmp_path / "out")
        assert path == tmp_path / "out" / "drill-front.png"
        assert path.read_bytes().startswith(b"\x89PNG")

    def test_data_url(self):
        artifact = ExportArtifact("a.svg", "image/svg+xml", b"<svg/>")
        url = artifact.data_url()
        prefix = "data:image/svg+xml;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == b"<svg/>"


# =============================================================================
# ERRORS
# =============================================================================


class TestExportErrors:
    """Test export failure modes."""

    def test_unsupported_format(self, raster):
        with pytest.raises(UnsupportedFormatError, match="Unsupported export format"):
            export(raster, "step")

    def test_unsupported_format_is_value_error(self, raster):
        with pytest.raises(ValueError):
            export(raster, "gif")

    def test_surface_never_rendered(self):
        with pytest.raises(SurfaceUnavailableError):
            export(RasterSurface(), "png")

    def test_missing_surface(self):
        with pytest.raises(SurfaceUnavailableError):
            export(None, "svg")

    def test_encoder_failure_is_wrapped(self, raster, monkeypatch):
        def broken(surface):
            raise RuntimeError("encoder exploded")

        monkeypatch.setitem(exporter.WRITERS, "png", broken)
        with pytest.raises(ExportError) as exc_info:
            export(raster, "png")
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "encoder exploded" in str(exc_info.value)

    def test_error_hierarchy(self):
        assert issubclass(SurfaceUnavailableError, ExportError)
        assert issubclass(ExportError, ToolDrawError)
