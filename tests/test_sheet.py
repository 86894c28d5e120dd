#!/usr/bin/env python3
"""
Tests for the four-view drawing sheet and its title block.

Tests cover:
- Sheet layout (2 x 2 view grid above the title block)
- Title block content
- SVG and PDF export
"""

import os
import xml.etree.ElementTree as ET

import pytest

from tooldraw.drawing import sheet as sheet_module
from tooldraw.drawing.geometry import Scale
from tooldraw.drawing.sheet import SHEET_LAYOUT, DrawingSheet
from tooldraw.drawing.title_block import TitleBlock, TitleBlockInfo
from tooldraw.drawing.view_area import ViewArea
from tooldraw.errors import ExportError
from tooldraw.templates import TemplateCatalog

NS = {"svg": "http://www.w3.org/2000/svg"}


@pytest.fixture
def sheet(drill):
    return DrawingSheet(params=drill, template=TemplateCatalog().resolve("template-drill"))


# =============================================================================
# LAYOUT
# =============================================================================


class TestSheetLayout:
    """Test how the views are placed on the sheet."""

    def test_four_view_groups(self, sheet):
        root = ET.fromstring(sheet.generate())
        ids = [g.get("id") for g in root.findall("svg:g", NS)]
        assert ids == ["view-top", "view-isometric", "view-front", "view-side", "title-block"]

    def test_cells_do_not_overlap_title_block(self, sheet):
        block = sheet.title_block_area
        for cell in sheet.view_cells().values():
            assert cell.bottom <= block.y

    def test_grid_positions(self, sheet):
        cells = sheet.view_cells()
        assert set(cells) == set(SHEET_LAYOUT)
        assert cells["top"].x < cells["isometric"].x
        assert cells["top"].y < cells["front"].y
        assert cells["front"].y == pytest.approx(cells["side"].y)

    def test_views_keep_their_primitives(self, sheet, drill):
        root = ET.fromstring(sheet.generate())
        front = root.find("svg:g[@id='view-front']", NS)
        kinds = [el.get("data-primitive") for el in front if el.get("data-primitive")]
        assert "filledPath" in kinds
        assert kinds.count("dimensionLine") == 3

    def test_zoom_in_title_block(self, drill):
        svg = DrawingSheet(params=drill, scale=Scale(1.4)).generate()
        assert "ZOOM 1.4x" in svg


# =============================================================================
# TITLE BLOCK
# =============================================================================


class TestTitleBlock:
    """Test title block content."""

    def test_sheet_title_block(self, sheet):
        root = ET.fromstring(sheet.generate())
        block = root.find("svg:g[@id='title-block']", NS)
        texts = [t.text for t in block.iter("{http://www.w3.org/2000/svg}text")]
        assert "DRILL - TIALN" in texts
        assert "TEMPLATE: Standard Drill" in texts
        assert "COATING: TiAlN" in texts
        assert "Precision Drawing Generator" in texts

    def test_escapes_text(self):
        info = TitleBlockInfo(title="A & B <x>", drawn_date="2024-01-01")
        svg = TitleBlock(info=info, area=ViewArea(0, 0, 480, 100)).generate_svg()
        assert "A &amp; B &lt;x&gt;" in svg
        ET.fromstring(svg)

    def test_missing_coating(self):
        info = TitleBlockInfo(title="REAMER", drawn_date="2024-01-01")
        assert "COATING: NONE" in TitleBlock(info=info).generate_svg()

    def test_default_date(self):
        assert TitleBlockInfo().drawn_date is not None


# =============================================================================
# EXPORT
# =============================================================================


class TestSheetExport:
    """Test writing the sheet to disk."""

    def test_export_svg(self, sheet, tmp_path):
        path = tmp_path / "drill-sheet.svg"
        sheet.export_svg(path)
        root = ET.parse(path).getroot()
        assert root.get("width") == "1188"

    def test_export_pdf(self, sheet, tmp_path):
        path = tmp_path / "drill-sheet.pdf"
        sheet.export_pdf(path)
        assert path.read_bytes().startswith(b"%PDF")

    @pytest.mark.parametrize("tool_type", ["endmill", "reamer"])
    def test_export_pdf_other_tools(self, make_params, tool_type, tmp_path):
        path = tmp_path / f"{tool_type}.pdf"
        DrawingSheet(params=make_params(tool_type=tool_type)).export_pdf(path)
        assert path.stat().st_size > 0

    def test_export_reflects_scale_change(self, sheet, tmp_path):
        first = tmp_path / "first.svg"
        second = tmp_path / "second.svg"
        sheet.export_svg(first)
        sheet.scale = Scale(2.0)
        sheet.export_svg(second)

        assert "ZOOM 1.0x" in first.read_text(encoding="utf-8")
        text = second.read_text(encoding="utf-8")
        assert "ZOOM 2.0x" in text
        assert "ZOOM 1.0x" not in text

    def test_export_reflects_parameter_change(self, sheet, make_params, tmp_path):
        sheet.export_svg(tmp_path / "drill.svg")
        sheet.params = make_params(tool_type="reamer", coating="")
        path = tmp_path / "reamer.svg"
        sheet.export_svg(path)
        assert "REAMER" in path.read_text(encoding="utf-8")

    def test_pdf_conversion_failure_is_wrapped(self, sheet, tmp_path, monkeypatch):
        def broken(path):
            raise RuntimeError("bad svg")

        monkeypatch.setattr(sheet_module, "svg2rlg", broken)
        with pytest.raises(ExportError, match="bad svg") as excinfo:
            sheet.export_pdf(tmp_path / "drill-sheet.pdf")
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_pdf_unparsable_svg(self, sheet, tmp_path, monkeypatch):
        monkeypatch.setattr(sheet_module, "svg2rlg", lambda path: None)
        with pytest.raises(ExportError, match="parse"):
            sheet.export_pdf(tmp_path / "drill-sheet.pdf")

    def test_pdf_temp_file_removed_on_failure(self, sheet, tmp_path, monkeypatch):
        seen = []

        def broken(path):
            seen.append(path)
            raise RuntimeError("bad svg")

        monkeypatch.setattr(sheet_module, "svg2rlg", broken)
        with pytest.raises(ExportError):
            sheet.export_pdf(tmp_path / "drill-sheet.pdf")
        assert not os.path.exists(seen[0])
