"""
Drawing Module

Compiles tool parameters into annotated 2D scenes and renders/exports them.

Features:
- Front, side, top and isometric projections
- Shared dimension annotator (linear and diameter dimensions)
- Raster (Pillow) and SVG surfaces
- PNG, SVG, PDF and DXF-placeholder export
- Four-view drawing sheet with title block

Usage:
    from tooldraw.drawing import build_projection, render, RasterSurface, export

    scene = build_projection("front", params)
    surface = render(scene, RasterSurface())
    export(surface, "png").write("out/")
"""

from .dimensions import (
    DimensionStyle,
    add_diameter_dimension,
    add_linear_dimension,
    arrowhead,
    format_diameter,
    format_length,
)
from .exporter import EXPORT_FORMATS, ExportArtifact, export
from .geometry import Scale, ToolGeometry, tip_length_mm
from .isometric import axis_indicator, iso
from .projection import (
    BUILDERS,
    VIEWS,
    FrontViewBuilder,
    IsometricViewBuilder,
    ProjectionBuilder,
    SideViewBuilder,
    TopViewBuilder,
    build_projection,
)
from .renderer import RasterSurface, Surface, SvgSurface, parse_svg_primitives, render
from .scene import (
    DiameterDimension,
    DimensionLine,
    Ellipse,
    FilledPath,
    Polyline,
    SceneGraph,
    Text,
)
from .sheet import DrawingSheet
from .title_block import TitleBlock, TitleBlockInfo
from .view_area import ViewArea

__all__ = [
    # Scene graph
    'SceneGraph',
    'Polyline',
    'FilledPath',
    'Ellipse',
    'Text',
    'DimensionLine',
    'DiameterDimension',
    # Geometry
    'Scale',
    'ToolGeometry',
    'tip_length_mm',
    'iso',
    'axis_indicator',
    'ViewArea',
    # Projections
    'ProjectionBuilder',
    'FrontViewBuilder',
    'SideViewBuilder',
    'TopViewBuilder',
    'IsometricViewBuilder',
    'BUILDERS',
    'VIEWS',
    'build_projection',
    # Dimensions
    'DimensionStyle',
    'arrowhead',
    'add_linear_dimension',
    'add_diameter_dimension',
    'format_length',
    'format_diameter',
    # Rendering and export
    'Surface',
    'RasterSurface',
    'SvgSurface',
    'render',
    'parse_svg_primitives',
    'export',
    'ExportArtifact',
    'EXPORT_FORMATS',
    # Sheet
    'DrawingSheet',
    'TitleBlock',
    'TitleBlockInfo',
]
