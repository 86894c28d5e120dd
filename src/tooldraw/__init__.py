"""
tooldraw - parametric technical drawings for rotary cutting tools.

Compiles a ToolParameters record into an annotated 2D scene for one of four
projections (front, side, top, isometric) and exports it as PNG, SVG, PDF
or a DXF placeholder.

Usage:
    from tooldraw import ToolParameters, build_projection, render, export
    from tooldraw.drawing import SvgSurface

    params = ToolParameters(
        tool_type="drill",
        overall_length=109.1,
        shank_length=56.1,
        flute_length=53.0,
        shank_diameter=10.503,
        cutting_diameter=10.519,
        point_angle=140,
        coating="TiAlN",
        back_taper=0.063,
    )
    scene = build_projection("front", params)
    artifact = export(render(scene, SvgSurface()), "svg")
    artifact.write("out/")
"""

__version__ = "0.1.0"

from .config import AppConfig, DrawingConfig, ServiceConfig
from .drawing import (
    ExportArtifact,
    RasterSurface,
    Scale,
    SceneGraph,
    SvgSurface,
    build_projection,
    export,
    render,
)
from .errors import (
    ExportError,
    GenerationFailedError,
    InvalidGeometryError,
    SurfaceUnavailableError,
    ToolDrawError,
    UnsupportedFormatError,
)
from .generation import (
    GenerationRequest,
    GenerationResult,
    LocalDrawingGenerator,
    RemoteDrawingGenerator,
    generator_from_config,
)
from .parameters import TOOL_TYPES, ToolParameters
from .templates import DrawingTemplate, TemplateCatalog

__all__ = [
    '__version__',
    # Parameters and configuration
    'ToolParameters',
    'TOOL_TYPES',
    'AppConfig',
    'DrawingConfig',
    'ServiceConfig',
    # Drawing pipeline
    'Scale',
    'SceneGraph',
    'build_projection',
    'render',
    'RasterSurface',
    'SvgSurface',
    'export',
    'ExportArtifact',
    # Templates and generation
    'DrawingTemplate',
    'TemplateCatalog',
    'GenerationRequest',
    'GenerationResult',
    'LocalDrawingGenerator',
    'RemoteDrawingGenerator',
    'generator_from_config',
    # Errors
    'ToolDrawError',
    'InvalidGeometryError',
    'ExportError',
    'SurfaceUnavailableError',
    'UnsupportedFormatError',
    'GenerationFailedError',
]
