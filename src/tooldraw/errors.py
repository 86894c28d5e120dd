"""
Exception types raised by tooldraw.

Geometry problems that can be recovered locally (clamping, degenerate
output) are not errors; the classes here cover the cases that must reach
the caller.
"""


class ToolDrawError(Exception):
    """Base class for all tooldraw errors."""


class InvalidGeometryError(ToolDrawError, ValueError):
    """Parameters cannot produce finite drawing coordinates."""


class ExportError(ToolDrawError):
    """A rendered surface could not be serialized."""


class SurfaceUnavailableError(ExportError):
    """Export was requested for a surface that was never rendered."""


class UnsupportedFormatError(ExportError, ValueError):
    """The requested export format is not one of the supported formats."""


class GenerationFailedError(ToolDrawError):
    """The drawing-generation collaborator failed to return an artifact."""
