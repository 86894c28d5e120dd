"""
Configuration schema for tooldraw.

The configuration can be:
- Constructed in code with defaults
- Loaded from a YAML file (``AppConfig.from_yaml``)
- Written back to YAML (``AppConfig.to_yaml``)

Nothing in the library reads configuration from the environment or from
ambient storage; callers pass an AppConfig (or one of its sections) in.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class DrawingConfig:
    """
    Canvas and styling settings shared by all projections.

    Attributes:
        canvas_width: Logical canvas width
        canvas_height: Logical canvas height
        margin: Horizontal margin reserved for dimension text
        zoom: Initial zoom factor (clamped to [0.6, 2.0])
        font_family: Font family written into vector output
        font_path: Optional TrueType font for raster output
        outline_fill: Fill color of the tool outline
        show_flute_detail: Draw cutting edges / helical flutes in the front view
        pixel_ratio: Raster supersampling factor (1 = 1:1 with the canvas)
    """

    canvas_width: float = 800
    canvas_height: float = 400
    margin: float = 50
    zoom: float = 1.0
    font_family: str = "Arial, sans-serif"
    font_path: str | None = None
    outline_fill: str = "#e5e7eb"
    show_flute_detail: bool = True
    pixel_ratio: int = 1


@dataclass
class ServiceConfig:
    """
    Remote drawing-generation service settings.

    The remote generator is used only when ``base_url`` is set.

    Attributes:
        base_url: Service root URL, e.g. "https://cad.example.com/api"
        api_token: Bearer token sent with each request
        timeout: Per-request timeout in seconds
        max_retries: Retries after the first attempt for transient failures
        backoff: Initial backoff in seconds, doubled after each retry
    """

    base_url: str | None = None
    api_token: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    backoff: float = 0.5


@dataclass
class TemplateConfig:
    """A metadata-only drawing template declared in the config file."""

    id: str
    name: str = ""
    description: str = ""


@dataclass
class AppConfig:
    """
    Root configuration.

    Attributes:
        version: Config file version (currently "1.0")
        drawing: Canvas and styling settings
        service: Remote generation service settings
        templates: Extra templates offered next to the built-in ones
        log_level: Logging level name for the CLI
    """

    version: str = "1.0"
    drawing: DrawingConfig = field(default_factory=DrawingConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    templates: list[TemplateConfig] = field(default_factory=list)
    log_level: str = "WARNING"

    def __post_init__(self):
        # Handle nested sections as dicts from YAML
        if isinstance(self.drawing, dict):
            self.drawing = DrawingConfig(**self.drawing)
        if isinstance(self.service, dict):
            self.service = ServiceConfig(**self.service)
        self.templates = [
            TemplateConfig(**t) if isinstance(t, dict) else t
            for t in (self.templates or [])
        ]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "AppConfig":
        """Load configuration from a YAML file. An empty file gives defaults."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the configuration to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(self._to_dict(), f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        result: dict[str, Any] = {
            "version": self.version,
            "drawing": asdict(self.drawing),
            "service": asdict(self.service),
            "log_level": self.log_level,
        }
        if self.templates:
            result["templates"] = [asdict(t) for t in self.templates]
        return result
