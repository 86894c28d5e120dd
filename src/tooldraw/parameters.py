"""
Tool parameter record.

ToolParameters is the single input of the drawing compiler. It mirrors the
fields of the web form that produces it; the form's camelCase names are
accepted by ``from_mapping`` so JSON and YAML payloads from either side can
be loaded directly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

TOOL_TYPES: tuple[str, ...] = ("endmill", "drill", "reamer")

# Web form field names -> dataclass field names
_CAMEL_CASE_KEYS = {
    "toolType": "tool_type",
    "overallLength": "overall_length",
    "shankLength": "shank_length",
    "fluteLength": "flute_length",
    "shankDiameter": "shank_diameter",
    "cuttingDiameter": "cutting_diameter",
    "pointAngle": "point_angle",
    "backTaper": "back_taper",
}

_NUMERIC_FIELDS = (
    "overall_length",
    "shank_length",
    "flute_length",
    "shank_diameter",
    "cutting_diameter",
    "point_angle",
    "back_taper",
)


@dataclass(frozen=True)
class ToolParameters:
    """
    Geometry of a rotary cutting tool.

    All lengths and diameters are in millimeters, angles in degrees.

    Attributes:
        tool_type: "endmill", "drill" or "reamer". Any other value is drawn
            like a reamer (flat-ended).
        overall_length: Overall length, used only as the scale reference.
        shank_length: Length of the shank section.
        flute_length: Length of the fluted (cutting) section.
        shank_diameter: Shank diameter.
        cutting_diameter: Cutting diameter.
        point_angle: Included point angle (drills only), in (0, 180].
        back_taper: Back taper; a callout is drawn when greater than zero.
        coating: Free-form coating label, display only.
    """

    tool_type: str
    overall_length: float
    shank_length: float
    flute_length: float
    shank_diameter: float
    cutting_diameter: float
    point_angle: float = 118.0
    back_taper: float = 0.0
    coating: str = ""

    def __post_init__(self):
        # Values arriving from YAML/JSON may be ints or numeric strings
        for name in _NUMERIC_FIELDS:
            object.__setattr__(self, name, float(getattr(self, name)))
        object.__setattr__(self, "tool_type", str(self.tool_type).strip().lower())
        object.__setattr__(self, "coating", str(self.coating))

    @property
    def is_drill(self) -> bool:
        return self.tool_type == "drill"

    @property
    def section_length(self) -> float:
        """Sum of shank and flute lengths as supplied."""
        return self.shank_length + self.flute_length

    @property
    def length_mismatch(self) -> float:
        """Difference between overall_length and shank + flute."""
        return abs(self.overall_length - self.section_length)

    @property
    def title(self) -> str:
        """Drawing title, e.g. ``"DRILL - TIALN"``."""
        if self.coating:
            return f"{self.tool_type.upper()} - {self.coating.upper()}"
        return self.tool_type.upper()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ToolParameters":
        """
        Build parameters from a mapping with snake_case or camelCase keys.

        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "ToolParameters":
        """Load parameters from a YAML (or JSON) file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{yaml_path}: expected a mapping of tool parameters")
        # Allow the parameters to sit under a top-level "parameters" key
        if "parameters" in data and isinstance(data["parameters"], dict):
            data = data["parameters"]
        return cls.from_mapping(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase mapping used by the web form and remote service."""
        reverse = {v: k for k, v in _CAMEL_CASE_KEYS.items()}
        return {reverse.get(k, k): v for k, v in asdict(self).items()}
