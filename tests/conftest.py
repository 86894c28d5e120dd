"""Shared fixtures for tooldraw tests."""

import logging

import pytest

from tooldraw.parameters import ToolParameters


def make_params(**overrides) -> ToolParameters:
    values = dict(
        tool_type="drill",
        overall_length=109.10,
        shank_length=56.10,
        flute_length=53.0,
        shank_diameter=10.503,
        cutting_diameter=10.519,
        point_angle=140,
        coating="TiAlN",
        back_taper=0.063,
    )
    values.update(overrides)
    return ToolParameters(**values)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def drill() -> ToolParameters:
    """The reference drill from the web form."""
    return make_params()


@pytest.fixture
def endmill() -> ToolParameters:
    return make_params(tool_type="endmill", point_angle=0, back_taper=0, coating="AlTiN")


@pytest.fixture
def reamer() -> ToolParameters:
    return make_params(tool_type="reamer", back_taper=0, coating="TiN")


@pytest.fixture(name="make_params")
def make_params_fixture():
    """Factory for the reference drill with some fields replaced."""
    return make_params


@pytest.fixture
def drill_yaml(tmp_path):
    """Reference drill written as a camelCase YAML parameters file."""
    path = tmp_path / "drill.yaml"
    path.write_text(
        "toolType: drill\n"
        "overallLength: 109.10\n"
        "shankLength: 56.10\n"
        "fluteLength: 53.00\n"
        "shankDiameter: 10.503\n"
        "cuttingDiameter: 10.519\n"
        "pointAngle: 140\n"
        "coating: TiAlN\n"
        "backTaper: 0.063\n"
    )
    return path
