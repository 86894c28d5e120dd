#!/usr/bin/env python3
"""
Tests for configuration, templates and logging setup.

Tests cover:
- AppConfig defaults and YAML round-trip
- TemplateCatalog lookup and fallback
- setup_logging text and JSON output
"""

import io
import json
import logging
import sys

import pytest

from tooldraw.config import AppConfig, DrawingConfig, ServiceConfig, TemplateConfig
from tooldraw.generation import GenerationRequest, LocalDrawingGenerator
from tooldraw.logging_config import JSONFormatter, setup_logging
from tooldraw.templates import BUILTIN_TEMPLATES, DrawingTemplate, TemplateCatalog


# =============================================================================
# APP CONFIG
# =============================================================================


class TestAppConfig:
    """Test the configuration schema."""

    def test_defaults(self):
        config = AppConfig()
        assert config.drawing.canvas_width == 800
        assert config.drawing.canvas_height == 400
        assert config.drawing.margin == 50
        assert config.drawing.zoom == 1.0
        assert config.service.base_url is None
        assert config.service.max_retries == 3
        assert config.templates == []
        assert config.log_level == "WARNING"

    def test_nested_dicts_converted(self):
        config = AppConfig(
            drawing={"zoom": 1.4, "show_flute_detail": False},
            service={"base_url": "https://cad.example.com"},
            templates=[{"id": "template-custom", "name": "Custom"}],
        )
        assert isinstance(config.drawing, DrawingConfig)
        assert config.drawing.zoom == 1.4
        assert isinstance(config.service, ServiceConfig)
        assert config.templates == [TemplateConfig("template-custom", "Custom")]

    def test_yaml_round_trip(self, tmp_path):
        original = AppConfig(
            drawing=DrawingConfig(canvas_width=1000, pixel_ratio=2),
            service=ServiceConfig(base_url="https://cad.example.com", api_token="t"),
            templates=[TemplateConfig("template-x", "X", "Extra")],
            log_level="DEBUG",
        )
        path = tmp_path / "tooldraw.yaml"
        original.to_yaml(path)
        assert AppConfig.from_yaml(path) == original

    def test_templates_omitted_when_empty(self, tmp_path):
        path = tmp_path / "tooldraw.yaml"
        AppConfig().to_yaml(path)
        assert "templates" not in path.read_text()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert AppConfig.from_yaml(path) == AppConfig()

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("drawing:\n  colour: red\n")
        with pytest.raises(TypeError):
            AppConfig.from_yaml(path)


# =============================================================================
# TEMPLATES
# =============================================================================


class TestTemplateCatalog:
    """Test template lookup."""

    def test_builtins(self):
        catalog = TemplateCatalog()
        assert [t.id for t in catalog] == [t.id for t in BUILTIN_TEMPLATES]
        assert len(catalog) == 3
        assert catalog.default.name == "Standard End Mill"

    def test_resolve_known(self):
        assert TemplateCatalog().resolve("template-reamer").name == "Standard Reamer"

    @pytest.mark.parametrize("template_id", [None, "", "template-unknown"])
    def test_resolve_falls_back_to_default(self, template_id):
        assert TemplateCatalog().resolve(template_id).id == "template-endmill"

    def test_default_for_tool_type(self):
        catalog = TemplateCatalog()
        assert catalog.default_for("drill").id == "template-drill"
        assert catalog.default_for("tap").id == "template-endmill"

    def test_extra_templates(self):
        catalog = TemplateCatalog.from_config([
            TemplateConfig("template-custom"),
            TemplateConfig("template-drill", "Step Drill", "Two diameters"),
        ])
        assert "template-custom" in catalog
        assert catalog.resolve("template-custom").name == "template-custom"
        assert catalog.resolve("template-drill").name == "Step Drill"
        assert len(catalog) == 4

    def test_default_must_exist(self):
        with pytest.raises(ValueError):
            TemplateCatalog(default_id="template-missing")

    def test_custom_default(self):
        catalog = TemplateCatalog([DrawingTemplate("house", "House")], default_id="house")
        assert catalog.resolve("nope").id == "house"


# =============================================================================
# LOGGING
# =============================================================================


class TestLogging:
    """Test logging setup."""

    def test_text_output(self):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)
        logging.getLogger("tooldraw.test").info("hello %s", "world")
        assert "[tooldraw.test] INFO: hello world" in stream.getvalue()

    def test_level(self):
        stream = io.StringIO()
        setup_logging("warning", stream=stream)
        logging.getLogger("tooldraw.test").info("quiet")
        assert stream.getvalue() == ""

    def test_json_output(self):
        stream = io.StringIO()
        setup_logging("DEBUG", json_output=True, stream=stream)
        logging.getLogger("tooldraw.test").warning("retrying", extra={"attempt": 2})

        entry = json.loads(stream.getvalue().strip())
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "tooldraw.test"
        assert entry["message"] == "retrying"
        assert entry["attempt"] == 2

    def test_json_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None,
                                       sys.exc_info())
        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]

    def test_noisy_loggers_quietened(self):
        setup_logging("DEBUG", stream=io.StringIO())
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_carries_drawing_context(self, drill):
        stream = io.StringIO()
        setup_logging("DEBUG", json_output=True, stream=stream)
        LocalDrawingGenerator().generate(GenerationRequest(drill, view="side"))

        entries = [json.loads(line) for line in stream.getvalue().splitlines()]
        built = [e for e in entries if e["logger"] == "tooldraw.drawing.projection"]
        generated = [e for e in entries if e["logger"] == "tooldraw.generation"]
        assert built and generated
        for entry in built + generated:
            assert entry["tool_type"] == "drill"
            assert entry["view"] == "side"
