"""
Command-line interface for tooldraw.

Commands:
- render: Draw one view of a tool and export it
- sheet: Draw the four-view sheet as SVG or PDF
- generate: Generate a drawing through the configured generator
- templates: List the available drawing templates

Usage:
    tooldraw render drill.yaml --view front --format png -o out/
    tooldraw sheet drill.yaml -o drill-sheet.pdf
    tooldraw --config tooldraw.yaml generate drill.yaml --template template-drill
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from . import __version__
from .config import AppConfig
from .drawing.exporter import EXPORT_FORMATS, export
from .drawing.geometry import Scale
from .drawing.projection import VIEWS, build_projection
from .drawing.renderer import RasterSurface, SvgSurface, render as render_scene
from .drawing.sheet import DrawingSheet
from .errors import ToolDrawError
from .generation import GenerationRequest, generator_from_config
from .logging_config import setup_logging
from .parameters import ToolParameters
from .templates import TemplateCatalog

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _load_parameters(path: Path) -> ToolParameters:
    try:
        return ToolParameters.from_yaml(path)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        _fail(f"cannot load parameters from {path}: {e}")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file.",
)
@click.option("--log-level", default=None, help="Logging level (default: from config, else WARNING).")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None, json_logs: bool):
    """tooldraw - technical drawings for endmills, drills and reamers."""
    try:
        config = AppConfig.from_yaml(config_path) if config_path else AppConfig()
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        raise SystemExit(1) from None

    setup_logging(log_level or config.log_level, json_output=json_logs, stream=sys.stderr)
    ctx.obj = config


@cli.command()
@click.argument("params_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--view", type=click.Choice(VIEWS), default="front", show_default=True)
@click.option("--format", "fmt", type=click.Choice(EXPORT_FORMATS), default="png", show_default=True)
@click.option("--zoom", type=float, default=None, help="Zoom factor, 0.6 to 2.0.")
@click.option("--template", "template_id", default=None, help="Template id (logged with the export).")
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Output directory (default: current directory).",
)
@click.pass_obj
def render(config: AppConfig, params_file: Path, view: str, fmt: str,
           zoom: float | None, template_id: str | None, output: Path):
    """
    Draw one view of a tool and export it.

    Example:
        tooldraw render drill.yaml --view isometric --format svg -o out/
    """
    params = _load_parameters(params_file)
    drawing = config.drawing
    template = TemplateCatalog.from_config(config.templates).resolve(
        template_id or f"template-{params.tool_type}"
    )
    try:
        scale = Scale(zoom if zoom is not None else drawing.zoom)
        scene = build_projection(view, params, scale, drawing)
        if fmt == "svg":
            surface = SvgSurface(drawing.font_family)
        else:
            surface = RasterSurface(drawing.font_family, drawing.font_path, drawing.pixel_ratio)
        render_scene(scene, surface)
        path = export(surface, fmt).write(output)
    except (ToolDrawError, OSError) as e:
        _fail(str(e))

    logger.info("Rendered %s view with %s", view, template.id)
    click.echo(f"Exported {fmt.upper()}: {path}")


@cli.command()
@click.argument("params_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output file (.svg or .pdf).",
)
@click.option("--template", "template_id", default=None, help="Template id for the title block.")
@click.option("--zoom", type=float, default=None, help="Zoom factor, 0.6 to 2.0.")
@click.pass_obj
def sheet(config: AppConfig, params_file: Path, output: Path,
          template_id: str | None, zoom: float | None):
    """
    Draw the four-view sheet (top, isometric, front, side) with a title block.

    Example:
        tooldraw sheet drill.yaml -o drill-sheet.pdf
    """
    params = _load_parameters(params_file)
    suffix = output.suffix.lower()
    if suffix not in (".svg", ".pdf"):
        _fail(f"sheet output must be .svg or .pdf, got {output.name}")

    catalog = TemplateCatalog.from_config(config.templates)
    template = catalog.resolve(template_id) if template_id else catalog.default_for(params.tool_type)
    try:
        drawing_sheet = DrawingSheet(
            params=params,
            template=template,
            scale=Scale(zoom if zoom is not None else config.drawing.zoom),
            config=config.drawing,
        )
        if suffix == ".pdf":
            drawing_sheet.export_pdf(output)
        else:
            drawing_sheet.export_svg(output)
    except (ToolDrawError, OSError) as e:
        _fail(str(e))

    click.echo(f"Exported sheet: {output}")


@cli.command()
@click.argument("params_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--template", "template_id", default=None, help="Template id.")
@click.option("--view", type=click.Choice(VIEWS), default="front", show_default=True)
@click.option("--format", "fmt", type=click.Choice(EXPORT_FORMATS), default="svg", show_default=True)
@click.pass_obj
def generate(config: AppConfig, params_file: Path, template_id: str | None, view: str, fmt: str):
    """
    Generate a drawing through the configured generator.

    Uses the remote drawing service when ``service.base_url`` is configured,
    otherwise renders locally. Prints the artifact reference.
    """
    params = _load_parameters(params_file)
    request = GenerationRequest(
        parameters=params,
        template_id=template_id,
        view=view,
        fmt=fmt,
        zoom=config.drawing.zoom,
    )

    generator = generator_from_config(config)
    try:
        result = generator.generate(request)
    except ToolDrawError as e:
        _fail(str(e))
    finally:
        generator.close()

    click.echo(f"Template: {result.template.id}")
    click.echo(result.artifact_ref)


@cli.command()
@click.pass_obj
def templates(config: AppConfig):
    """List the available drawing templates."""
    catalog = TemplateCatalog.from_config(config.templates)
    for template in catalog:
        marker = "*" if template.id == catalog.default_id else " "
        click.echo(f"{marker} {template.id:<20} {template.name}")
        if template.description:
            click.echo(f"  {'':<20} {template.description}")


def main():
    cli()


if __name__ == "__main__":
    main()
