#!/usr/bin/env python3
"""
Drawing Sheet Example

Lays out the top, isometric, front and side views of each example tool on
one landscape sheet with a title block, using the configuration in
tooldraw.yaml.

Outputs:
- SVG sheet per tool
- PDF sheet per tool
"""

from pathlib import Path

from tooldraw import AppConfig, TemplateCatalog, ToolParameters
from tooldraw.drawing import DrawingSheet, Scale

EXAMPLES_DIR = Path(__file__).parent


def main():
    output_dir = EXAMPLES_DIR / "output" / "sheets"
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Drawing Sheet Example")
    print("=" * 50)

    config = AppConfig.from_yaml(EXAMPLES_DIR / "tooldraw.yaml")
    catalog = TemplateCatalog.from_config(config.templates)

    for name in ("drill", "endmill"):
        params = ToolParameters.from_yaml(EXAMPLES_DIR / f"{name}.yaml")
        sheet = DrawingSheet(
            params=params,
            template=catalog.default_for(params.tool_type),
            scale=Scale(config.drawing.zoom),
            config=config.drawing,
        )

        svg_path = output_dir / f"{name}-sheet.svg"
        sheet.export_svg(svg_path)
        print(f"Exported SVG: {svg_path}")

        pdf_path = output_dir / f"{name}-sheet.pdf"
        sheet.export_pdf(pdf_path)
        print(f"Exported PDF: {pdf_path}")

    print("\n" + "=" * 50)
    print("Done!")


if __name__ == "__main__":
    main()
