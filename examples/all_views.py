#!/usr/bin/env python3
"""
All Views Example

Renders every projection of the reference drill and exports it in each
supported format:
- PNG (raster, supersampled 2x)
- SVG (vector)
- PDF (single A4 landscape page)
- DXF (placeholder line)

Outputs are written to examples/output/views/.
"""

from pathlib import Path

from tooldraw import ToolParameters, build_projection, export, render
from tooldraw.drawing import VIEWS, RasterSurface, Scale, SvgSurface

EXAMPLES_DIR = Path(__file__).parent


def main():
    output_dir = EXAMPLES_DIR / "output" / "views"
    output_dir.mkdir(parents=True, exist_ok=True)

    print("All Views Example")
    print("=" * 50)

    params = ToolParameters.from_yaml(EXAMPLES_DIR / "drill.yaml")
    print(f"Tool: {params.title}")

    for view in VIEWS:
        scene = build_projection(view, params)
        print(f"\n{view}: {len(scene)} primitives at {scene.scale:.3f} px/mm")

        raster = render(scene, RasterSurface(pixel_ratio=2))
        vector = render(scene, SvgSurface())

        for surface, fmt in ((raster, "png"), (vector, "svg"), (raster, "dxf")):
            path = export(surface, fmt).write(output_dir)
            print(f"  Exported {fmt.upper()}: {path}")

    # Zoomed front view as PDF
    scene = build_projection("front", params, Scale(1.4))
    path = export(render(scene, RasterSurface()), "pdf").write(output_dir)
    print(f"\nExported PDF: {path}")

    print("\n" + "=" * 50)
    print("Done!")


if __name__ == "__main__":
    main()
