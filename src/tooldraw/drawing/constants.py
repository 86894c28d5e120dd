"""
Drawing generator constants.

Canvas sizes, margins, zoom limits and styling constants for tool drawings.
All values are logical canvas units (1 unit = 1 pixel at 1:1 export).
"""

# =============================================================================
# CANVAS AND LAYOUT CONSTANTS
# =============================================================================

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 400

# Horizontal margin reserved for dimension text on each side
MARGIN = 50

TITLE_Y = 30  # Baseline of the view title

# Zoom factor applied on top of the fitted scale
ZOOM_MIN = 0.6
ZOOM_MAX = 2.0
ZOOM_STEP = 0.2
ZOOM_DEFAULT = 1.0

# Background grid
GRID_SPACING = 20
GRID_COLOR = "#e2e8f0"
BACKGROUND_COLOR = "#fcfcfd"
GRID_LINE_WIDTH = 0.5


# =============================================================================
# FRONT VIEW LAYOUT
# =============================================================================

# Dimension bands below the lowest outline edge, one per linear dimension
OVERALL_DIMENSION_OFFSET = 40
SHANK_DIMENSION_OFFSET = 70
FLUTE_DIMENSION_OFFSET = 100

# Diameter dimensions sit at these fractions of their section span
SHANK_DIAMETER_POSITION = 0.2
CUTTING_DIAMETER_POSITION = 0.7

BACK_TAPER_LEADER_RISE = 40
BACK_TAPER_LEADER_RUN = 20

POINT_ANGLE_ARC_RADIUS = 20
POINT_ANGLE_ARC_STEPS = 16

# Flute detail (endmill cutting edges, reamer helical flutes)
ENDMILL_EDGE_COUNT = 7
REAMER_FLUTE_COUNT = 6
REAMER_HELIX_ANGLE = 15.0  # degrees
REAMER_HELIX_STEPS = 20


# =============================================================================
# SIDE / TOP / ISOMETRIC VIEWS
# =============================================================================

# Top view circle radius = max diameter * this multiplier (not the front scale)
TOP_VIEW_RADIUS_MULTIPLIER = 5
REAMER_EDGE_RADIUS_FRACTION = 0.7

# Isometric model scale relative to the front-view scale, so the
# 30 degree receding axis fits the same canvas
ISO_SCALE_FACTOR = 0.7
ISO_ELLIPSE_RATIO = 0.5  # ry / rx for end caps
ISO_AXIS_SIZE = 30


# =============================================================================
# STYLING
# =============================================================================

FONT_FAMILY = "Arial, sans-serif"
OUTLINE_COLOR = "#000000"
TIP_FILL = "#d1d5db"
DETAIL_COLOR = "#374151"
DIMENSION_COLOR = "#1e3a8a"
TITLE_COLOR = "#1e40af"
LABEL_COLOR = "#4b5563"
OUTLINE_WIDTH = 1.0
DETAIL_WIDTH = 0.5

TITLE_FONT_SIZE = 18
LABEL_FONT_SIZE = 12

# Isometric axis colors (X, Y, Z)
AXIS_COLORS = ("#CC0000", "#00AA00", "#0000CC")


# =============================================================================
# DRAWING SHEET
# =============================================================================

# A4 landscape proportions in sheet units (4 units per millimeter)
SHEET_WIDTH = 1188
SHEET_HEIGHT = 840
SHEET_MARGIN = 20
SHEET_CELL_SPACING = 10

TITLE_BLOCK_WIDTH = 480
TITLE_BLOCK_HEIGHT = 100
BORDER_COLOR = "#000000"
BORDER_WIDTH = 1.5
THIN_LINE_WIDTH = 0.75
