"""
Single source of truth for all Excel colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
EMERALD = "10B981"
DARK_EMERALD = "065F46"
LIGHT_EMERALD = "ECFDF5"
HEADER_BG = "065F46"
ALTERNATE_ROW = "F5F5F5"
WHITE = "FFFFFF"
BLACK = "000000"
RED = "DC2626"
LIGHT_RED = "FEE2E2"
AMBER = "F59E0B"
LIGHT_AMBER = "FEF3C7"
TOTAL_ROW_BG = "E0F2FE"
GRAY_666 = "666666"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=24, bold=True, color=DARK_EMERALD)
SUBTITLE_FONT = Font(name="Calibri", size=12, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=DARK_EMERALD)
KPI_VALUE_FONT = Font(name="Calibri", size=28, bold=True, color=DARK_EMERALD)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY_666)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
LIGHT_EMERALD_FILL = PatternFill(start_color=LIGHT_EMERALD, end_color=LIGHT_EMERALD, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
WARNING_FILL = PatternFill(start_color=LIGHT_RED, end_color=LIGHT_RED, fill_type="solid")
PENDING_FILL = PatternFill(start_color=LIGHT_AMBER, end_color=LIGHT_AMBER, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=DARK_EMERALD),
    right=Side(style="thin", color=DARK_EMERALD),
    top=Side(style="thin", color=DARK_EMERALD),
    bottom=Side(style="medium", color=DARK_EMERALD),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color="999999"),
    right=Side(style="thin", color="999999"),
    top=Side(style="medium", color="999999"),
    bottom=Side(style="medium", color="999999"),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# ---------------------------------------------------------------------------
# Number formats
# ---------------------------------------------------------------------------
# Column type → number format; types missing here are written as left-aligned text.
NUMBER_FORMATS = {
    "number": "#,##0",
    "percent": '0.0"%"',
}

# ---------------------------------------------------------------------------
# Highlight name → fill mapping
# ---------------------------------------------------------------------------
HIGHLIGHT_FILLS = {
    "warning": WARNING_FILL,
    "pending": PENDING_FILL,
    "green": LIGHT_EMERALD_FILL,
}
