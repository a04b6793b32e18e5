"""
Reusable Excel cell/row formatting helpers.

Cells take a ready-made openpyxl number format (or None for text); the
mapping from column types to formats lives on ExcelWriter.
"""
from __future__ import annotations

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from app.excel.styles import (
    HEADER_FONT, HEADER_FILL, HEADER_BORDER,
    DATA_FONT, TOTAL_FONT,
    THIN_BORDER, TOTAL_BORDER,
    ALTERNATE_FILL, TOTAL_FILL,
    KPI_VALUE_FONT, KPI_LABEL_FONT,
    CENTER, LEFT, RIGHT,
    HIGHLIGHT_FILLS,
)


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Apply header styling to an entire row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    number_format: str | None = None,
    is_total: bool = False,
    highlight: str | None = None,
) -> None:
    """Write one table cell. Numeric cells (those with a format) align right."""
    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    cell.font = TOTAL_FONT if is_total else DATA_FONT
    cell.border = TOTAL_BORDER if is_total else THIN_BORDER
    if number_format:
        cell.number_format = number_format
        cell.alignment = RIGHT
    else:
        cell.alignment = LEFT

    if highlight in HIGHLIGHT_FILLS:
        cell.fill = HIGHLIGHT_FILLS[highlight]
    elif is_total:
        cell.fill = TOTAL_FILL
    elif row_num % 2 == 0:
        cell.fill = ALTERNATE_FILL


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 55) -> None:
    """Fit each column to its longest value, within [min_width, max_width]."""
    for column in ws.columns:
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        width = min(max(longest + 2, min_width), max_width)
        ws.column_dimensions[get_column_letter(column[0].column)].width = width


def add_kpi_card(
    ws: Worksheet,
    row: int,
    col: int,
    value,
    label: str,
    number_format: str | None = None,
) -> None:
    """Large KPI value with its caption on the row below."""
    value_cell = ws.cell(row=row, column=col)
    value_cell.value = value
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if number_format:
        value_cell.number_format = number_format

    label_cell = ws.cell(row=row + 1, column=col)
    label_cell.value = label
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER
