"""
ExcelWriter — builder for styled workbooks: title block, sections, KPI cards, tables.

Column types ("number", "percent", or whatever a report registers, such as
"currency") map to openpyxl number formats per writer, so each report owns
its own money format.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from app.excel.styles import TITLE_FONT, SUBTITLE_FONT, SECTION_FONT, NUMBER_FORMATS
from app.excel.formatters import (
    format_header_row,
    format_data_cell,
    auto_column_width,
    add_kpi_card,
)


ColSpec = tuple[str, str, str]  # (key, col_type, label)
HighlightFn = Callable[[int, dict], Optional[str]]


class ExcelWriter:
    """Fluent builder for styled Excel workbooks."""

    def __init__(
        self,
        number_formats: Optional[dict[str, str]] = None,
        kpi_formats: Optional[dict[str, str]] = None,
        summed_types: Iterable[str] = ("number",),
    ) -> None:
        self.wb = Workbook()
        self._first_sheet = True
        self.number_formats = {**NUMBER_FORMATS, **(number_formats or {})}
        self.kpi_formats = {**self.number_formats, **(kpi_formats or {})}
        self.summed_types = frozenset(summed_types)

    def add_sheet(self, title: str) -> Worksheet:
        """Create a new worksheet (re-uses the default sheet for the first call)."""
        if self._first_sheet:
            ws = self.wb.active
            ws.title = title
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=title)
        return ws

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 8) -> int:
        """Write title + subtitle rows. Returns next available row."""
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)

        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)

        for col in range(1, merge_cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18

        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        """Write a section header. Returns next row."""
        ws.cell(row=row, column=1).value = title
        ws.cell(row=row, column=1).font = SECTION_FONT
        return row + 2

    def write_kpi_row(
        self,
        ws: Worksheet,
        row: int,
        kpis: list[tuple],  # [(value, label, col_type), ...]
        start_col: int = 1,
        col_spacing: int = 2,
    ) -> int:
        """Write a row of KPI cards. Returns the next free row."""
        col = start_col
        for value, label, col_type in kpis:
            add_kpi_card(ws, row, col, value, label, self.kpi_formats.get(col_type))
            col += col_spacing
        return row + 3

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        data: list[dict] | pd.DataFrame,
        highlight_fn: Optional[HighlightFn] = None,
        freeze: bool = True,
        show_total: bool = False,
        total_label: str = "TOTAL",
    ) -> int:
        """Header row, one row per record, and an optional total row.

        highlight_fn(row_idx, row_data) returns a HIGHLIGHT_FILLS key or None.
        The total row sums the columns whose type is in `summed_types`.
        Returns the row number after the last written row.
        """
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        rows = data.to_dict("records") if isinstance(data, pd.DataFrame) else data

        row = start_row + 1
        for idx, row_data in enumerate(rows):
            hl = highlight_fn(idx, row_data) if highlight_fn else None
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                val = row_data.get(key, 0)
                if pd.isna(val):
                    val = 0
                format_data_cell(ws, row, col_num, val, self.number_formats.get(col_type), highlight=hl)
            row += 1

        if show_total and rows:
            totals = pd.DataFrame(rows)
            format_data_cell(ws, row, 1, total_label, is_total=True)
            for col_num, (key, col_type, _) in enumerate(columns[1:], 2):
                if col_type in self.summed_types and key in totals.columns:
                    format_data_cell(ws, row, col_num, float(totals[key].sum()),
                                     self.number_formats.get(col_type), is_total=True)
                else:
                    format_data_cell(ws, row, col_num, "", is_total=True)
            row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"

        return row

    def save(self, path: str | Path) -> Path:
        """Save the workbook to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
