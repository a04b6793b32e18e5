"""
Header inspection: delimiter detection and flexible column matching.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.config import COLUMN_ALIASES

_BOM = "\ufeff"


@dataclass(frozen=True)
class ColumnMap:
    """Position of each canonical field in the header; None when absent."""
    date: Optional[int] = None
    operator: Optional[int] = None
    client: Optional[int] = None
    package: Optional[int] = None
    category: Optional[int] = None
    sale_value: Optional[int] = None
    cost: Optional[int] = None
    profit: Optional[int] = None
    status: Optional[int] = None

    @property
    def has_economics(self) -> bool:
        """True when the export carries a cost or a profit column."""
        return self.cost is not None or self.profit is not None


@dataclass(frozen=True)
class DetectedSchema:
    delimiter: str
    headers: list[str]
    columns: ColumnMap


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(_BOM) else text


def detect_delimiter(header_line: str) -> str:
    """Semicolon if the header has one, comma otherwise."""
    return ";" if ";" in header_line else ","


def split_header(header_line: str, delimiter: str) -> list[str]:
    return [h.strip().replace('"', "") for h in header_line.split(delimiter)]


def find_column(headers: list[str], aliases: list[str]) -> Optional[int]:
    """Index of the first header equal to or containing any alias."""
    wanted = [a.lower() for a in aliases]
    for idx, header in enumerate(headers):
        h = header.lower()
        if any(h == a or a in h for a in wanted):
            return idx
    return None


def resolve_columns(headers: list[str]) -> ColumnMap:
    return ColumnMap(**{
        field_name: find_column(headers, aliases)
        for field_name, aliases in COLUMN_ALIASES.items()
    })


def detect_schema(text: str) -> DetectedSchema:
    """Inspect the first line of a CSV export."""
    header_line = strip_bom(text.split("\n", 1)[0].rstrip("\r"))
    delimiter = detect_delimiter(header_line)
    headers = split_header(header_line, delimiter)
    return DetectedSchema(delimiter, headers, resolve_columns(headers))
