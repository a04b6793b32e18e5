"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    rows: int
    operators: int
    source: Optional[str] = None


class OperatorsResponse(BaseModel):
    operators: list[str]


class UploadResponse(BaseModel):
    status: str
    name: str
    rows: int


class TransactionRow(BaseModel):
    id: str
    date: str
    operator: str
    client: str
    package: str
    category: str
    sale_value: float
    cost: float
    profit: float
    status: str


class TransactionPage(BaseModel):
    items: list[TransactionRow]
    page: int
    per_page: int
    total: int
    total_pages: int
