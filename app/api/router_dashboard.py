"""
Dashboard endpoints — stats, transaction table, Excel export.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse, JSONResponse

from app.config import REPORTS_FOLDER, ROWS_PER_PAGE
from app.data.store import DataStore
from app.data.schemas import FilterCriteria, SortDirection, SortField
from app.api.dependencies import get_store, parse_criteria
from app.api.response_models import TransactionPage, TransactionRow
from app.analytics.dashboard import dashboard_summary
from app.analytics.table import paginate, search_transactions, sort_transactions

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard")
def dashboard(
    store: DataStore = Depends(get_store),
    criteria: FilterCriteria = Depends(parse_criteria),
):
    """KPIs, breakdowns, time series and top clients for the filtered set."""
    return JSONResponse(content=dashboard_summary(store.filtered(criteria), criteria))


@router.get("/transactions", response_model=TransactionPage)
def transactions(
    search: str | None = Query(None, description="Client/package/operator/category text"),
    sort: str = Query(SortField.DATE.value, description="date|sale_value|profit|client|category"),
    direction: str = Query(SortDirection.DESC.value, description="asc|desc"),
    page: int = Query(1, ge=1),
    per_page: int = Query(ROWS_PER_PAGE, ge=1, le=500),
    store: DataStore = Depends(get_store),
    criteria: FilterCriteria = Depends(parse_criteria),
):
    """One page of the filtered, searched and sorted transaction table."""
    try:
        field = SortField(sort)
        order = SortDirection(direction)
    except ValueError as exc:
        raise HTTPException(400, str(exc))

    rows = sort_transactions(search_transactions(store.filtered(criteria), search), field, order)
    p = paginate(rows, page, per_page)
    return TransactionPage(
        items=[TransactionRow(**t.to_dict()) for t in p.items],
        page=p.page,
        per_page=p.per_page,
        total=p.total,
        total_pages=p.total_pages,
    )


@router.get("/export")
def export_excel(
    store: DataStore = Depends(get_store),
    criteria: FilterCriteria = Depends(parse_criteria),
):
    """Download the dashboard as an Excel workbook."""
    from app.reports.dashboard_report import generate_excel

    out = REPORTS_FOLDER / "Wise_Analyst_Dashboard.xlsx"
    generate_excel(store, out, criteria)
    return FileResponse(
        path=str(out),
        filename=out.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
