"""
Meta endpoints: health, operators, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.data.store import DataStore
from app.api.dependencies import get_store_or_empty
from app.api.response_models import HealthResponse, OperatorsResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok",
        rows=store.row_count(),
        operators=len(store.operators()) - 1,
        source=store.source_name,
    )


@router.get("/operators", response_model=OperatorsResponse)
def list_operators(store: DataStore = Depends(get_store_or_empty)):
    return OperatorsResponse(operators=store.operators())


@router.post("/reload")
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-scan the inbox and load the newest CSV."""
    from app.config import INBOX_FOLDER
    store.load(INBOX_FOLDER)
    return {"status": "reloaded", "rows": store.row_count(), "source": store.source_name}
