"""
Wise Analyst — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.data.store import DataStore
from app.api.dependencies import set_store
from app.api.router_meta import router as meta_router
from app.api.router_upload import router as upload_router
from app.api.router_dashboard import router as dashboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the newest inbox CSV at startup."""
    from app.config import INBOX_FOLDER, REPORTS_FOLDER
    for d in [INBOX_FOLDER, REPORTS_FOLDER]:
        d.mkdir(parents=True, exist_ok=True)

    print(f"  INBOX_FOLDER = {INBOX_FOLDER}")

    store = DataStore()
    store.load(INBOX_FOLDER)
    set_store(store)

    if store.row_count() > 0:
        print(f"\nWise Analyst ready — {store.row_count():,} transactions, "
              f"{len(store.operators()) - 1} operators\n")
    else:
        print("\nWise Analyst ready — no data yet. Upload a CSV to build the dashboard.\n")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Wise Analyst API",
        description="Sales CSV ingestion and dashboard statistics",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(upload_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
