"""
Upload endpoints: ingest a CSV export, list and delete stored files.
"""
from __future__ import annotations

import gzip
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.concurrency import run_in_threadpool

from app.config import INBOX_FOLDER
from app.data.loader import parse_csv
from app.data.store import DataStore
from app.api.dependencies import get_store_or_empty
from app.api.response_models import UploadResponse

router = APIRouter(prefix="/api", tags=["upload"])

MALFORMED_MESSAGE = "CSV file is empty or malformed. Check the delimiters (; or ,) and headers."


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


@router.post("/upload", response_model=UploadResponse)
async def upload_csv(
    file: UploadFile = File(...),
    store: DataStore = Depends(get_store_or_empty),
):
    """Upload a CSV export; it replaces the current record set."""
    # Base name only: directory parts of the client path are ignored
    filename = Path(file.filename or "").name
    if not filename:
        raise HTTPException(400, "Missing filename")

    # Strip .gz suffix if present (browser gzip-compressed upload)
    is_gzipped = filename.lower().endswith(".csv.gz")
    if is_gzipped:
        filename = filename[:-3]

    if not filename.lower().endswith(".csv"):
        raise HTTPException(400, f"Only .csv files are accepted (got '{file.filename}')")

    content = await file.read()
    if is_gzipped:
        try:
            content = gzip.decompress(content)
        except OSError:
            raise HTTPException(400, MALFORMED_MESSAGE)

    transactions = await run_in_threadpool(parse_csv, _decode(content))
    if not transactions:
        print(f"  Rejected {filename}: empty or malformed CSV")
        raise HTTPException(400, MALFORMED_MESSAGE)

    # Inbox first, then the in-memory swap
    INBOX_FOLDER.mkdir(parents=True, exist_ok=True)
    (INBOX_FOLDER / filename).write_bytes(content)
    rows = await run_in_threadpool(store.accept, transactions, filename)
    return UploadResponse(status="uploaded", name=filename, rows=rows)


@router.get("/upload/files")
def list_files():
    """List all CSV files in the inbox with sizes."""
    files = []
    if INBOX_FOLDER.exists():
        for csv_file in sorted(INBOX_FOLDER.rglob("*.csv")):
            stat = csv_file.stat()
            files.append({
                "name": csv_file.name,
                "path": str(csv_file.relative_to(INBOX_FOLDER)),
                "size": stat.st_size,
                "modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            })
    return {"files": files, "count": len(files), "inbox_path": str(INBOX_FOLDER)}


def inbox_csv_path(filename: str) -> Path:
    """Resolve `filename` inside the inbox; 400 unless it is a .csv under it."""
    target = (INBOX_FOLDER / filename).resolve()
    if not target.is_relative_to(INBOX_FOLDER.resolve()) or target.suffix.lower() != ".csv":
        raise HTTPException(400, "Invalid file path")
    return target


@router.delete("/upload/{filename:path}")
def delete_file(filename: str):
    """Delete a specific CSV file from the inbox."""
    target = inbox_csv_path(filename)
    if not target.exists():
        raise HTTPException(404, f"File not found: {filename}")
    target.unlink()
    return {"status": "deleted", "file": filename}
