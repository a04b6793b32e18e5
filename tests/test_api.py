import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

import app.config
import app.api.router_dashboard
import app.api.router_upload
from app.api.router_upload import inbox_csv_path
from app.main import create_app

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def client(tmp_path, monkeypatch):
    inbox = tmp_path / "inbox"
    reports = tmp_path / "reports"
    monkeypatch.setattr(app.config, "INBOX_FOLDER", inbox)
    monkeypatch.setattr(app.config, "REPORTS_FOLDER", reports)
    monkeypatch.setattr(app.api.router_upload, "INBOX_FOLDER", inbox)
    monkeypatch.setattr(app.api.router_dashboard, "REPORTS_FOLDER", reports)
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def loaded(client, sales_csv):
    resp = client.post("/api/upload", files={"file": ("vendas.csv", sales_csv.encode("utf-8"), "text/csv")})
    assert resp.status_code == 200
    return client


def test_upload_replaces_record_set(client, sales_csv, tmp_path):
    resp = client.post("/api/upload", files={"file": ("vendas.csv", sales_csv.encode("utf-8"), "text/csv")})
    assert resp.status_code == 200
    assert resp.json() == {"status": "uploaded", "name": "vendas.csv", "rows": 3}
    assert (tmp_path / "inbox" / "vendas.csv").exists()

    stats = client.get("/api/dashboard").json()["stats"]
    assert stats["total_revenue"] == 650.0
    assert stats["sales_count"] == 3


def test_dashboard_before_upload_is_404(client):
    assert client.get("/api/dashboard").status_code == 404


def test_header_only_upload_rejected_and_not_stored(client, tmp_path):
    resp = client.post("/api/upload", files={"file": ("vazio.csv", b"Data;Operadora;Valor\n", "text/csv")})
    assert resp.status_code == 400
    assert "malformed" in resp.json()["detail"]
    assert not (tmp_path / "inbox" / "vazio.csv").exists()


def test_non_csv_upload_rejected(client):
    resp = client.post("/api/upload", files={"file": ("notas.txt", b"a;b\n1;2\n", "text/plain")})
    assert resp.status_code == 400


def test_failed_upload_keeps_previous_data(loaded):
    loaded.post("/api/upload", files={"file": ("vazio.csv", b"", "text/csv")})
    assert loaded.get("/api/dashboard").json()["stats"]["sales_count"] == 3


def test_dashboard_filters(loaded):
    by_operator = loaded.get("/api/dashboard", params={"operator": "Vodacom"}).json()
    assert by_operator["stats"]["sales_count"] == 2
    assert by_operator["label"] == "Vodacom | All Time"

    since_feb = loaded.get("/api/dashboard", params={"start_date": "2024-02-01"}).json()
    assert since_feb["stats"]["sales_count"] == 1

    nothing = loaded.get("/api/dashboard", params={"operator": "Nada"}).json()
    assert nothing["empty"] is True


def test_bad_filter_params_are_400(loaded):
    assert loaded.get("/api/dashboard", params={"start_date": "31/01/2024"}).status_code == 400
    assert loaded.get("/api/dashboard", params={"preset": "week"}).status_code == 400


def test_transactions_sorted_and_paged(loaded):
    body = loaded.get(
        "/api/transactions",
        params={"sort": "sale_value", "direction": "desc", "per_page": 2},
    ).json()
    assert body["items"][0]["sale_value"] == 500.0
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert len(body["items"]) == 2


def test_transactions_search(loaded):
    body = loaded.get("/api/transactions", params={"search": "bruno"}).json()
    assert [r["client"] for r in body["items"]] == ["Bruno"]


def test_transactions_bad_sort_is_400(loaded):
    assert loaded.get("/api/transactions", params={"sort": "colour"}).status_code == 400


def test_health_and_operators(loaded):
    health = loaded.get("/api/health").json()
    assert health == {"status": "ok", "rows": 3, "operators": 2, "source": "vendas.csv"}
    assert loaded.get("/api/operators").json() == {"operators": ["Todos", "Movitel", "Vodacom"]}


def test_uploaded_files_listed_and_reloaded(loaded):
    files = loaded.get("/api/upload/files").json()
    assert files["count"] == 1
    assert files["files"][0]["name"] == "vendas.csv"

    resp = loaded.post("/api/reload").json()
    assert resp["rows"] == 3

    assert loaded.delete("/api/upload/vendas.csv").status_code == 200
    assert loaded.delete("/api/upload/vendas.csv").status_code == 404


def test_export_returns_workbook(loaded):
    resp = loaded.get("/api/export", params={"operator": "Vodacom"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == XLSX_TYPE
    assert resp.content[:2] == b"PK"


def test_upload_keeps_only_the_base_name(client, tmp_path):
    body = "Data;Operadora;Valor Venda\n2024-01-05;Vodacom;100\n"
    resp = client.post("/api/upload", files={"file": ("../../fora.csv", body.encode("utf-8"), "text/csv")})
    assert resp.status_code == 200
    assert resp.json()["name"] == "fora.csv"
    assert (tmp_path / "inbox" / "fora.csv").exists()
    assert not (tmp_path.parent / "fora.csv").exists()


def test_upload_without_a_name_is_rejected(client):
    resp = client.post("/api/upload", files={"file": ("../", b"Data;Valor\n2024-01-05;1\n", "text/csv")})
    assert resp.status_code in (400, 422)


def test_reload_after_deleting_every_file_empties_the_store(loaded):
    assert loaded.delete("/api/upload/vendas.csv").status_code == 200

    resp = loaded.post("/api/reload").json()
    assert resp == {"status": "reloaded", "rows": 0, "source": None}
    assert loaded.get("/api/dashboard").status_code == 404


def test_delete_refuses_non_csv_files(client, tmp_path):
    inbox = tmp_path / "inbox"
    notes = inbox / "notas.txt"
    notes.write_text("keep me")
    assert client.delete("/api/upload/notas.txt").status_code == 400
    assert notes.exists()


def test_inbox_csv_path_rejects_sibling_folders(client, tmp_path):
    sibling = tmp_path / "inbox2"
    sibling.mkdir()
    (sibling / "keep.csv").write_text("x")

    with pytest.raises(HTTPException) as exc:
        inbox_csv_path("../inbox2/keep.csv")
    assert exc.value.status_code == 400
    assert inbox_csv_path("sub/vendas.csv") == (tmp_path / "inbox" / "sub" / "vendas.csv").resolve()


def test_failed_inbox_write_leaves_store_untouched(loaded, tmp_path, monkeypatch, heuristic_csv):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    monkeypatch.setattr(app.api.router_upload, "INBOX_FOLDER", blocker / "inbox")

    with pytest.raises(OSError):
        loaded.post("/api/upload", files={"file": ("novo.csv", heuristic_csv.encode("utf-8"), "text/csv")})

    health = loaded.get("/api/health").json()
    assert (health["rows"], health["source"]) == (3, "vendas.csv")
