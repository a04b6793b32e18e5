import pytest
from openpyxl import load_workbook

from app.cli import main
from app.data.schemas import FilterCriteria
from app.data.store import DataStore
from app.reports.dashboard_report import generate_excel, generate_json


@pytest.fixture
def store(sales_csv):
    s = DataStore()
    assert s.load_text(sales_csv, source_name="vendas.csv") == 3
    return s


@pytest.fixture
def csv_path(tmp_path, sales_csv):
    path = tmp_path / "vendas.csv"
    path.write_text(sales_csv, encoding="utf-8")
    return path


def test_generate_json_kpis(store):
    data = generate_json(store)
    assert data["source"] == "vendas.csv"
    assert data["date_range"] == "2024-01-05 to 2024-02-01"
    assert data["kpis"]["total_revenue"] == 650.0
    assert data["kpis"]["margin"] == 20.0
    assert data["top_operators"][0] == {"name": "Vodacom", "value": 2, "pct": 66.7}
    assert [t["date"] for t in data["transactions"]] == ["2024-02-01", "2024-01-31", "2024-01-05"]


def test_generate_json_respects_criteria(store):
    data = generate_json(store, FilterCriteria(operator="Movitel"))
    assert data["label"] == "Movitel | All Time"
    assert data["kpis"]["sales_count"] == 1
    assert data["top_clients"] == [{"name": "Bruno", "total_spent": 500.0, "transactions": 1}]


def test_load_text_rejection_keeps_existing_data(store):
    assert store.load_text("Data;Valor\n", source_name="vazio.csv") == 0
    assert store.row_count() == 3
    assert store.source_name == "vendas.csv"


def test_generate_excel_sheets(store, tmp_path):
    path = generate_excel(store, tmp_path / "out" / "dashboard.xlsx")
    wb = load_workbook(path)
    assert wb.sheetnames == [
        "Resumo", "Pacotes", "Operadoras", "Categorias", "Status",
        "Receita por Dia", "Top Clientes", "Transações",
    ]
    tx = wb["Transações"]
    assert tx.cell(row=1, column=1).value == "Data"
    assert tx.cell(row=2, column=1).value == "2024-02-01"
    assert tx.cell(row=5, column=1).value == "TOTAL"
    assert tx.cell(row=5, column=6).value == 650.0


def test_cli_summary(csv_path, capsys):
    assert main(["summary", str(csv_path)]) == 0
    out = capsys.readouterr().out
    assert "Receita" in out
    assert "650,00 MT" in out
    assert "Bruno" in out


def test_cli_summary_filter_with_no_matches(csv_path, capsys):
    assert main(["summary", str(csv_path), "--operator", "Nada"]) == 0
    assert "No data for this filter" in capsys.readouterr().out


def test_cli_rejects_malformed_and_missing_files(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("Data;Valor\n", encoding="utf-8")
    assert main(["summary", str(bad)]) == 1
    assert main(["summary", str(tmp_path / "missing.csv")]) == 1


def test_cli_export(csv_path, tmp_path):
    out = tmp_path / "report.xlsx"
    assert main(["export", str(csv_path), "--output", str(out), "--start", "2024-01-01"]) == 0
    assert out.exists()
    assert "Resumo" in load_workbook(out).sheetnames


def test_excel_money_formats_and_status_highlights(store, tmp_path):
    wb = load_workbook(generate_excel(store, tmp_path / "dashboard.xlsx"))

    kpi = wb["Resumo"].cell(row=7, column=1)
    assert kpi.value == 650.0
    assert kpi.number_format == '#,##0 "MT"'

    tx = wb["Transações"]
    assert tx.cell(row=2, column=6).number_format == '#,##0.00 "MT"'
    assert tx.cell(row=2, column=9).value == "Falha"
    assert tx.cell(row=2, column=9).fill.fgColor.rgb.endswith("FEE2E2")
    assert tx.cell(row=3, column=9).fill.fgColor.rgb.endswith("FEF3C7")

    breakdown = wb["Operadoras"]
    assert breakdown.cell(row=2, column=2).number_format == "#,##0"
    assert breakdown.cell(row=2, column=3).number_format == '0.0"%"'


def test_load_empties_store_when_newest_inbox_file_is_malformed(store, tmp_path):
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "quebrado.csv").write_text("Data;Valor\n", encoding="utf-8")

    store.load(inbox)
    assert store.row_count() == 0
    assert store.source_name is None
    assert store.is_loaded
