"""
Dashboard Report — KPIs, breakdowns, revenue over time, top clients, transaction list.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from app.data.store import DataStore
from app.data.schemas import FilterCriteria
from app.analytics.common import calc_margin, pct_of_total, sanitize_for_json
from app.analytics.dashboard import calculate_stats
from app.analytics.table import sort_transactions
from app.excel.writer import ExcelWriter


BREAKDOWN_COLS = [
    ("name", "text", "Nome"),
    ("value", "number", "Vendas"),
    ("pct", "percent", "% do Total"),
]

TIME_SERIES_COLS = [
    ("date", "text", "Data"),
    ("value", "currency", "Receita"),
    ("profit", "currency", "Lucro"),
]

CLIENT_COLS = [
    ("name", "text", "Cliente"),
    ("total_spent", "currency", "Total Gasto"),
    ("transactions", "number", "Transações"),
]

TRANSACTION_COLS = [
    ("date", "text", "Data"),
    ("operator", "text", "Operadora"),
    ("client", "text", "Cliente"),
    ("package", "text", "Pacote"),
    ("category", "text", "Categoria"),
    ("sale_value", "currency", "Valor Venda"),
    ("cost", "currency", "Custo"),
    ("profit", "currency", "Lucro"),
    ("status", "text", "Status"),
]


def _with_share(rows: list[dict], total: int) -> list[dict]:
    return [{**r, "pct": round(pct_of_total(r["value"], total), 1)} for r in rows]


# Metical amounts: cents in tables, whole units on KPI cards
MONEY_FORMATS = {"currency": '#,##0.00 "MT"'}
MONEY_KPI_FORMATS = {"currency": '#,##0 "MT"'}

STATUS_HIGHLIGHTS = {
    "falha": "warning",
    "failed": "warning",
    "pendente": "pending",
    "pending": "pending",
}


def _status_highlight(_idx: int, row: dict) -> str | None:
    return STATUS_HIGHLIGHTS.get(str(row.get("status", "")).lower())


def generate_json(store: DataStore, criteria: FilterCriteria | None = None) -> dict:
    records = store.filtered(criteria)
    stats = calculate_stats(records)
    data = stats.to_dict()
    count = stats.sales_count

    return sanitize_for_json({
        "label": (criteria or FilterCriteria()).label,
        "date_range": store.date_range(criteria),
        "source": store.source_name,
        "kpis": {
            "total_revenue": stats.total_revenue,
            "total_profit": stats.total_profit,
            "total_cost": stats.total_cost,
            "sales_count": count,
            "avg_ticket": stats.avg_ticket,
            "margin": round(calc_margin(stats.total_revenue, stats.total_profit), 1),
        },
        "top_packages": _with_share(data["top_packages"], count),
        "top_operators": _with_share(data["top_operators"], count),
        "top_categories": _with_share(data["top_categories"], count),
        "status_distribution": _with_share(data["status_distribution"], count),
        "revenue_over_time": data["revenue_over_time"],
        "top_clients": data["top_clients"],
        "transactions": [t.to_dict() for t in sort_transactions(records)],
    })


def generate_excel(
    store: DataStore,
    output_path: str | Path,
    criteria: FilterCriteria | None = None,
) -> Path:
    data = generate_json(store, criteria)
    k = data["kpis"]
    ew = ExcelWriter(
        number_formats=MONEY_FORMATS,
        kpi_formats=MONEY_KPI_FORMATS,
        summed_types=("number", "currency"),
    )

    ws = ew.add_sheet("Resumo")
    ew.write_title(ws, "WISE ANALYST",
                   f"{data['label']}  |  {data['date_range']}  |  Gerado em {pd.Timestamp.now():%d/%m/%Y}")

    row = ew.write_section(ws, 5, "RESULTADOS")
    row = ew.write_kpi_row(ws, row, [
        (k["total_revenue"], "RECEITA", "currency"),
        (k["total_profit"], "LUCRO", "currency"),
        (k["total_cost"], "CUSTOS", "currency"),
    ])
    row = ew.write_kpi_row(ws, row, [
        (k["sales_count"], "QTD. VENDAS", "number"),
        (k["avg_ticket"], "TICKET MÉDIO", "currency"),
        (k["margin"], "MARGEM", "percent"),
    ])

    for sheet_name, key in [("Pacotes", "top_packages"), ("Operadoras", "top_operators"),
                            ("Categorias", "top_categories"), ("Status", "status_distribution")]:
        ws_d = ew.add_sheet(sheet_name)
        ew.write_table(ws_d, 1, BREAKDOWN_COLS, data[key])

    ws_t = ew.add_sheet("Receita por Dia")
    ew.write_table(ws_t, 1, TIME_SERIES_COLS, data["revenue_over_time"], show_total=True)

    ws_c = ew.add_sheet("Top Clientes")
    ew.write_table(ws_c, 1, CLIENT_COLS, data["top_clients"])

    ws_x = ew.add_sheet("Transações")
    ew.write_table(ws_x, 1, TRANSACTION_COLS, data["transactions"],
                   highlight_fn=_status_highlight, show_total=True)

    return ew.save(output_path)
