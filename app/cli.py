#!/usr/bin/env python3
"""
Wise Analyst CLI — dashboard summary, Excel export, and API server.

USAGE:
  python -m app.cli summary vendas.csv                          # KPIs + breakdowns
  python -m app.cli summary vendas.csv --operator Vodacom       # One operator
  python -m app.cli summary vendas.csv --start 2024-01-01 --end 2024-01-31
  python -m app.cli summary vendas.csv --preset month           # Current month

  python -m app.cli export vendas.csv                           # Excel report
  python -m app.cli export vendas.csv --output ./dashboard.xlsx

  python -m app.cli serve                                       # Start API server
  python -m app.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import datetime as dt
import os
import sys
from pathlib import Path

from app.config import REPORTS_FOLDER, SELECT_ALL
from app.data.store import DataStore
from app.data.schemas import DatePreset, FilterCriteria
from app.analytics.common import format_currency
from app.analytics.dashboard import calculate_stats


def _build_criteria(args) -> FilterCriteria:
    """Build FilterCriteria from CLI args."""
    operator = getattr(args, "operator", None) or SELECT_ALL
    preset = getattr(args, "preset", None)
    if preset:
        return FilterCriteria.from_preset(DatePreset(preset), operator)
    return FilterCriteria(
        operator=operator,
        start_date=getattr(args, "start", None),
        end_date=getattr(args, "end", None),
    )


def _load(path: str) -> DataStore | None:
    store = DataStore()
    try:
        rows = store.load_file(Path(path))
    except OSError as exc:
        print(f"  Could not read {path}: {exc}")
        return None
    if rows == 0:
        print("  The CSV file is empty or malformed. Check the delimiters (; or ,) and headers.")
        return None
    return store


def cmd_summary(args) -> int:
    """Print dashboard KPIs and breakdowns."""
    store = _load(args.file)
    if store is None:
        return 1

    criteria = _build_criteria(args)
    records = store.filtered(criteria)

    print("\n" + "=" * 70)
    print("  WISE ANALYST — DASHBOARD SUMMARY")
    print(f"  {criteria.label}  |  {store.date_range(criteria)}")
    print("=" * 70)

    if not records:
        print("\n  No data for this filter. Try a different date or operator.\n")
        return 0

    stats = calculate_stats(records)
    print(f"\n  {'Receita':<16}{format_currency(stats.total_revenue):>20}")
    print(f"  {'Lucro':<16}{format_currency(stats.total_profit):>20}")
    print(f"  {'Custos':<16}{format_currency(stats.total_cost):>20}")
    print(f"  {'Qtd. Vendas':<16}{stats.sales_count:>20,}")
    print(f"  {'Ticket Médio':<16}{format_currency(stats.avg_ticket):>20}")

    for title, rows in [
        ("TOP PACOTES", stats.top_packages),
        ("OPERADORAS", stats.top_operators),
        ("CATEGORIAS", stats.top_categories),
        ("STATUS", stats.status_distribution),
    ]:
        print(f"\n  {title}")
        for i, r in enumerate(rows, 1):
            print(f"  {i:<4}{r.name[:40]:<42}{r.value:>8,}")

    print("\n  TOP 5 CLIENTES")
    for i, c in enumerate(stats.top_clients, 1):
        print(f"  {i:<4}{c.name[:32]:<34}{format_currency(c.total_spent):>20}  ({c.transactions} transações)")
    print()
    return 0


def cmd_export(args) -> int:
    """Write the dashboard Excel report."""
    from app.reports.dashboard_report import generate_excel

    store = _load(args.file)
    if store is None:
        return 1
    out = Path(args.output) if args.output else REPORTS_FOLDER / f"{Path(args.file).stem}_dashboard.xlsx"
    path = generate_excel(store, out, _build_criteria(args))
    print(f"  Saved: {path}")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Wise Analyst API on port {args.port}...")
    uvicorn.run("app.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--operator", help=f"Operator name (default: {SELECT_ALL})")
    p.add_argument("--start", type=dt.date.fromisoformat, help="Start date YYYY-MM-DD (inclusive)")
    p.add_argument("--end", type=dt.date.fromisoformat, help="End date YYYY-MM-DD (inclusive)")
    p.add_argument("--preset", choices=[d.value for d in DatePreset], help="Quick date range")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wise Analyst — sales CSV dashboard engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    summary_parser = subparsers.add_parser("summary", help="Print dashboard summary for a CSV")
    summary_parser.add_argument("file", help="CSV export")
    _add_filter_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    export_parser = subparsers.add_parser("export", help="Export dashboard to Excel")
    export_parser.add_argument("file", help="CSV export")
    export_parser.add_argument("--output", help="Output .xlsx path")
    _add_filter_args(export_parser)
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
