"""
Wise Analyst — Configuration: paths, column aliases, defaults, business rules.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with WISE_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("WISE_DATA_DIR", str(Path.home() / "Wise Analyst")))
BASE_FOLDER = _data_dir
INBOX_FOLDER = _data_dir / "inbox"
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Header aliases → canonical fields
# Matched case-insensitively, exact or substring; aliases are tried in order.
# ---------------------------------------------------------------------------
COLUMN_ALIASES = {
    "date": ["Data"],
    "operator": ["Operadora"],
    "client": ["Cliente"],
    "package": ["Pacote"],
    "category": ["Categoria"],
    "sale_value": ["Valor Venda", "Venda"],
    "cost": ["Custo"],
    "profit": ["Lucro"],
    "status": ["Status"],
}

# ---------------------------------------------------------------------------
# Defaults for empty cells / absent columns
# ---------------------------------------------------------------------------
DEFAULT_OPERATOR = "Outros"
DEFAULT_CLIENT = "Desconhecido"
DEFAULT_PACKAGE = "Geral"
DEFAULT_CATEGORY = "Geral"
DEFAULT_STATUS = "Pendente"

# Operator selector value meaning "no operator restriction"
SELECT_ALL = "Todos"

# ---------------------------------------------------------------------------
# Package-name profit heuristics (first match wins)
# Only used when the export has neither a cost nor a profit column.
# ---------------------------------------------------------------------------
PACKAGE_PROFIT_RULES = [
    ("crédito 500", 90.0),
    ("1024mb", 6.0),
    ("5gb", 20.0),
]
DEFAULT_MARGIN_RATE = 0.15

# ---------------------------------------------------------------------------
# Dashboard sizes
# ---------------------------------------------------------------------------
TOP_N_LIMIT = 10
TOP_CLIENTS_LIMIT = 5
ROWS_PER_PAGE = 10

# ---------------------------------------------------------------------------
# Currency (Mozambican metical), display only
# ---------------------------------------------------------------------------
CURRENCY_SYMBOL = "MT"
