"""Shared fixtures.

The data folder is redirected to a throwaway directory before any ``app``
module is imported, so nothing touches the real ``~/Wise Analyst`` inbox.
"""
from __future__ import annotations

import os
import tempfile
import textwrap
from itertools import count

import pytest

os.environ.setdefault("WISE_DATA_DIR", tempfile.mkdtemp(prefix="wise-analyst-tests-"))

from app.data.schemas import Transaction  # noqa: E402


SALES_CSV = textwrap.dedent(
    """\
    Data;Operadora;Cliente;Pacote;Categoria;Valor Venda (MT);Custo;Lucro;Status
    05/01/2024;Vodacom;Ana;Pacote 5GB;Dados;100,00;;30;Pago
    2024-01-31, 10:00:00;Movitel;Bruno;Crédito 500;Crédito;500;410;;Pendente
    01/02/2024 14:30:00;Vodacom;Ana;Pacote 1024MB;Dados;50;40;10;Falha
    """
)

HEURISTIC_CSV = textwrap.dedent(
    """\
    Data,Operadora,Cliente,Pacote,Valor Venda,Status
    2024-03-10,Tmcel,Carla,Pacote 5GB Mensal,150,Pago
    2024-03-11,Tmcel,Carla,CRÉDITO 500,600,Pago
    2024-03-12,Vodacom,Dino,Diário 1024MB,10,Pago
    2024-03-13,Vodacom,Dino,Chamadas,200,Pago
    """
)


@pytest.fixture
def sales_csv() -> str:
    return SALES_CSV


@pytest.fixture
def heuristic_csv() -> str:
    return HEURISTIC_CSV


@pytest.fixture
def make_tx():
    """Factory for Transaction records with sensible defaults."""
    ids = count(1)

    def _make(**overrides) -> Transaction:
        sale = overrides.pop("sale_value", 100.0)
        fields = {
            "id": f"tx{next(ids)}",
            "date": "2024-01-15",
            "operator": "Vodacom",
            "client": "Ana",
            "package": "Pacote 5GB",
            "category": "Dados",
            "sale_value": sale,
            "cost": round(sale * 0.85, 2),
            "profit": round(sale * 0.15, 2),
            "status": "Pago",
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make
