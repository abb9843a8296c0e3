# src/core/stats.py
import datetime
from typing import Dict, List, NamedTuple, Optional

from src.config import URGENT_WINDOW_DAYS
from src.core.models import (
    FILTER_ABERTA,
    FILTER_FECHADA,
    FILTER_OPTIONS,
    FILTER_TODAS,
    Debt,
    Situacao,
)


class DashboardStats(NamedTuple):
    total_debt: float
    total_paid: float
    pending_count: int
    urgent_count: int


def compute_stats(debts: List[Debt], today: Optional[datetime.date] = None) -> DashboardStats:
    """
    Calcula os indicadores do painel a partir da lista atual.
    Urgente: dívida aberta com vencimento até `today + URGENT_WINDOW_DAYS` (inclusive),
    o que também inclui as vencidas. Dívidas sem vencimento nunca são urgentes.
    """
    today = today or datetime.date.today()
    limit = today + datetime.timedelta(days=URGENT_WINDOW_DAYS)

    active = [d for d in debts if d.situacao == Situacao.ABERTA]
    closed = [d for d in debts if d.situacao == Situacao.FECHADA]

    urgent_count = len([d for d in active if d.data_limite is not None and d.data_limite <= limit])

    return DashboardStats(
        total_debt=round(sum(d.valor for d in active), 2),
        total_paid=round(sum(d.valor for d in closed), 2),
        pending_count=len(active),
        urgent_count=urgent_count,
    )


def filter_debts(debts: List[Debt], active_filter: str) -> List[Debt]:
    if active_filter == FILTER_TODAS:
        return list(debts)
    if active_filter == FILTER_ABERTA:
        return [d for d in debts if d.situacao == Situacao.ABERTA]
    if active_filter == FILTER_FECHADA:
        return [d for d in debts if d.situacao == Situacao.FECHADA]
    raise ValueError(f"Filtro desconhecido: {active_filter}")


def count_by_filter(debts: List[Debt]) -> Dict[str, int]:
    return {f: len(filter_debts(debts, f)) for f in FILTER_OPTIONS}
