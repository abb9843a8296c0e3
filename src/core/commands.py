# src/core/commands.py
# Cada ação do usuário vira um destes comandos, consumido por DebtController.dispatch.
from typing import Any, Dict, NamedTuple, Optional

from src.core.models import Direction


class FetchDebts(NamedTuple):
    pass


class SettleDebt(NamedTuple):
    debt_id: str


class DeleteDebt(NamedTuple):
    debt_id: str


class AdjustAmount(NamedTuple):
    debt_id: str
    delta: float
    direction: Direction


class SaveDebt(NamedTuple):
    form_data: Dict[str, Any]
    editing_id: Optional[str] = None


class SetFilter(NamedTuple):
    value: str


class RequestAnalysis(NamedTuple):
    pass
