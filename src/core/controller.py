# src/core/controller.py
import asyncio
import datetime
import math
import sys
from typing import Any, Dict, List, Optional, Union

from supabase import Client

from src.core import ai, db
from src.core.commands import (
    AdjustAmount,
    DeleteDebt,
    FetchDebts,
    RequestAnalysis,
    SaveDebt,
    SetFilter,
    SettleDebt,
)
from src.core.errors import ValidationError
from src.core.models import (
    EDITABLE_FIELDS,
    FILTER_ABERTA,
    FILTER_OPTIONS,
    Debt,
    Direction,
    ModalKind,
    Situacao,
    available_actions,
    sort_by_due_date,
    validate_debt_form,
)
from src.core.stats import DashboardStats, compute_stats, count_by_filter, filter_debts


class DebtController:
    """
    Mantém a lista local de dívidas (cache) sincronizada com o Supabase.

    Mutações são aplicadas primeiro no cache e depois enviadas ao Supabase.
    Se o Supabase recusar, o usuário é avisado e a lista inteira é recarregada:
    o cache nunca é "desfeito" manualmente, ele é substituído pelo estado remoto.
    """

    def __init__(self, supabase_client: Client):
        self.supabase_client = supabase_client
        self.debts: List[Debt] = []
        self.active_filter = FILTER_ABERTA
        self.pending_modal: Optional[ModalKind] = None
        self.modal_target: Optional[str] = None
        self.adjust_direction: Optional[Direction] = None
        self.alerts: List[str] = []
        self.ai_analysis = ""
        self.loading = False
        self._in_flight = set()

    # --- Leitura ---
    def find(self, debt_id: str) -> Union[Debt, None]:
        return next((d for d in self.debts if d.id == debt_id), None)

    def visible_debts(self) -> List[Debt]:
        return filter_debts(self.debts, self.active_filter)

    def filter_counts(self) -> Dict[str, int]:
        return count_by_filter(self.debts)

    def stats(self, today: Optional[datetime.date] = None) -> DashboardStats:
        return compute_stats(self.debts, today)

    def available_actions(self, debt: Debt) -> tuple:
        return available_actions(debt)

    def set_filter(self, value: str) -> None:
        if value not in FILTER_OPTIONS:
            raise ValueError(f"Filtro desconhecido: {value}")
        self.active_filter = value

    def notify(self, message: str) -> None:
        print(f"DEBUG: alerta para o usuário: {message}")
        self.alerts.append(message)

    def drain_alerts(self) -> List[str]:
        alerts, self.alerts = self.alerts, []
        return alerts

    # --- Diálogos ---
    def request_settle(self, debt_id: str) -> None:
        self._open_modal(ModalKind.SETTLE_CONFIRM, debt_id)

    def request_delete(self, debt_id: str) -> None:
        self._open_modal(ModalKind.DELETE_CONFIRM, debt_id)

    def request_adjustment(self, debt_id: str, direction: Direction) -> None:
        self._open_modal(ModalKind.ADJUSTMENT, debt_id)
        self.adjust_direction = Direction(direction)

    def open_form(self, editing_id: Optional[str] = None) -> None:
        self._open_modal(ModalKind.FORM, editing_id)

    def close_modal(self) -> None:
        self.pending_modal = None
        self.modal_target = None
        self.adjust_direction = None

    def _open_modal(self, kind: ModalKind, debt_id: Optional[str]) -> None:
        self.pending_modal = kind
        self.modal_target = debt_id
        self.adjust_direction = None

    async def confirm(self, payload: Any = None) -> bool:
        """Executa a operação do diálogo aberto. `payload` é o valor do ajuste ou os dados do formulário."""
        kind, target = self.pending_modal, self.modal_target
        if kind == ModalKind.SETTLE_CONFIRM:
            self.close_modal()
            return await self.dispatch(SettleDebt(target))
        if kind == ModalKind.DELETE_CONFIRM:
            self.close_modal()
            return await self.dispatch(DeleteDebt(target))
        if kind == ModalKind.ADJUSTMENT:
            return await self.dispatch(AdjustAmount(target, payload, self.adjust_direction))
        if kind == ModalKind.FORM:
            return await self.dispatch(SaveDebt(payload, target))
        return False

    # --- Comandos ---
    async def dispatch(self, command) -> bool:
        if isinstance(command, FetchDebts):
            return await self.fetch()
        if isinstance(command, SettleDebt):
            return await self.settle(command.debt_id)
        if isinstance(command, DeleteDebt):
            return await self.delete(command.debt_id)
        if isinstance(command, AdjustAmount):
            return await self.adjust_amount(command.debt_id, command.delta, command.direction)
        if isinstance(command, SaveDebt):
            return await self.save(command.form_data, command.editing_id)
        if isinstance(command, SetFilter):
            self.set_filter(command.value)
            return True
        if isinstance(command, RequestAnalysis):
            await self.analyze()
            return True
        raise TypeError(f"Comando desconhecido: {command!r}")

    async def fetch(self) -> bool:
        """Substitui o cache pelo conteúdo atual do Supabase."""
        self.loading = True
        try:
            data, error = await asyncio.to_thread(db.fetch_debts, self.supabase_client)
        finally:
            self.loading = False

        if error:
            self.notify(f"Erro ao carregar dívidas: {error.message}")
            return False

        try:
            debts = [Debt.from_row(row) for row in data]
        except (TypeError, ValueError) as e:
            print(f"ERROR: Linha inválida na tabela de dívidas: {e}", file=sys.stderr)
            self.notify(f"Erro ao carregar dívidas: {e}")
            return False

        self.debts = sort_by_due_date(debts)
        return True

    async def settle(self, debt_id: str) -> bool:
        debt = self.find(debt_id)
        if debt is None or not debt.is_open:
            self.notify("Esta dívida não pode ser quitada.")
            return False
        if not self._begin(debt_id):
            return False

        try:
            debt.situacao = Situacao.FECHADA
            _, error = await asyncio.to_thread(
                db.update_debt, self.supabase_client, debt_id, {"situacao": Situacao.FECHADA.value}
            )
        finally:
            self._end(debt_id)

        if error:
            self.notify(f"Erro ao quitar: {error.message}")
            await self.fetch()
            return False
        return True

    async def delete(self, debt_id: str) -> bool:
        if self.find(debt_id) is None:
            self.notify("Dívida não encontrada.")
            return False
        if not self._begin(debt_id):
            return False

        try:
            self.debts = [d for d in self.debts if d.id != debt_id]
            _, error = await asyncio.to_thread(db.delete_debt, self.supabase_client, debt_id)
        finally:
            self._end(debt_id)

        if error:
            self.notify(f"Erro ao excluir: {error.message}")
            await self.fetch()
            return False
        return True

    async def adjust_amount(self, debt_id: str, delta: Union[float, None], direction: Direction) -> bool:
        """Aumenta ou reduz o valor de uma dívida aberta. O resultado nunca fica abaixo de zero."""
        if delta is None or not math.isfinite(delta) or delta <= 0:
            self.notify("Informe um valor maior que zero.")
            return False
        debt = self.find(debt_id)
        if debt is None or not debt.is_open:
            self.notify("O valor desta dívida não pode ser ajustado.")
            return False
        if not self._begin(debt_id):
            return False

        direction = Direction(direction)
        if direction == Direction.INCREASE:
            new_value = debt.valor + delta
        else:
            new_value = debt.valor - delta
        new_value = round(max(0.0, new_value), 2)

        try:
            debt.valor = new_value
            _, error = await asyncio.to_thread(
                db.update_debt, self.supabase_client, debt_id, {"valor": new_value}
            )
        finally:
            self._end(debt_id)

        if error:
            self.notify(f"Erro ao ajustar: {error.message}")
            await self.fetch()
            return False

        if self.pending_modal == ModalKind.ADJUSTMENT:
            self.close_modal()
        return True

    async def save(self, form_data: Dict[str, Any], editing_id: Optional[str] = None) -> bool:
        """Cria uma dívida nova ou edita uma existente (sem alterar o valor)."""
        creating = editing_id is None
        try:
            fields = validate_debt_form(form_data, creating=creating)
        except ValidationError as e:
            self.notify(e.message)
            return False

        if creating:
            record = Debt(id=None, **fields).to_insert_row()
            _, error = await asyncio.to_thread(db.insert_debt, self.supabase_client, record)
        else:
            if not self._begin(editing_id):
                return False
            changes = {k: fields[k] for k in EDITABLE_FIELDS}
            if changes["data_limite"] is not None:
                changes["data_limite"] = changes["data_limite"].isoformat()
            try:
                _, error = await asyncio.to_thread(
                    db.update_debt, self.supabase_client, editing_id, changes
                )
            finally:
                self._end(editing_id)

        if error:
            self.notify(f"Erro ao salvar dívida: {error.message}")
            return False

        await self.fetch()
        if self.pending_modal == ModalKind.FORM:
            self.close_modal()
        return True

    async def analyze(self) -> str:
        self.ai_analysis = await asyncio.to_thread(ai.analyze_debts, list(self.debts))
        return self.ai_analysis

    # --- Requisições em andamento ---
    def _begin(self, debt_id: str) -> bool:
        if debt_id in self._in_flight:
            print(f"DEBUG: operação ignorada, dívida {debt_id} já tem requisição em andamento", file=sys.stderr)
            self.notify("Já existe uma operação em andamento para esta dívida. Aguarde.")
            return False
        self._in_flight.add(debt_id)
        return True

    def _end(self, debt_id: str) -> None:
        self._in_flight.discard(debt_id)
