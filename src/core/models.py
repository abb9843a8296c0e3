# src/core/models.py
import datetime
import math
from enum import Enum
from typing import Any, Dict, Optional, Union

from src.core.errors import ValidationError


class Situacao(str, Enum):
    ABERTA = "Aberta"
    FECHADA = "Fechada"


class Direction(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class ModalKind(str, Enum):
    """Diálogos que podem estar abertos para o usuário."""

    FORM = "form"
    SETTLE_CONFIRM = "settle_confirm"
    DELETE_CONFIRM = "delete_confirm"
    ADJUSTMENT = "adjustment"


# Abas de filtro da lista de dívidas
FILTER_ABERTA = "aberta"
FILTER_FECHADA = "fechada"
FILTER_TODAS = "todas"
FILTER_OPTIONS = (FILTER_ABERTA, FILTER_FECHADA, FILTER_TODAS)

# Ações disponíveis por situação
ACTION_SETTLE = "quitar"
ACTION_INCREASE = "aumentar"
ACTION_DECREASE = "reduzir"
ACTION_EDIT = "editar"
ACTION_DELETE = "excluir"

# Campos que a edição pode alterar. O valor só muda pelo ajuste.
EDITABLE_FIELDS = ("descricao", "credor", "data_limite", "obs")


def _parse_date(value: Any) -> Union[datetime.date, None]:
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


class Debt:
    """Registro canônico de uma dívida, espelho local de uma linha da tabela `debts`."""

    def __init__(
        self,
        id: Optional[str],
        descricao: str,
        credor: str,
        valor: float,
        data_limite: Optional[datetime.date] = None,
        obs: str = "",
        situacao: Situacao = Situacao.ABERTA,
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.descricao = descricao
        self.credor = credor
        self.valor = valor
        self.data_limite = data_limite
        self.obs = obs or ""
        self.situacao = Situacao(situacao)
        self.created_at = created_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Debt":
        return cls(
            id=row.get("id"),
            descricao=row.get("descricao") or "",
            credor=row.get("credor") or "",
            valor=round(float(row.get("valor") or 0), 2),
            data_limite=_parse_date(row.get("data_limite")),
            obs=row.get("obs") or "",
            situacao=Situacao(row.get("situacao") or Situacao.ABERTA.value),
            created_at=row.get("created_at"),
        )

    def to_insert_row(self) -> Dict[str, Any]:
        """Payload de criação. `id` e `created_at` são atribuídos pelo Supabase."""
        return {
            "descricao": self.descricao,
            "credor": self.credor,
            "valor": self.valor,
            "data_limite": self.data_limite.isoformat() if self.data_limite else None,
            "obs": self.obs,
            "situacao": self.situacao.value,
        }

    @property
    def is_open(self) -> bool:
        return self.situacao == Situacao.ABERTA

    def _key(self):
        return (
            self.id,
            self.descricao,
            self.credor,
            self.valor,
            self.data_limite,
            self.obs,
            self.situacao,
            self.created_at,
        )

    def __eq__(self, other):
        if not isinstance(other, Debt):
            return NotImplemented
        return self._key() == other._key()

    def __repr__(self):
        return (
            f"Debt(id={self.id!r}, descricao={self.descricao!r}, credor={self.credor!r}, "
            f"valor={self.valor!r}, data_limite={self.data_limite!r}, situacao={self.situacao.value!r})"
        )


def sort_by_due_date(debts):
    """Ordena por vencimento crescente, dívidas sem vencimento por último."""
    return sorted(debts, key=lambda d: (d.data_limite is None, d.data_limite or datetime.date.min))


def available_actions(debt: Debt) -> tuple:
    if debt.is_open:
        return (ACTION_SETTLE, ACTION_INCREASE, ACTION_DECREASE, ACTION_EDIT, ACTION_DELETE)
    return (ACTION_DELETE,)


def validate_debt_form(form_data: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """
    Valida os dados do formulário de dívida e retorna os campos normalizados.
    Na criação o valor é obrigatório e deve ser positivo; na edição ele é ignorado.
    Levanta ValidationError se algo estiver inválido.
    """
    descricao = (form_data.get("descricao") or "").strip()
    credor = (form_data.get("credor") or "").strip()
    if not descricao:
        raise ValidationError("Informe a descrição da dívida.")
    if not credor:
        raise ValidationError("Informe o credor.")

    data_limite = form_data.get("data_limite")
    if data_limite is not None and not isinstance(data_limite, datetime.date):
        raise ValidationError("Data limite inválida.")

    fields = {
        "descricao": descricao,
        "credor": credor,
        "data_limite": data_limite,
        "obs": (form_data.get("obs") or "").strip(),
    }

    if creating:
        try:
            valor = float(form_data["valor"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("O valor da dívida deve ser maior que zero.")
        if not math.isfinite(valor) or valor <= 0:
            raise ValidationError("O valor da dívida deve ser maior que zero.")
        fields["valor"] = round(valor, 2)

    return fields
