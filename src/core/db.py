# src/core/db.py
import sys
from typing import Any, Dict, List, Tuple, Union

from supabase import Client, create_client

from src.config import DEBTS_TABLE, SUPABASE_KEY, SUPABASE_URL
from src.core.errors import RemoteError

# Toda função retorna (dados, erro). Exatamente um dos dois é None.
DbResult = Tuple[Union[List[Dict[str, Any]], None], Union[RemoteError, None]]


def get_supabase_client() -> Client:
    """Retorna uma instância do cliente Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def _remote_error(action: str, e: Exception) -> RemoteError:
    message = getattr(e, "message", None) or str(e)
    print(f"ERROR: Erro ao {action} no Supabase: {message}", file=sys.stderr)
    return RemoteError(message)


def fetch_debts(supabase_client: Client) -> DbResult:
    """Obtém todas as dívidas, ordenadas por data limite (sem data limite por último)."""
    try:
        response = (
            supabase_client.table(DEBTS_TABLE)
            .select("*")
            .order("data_limite", desc=False, nullsfirst=False)
            .execute()
        )
        return response.data or [], None
    except Exception as e:
        return None, _remote_error("obter dívidas", e)


def insert_debt(supabase_client: Client, record: Dict[str, Any]) -> DbResult:
    """Insere uma nova dívida."""
    try:
        response = supabase_client.table(DEBTS_TABLE).insert(record).execute()
        return response.data or [], None
    except Exception as e:
        return None, _remote_error("adicionar dívida", e)


def update_debt(supabase_client: Client, debt_id: str, fields: Dict[str, Any]) -> DbResult:
    """Atualiza apenas os campos informados de uma dívida."""
    try:
        response = supabase_client.table(DEBTS_TABLE).update(fields).eq("id", debt_id).execute()
        return response.data or [], None
    except Exception as e:
        return None, _remote_error("atualizar dívida", e)


def delete_debt(supabase_client: Client, debt_id: str) -> DbResult:
    """Remove uma dívida."""
    try:
        response = supabase_client.table(DEBTS_TABLE).delete().eq("id", debt_id).execute()
        return response.data or [], None
    except Exception as e:
        return None, _remote_error("excluir dívida", e)
