# src/core/errors.py


class DebtError(Exception):
    """Erro base do gerenciador de dívidas."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DebtError):
    """Dados inválidos detectados localmente, antes de qualquer chamada remota."""


class RemoteError(DebtError):
    """O Supabase rejeitou ou não completou uma operação."""


class AnalysisError(DebtError):
    """Falha ao consultar o Gemini."""
