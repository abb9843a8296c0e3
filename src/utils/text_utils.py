# src/utils/text_utils.py
import re
import datetime
from typing import Union

NO_DUE_DATE_ANSWERS = {"", "-", "sem", "nao", "não", "nenhum", "nenhuma", "sem vencimento", "sem data"}
DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d", "%d/%m/%y", "%d-%m-%Y")


def format_brl(value: float) -> str:
    """Formata um valor no padrão monetário brasileiro.
    Ex: 1234.5 -> "R$ 1.234,50"
    """
    formatted = f"{value:,.2f}"  # 1,234.50
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def parse_amount(text: str) -> Union[float, None]:
    """Converte o texto digitado pelo usuário em um valor monetário.
    Aceita "150", "150,50", "150.50", "1.500", "R$ 1.234,56" e "1,234.56".
    Retorna None se o texto não for um número válido.
    """
    if not text:
        return None

    cleaned = re.sub(r"[^0-9,.\-]", "", text)
    if not cleaned or cleaned in {"-", ",", "."}:
        return None

    if "," in cleaned and "." in cleaned:
        # O último separador que aparece é o decimal
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")
    elif cleaned.count(".") > 1:
        # "1.234.567" -> separadores de milhar
        cleaned = cleaned.replace(".", "")
    elif re.fullmatch(r"-?\d{1,3}\.\d{3}", cleaned):
        # "1.500" -> ponto com três casas é separador de milhar
        cleaned = cleaned.replace(".", "")

    try:
        return round(float(cleaned), 2)
    except ValueError:
        return None


def parse_due_date(text: Union[str, None]) -> Union[datetime.date, None]:
    """Interpreta a data de vencimento digitada.
    Respostas como "sem" ou "-" significam que a dívida não tem vencimento (None).
    Levanta ValueError se o formato não for reconhecido.
    """
    if text is None:
        return None
    normalized = text.strip().lower()
    if normalized in NO_DUE_DATE_ANSWERS:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(normalized, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Data inválida: '{text}'. Use o formato DD/MM/AAAA.")


def format_due_date(due_date: Union[datetime.date, None]) -> str:
    if due_date is None:
        return "Sem Vencimento"
    return due_date.strftime("%d/%m/%Y")
