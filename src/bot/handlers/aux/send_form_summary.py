from typing import Any, Dict

from telegram import Update

from src.bot.handlers.aux.confirmation import ask_yes_no
from src.utils.text_utils import format_brl, format_due_date


async def send_form_summary(update: Update, form_data: Dict[str, Any], editing: bool) -> None:
    """Mostra os dados do formulário e pede confirmação antes de salvar."""
    titulo = "✏️ Confirme a edição da dívida:" if editing else "📝 Confirme a nova dívida:"
    linhas = [
        titulo,
        f"• Descrição: {form_data.get('descricao')}",
        f"• Credor: {form_data.get('credor')}",
    ]
    if not editing:
        linhas.append(f"• Valor: {format_brl(form_data.get('valor') or 0)}")
    linhas.append(f"• Vencimento: {format_due_date(form_data.get('data_limite'))}")
    if form_data.get("obs"):
        linhas.append(f"• Observações: {form_data['obs']}")
    linhas.append("\nEstá tudo certo?")

    await ask_yes_no(update, "\n".join(linhas))
