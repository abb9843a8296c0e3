# src/bot/session.py
from typing import List, Tuple, Union

from telegram import Update
from telegram.ext import ContextTypes

from src.core.controller import DebtController
from src.core.models import Debt

CONTROLLER_KEY = "debt_controller"
FORM_KEY = "debt_form"
# Ids na ordem em que o último /dividas os mostrou
LISTED_KEY = "listed_debt_ids"


async def get_controller(context: ContextTypes.DEFAULT_TYPE) -> DebtController:
    """Retorna o controlador do chat, criando e carregando a lista na primeira vez."""
    controller = context.chat_data.get(CONTROLLER_KEY)
    if controller is None:
        controller = DebtController(context.bot_data["supabase_client"])
        context.chat_data[CONTROLLER_KEY] = controller
        await controller.fetch()
    return controller


async def send_alerts(update: Update, controller: DebtController) -> None:
    """Envia ao chat os alertas acumulados pelo controlador."""
    for alert in controller.drain_alerts():
        await update.message.reply_text(f"⚠️ {alert}")


def remember_listing(context: ContextTypes.DEFAULT_TYPE, debts: List[Debt]) -> None:
    context.chat_data[LISTED_KEY] = [d.id for d in debts]


def resolve_debt(context: ContextTypes.DEFAULT_TYPE, controller: DebtController) -> Tuple[Union[Debt, None], str]:
    """
    Converte o número informado no comando (ex: `/quitar 2`) na dívida que ocupava essa
    posição na última lista mostrada por /dividas. Sem lista anterior, usa a aba atual.
    Retorna (dívida, "") ou (None, mensagem de erro).
    """
    args = context.args
    if not args:
        return None, "Informe o número da dívida. Use /dividas para ver a lista numerada."
    try:
        position = int(args[0])
    except ValueError:
        return None, f"'{args[0]}' não é um número válido."

    listed_ids = context.chat_data.get(LISTED_KEY)
    if listed_ids is None:
        listed_ids = [d.id for d in controller.visible_debts()]

    if position < 1 or position > len(listed_ids):
        return None, f"Não existe dívida número {position} na lista atual. Use /dividas para conferir."

    debt = controller.find(listed_ids[position - 1])
    if debt is None:
        return None, f"A dívida número {position} não existe mais. Use /dividas para ver a lista atualizada."
    return debt, ""
