from telegram import Update
from telegram.ext import ContextTypes, ConversationHandler

from src.bot.handlers import ASKING_ADJUSTMENT_VALUE
from src.bot.session import get_controller, resolve_debt, send_alerts
from src.core.models import ACTION_DECREASE, ACTION_INCREASE, Direction
from src.utils.text_utils import format_brl, parse_amount


async def _start_adjustment(update: Update, context: ContextTypes.DEFAULT_TYPE, direction: Direction) -> int:
    controller = await get_controller(context)
    await send_alerts(update, controller)

    debt, error_message = resolve_debt(context, controller)
    if debt is None:
        await update.message.reply_text(error_message)
        return ConversationHandler.END

    action = ACTION_INCREASE if direction == Direction.INCREASE else ACTION_DECREASE
    if action not in controller.available_actions(debt):
        await update.message.reply_text("ℹ️ Só é possível ajustar o valor de dívidas em aberto.")
        return ConversationHandler.END

    controller.request_adjustment(debt.id, direction)
    verbo = "aumentar" if direction == Direction.INCREASE else "reduzir"
    await update.message.reply_text(
        f"💰 '{debt.descricao}' está em {format_brl(debt.valor)}.\n"
        f"Quanto deseja {verbo}? (ex: 150,00)"
    )
    return ASKING_ADJUSTMENT_VALUE


async def increase_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/aumentar N"""
    return await _start_adjustment(update, context, Direction.INCREASE)


async def decrease_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/reduzir N"""
    return await _start_adjustment(update, context, Direction.DECREASE)


async def handle_adjustment_value(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Recebe o valor do ajuste. Em caso de erro o diálogo continua aberto para nova tentativa."""
    controller = await get_controller(context)
    amount = parse_amount(update.message.text)

    if amount is None or amount <= 0:
        await update.message.reply_text("🤔 Valor inválido. Digite um valor maior que zero (ex: 150,00) ou /cancelar.")
        return ASKING_ADJUSTMENT_VALUE

    debt_id = controller.modal_target
    success = await controller.confirm(amount)
    await send_alerts(update, controller)

    if success:
        debt = controller.find(debt_id)
        novo_valor = format_brl(debt.valor) if debt else ""
        await update.message.reply_text(f"✅ Novo valor salvo: {novo_valor}")
        return ConversationHandler.END

    if controller.find(debt_id) is None:
        controller.close_modal()
        return ConversationHandler.END

    await update.message.reply_text("Envie o valor novamente para tentar outra vez, ou /cancelar.")
    return ASKING_ADJUSTMENT_VALUE
