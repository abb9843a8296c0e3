from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from src.bot.handlers import ASKING_SETTLE_CONFIRMATION
from src.bot.handlers.aux import ask_yes_no, is_no, is_yes
from src.bot.session import get_controller, resolve_debt, send_alerts
from src.core.models import ACTION_SETTLE
from src.utils.text_utils import format_brl


async def settle_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/quitar N: pede confirmação para marcar a dívida N como paga."""
    controller = await get_controller(context)
    await send_alerts(update, controller)

    debt, error_message = resolve_debt(context, controller)
    if debt is None:
        await update.message.reply_text(error_message)
        return ConversationHandler.END

    if ACTION_SETTLE not in controller.available_actions(debt):
        await update.message.reply_text("ℹ️ Esta dívida já está quitada.")
        return ConversationHandler.END

    controller.request_settle(debt.id)
    await ask_yes_no(
        update,
        f"💸 Deseja quitar '{debt.descricao}' ({debt.credor}) de {format_brl(debt.valor)}?\n"
        "Esta dívida será marcada como paga.",
    )
    return ASKING_SETTLE_CONFIRMATION


async def handle_settle_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    controller = await get_controller(context)
    user_response = update.message.text

    if is_yes(user_response):
        success = await controller.confirm()
        await send_alerts(update, controller)
        if success:
            await update.message.reply_text(
                "✅ Dívida quitada! Parabéns! 🎉", reply_markup=ReplyKeyboardRemove()
            )
        return ConversationHandler.END

    if is_no(user_response):
        controller.close_modal()
        await update.message.reply_text("👍 Ok, nada foi alterado.", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    await ask_yes_no(update, "Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.")
    return ASKING_SETTLE_CONFIRMATION
