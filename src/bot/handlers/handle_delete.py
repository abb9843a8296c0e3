from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from src.bot.handlers import ASKING_DELETE_CONFIRMATION
from src.bot.handlers.aux import ask_yes_no, is_no, is_yes
from src.bot.session import get_controller, resolve_debt, send_alerts


async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/excluir N: pede confirmação para apagar a dívida N."""
    controller = await get_controller(context)
    await send_alerts(update, controller)

    debt, error_message = resolve_debt(context, controller)
    if debt is None:
        await update.message.reply_text(error_message)
        return ConversationHandler.END

    controller.request_delete(debt.id)
    await ask_yes_no(
        update,
        f"🗑️ Excluir '{debt.descricao}' ({debt.credor})?\n"
        "Esta ação não pode ser desfeita.",
    )
    return ASKING_DELETE_CONFIRMATION


async def handle_delete_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    controller = await get_controller(context)
    user_response = update.message.text

    if is_yes(user_response):
        success = await controller.confirm()
        await send_alerts(update, controller)
        if success:
            await update.message.reply_text("🗑️ Dívida excluída.", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    if is_no(user_response):
        controller.close_modal()
        await update.message.reply_text("👍 Dívida mantida.", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    await ask_yes_no(update, "Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.")
    return ASKING_DELETE_CONFIRMATION
