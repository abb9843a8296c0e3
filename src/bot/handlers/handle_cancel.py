from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from src.bot.session import FORM_KEY, get_controller


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/cancelar: fecha qualquer diálogo aberto sem alterar nada."""
    controller = await get_controller(context)
    controller.close_modal()
    context.chat_data.pop(FORM_KEY, None)
    await update.message.reply_text("❌ Operação cancelada.", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
