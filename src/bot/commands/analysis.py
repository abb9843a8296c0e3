from telegram import Update
from telegram.ext import ContextTypes

from src.bot.session import get_controller, send_alerts
from src.core.commands import RequestAnalysis


async def analysis_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/analise: pede ao Gemini uma estratégia para as dívidas atuais."""
    controller = await get_controller(context)
    await send_alerts(update, controller)
    await update.message.reply_text("🤖 Gerando dicas personalizadas, por favor aguarde...")

    await controller.dispatch(RequestAnalysis())
    await update.message.reply_text(controller.ai_analysis)
