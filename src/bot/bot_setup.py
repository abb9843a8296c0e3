# src/bot/bot_setup.py
from telegram.ext import Application, MessageHandler, filters, CommandHandler, ConversationHandler
from src.bot.commands import (
    start_command, help_command, list_debts_command, summary_command,
    chart_command, refresh_command, analysis_command,
)
from src.bot.handlers import (
    new_debt_command, edit_debt_command, settle_command, delete_command,
    increase_command, decrease_command, cancel_command,
    handle_descricao, handle_credor, handle_valor, handle_data_limite, handle_obs,
    handle_form_confirmation, handle_settle_confirmation, handle_delete_confirmation,
    handle_adjustment_value,
    ASKING_DESCRICAO, ASKING_CREDOR, ASKING_VALOR, ASKING_DATA_LIMITE, ASKING_OBS,
    ASKING_FORM_CONFIRMATION, ASKING_SETTLE_CONFIRMATION, ASKING_DELETE_CONFIRMATION,
    ASKING_ADJUSTMENT_VALUE,
)

TEXT_ONLY = filters.TEXT & ~filters.COMMAND


def build_conversation_handler() -> ConversationHandler:
    """Diálogos de cadastro, edição, quitação, exclusão e ajuste de valor."""
    return ConversationHandler(
        entry_points=[
            CommandHandler("nova", new_debt_command),
            CommandHandler("editar", edit_debt_command),
            CommandHandler("quitar", settle_command),
            CommandHandler("excluir", delete_command),
            CommandHandler("aumentar", increase_command),
            CommandHandler("reduzir", decrease_command),
        ],
        states={
            ASKING_DESCRICAO: [MessageHandler(TEXT_ONLY, handle_descricao)],
            ASKING_CREDOR: [MessageHandler(TEXT_ONLY, handle_credor)],
            ASKING_VALOR: [MessageHandler(TEXT_ONLY, handle_valor)],
            ASKING_DATA_LIMITE: [MessageHandler(TEXT_ONLY, handle_data_limite)],
            ASKING_OBS: [MessageHandler(TEXT_ONLY, handle_obs)],
            ASKING_FORM_CONFIRMATION: [MessageHandler(TEXT_ONLY, handle_form_confirmation)],
            ASKING_SETTLE_CONFIRMATION: [MessageHandler(TEXT_ONLY, handle_settle_confirmation)],
            ASKING_DELETE_CONFIRMATION: [MessageHandler(TEXT_ONLY, handle_delete_confirmation)],
            ASKING_ADJUSTMENT_VALUE: [MessageHandler(TEXT_ONLY, handle_adjustment_value)],
        },
        # /cancelar encerra qualquer diálogo em andamento
        fallbacks=[CommandHandler("cancelar", cancel_command)],
    )


def setup_and_run_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (Handlers, Comandos, Conversas).
    Retorna o objeto Application configurado, pronto para ser usado por um servidor WSGI.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # O cliente Supabase fica no bot_data para que handlers e comandos possam acessá-lo
    application.bot_data['supabase_client'] = config["SUPABASE_CLIENT"]

    # O ConversationHandler vem primeiro para que /cancelar e as respostas dos diálogos tenham prioridade
    application.add_handler(build_conversation_handler())

    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("dividas", list_debts_command))
    application.add_handler(CommandHandler("resumo", summary_command))
    application.add_handler(CommandHandler("grafico", chart_command))
    application.add_handler(CommandHandler("atualizar", refresh_command))
    application.add_handler(CommandHandler("analise", analysis_command))
    application.add_handler(CommandHandler("cancelar", cancel_command))

    print("DEBUG: Bot Telegram configurado. Pronto para ser rodado pelo WSGI.")
    return application
