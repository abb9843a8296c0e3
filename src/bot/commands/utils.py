from telegram import Update
from telegram.ext import ContextTypes

async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou o DebtManager, seu bot de gestão de dívidas. 💳\n\n"
        "Comandos úteis:\n"
        "- /nova para cadastrar uma dívida.\n"
        "- /dividas [ativas|quitadas|todas] para ver a lista numerada.\n"
        "- /resumo para ver o total devido, o total pago e as urgências.\n"
        "- /analise para receber dicas da nossa IA.\n"
        "- /help para mais informações."
    )

async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "Como usar:\n"
        "Os números abaixo (N) são as posições da última lista mostrada por /dividas.\n\n"
        "Consultas:\n"
        "- /dividas [ativas|quitadas|todas]: lista suas dívidas (padrão: ativas).\n"
        "- /resumo: dívida total, total pago, pendências e urgentes (vencem em até 7 dias).\n"
        "- /grafico: gráfico de dívidas por credor.\n"
        "- /analise: estratégia de quitação gerada por IA.\n"
        "- /atualizar: recarrega a lista a partir do servidor.\n\n"
        "Gerenciamento:\n"
        "- /nova: cadastra uma nova dívida.\n"
        "- /editar N: altera descrição, credor, vencimento e observações.\n"
        "- /aumentar N e /reduzir N: ajustam o valor da dívida.\n"
        "- /quitar N: marca a dívida como paga.\n"
        "- /excluir N: apaga a dívida.\n"
        "- /cancelar: interrompe a operação em andamento."
    )
