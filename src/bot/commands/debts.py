from telegram import Update
from telegram.ext import ContextTypes

from src.bot.session import get_controller, remember_listing, send_alerts
from src.core import charts
from src.core.commands import FetchDebts, SetFilter
from src.core.models import FILTER_ABERTA, FILTER_FECHADA, FILTER_TODAS, Debt
from src.utils.text_utils import format_brl, format_due_date

FILTER_ALIASES = {
    "ativas": FILTER_ABERTA,
    "abertas": FILTER_ABERTA,
    "quitadas": FILTER_FECHADA,
    "fechadas": FILTER_FECHADA,
    "pagas": FILTER_FECHADA,
    "todas": FILTER_TODAS,
}
FILTER_LABELS = {
    FILTER_ABERTA: "ATIVAS",
    FILTER_FECHADA: "QUITADAS",
    FILTER_TODAS: "TODAS",
}


def format_debt_entry(position: int, debt: Debt, actions: tuple) -> str:
    linhas = [
        f"{position}. {debt.descricao} ({debt.credor}): {format_brl(debt.valor)}",
        f"   Vencimento: {format_due_date(debt.data_limite)} | {debt.situacao.value}",
    ]
    if debt.obs:
        linhas.append(f"   🗒️ {debt.obs}")
    linhas.append("   " + " ".join(f"/{action} {position}" for action in actions))
    return "\n".join(linhas)


async def list_debts_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/dividas [ativas|quitadas|todas]: lista numerada das dívidas do filtro escolhido."""
    controller = await get_controller(context)

    if context.args:
        escolha = context.args[0].strip().lower()
        if escolha not in FILTER_ALIASES:
            await update.message.reply_text("Uso: /dividas [ativas|quitadas|todas]")
            return
        await controller.dispatch(SetFilter(FILTER_ALIASES[escolha]))

    await send_alerts(update, controller)

    counts = controller.filter_counts()
    abas = " | ".join(
        f"[{FILTER_LABELS[f]} ({counts[f]})]" if f == controller.active_filter else f"{FILTER_LABELS[f]} ({counts[f]})"
        for f in (FILTER_ABERTA, FILTER_FECHADA, FILTER_TODAS)
    )

    visible = controller.visible_debts()
    remember_listing(context, visible)
    if not visible:
        await update.message.reply_text(f"📋 Minhas Dívidas\n{abas}\n\nNada por aqui! Use /nova para cadastrar.")
        return

    entradas = [
        format_debt_entry(i, debt, controller.available_actions(debt))
        for i, debt in enumerate(visible, start=1)
    ]
    await update.message.reply_text(f"📋 Minhas Dívidas\n{abas}\n\n" + "\n\n".join(entradas))


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/resumo: indicadores do painel."""
    controller = await get_controller(context)
    await send_alerts(update, controller)

    stats = controller.stats()
    await update.message.reply_text(
        "📊 Resumo das suas dívidas\n\n"
        f"💰 Dívida Total: {format_brl(stats.total_debt)}\n"
        f"✅ Total Pago: {format_brl(stats.total_paid)}\n"
        f"📌 Pendências: {stats.pending_count}\n"
        f"⏰ Urgentes: {stats.urgent_count}"
    )


async def refresh_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/atualizar: recarrega a lista do Supabase."""
    controller = await get_controller(context)
    success = await controller.dispatch(FetchDebts())
    await send_alerts(update, controller)
    if success:
        await update.message.reply_text(f"🔄 Lista atualizada: {len(controller.debts)} dívida(s).")


async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/grafico: envia o gráfico de dívidas por credor."""
    controller = await get_controller(context)
    await send_alerts(update, controller)
    await update.message.reply_text("Gerando o gráfico das suas dívidas, por favor aguarde...")

    chart_buffer = charts.generate_debts_chart(controller.debts)
    if chart_buffer:
        chart_buffer.name = "dividas_por_credor.png"
        await update.message.reply_photo(photo=chart_buffer, caption="📊 Suas dívidas por credor:")
    else:
        await update.message.reply_text("Ainda não há dívidas para gerar o gráfico. Use /nova para cadastrar.")
