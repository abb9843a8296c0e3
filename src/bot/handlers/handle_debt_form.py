from typing import Any, Dict

from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from src.bot.handlers import (
    ASKING_CREDOR,
    ASKING_DATA_LIMITE,
    ASKING_DESCRICAO,
    ASKING_FORM_CONFIRMATION,
    ASKING_OBS,
    ASKING_VALOR,
)
from src.bot.handlers.aux import ask_yes_no, is_no, is_yes, send_form_summary
from src.bot.session import CONTROLLER_KEY, FORM_KEY, get_controller, resolve_debt, send_alerts
from src.core.models import ACTION_EDIT
from src.utils.text_utils import format_due_date, parse_amount, parse_due_date

# Na edição, "." mantém o valor atual do campo
KEEP_CURRENT = "."
EMPTY_OBS_ANSWERS = {"-", "sem", "nenhuma", "não", "nao"}


def _is_editing(context: ContextTypes.DEFAULT_TYPE) -> bool:
    controller = context.chat_data.get(CONTROLLER_KEY)
    return controller is not None and controller.modal_target is not None


def _form(context: ContextTypes.DEFAULT_TYPE) -> Dict[str, Any]:
    return context.chat_data.setdefault(FORM_KEY, {})


def _hint(context: ContextTypes.DEFAULT_TYPE, current: str) -> str:
    if _is_editing(context):
        return f"\n(atual: {current}. Envie '{KEEP_CURRENT}' para manter)"
    return ""


async def new_debt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/nova: inicia o cadastro de uma nova dívida."""
    controller = await get_controller(context)
    await send_alerts(update, controller)
    controller.open_form()
    context.chat_data[FORM_KEY] = {}
    await update.message.reply_text(
        "📝 Nova dívida! Qual a descrição? (ex: Empréstimo Bancário)\nUse /cancelar para desistir.",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ASKING_DESCRICAO


async def edit_debt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """/editar N: edita descrição, credor, vencimento e observações. O valor não é alterado aqui."""
    controller = await get_controller(context)
    await send_alerts(update, controller)

    debt, error_message = resolve_debt(context, controller)
    if debt is None:
        await update.message.reply_text(error_message)
        return ConversationHandler.END
    if ACTION_EDIT not in controller.available_actions(debt):
        await update.message.reply_text("ℹ️ Dívidas quitadas não podem ser editadas.")
        return ConversationHandler.END

    controller.open_form(debt.id)
    context.chat_data[FORM_KEY] = {
        "descricao": debt.descricao,
        "credor": debt.credor,
        "data_limite": debt.data_limite,
        "obs": debt.obs,
    }
    await update.message.reply_text(
        f"✏️ Editando '{debt.descricao}'. Qual a nova descrição?" + _hint(context, debt.descricao),
        reply_markup=ReplyKeyboardRemove(),
    )
    return ASKING_DESCRICAO


async def handle_descricao(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    form = _form(context)
    text = update.message.text.strip()
    if not (_is_editing(context) and text == KEEP_CURRENT):
        if not text:
            await update.message.reply_text("A descrição não pode ficar vazia.")
            return ASKING_DESCRICAO
        form["descricao"] = text

    await update.message.reply_text(
        "🏦 Quem é o credor? (ex: Nubank)" + _hint(context, form.get("credor", ""))
    )
    return ASKING_CREDOR


async def handle_credor(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    form = _form(context)
    text = update.message.text.strip()
    if not (_is_editing(context) and text == KEEP_CURRENT):
        if not text:
            await update.message.reply_text("O credor não pode ficar vazio.")
            return ASKING_CREDOR
        form["credor"] = text

    if _is_editing(context):
        await update.message.reply_text(
            "📅 Qual a data limite? (DD/MM/AAAA, ou 'sem' para nenhuma)"
            + _hint(context, format_due_date(form.get("data_limite")))
        )
        return ASKING_DATA_LIMITE

    await update.message.reply_text("💰 Qual o valor da dívida? (ex: 1.500,00)")
    return ASKING_VALOR


async def handle_valor(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    valor = parse_amount(update.message.text)
    if valor is None:
        await update.message.reply_text("🤔 Não entendi o valor. Digite algo como 1500 ou 1.500,00.")
        return ASKING_VALOR
    if valor <= 0:
        await update.message.reply_text("O valor da dívida deve ser maior que zero.")
        return ASKING_VALOR

    _form(context)["valor"] = valor
    await update.message.reply_text("📅 Qual a data limite? (DD/MM/AAAA, ou 'sem' para nenhuma)")
    return ASKING_DATA_LIMITE


async def handle_data_limite(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    form = _form(context)
    text = update.message.text.strip()
    if not (_is_editing(context) and text == KEEP_CURRENT):
        try:
            form["data_limite"] = parse_due_date(text)
        except ValueError as e:
            await update.message.reply_text(f"📅 {e}")
            return ASKING_DATA_LIMITE

    await update.message.reply_text(
        "🗒️ Alguma observação? (ou '-' para nenhuma)" + _hint(context, form.get("obs") or "nenhuma")
    )
    return ASKING_OBS


async def handle_obs(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    form = _form(context)
    text = update.message.text.strip()
    if not (_is_editing(context) and text == KEEP_CURRENT):
        form["obs"] = "" if text.lower() in EMPTY_OBS_ANSWERS else text

    await send_form_summary(update, form, editing=_is_editing(context))
    return ASKING_FORM_CONFIRMATION


async def handle_form_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Salva o formulário. Se o Supabase recusar, o formulário continua aberto para nova tentativa."""
    controller = await get_controller(context)
    user_response = update.message.text

    if is_yes(user_response):
        editing = controller.modal_target is not None
        success = await controller.confirm(dict(_form(context)))
        await send_alerts(update, controller)
        if success:
            context.chat_data.pop(FORM_KEY, None)
            mensagem = "✅ Dívida atualizada!" if editing else "✅ Dívida cadastrada com sucesso! 🎉"
            await update.message.reply_text(mensagem, reply_markup=ReplyKeyboardRemove())
            return ConversationHandler.END

        await ask_yes_no(update, "Deseja tentar salvar novamente? Ou use /cancelar.")
        return ASKING_FORM_CONFIRMATION

    if is_no(user_response):
        controller.close_modal()
        context.chat_data.pop(FORM_KEY, None)
        await update.message.reply_text(
            "👍 Cadastro descartado. Use /nova para começar de novo.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    await ask_yes_no(update, "Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.")
    return ASKING_FORM_CONFIRMATION
