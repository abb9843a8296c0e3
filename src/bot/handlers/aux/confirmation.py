from telegram import ReplyKeyboardMarkup, Update

CONFIRMATION_KEYBOARD = [["Sim ✅", "Não ❌"]]

YES_ANSWERS = {"sim ✅", "sim", "s"}
NO_ANSWERS = {"não ❌", "não", "nao", "n"}


def is_yes(text: str) -> bool:
    return (text or "").strip().lower() in YES_ANSWERS


def is_no(text: str) -> bool:
    return (text or "").strip().lower() in NO_ANSWERS


async def ask_yes_no(update: Update, question: str) -> None:
    reply_markup = ReplyKeyboardMarkup(
        CONFIRMATION_KEYBOARD, one_time_keyboard=True, resize_keyboard=True
    )
    await update.message.reply_text(question, reply_markup=reply_markup)
