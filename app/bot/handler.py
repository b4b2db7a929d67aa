from loguru import logger
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from app.errors import ExpenseBotError
from app.flow.callbacks import decode_callback
from app.flow.controller import SelectionFlowController
from app.models.schemas import Reply

USAGE = (
    "Привет! Для добавления операции напиши:\n"
    "сумма название [валюта] [ддммгг]\n\n"
    'Пример: "3000.45 Такси до отеля USD"\n'
    'или: "500 продукты 150425"\n'
    'или: "1500 Жевачка"\n\n'
    "Валюты: TRY, GEL, USD, RUB (по умолчанию RUB).\n"
    "/cancel — отменить текущую операцию"
)


def _keyboard(reply: Reply) -> InlineKeyboardMarkup | None:
    """One button per row, like the selection lists in the chat."""
    if not reply.buttons:
        return None
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(b.label, callback_data=b.callback_data)] for b in reply.buttons]
    )


def _controller(context: ContextTypes.DEFAULT_TYPE) -> SelectionFlowController:
    return context.application.bot_data["controller"]


async def _send(update: Update, context: ContextTypes.DEFAULT_TYPE, reply: Reply) -> None:
    """Reply to a button press as a new message.

    The pressed message may be too old for the bot to access, so the chat is
    addressed directly rather than through the callback message.
    """
    chat = update.effective_chat
    chat_id = chat.id if chat else update.callback_query.from_user.id
    await context.bot.send_message(chat_id=chat_id, text=reply.text, reply_markup=_keyboard(reply))


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.effective_message.reply_text(USAGE)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await start_command(update, context)


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /cancel command."""
    if _controller(context).cancel(update.effective_user.id):
        await update.effective_message.reply_text("Операция отменена. Введите новую.")
    else:
        await update.effective_message.reply_text("Нечего отменять.")


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Free text starts a new entry, replacing any unfinished one."""
    user_id = update.effective_user.id
    message = update.effective_message
    text = (message.text or "").strip()
    logger.info("Telegram message from {}: {}", user_id, text)

    try:
        reply = _controller(context).start(user_id, text)
    except ExpenseBotError as e:
        await message.reply_text(str(e))
        return

    await message.reply_text(reply.text, reply_markup=_keyboard(reply))


async def handle_selection(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle category, subcategory and account button presses."""
    query = update.callback_query
    await query.answer()
    user_id = query.from_user.id
    logger.info("Button from {}: {}", user_id, query.data)

    try:
        selection = decode_callback(query.data)
        reply = await _controller(context).choose(user_id, selection)
    except ExpenseBotError as e:
        await _send(update, context, Reply(text=str(e)))
        return
    except Exception:
        logger.exception("Error handling button {} from {}", query.data, user_id)
        await _send(update, context, Reply(text="Что-то пошло не так. Введите операцию заново."))
        return

    await _send(update, context, reply)


def build_bot_app(token: str, controller: SelectionFlowController) -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(token).build()
    app.bot_data["controller"] = controller

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("cancel", cancel_command))

    app.add_handler(CallbackQueryHandler(handle_selection))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    return app
