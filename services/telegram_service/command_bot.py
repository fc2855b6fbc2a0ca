# services/telegram_service/command_bot.py
import logging

from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.ext import CommandHandler, ContextTypes, MessageHandler, filters

from controllers.commands_controller import CommandInvocation
from models.commands import COMMANDS
from utils.formatters import format_help

logger = logging.getLogger("command_bot")


def register_handlers(application, app_layer):
    """
    The only public function main.py needs.
    One CommandHandler per position command, /help, and a group-message
    handler that keeps the topic directory up to date.
    """
    application.bot_data["app_layer"] = app_layer

    # Topic learning runs first (group -1) so commands see fresh topics
    application.add_handler(
        MessageHandler(filters.ChatType.GROUPS, on_group_message),
        group=-1,
    )

    # Edited commands are ignored so an edit never runs a command twice
    application.add_handler(CommandHandler(["help", "start"], cmd_help, filters=filters.UpdateType.MESSAGE))
    for name, _, _ in COMMANDS:
        application.add_handler(CommandHandler(name, cmd_position, filters=filters.UpdateType.MESSAGE))

    logger.info("✅ Handlers registered (command_bot).")


async def publish_commands(bot) -> None:
    """Publishes the command menu shown by Telegram clients."""
    commands = [BotCommand(name, description) for name, _, description in COMMANDS]
    commands.append(BotCommand("help", "Show available commands"))
    await bot.set_my_commands(commands)
    logger.info(f"📋 Command menu published ({len(commands)} commands).")


def build_invocation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> CommandInvocation:
    message = update.effective_message
    chat = update.effective_chat
    user = update.effective_user

    # "/long_position@MyBot AAPL ..." → "long_position"
    command = message.text.split()[0][1:].split("@")[0].lower()

    return CommandInvocation(
        command=command,
        args=tuple(context.args or ()),
        chat_id=chat.id,
        chat_type=chat.type,
        chat_title=chat.title,
        user=(user.username or user.full_name) if user else "unknown",
    )


async def cmd_position(update: Update, context: ContextTypes.DEFAULT_TYPE):
    app_layer = context.application.bot_data.get("app_layer")
    if not app_layer:
        return await update.effective_message.reply_text("⚠️ app_layer not available.")

    invocation = build_invocation(update, context)

    async def reply(text: str):
        return await update.effective_message.reply_text(text, parse_mode=ParseMode.HTML)

    await app_layer.dispatcher.dispatch(invocation, reply)


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE):
    app_layer = context.application.bot_data.get("app_layer")
    topic = app_layer.dispatcher.entries_topic if app_layer else "entries-and-exits"
    await update.effective_message.reply_text(format_help(COMMANDS, topic), parse_mode=ParseMode.HTML)


async def on_group_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    app_layer = context.application.bot_data.get("app_layer")
    if not app_layer:
        return

    try:
        app_layer.topics.learn_from_message(update.effective_message)
    except Exception as e:
        logger.error(f"❌ Could not record topic: {e}")
