"""Tests for the Telegram glue: handler registration and update translation."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import Chat, Message, MessageEntity, Update
from telegram.constants import ParseMode
from telegram.ext import CommandHandler, MessageHandler

from models.commands import COMMANDS
from services.telegram_service.command_bot import (
    build_invocation,
    cmd_help,
    cmd_position,
    on_group_message,
    publish_commands,
    register_handlers,
)


def _update(text, chat_type="supergroup", title="Alpha Desk"):
    message = SimpleNamespace(text=text, reply_text=AsyncMock())
    return SimpleNamespace(
        effective_message=message,
        effective_chat=SimpleNamespace(id=-1001234, type=chat_type, title=title),
        effective_user=SimpleNamespace(username="trader", full_name="Trader Joe"),
    )


def _context(app_layer, args=()):
    return SimpleNamespace(
        args=list(args),
        application=SimpleNamespace(bot_data={"app_layer": app_layer} if app_layer else {}),
    )


def test_register_handlers_adds_every_command():
    application = MagicMock()
    application.bot_data = {}
    app_layer = object()

    register_handlers(application, app_layer)

    assert application.bot_data["app_layer"] is app_layer
    handlers = [c.args[0] for c in application.add_handler.call_args_list]
    assert isinstance(handlers[0], MessageHandler)

    registered = set()
    for handler in handlers:
        if isinstance(handler, CommandHandler):
            registered |= set(handler.commands)
    assert {name for name, _, _ in COMMANDS} | {"help", "start"} == registered


def _command_update(text, edited=False):
    message = Message(
        message_id=1,
        date=datetime.now(timezone.utc),
        chat=Chat(id=-1001234, type=Chat.SUPERGROUP, title="Alpha Desk"),
        text=text,
        entities=[MessageEntity(type=MessageEntity.BOT_COMMAND, offset=0, length=len(text.split()[0]))],
    )
    message.set_bot(SimpleNamespace(username="ExpertBot"))
    if edited:
        return Update(update_id=2, edited_message=message)
    return Update(update_id=1, message=message)


def test_command_handlers_ignore_edited_messages():
    application = MagicMock()
    application.bot_data = {}
    register_handlers(application, object())

    handlers = [c.args[0] for c in application.add_handler.call_args_list]
    close_handler = next(
        h for h in handlers if isinstance(h, CommandHandler) and "close_long_position" in h.commands
    )
    text = "/close_long_position AAPL 110 5"

    assert close_handler.check_update(_command_update(text))
    assert not close_handler.check_update(_command_update(text, edited=True))


def test_build_invocation_strips_bot_mention():
    update = _update("/long_position@ExpertBot aapl 100 90 10")

    invocation = build_invocation(update, _context(None, ["aapl", "100", "90", "10"]))

    assert invocation.command == "long_position"
    assert invocation.args == ("aapl", "100", "90", "10")
    assert invocation.chat_type == "supergroup"
    assert invocation.chat_title == "Alpha Desk"
    assert invocation.user == "trader"


@pytest.mark.asyncio
async def test_cmd_position_dispatches_with_html_reply():
    dispatcher = SimpleNamespace(dispatch=AsyncMock(return_value=True))
    app_layer = SimpleNamespace(dispatcher=dispatcher)
    update = _update("/clear_positions")

    await cmd_position(update, _context(app_layer))

    invocation, reply = dispatcher.dispatch.await_args.args
    assert invocation.command == "clear_positions"

    await reply("done")
    update.effective_message.reply_text.assert_awaited_once_with("done", parse_mode=ParseMode.HTML)


@pytest.mark.asyncio
async def test_cmd_position_without_app_layer():
    update = _update("/clear_positions")

    await cmd_position(update, _context(None))

    update.effective_message.reply_text.assert_awaited_once_with("⚠️ app_layer not available.")


@pytest.mark.asyncio
async def test_cmd_help_lists_commands():
    app_layer = SimpleNamespace(dispatcher=SimpleNamespace(entries_topic="entries-and-exits"))
    update = _update("/help")

    await cmd_help(update, _context(app_layer))

    text = update.effective_message.reply_text.await_args.args[0]
    for name, _, _ in COMMANDS:
        assert f"/{name}" in text
    assert "<b>entries-and-exits</b>" in text


@pytest.mark.asyncio
async def test_group_messages_feed_topic_directory():
    topics = MagicMock()
    update = _update("hello")

    await on_group_message(update, _context(SimpleNamespace(topics=topics)))

    topics.learn_from_message.assert_called_once_with(update.effective_message)


@pytest.mark.asyncio
async def test_publish_commands():
    bot = AsyncMock()

    await publish_commands(bot)

    commands = bot.set_my_commands.await_args.args[0]
    assert [c.command for c in commands] == [name for name, _, _ in COMMANDS] + ["help"]
