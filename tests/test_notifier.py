"""Tests for Notifier."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.constants import ParseMode
from telegram.error import NetworkError

from services.positions_service.portfolio_renderer import EmbedField, PortfolioEmbed
from services.telegram_service.notifier import Notifier
from services.telegram_service.topic_directory import Destination

DESTINATION = Destination(chat_id=-100777, thread_id=9, name="entries-and-exits")


def test_requires_bot():
    with pytest.raises(ValueError):
        Notifier(None)


@pytest.mark.asyncio
async def test_send_embed_posts_html_into_topic():
    bot = MagicMock()
    bot.send_message = AsyncMock()
    embed = PortfolioEmbed(title="Portfolio Overview for Alpha", fields=[EmbedField("No positions", "No active positions found.")])

    await Notifier(bot).send_embed(DESTINATION, embed)

    bot.send_message.assert_awaited_once_with(
        chat_id=-100777,
        message_thread_id=9,
        text="<b>Portfolio Overview for Alpha</b>\n\n<b>No positions</b>\nNo active positions found.",
        parse_mode=ParseMode.HTML,
    )


@pytest.mark.asyncio
async def test_send_errors_are_logged_and_raised(caplog):
    bot = MagicMock()
    bot.send_message = AsyncMock(side_effect=NetworkError("timed out"))

    with pytest.raises(NetworkError):
        await Notifier(bot).send(DESTINATION, "hello")

    assert "entries-and-exits" in caplog.text
