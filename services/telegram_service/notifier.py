import logging

from telegram.constants import ParseMode

from services.telegram_service.topic_directory import Destination
from utils.formatters import format_embed_html

logger = logging.getLogger("notifier")


class Notifier:
    """
    Posts to a notification destination (a forum topic of a group).
    - constructor requires the bot
    - send(destination, text) / send_embed(destination, embed)
    Send errors are logged and re-raised so the command can report them.
    """

    def __init__(self, bot):
        if bot is None:
            raise ValueError("❌ Notifier requires a bot")
        self.bot = bot

    async def send(self, destination: Destination, text: str):
        try:
            return await self.bot.send_message(
                chat_id=destination.chat_id,
                message_thread_id=destination.thread_id,
                text=text,
                parse_mode=ParseMode.HTML,
            )
        except Exception as e:
            logger.exception(f"❌ Error sending to {destination.name} ({destination.chat_id}): {e}")
            raise

    async def send_embed(self, destination: Destination, embed):
        return await self.send(destination, format_embed_html(embed))
