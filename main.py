# main.py
import logging
import sys

from telegram.ext import Application

from config import TELEGRAM_BOT_TOKEN, validate_config
from application_layer import ApplicationLayer
from core.errors import StoreCorrupted
from utils.logger import configure_logging

logger = logging.getLogger("main")


async def post_init(app: Application):
    """
    Runs inside the python-telegram-bot asyncio loop.
    Loads the persisted state, then registers the handlers.
    """
    from services.telegram_service.command_bot import publish_commands, register_handlers

    # 1) Build ApplicationLayer with the real bot and load state
    app_layer = ApplicationLayer(bot=app.bot)
    app_layer.load()
    app.bot_data["app_layer"] = app_layer

    # 2) Register commands/handlers
    register_handlers(app, app_layer)

    # 3) Command menu (not fatal)
    try:
        await publish_commands(app.bot)
    except Exception as e:
        logger.warning(f"⚠️ Could not publish command menu: {e}")

    logger.info("✅ Bot ready.")


async def post_shutdown(app: Application):
    app_layer = app.bot_data.get("app_layer")
    if app_layer is not None:
        await app_layer.shutdown()


def main():
    configure_logging()

    problems = validate_config()
    if problems:
        for p in problems:
            logger.error(p)
        sys.exit(1)

    logger.info("🚀 Starting bot. Polling...")

    application = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    try:
        application.run_polling()
    except StoreCorrupted as e:
        logger.critical(f"❌ Refusing to start, stored data is unreadable: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
