# application_layer.py
import logging

import config
from controllers.commands_controller import CommandDispatcher
from services.positions_service.portfolio_renderer import PortfolioRenderer
from services.positions_service.position_lifecycle import PositionLifecycle
from services.positions_service.position_store import PositionStore
from services.scheduler_service import DeferredRenderScheduler
from services.telegram_service.notifier import Notifier
from services.telegram_service.topic_directory import TopicDirectory

logger = logging.getLogger("application_layer")


class ApplicationLayer:
    """
    Wiring layer: builds the store, services and dispatcher.
    IMPORTANT:
    - bot is required (Notifier needs it)
    - load() must run before the first command
    """

    def __init__(
        self,
        bot,
        positions_file: str = config.POSITIONS_FILE,
        topics_file: str = config.TOPICS_FILE,
        entries_topic: str = config.ENTRIES_TOPIC_NAME,
        hide_closed_delay: float = config.HIDE_CLOSED_DELAY_SEC,
    ):
        if bot is None:
            raise TypeError("ApplicationLayer.__init__() requires bot (python-telegram-bot).")

        # Infra
        self.notifier = Notifier(bot)
        self.store = PositionStore(positions_file)
        self.topics = TopicDirectory(topics_file)
        self.scheduler = DeferredRenderScheduler()

        # Services
        self.lifecycle = PositionLifecycle(self.store)
        self.renderer = PortfolioRenderer(self.store)

        # Controllers
        self.dispatcher = CommandDispatcher(
            lifecycle=self.lifecycle,
            renderer=self.renderer,
            notifier=self.notifier,
            topics=self.topics,
            scheduler=self.scheduler,
            entries_topic=entries_topic,
            hide_closed_delay=hide_closed_delay,
        )

        logger.info("✅ ApplicationLayer initialized.")

    def load(self) -> None:
        """Reads persisted positions and topics. StoreCorrupted propagates."""
        self.store.load()
        self.topics.load()

    async def shutdown(self) -> None:
        cancelled = await self.dispatcher.shutdown()
        logger.info(f"👋 ApplicationLayer stopped ({cancelled} pending renders cancelled).")
