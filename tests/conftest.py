# Pytest configuration and shared fixtures.

import os
from unittest.mock import AsyncMock

import pytest

from controllers.commands_controller import CommandDispatcher, CommandInvocation
from services.positions_service.portfolio_renderer import PortfolioRenderer
from services.positions_service.position_lifecycle import PositionLifecycle
from services.positions_service.position_store import PositionStore
from services.scheduler_service import DeferredRenderScheduler
from services.telegram_service.topic_directory import TopicDirectory

EXPERT = "Alpha Desk"
CHAT_ID = -1001234
ENTRIES_THREAD = 17


@pytest.fixture
def positions_file(tmp_path):
    return os.path.join(tmp_path, "positions.json")


@pytest.fixture
def store(positions_file):
    s = PositionStore(positions_file)
    s.load()
    return s


@pytest.fixture
def lifecycle(store):
    return PositionLifecycle(store)


@pytest.fixture
def renderer(store):
    return PortfolioRenderer(store)


@pytest.fixture
def topics(tmp_path):
    directory = TopicDirectory(os.path.join(tmp_path, "topics.json"))
    directory.load()
    directory.remember(CHAT_ID, "entries-and-exits", ENTRIES_THREAD)
    return directory


@pytest.fixture
def notifier():
    mock = AsyncMock()
    mock.send_embed = AsyncMock()
    return mock


@pytest.fixture
def dispatcher(lifecycle, renderer, notifier, topics):
    return CommandDispatcher(
        lifecycle=lifecycle,
        renderer=renderer,
        notifier=notifier,
        topics=topics,
        scheduler=DeferredRenderScheduler(),
        hide_closed_delay=0.01,
    )


@pytest.fixture
def invoke():
    """Builds a group invocation for the test expert."""

    def _invoke(command, *args, **overrides):
        fields = dict(
            command=command,
            args=tuple(args),
            chat_id=CHAT_ID,
            chat_type="supergroup",
            chat_title=EXPERT,
            user="tester",
        )
        fields.update(overrides)
        return CommandInvocation(**fields)

    return _invoke
