"""
services/telegram_service/topic_directory.py
--------------------------------------------
Remembers the forum topics of each group chat so commands can find the
companion topic ("entries-and-exits") where portfolio updates are posted.

The Bot API cannot list the topics of a chat, so topics are learned from:
    - forum_topic_created / forum_topic_edited service messages
    - any message posted inside a topic (its reply_to_message is the
      topic-creation message)

Known topics are persisted to TOPICS_FILE:
    {"-1001234": {"entries-and-exits": 17}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from core.errors import StoreCorrupted
from core.json_file import read_json, write_json

logger = logging.getLogger("topic_directory")


@dataclass(frozen=True)
class Destination:
    chat_id: int
    thread_id: int
    name: str


class TopicDirectory:
    def __init__(self, path: str):
        self.path = path
        self._topics: Dict[int, Dict[str, int]] = {}

    def load(self) -> None:
        raw = read_json(self.path, default={})
        if not isinstance(raw, dict):
            raise StoreCorrupted(f"Topics file must hold an object, got {type(raw).__name__}")

        try:
            self._topics = {
                int(chat_id): {str(name): int(thread_id) for name, thread_id in topics.items()}
                for chat_id, topics in raw.items()
            }
        except (AttributeError, TypeError, ValueError) as e:
            raise StoreCorrupted(f"Topics file has an unexpected layout: {e}") from e

        logger.info(f"📂 Loaded topics for {len(self._topics)} chats from {self.path}")

    def save(self) -> None:
        data = {str(chat_id): topics for chat_id, topics in self._topics.items()}
        write_json(self.path, data)

    # ============================================================
    # 🧭 LOOKUP
    # ============================================================
    def destination(self, chat_id: int, name: str) -> Optional[Destination]:
        thread_id = self._topics.get(chat_id, {}).get(name)
        if thread_id is None:
            return None
        return Destination(chat_id=chat_id, thread_id=thread_id, name=name)

    # ============================================================
    # 📝 LEARN
    # ============================================================
    def remember(self, chat_id: int, name: str, thread_id: int) -> bool:
        """Records a topic; returns True when something changed."""
        topics = self._topics.setdefault(chat_id, {})
        if topics.get(name) == thread_id:
            return False

        # A renamed topic keeps its thread id
        for old_name, old_id in list(topics.items()):
            if old_id == thread_id:
                del topics[old_name]

        topics[name] = thread_id
        self.save()
        logger.info(f"🧭 Chat {chat_id}: topic '{name}' → thread {thread_id}")
        return True

    def learn_from_message(self, message) -> bool:
        """Inspects a Telegram message for topic names."""
        if message is None or not getattr(message, "message_thread_id", None):
            return False

        chat_id = message.chat.id
        thread_id = message.message_thread_id

        created = getattr(message, "forum_topic_created", None)
        if created is not None:
            return self.remember(chat_id, created.name, thread_id)

        edited = getattr(message, "forum_topic_edited", None)
        if edited is not None and edited.name:
            return self.remember(chat_id, edited.name, thread_id)

        parent = getattr(message, "reply_to_message", None)
        parent_created = getattr(parent, "forum_topic_created", None) if parent is not None else None
        if parent_created is not None:
            return self.remember(chat_id, parent_created.name, thread_id)

        return False
