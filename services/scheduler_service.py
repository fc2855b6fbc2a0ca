"""
services/scheduler_service.py
------------------------------
One-shot delayed tasks keyed by name.

Used by the command dispatcher to post the portfolio a second time after a
close. Pending tasks are cancelled on shutdown instead of being leaked.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable

logger = logging.getLogger("scheduler_service")


class DeferredRenderScheduler:
    def __init__(self):
        self._tasks: Dict[Hashable, asyncio.Task] = {}

    # ============================================================
    # ⏱️ SCHEDULE
    # ============================================================
    def schedule(self, key: Hashable, delay: float, callback: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """
        Runs `callback()` after `delay` seconds.
        Scheduling a key that is already pending replaces the old task.
        """
        self.cancel(key)

        task = asyncio.create_task(self._run(key, delay, callback))
        self._tasks[key] = task
        logger.info(f"⏱️ Deferred render scheduled for {key} in {delay:.0f}s")
        return task

    async def _run(self, key: Hashable, delay: float, callback) -> None:
        try:
            await asyncio.sleep(delay)
            await callback()
        except asyncio.CancelledError:
            logger.info(f"🛑 Deferred render for {key} cancelled.")
            raise
        except Exception as e:
            logger.exception(f"❌ Deferred render for {key} failed: {e}")
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]

    # ============================================================
    # 🛑 CANCEL
    # ============================================================
    def cancel(self, key: Hashable) -> bool:
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def cancel_all(self) -> int:
        """Cancels every pending task and waits for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(f"🛑 {len(tasks)} deferred renders cancelled.")
        return len(tasks)

    def pending(self) -> list:
        return [key for key, task in self._tasks.items() if not task.done()]
