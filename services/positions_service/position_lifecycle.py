"""
services/positions_service/position_lifecycle.py
------------------------------------------------
Open / close / clear operations on the position store.

Per ticker:
    absent → open → open (partially closed) → absent

There is no persisted "closed" state: a full close or a bull market close
removes the record. Every operation saves the whole store before returning;
if the save fails the in-memory change is kept and PersistenceError propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.errors import NoOpenPosition
from core.validator import validate_position_parameters
from models.position import Position
from services.positions_service.position_store import PositionStore

logger = logging.getLogger("position_lifecycle")


@dataclass(frozen=True)
class CloseResult:
    position: Position
    closed_amount: int
    fully_closed: bool


class PositionLifecycle:
    def __init__(self, store: PositionStore):
        self.store = store

    # ============================================================
    # 📈 OPEN
    # ============================================================
    def open(
        self,
        expert: str,
        ticker: str,
        entry_price: float,
        stop_loss: float,
        amount: int,
        take_profit: Optional[float] = None,
    ) -> Position:
        """Validates and records a position, replacing any existing one for the ticker."""
        validate_position_parameters(entry_price, stop_loss, take_profit)

        ticker = ticker.upper()
        if self.store.get(expert, ticker) is not None:
            logger.info(f"♻️ {expert}: replacing existing position {ticker}")

        position = Position(
            ticker=ticker,
            entry_price=float(entry_price),
            stop_loss=float(stop_loss),
            take_profit=float(take_profit) if take_profit is not None else None,
            amount=int(amount),
        )
        self.store.put(expert, position)
        self.store.save()

        logger.info(f"📈 {expert}: opened {ticker} @ {entry_price} (SL {stop_loss}, TP {take_profit}, x{amount})")
        return position

    # ============================================================
    # ✅ CLOSE (partial or full)
    # ============================================================
    def close(self, expert: str, ticker: str, exit_price: float, amount: int) -> CloseResult:
        ticker = ticker.upper()
        position = self.store.get(expert, ticker)
        if position is None:
            raise NoOpenPosition(ticker)

        sold = min(position.amount, int(amount))
        position.closed_price = float(exit_price)
        position.amount -= sold

        fully_closed = position.amount == 0
        if fully_closed:
            self.store.remove(expert, ticker)
        self.store.save()

        logger.info(
            f"✅ {expert}: closed {sold} of {ticker} @ {exit_price} "
            f"({'fully closed' if fully_closed else f'{position.amount} left'})"
        )
        return CloseResult(position=position, closed_amount=sold, fully_closed=fully_closed)

    # ============================================================
    # 🗑️ CLEAR
    # ============================================================
    def clear_all(self, expert: str) -> int:
        if expert not in self.store.positions:
            logger.info(f"🗑️ {expert}: nothing to clear")
            return 0

        dropped = self.store.clear(expert)
        self.store.save()
        logger.info(f"🗑️ {expert}: cleared {dropped} positions")
        return dropped

    # ============================================================
    # 🐂 BULL MARKET CLOSE
    # ============================================================
    def bull_market_close(self, expert: str, ticker: str) -> Position:
        """Closes at entry price and removes the record unconditionally."""
        ticker = ticker.upper()
        position = self.store.get(expert, ticker)
        if position is None:
            raise NoOpenPosition(ticker, "bull market")

        position.closed_price = position.entry_price
        self.store.remove(expert, ticker)
        self.store.save()

        logger.info(f"🐂 {expert}: bull market close of {ticker} @ {position.entry_price}")
        return position
