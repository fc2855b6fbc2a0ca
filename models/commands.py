"""
models/commands.py
------------------
Typed argument records, one per command shape, plus the command catalogue
used for handler registration, /help and the Telegram command menu.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PositionKind(str, Enum):
    LONG = "long"
    GAMBLER = "gambler"
    SWING = "swing"


class BullMarketAction(str, Enum):
    SET = "set"
    CLOSE = "close"


@dataclass(frozen=True)
class OpenPositionArgs:
    kind: PositionKind
    ticker: str
    entry_price: float
    stop_loss: float
    amount: int
    take_profit: Optional[float] = None


@dataclass(frozen=True)
class ClosePositionArgs:
    kind: PositionKind
    ticker: str
    exit_price: float
    amount: int


@dataclass(frozen=True)
class BullMarketArgs:
    action: BullMarketAction
    ticker: str
    entry_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    amount: Optional[int] = None


@dataclass(frozen=True)
class ClearPositionsArgs:
    pass


# ============================================================
# 📋 Command catalogue: (name, usage, description)
# ============================================================

LONG_POSITION = "long_position"
CLOSE_LONG_POSITION = "close_long_position"
GAMBLER_POSITION = "gambler_position"
CLOSE_GAMBLER_POSITION = "close_gambler_position"
SWING_POSITION = "swing_position"
CLOSE_SWING_POSITION = "close_swing_position"
CLEAR_POSITIONS = "clear_positions"
BULL_MARKET = "bull_market"

OPEN_COMMANDS = {
    LONG_POSITION: PositionKind.LONG,
    GAMBLER_POSITION: PositionKind.GAMBLER,
    SWING_POSITION: PositionKind.SWING,
}

CLOSE_COMMANDS = {
    CLOSE_LONG_POSITION: PositionKind.LONG,
    CLOSE_GAMBLER_POSITION: PositionKind.GAMBLER,
    CLOSE_SWING_POSITION: PositionKind.SWING,
}

COMMANDS = [
    (LONG_POSITION, "TICKER ENTRY STOP AMOUNT", "Open a long position"),
    (CLOSE_LONG_POSITION, "TICKER EXIT AMOUNT", "Close a long position"),
    (GAMBLER_POSITION, "TICKER ENTRY STOP TAKE_PROFIT AMOUNT", "Open a gambler position"),
    (CLOSE_GAMBLER_POSITION, "TICKER EXIT AMOUNT", "Close a gambler position"),
    (SWING_POSITION, "TICKER ENTRY STOP TAKE_PROFIT AMOUNT", "Open a swing position"),
    (CLOSE_SWING_POSITION, "TICKER EXIT AMOUNT", "Close a swing position"),
    (CLEAR_POSITIONS, "", "Clear all positions of this expert"),
    (BULL_MARKET, "set|close TICKER [ENTRY STOP TAKE_PROFIT AMOUNT]", "Set or close a bull market position"),
]

USAGE = {name: usage for name, usage, _ in COMMANDS}
