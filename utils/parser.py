"""
utils/parser.py
----------------
Turns the raw positional arguments of a command into its typed record.

    /gambler_position tsla 50 40 70 5
        → OpenPositionArgs(kind=GAMBLER, ticker="TSLA", entry_price=50.0,
                           stop_loss=40.0, take_profit=70.0, amount=5)

Anything missing or non-numeric raises MalformedInput with the usage line.
Price ordering (stop < entry < take profit) is checked later by the validator.
"""

import math
import re
from typing import Sequence

from core.errors import MalformedInput
from models.commands import (
    BULL_MARKET,
    CLEAR_POSITIONS,
    CLOSE_COMMANDS,
    OPEN_COMMANDS,
    USAGE,
    BullMarketAction,
    BullMarketArgs,
    ClearPositionsArgs,
    ClosePositionArgs,
    OpenPositionArgs,
    PositionKind,
)

_THOUSANDS_GROUP = re.compile(r",\d{3}$")


# =============================================================
# 🔤 Field parsers
# =============================================================

def parse_ticker(text: str) -> str:
    ticker = text.strip().lstrip("$#").upper()
    if not ticker or not ticker.replace(".", "").replace("-", "").replace("/", "").isalnum():
        raise MalformedInput(f"'{text}' is not a valid ticker symbol.")
    return ticker


def parse_price(text: str, label: str) -> float:
    # A decimal comma is accepted; "1,000" could be a thousands separator
    if "," in text and ("." in text or text.count(",") > 1 or _THOUSANDS_GROUP.search(text)):
        raise MalformedInput(f"{label} must be a plain number without thousands separators, got '{text}'.")

    try:
        value = float(text.replace(",", "."))
    except ValueError:
        raise MalformedInput(f"{label} must be a number, got '{text}'.") from None

    if not math.isfinite(value) or value <= 0:
        raise MalformedInput(f"{label} must be a positive number, got '{text}'.")
    return value


def parse_amount(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise MalformedInput(f"Amount must be a whole number of shares, got '{text}'.") from None

    if value <= 0:
        raise MalformedInput(f"Amount must be greater than zero, got '{text}'.")
    return value


# =============================================================
# 🔵 Command parser
# =============================================================

def _usage(command: str) -> str:
    usage = USAGE.get(command, "")
    return f"Usage: /{command} {usage}".rstrip()


def _expect(command: str, args: Sequence[str], count: int, what: str) -> None:
    if len(args) != count:
        raise MalformedInput(f"Please provide {what}.\n{_usage(command)}")


def parse_command_args(command: str, args: Sequence[str]):
    """Returns the typed argument record for `command`."""

    if command in OPEN_COMMANDS:
        kind = OPEN_COMMANDS[command]

        if kind == PositionKind.LONG:
            _expect(command, args, 4, "ticker symbol, entry price, stop loss and amount of shares")
            ticker, entry, stop, amount = args
            take_profit = None
        else:
            _expect(command, args, 5, "ticker symbol, entry price, stop loss, take profit and amount of shares")
            ticker, entry, stop, tp, amount = args
            take_profit = parse_price(tp, "Take profit")

        return OpenPositionArgs(
            kind=kind,
            ticker=parse_ticker(ticker),
            entry_price=parse_price(entry, "Entry price"),
            stop_loss=parse_price(stop, "Stop loss"),
            take_profit=take_profit,
            amount=parse_amount(amount),
        )

    if command in CLOSE_COMMANDS:
        _expect(command, args, 3, "ticker symbol, exit price and amount of shares to close")
        ticker, exit_price, amount = args
        return ClosePositionArgs(
            kind=CLOSE_COMMANDS[command],
            ticker=parse_ticker(ticker),
            exit_price=parse_price(exit_price, "Exit price"),
            amount=parse_amount(amount),
        )

    if command == CLEAR_POSITIONS:
        if args:
            raise MalformedInput(f"This command takes no arguments.\n{_usage(command)}")
        return ClearPositionsArgs()

    if command == BULL_MARKET:
        return _parse_bull_market(args)

    raise MalformedInput(f"Unknown command: /{command}")


def _parse_bull_market(args: Sequence[str]) -> BullMarketArgs:
    if not args:
        raise MalformedInput(f'Invalid action. Please specify "set" or "close".\n{_usage(BULL_MARKET)}')

    try:
        action = BullMarketAction(args[0].lower())
    except ValueError:
        raise MalformedInput(f'Invalid action. Please specify "set" or "close".\n{_usage(BULL_MARKET)}') from None

    if action == BullMarketAction.CLOSE:
        _expect(BULL_MARKET, args, 2, "the ticker symbol to close")
        return BullMarketArgs(action=action, ticker=parse_ticker(args[1]))

    _expect(BULL_MARKET, args, 6, "ticker symbol, entry price, stop loss, take profit and amount of shares")
    _, ticker, entry, stop, tp, amount = args
    return BullMarketArgs(
        action=action,
        ticker=parse_ticker(ticker),
        entry_price=parse_price(entry, "Entry price"),
        stop_loss=parse_price(stop, "Stop loss"),
        take_profit=parse_price(tp, "Take profit"),
        amount=parse_amount(amount),
    )
