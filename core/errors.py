"""
core/errors.py
--------------
Errors raised by the positions core and the command layer.

Every error carries a message that is safe to show to the user as-is.
"""


class PositionsBotError(Exception):
    """Base class for all bot errors."""


class InvalidParameters(PositionsBotError):
    """Stop loss / take profit ordering violated."""


class NoOpenPosition(PositionsBotError):
    """Close requested for a ticker that has no open position."""

    def __init__(self, ticker: str, label: str = ""):
        self.ticker = ticker
        kind = f"{label} " if label else ""
        super().__init__(f"No open {kind}position found for {ticker}.")


class MissingContext(PositionsBotError):
    """Command used outside a group, or without an entries topic."""


class MalformedInput(PositionsBotError):
    """A required argument is missing or not a valid number."""


class PersistenceError(PositionsBotError):
    """The positions file could not be written."""


class StoreCorrupted(PositionsBotError):
    """The positions file exists but does not hold the expected structure."""
