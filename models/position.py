"""
models/position.py
-------------------
Record of one tracked position of an expert.

Stored on disk with camelCase keys:
    {"entryPrice": 100, "closedPrice": null, "stopLoss": 90, "amount": 10}
"takeProfit" is only written when set.
"""

from dataclasses import dataclass
from typing import Optional

from core.errors import StoreCorrupted


def _number(value: float):
    """Whole floats are written as JSON integers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _read_number(raw: dict, key: str, ticker: str) -> float:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StoreCorrupted(f"Position {ticker}: '{key}' must be a number, got {value!r}")
    return float(value)


@dataclass
class Position:
    ticker: str
    entry_price: float
    stop_loss: float
    amount: int
    take_profit: Optional[float] = None
    closed_price: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "entryPrice": _number(self.entry_price),
            "closedPrice": _number(self.closed_price) if self.closed_price is not None else None,
            "stopLoss": _number(self.stop_loss),
        }
        if self.take_profit is not None:
            data["takeProfit"] = _number(self.take_profit)
        data["amount"] = self.amount
        return data

    @classmethod
    def from_dict(cls, ticker: str, raw: dict) -> "Position":
        if not isinstance(raw, dict):
            raise StoreCorrupted(f"Position {ticker}: expected an object, got {type(raw).__name__}")

        amount = raw.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise StoreCorrupted(f"Position {ticker}: 'amount' must be a non-negative integer")

        closed = raw.get("closedPrice")
        take_profit = raw.get("takeProfit")

        return cls(
            ticker=ticker,
            entry_price=_read_number(raw, "entryPrice", ticker),
            stop_loss=_read_number(raw, "stopLoss", ticker),
            amount=amount,
            take_profit=_read_number(raw, "takeProfit", ticker) if take_profit is not None else None,
            closed_price=_read_number(raw, "closedPrice", ticker) if closed is not None else None,
        )
