"""
core/validator.py
-----------------
Price ordering checks applied before any position is opened.
"""

from typing import Optional

from core.errors import InvalidParameters


def validate_position_parameters(
    entry_price: float,
    stop_loss: float,
    take_profit: Optional[float] = None,
) -> None:
    """
    stop_loss < entry_price < take_profit (take_profit only when given).
    Raises InvalidParameters otherwise.
    """
    if stop_loss >= entry_price:
        raise InvalidParameters("Stop loss must be less than entry price.")

    if take_profit is not None and take_profit <= entry_price:
        raise InvalidParameters("Take profit must be greater than entry price.")
