"""
services/positions_service/portfolio_renderer.py
------------------------------------------------
Builds the portfolio overview document of one expert.

The document is platform neutral (title, color, fields); utils/formatters.py
turns it into a Telegram HTML message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from services.positions_service.position_store import PositionStore
from utils.formatters import format_price

EMBED_COLOR = 0x0099FF


@dataclass(frozen=True)
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass
class PortfolioEmbed:
    title: str
    color: int = EMBED_COLOR
    fields: List[EmbedField] = field(default_factory=list)


class PortfolioRenderer:
    def __init__(self, store: PositionStore):
        self.store = store

    def render(self, expert: str, hidden: Iterable[str] = ()) -> PortfolioEmbed:
        """
        One field per ticker, in the portfolio's insertion order.
        Tickers in `hidden` show "Open" instead of their last closed price.
        """
        hidden = set(hidden)
        embed = PortfolioEmbed(title=f"Portfolio Overview for {expert}")

        portfolio = self.store.portfolio(expert)
        if not portfolio:
            embed.fields.append(EmbedField("No positions", "No active positions found."))
            return embed

        for ticker, position in portfolio.items():
            closed = position.closed_price
            if closed is None or ticker in hidden:
                closed_label = "Open"
            else:
                closed_label = format_price(closed)

            embed.fields.append(
                EmbedField(
                    name=ticker,
                    value=(
                        f"Entry Price: {format_price(position.entry_price)}\n"
                        f"Stop Loss: {format_price(position.stop_loss)}\n"
                        f"Amount: {position.amount}\n"
                        f"Closed Price: {closed_label}"
                    ),
                    inline=True,
                )
            )

        return embed
