"""
services/positions_service/position_store.py
--------------------------------------------
Durable mapping: expert name → {ticker → Position}.

Lifecycle:
    store = PositionStore(POSITIONS_FILE)
    store.load()          # once, at startup
    ...mutations...
    store.save()          # after every mutation, whole file overwritten

Single writer only: there is no locking between processes.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from core.errors import StoreCorrupted
from core.json_file import read_json, write_json
from models.position import Position

logger = logging.getLogger("position_store")

PortfolioMapping = Dict[str, Position]
Positions = Dict[str, PortfolioMapping]


class PositionStore:
    def __init__(self, path: str):
        self.path = path
        self._positions: Positions = {}

    # ============================================================
    # 📖 LOAD / 💾 SAVE
    # ============================================================
    def load(self) -> Positions:
        """
        Reads the positions file. A missing file means an empty store.
        Raises StoreCorrupted if the file does not hold the expected structure;
        the file itself is left untouched.
        """
        raw = read_json(self.path, default={})
        self._positions = self._parse(raw)

        total = sum(len(p) for p in self._positions.values())
        logger.info(f"📂 Loaded {total} positions for {len(self._positions)} experts from {self.path}")
        return self._positions

    def save(self, positions: Optional[Positions] = None) -> None:
        """Overwrites the positions file with the full structure."""
        if positions is not None:
            self._positions = positions

        data = {
            expert: {ticker: pos.to_dict() for ticker, pos in portfolio.items()}
            for expert, portfolio in self._positions.items()
        }
        write_json(self.path, data)
        logger.debug(f"💾 Positions saved to {self.path}")

    @staticmethod
    def _parse(raw) -> Positions:
        if not isinstance(raw, dict):
            raise StoreCorrupted(f"Positions file must hold an object, got {type(raw).__name__}")

        positions: Positions = {}
        for expert, portfolio in raw.items():
            if not isinstance(portfolio, dict):
                raise StoreCorrupted(f"Portfolio of {expert} must be an object")
            positions[expert] = {
                ticker: Position.from_dict(ticker, record)
                for ticker, record in portfolio.items()
            }
        return positions

    # ============================================================
    # 🔍 ACCESSORS
    # ============================================================
    @property
    def positions(self) -> Positions:
        return self._positions

    def experts(self) -> list[str]:
        return list(self._positions)

    def portfolio(self, expert: str) -> Mapping[str, Position]:
        """Read-only view of an expert's positions (empty when unknown)."""
        return MappingProxyType(self._positions.get(expert, {}))

    def get(self, expert: str, ticker: str) -> Optional[Position]:
        return self._positions.get(expert, {}).get(ticker)

    # ============================================================
    # ✏️ MUTATORS (in memory; callers save)
    # ============================================================
    def put(self, expert: str, position: Position) -> None:
        self._positions.setdefault(expert, {})[position.ticker] = position

    def remove(self, expert: str, ticker: str) -> Optional[Position]:
        portfolio = self._positions.get(expert)
        if not portfolio:
            return None
        return portfolio.pop(ticker, None)

    def clear(self, expert: str) -> int:
        portfolio = self._positions.pop(expert, None)
        return len(portfolio) if portfolio else 0
