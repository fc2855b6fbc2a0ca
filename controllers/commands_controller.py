"""
commands_controller.py
----------------------
Command dispatcher for the expert position commands.

Flow of one command:
    received → context resolved (expert + entries topic)
             → arguments parsed into a typed record
             → lifecycle operation executed (store saved)
             → portfolio posted to the entries topic
             → command acknowledged

✔ Context or argument problems are rejected before anything is executed
✔ Every error is answered with a readable reply, never raised to the bot
✔ Closes schedule a second portfolio post after HIDE_CLOSED_DELAY_SEC
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from html import escape
from typing import Awaitable, Callable, Optional, Sequence, Set, Tuple

from core.errors import MalformedInput, MissingContext, PositionsBotError
from models.commands import (
    BullMarketAction,
    BullMarketArgs,
    ClearPositionsArgs,
    ClosePositionArgs,
    OpenPositionArgs,
    PositionKind,
)
from services.positions_service.portfolio_renderer import PortfolioRenderer
from services.positions_service.position_lifecycle import PositionLifecycle
from services.scheduler_service import DeferredRenderScheduler
from services.telegram_service.notifier import Notifier
from services.telegram_service.topic_directory import Destination, TopicDirectory
from utils.formatters import bold
from utils.parser import parse_command_args

logger = logging.getLogger("commands_controller")

GROUP_CHAT_TYPES = ("group", "supergroup")

Reply = Callable[[str], Awaitable[object]]


@dataclass(frozen=True)
class CommandInvocation:
    """Platform-neutral view of an incoming command."""
    command: str
    args: Sequence[str] = ()
    chat_id: int = 0
    chat_type: str = "private"
    chat_title: Optional[str] = None
    user: str = "unknown"


@dataclass(frozen=True)
class ExpertContext:
    expert: str
    destination: Destination


@dataclass
class CommandDispatcher:
    lifecycle: PositionLifecycle
    renderer: PortfolioRenderer
    notifier: Notifier
    topics: TopicDirectory
    scheduler: DeferredRenderScheduler = field(default_factory=DeferredRenderScheduler)
    entries_topic: str = "entries-and-exits"
    hide_closed_delay: float = 120.0
    hidden: Set[Tuple[str, str]] = field(default_factory=set)

    # ============================================================
    # 🧭 CONTEXT
    # ============================================================
    def resolve_context(self, invocation: CommandInvocation) -> ExpertContext:
        if invocation.chat_type not in GROUP_CHAT_TYPES:
            raise MissingContext("This command can only be used within a group.")

        expert = (invocation.chat_title or "").strip()
        if not expert:
            raise MissingContext("This chat has no name to track positions under.")

        destination = self.topics.destination(invocation.chat_id, self.entries_topic)
        if destination is None:
            raise MissingContext(
                f"The '{escape(self.entries_topic)}' topic does not exist for {bold(expert)}."
            )

        return ExpertContext(expert=expert, destination=destination)

    # ============================================================
    # 📥 DISPATCH
    # ============================================================
    async def dispatch(self, invocation: CommandInvocation, reply: Reply) -> bool:
        """Runs one command end to end. Returns True when it was executed."""
        logger.info(f"📥 Received command: {invocation.command} {list(invocation.args)} from {invocation.user}")

        try:
            ctx = self.resolve_context(invocation)
            parsed = parse_command_args(invocation.command, invocation.args)
        except MissingContext as e:
            # Context messages are already HTML
            logger.warning(f"⚠️ /{invocation.command} rejected: {e}")
            await reply(f"❌ {e}")
            return False
        except MalformedInput as e:
            logger.warning(f"⚠️ /{invocation.command} rejected: {e}")
            await reply(f"❌ {escape(str(e))}")
            return False

        try:
            message = await self.execute(ctx, parsed)
        except PositionsBotError as e:
            logger.warning(f"⚠️ /{invocation.command} failed for {ctx.expert}: {e}")
            await reply(f"❌ {escape(str(e))}")
            return False
        except Exception as e:
            logger.exception(f"❌ Error executing /{invocation.command} for {ctx.expert}: {e}")
            await reply(f"❌ An error occurred: {escape(str(e))}")
            return False

        await reply(message)
        return True

    async def execute(self, ctx: ExpertContext, parsed) -> str:
        """Runs the operation for a parsed record; returns the acknowledgement text."""
        if isinstance(parsed, OpenPositionArgs):
            return await self._open(ctx, parsed)
        if isinstance(parsed, ClosePositionArgs):
            return await self._close(ctx, parsed)
        if isinstance(parsed, ClearPositionsArgs):
            return self._clear(ctx)
        if isinstance(parsed, BullMarketArgs):
            return await self._bull_market(ctx, parsed)
        raise TypeError(f"Unsupported command arguments: {parsed!r}")

    # ============================================================
    # 📈 OPEN / ✅ CLOSE / 🗑️ CLEAR / 🐂 BULL MARKET
    # ============================================================
    async def _open(self, ctx: ExpertContext, args: OpenPositionArgs) -> str:
        self.lifecycle.open(
            ctx.expert,
            args.ticker,
            entry_price=args.entry_price,
            stop_loss=args.stop_loss,
            take_profit=args.take_profit,
            amount=args.amount,
        )
        await self.post_portfolio(ctx)

        icon = {PositionKind.LONG: "📈", PositionKind.GAMBLER: "🎲", PositionKind.SWING: "🔄"}[args.kind]
        return (
            f"{icon} {args.kind.value.capitalize()} position for {bold(args.ticker)} "
            f"added in {bold(ctx.destination.name)}."
        )

    async def _close(self, ctx: ExpertContext, args: ClosePositionArgs) -> str:
        self.lifecycle.close(ctx.expert, args.ticker, exit_price=args.exit_price, amount=args.amount)
        await self.post_portfolio(ctx)

        self.scheduler.schedule(
            (ctx.expert, args.ticker),
            self.hide_closed_delay,
            lambda: self._deferred_render(ctx, args.ticker),
        )
        return (
            f"✅ Closed {args.kind.value} position for {bold(args.ticker)} "
            f"in {bold(ctx.destination.name)}."
        )

    def _clear(self, ctx: ExpertContext) -> str:
        self.lifecycle.clear_all(ctx.expert)
        return f"🗑️ All positions cleared for {bold(ctx.expert)}."

    async def _bull_market(self, ctx: ExpertContext, args: BullMarketArgs) -> str:
        if args.action == BullMarketAction.SET:
            self.lifecycle.open(
                ctx.expert,
                args.ticker,
                entry_price=args.entry_price,
                stop_loss=args.stop_loss,
                take_profit=args.take_profit,
                amount=args.amount,
            )
            await self.post_portfolio(ctx)
            return f"📈 Bull market position for {bold(args.ticker)} set in {bold(ctx.destination.name)}."

        self.lifecycle.bull_market_close(ctx.expert, args.ticker)
        await self.post_portfolio(ctx)
        return f"✅ Closed bull market position for {bold(args.ticker)} in {bold(ctx.destination.name)}."

    # ============================================================
    # 🖼️ RENDER
    # ============================================================
    async def post_portfolio(self, ctx: ExpertContext):
        hidden = {ticker for expert, ticker in self.hidden if expert == ctx.expert}
        embed = self.renderer.render(ctx.expert, hidden=hidden)
        return await self.notifier.send_embed(ctx.destination, embed)

    async def _deferred_render(self, ctx: ExpertContext, ticker: str) -> None:
        key = (ctx.expert, ticker)
        self.hidden.add(key)
        try:
            await self.post_portfolio(ctx)
        finally:
            self.hidden.discard(key)

    # ============================================================
    # 🛑 SHUTDOWN
    # ============================================================
    async def shutdown(self) -> int:
        return await self.scheduler.cancel_all()
