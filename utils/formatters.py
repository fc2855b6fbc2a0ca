# =====================================================================
# formatters.py
# ---------------------------------------------------------------
# Text builders for Telegram (HTML parse mode).
# Prices, portfolio overview, help text.
# =====================================================================

from html import escape


def format_price(value: float) -> str:
    """100.0 → '100', 12.5 → '12.5'"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def bold(text) -> str:
    return f"<b>{escape(str(text))}</b>"


def format_embed_html(embed) -> str:
    """
    Portfolio document → HTML message.

    <b>Portfolio Overview for X</b>

    <b>AAPL</b>
    Entry Price: 100
    ...
    """
    blocks = [bold(embed.title)]

    for f in embed.fields:
        blocks.append(f"{bold(f.name)}\n{escape(f.value)}")

    return "\n\n".join(blocks)


def format_help(commands, entries_topic: str) -> str:
    lines = ["🤖 <b>Expert Positions Bot</b>", ""]
    for name, usage, _ in commands:
        lines.append(f"• <code>/{name}{' ' + escape(usage) if usage else ''}</code>")
    lines.append("")
    lines.append(
        f"Use the commands inside your expert group. Portfolio updates are posted "
        f"in the {bold(entries_topic)} topic."
    )
    return "\n".join(lines)
