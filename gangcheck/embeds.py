from __future__ import annotations

from typing import Any, List, Sequence

import discord

from .models import DailyChecklist, Summary

PREVIEW_LIMIT = 20
MESSAGE_LIMIT = 1900

CHECK_GREEN = discord.Color.from_rgb(87, 242, 135)
PANEL_BLURPLE = discord.Color.blurple()

NO_ROLE_HINT = "*(Set a gang role with **/setgangrole** to track everyone automatically)*"


def _mentions(members: Sequence[Any], sep: str = "\n", bullet: str = "") -> str:
    return sep.join(f"{bullet}{m.mention}" for m in members)


def progress_text(summary: Summary) -> str:
    if summary.tracked:
        return f"**Done:** {summary.done_count}/{summary.total}\n**Remaining:** {summary.remaining_count}"
    return f"**Done:** {summary.done_count}\n{NO_ROLE_HINT}"


def remaining_preview(summary: Summary) -> str:
    shown = list(summary.remaining)[:PREVIEW_LIMIT]
    if not shown:
        return "—"
    text = _mentions(shown, bullet="• ")
    extra = len(summary.remaining) - len(shown)
    if extra > 0:
        text += f"\n…and {extra} more"
    return text


def build_done_embed(doc: DailyChecklist, summary: Summary) -> discord.Embed:
    embed = discord.Embed(
        title="Submission Recorded",
        description=f"You’re marked as **DONE** for **{doc.current_date}**.",
        color=CHECK_GREEN,
        timestamp=discord.utils.utcnow(),
    )
    if summary.tracked:
        embed.add_field(name="Done", value=f"{summary.done_count}/{summary.total}", inline=True)
        embed.add_field(name="Remaining", value=str(summary.remaining_count), inline=True)
    else:
        embed.add_field(name="Done (no role set yet)", value=str(summary.done_count), inline=True)
    return embed


def build_status_embed(doc: DailyChecklist, summary: Summary) -> discord.Embed:
    embed = discord.Embed(
        title=f"Today’s Progress ({doc.current_date})",
        description=progress_text(summary),
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name=f"Remaining (first {PREVIEW_LIMIT})", value=remaining_preview(summary), inline=False)
    return embed


def build_panel_embed(doc: DailyChecklist, summary: Summary) -> discord.Embed:
    embed = discord.Embed(
        title="📋 Daily Submission Checklist",
        description=f"**Date:** {doc.current_date}\n{progress_text(summary)}",
        color=PANEL_BLURPLE,
        timestamp=discord.utils.utcnow(),
    )
    if summary.tracked:
        embed.add_field(name="Still to submit", value=remaining_preview(summary), inline=False)
    embed.set_footer(text="Press ✅ Mark Done once you’ve submitted today.")
    return embed


def build_help_embed() -> discord.Embed:
    embed = discord.Embed(title="❓ Checklist help", color=PANEL_BLURPLE)
    embed.add_field(
        name="Everyone",
        value=(
            "**/done** — mark yourself done for today\n"
            "**/status** — today’s progress\n"
            "**/remaining** — who still needs to submit"
        ),
        inline=False,
    )
    embed.add_field(
        name="Admins",
        value=(
            "**/setgangrole** — pick the role that has to submit\n"
            "**/force-reset** — clear today’s checklist now\n"
            "**/ping-remaining** — ping everyone who hasn’t submitted\n"
            "**/panel** — post the live checklist panel here"
        ),
        inline=False,
    )
    embed.set_footer(text="The checklist resets automatically at midnight.")
    return embed


def chunk_mentions(members: Sequence[Any], sep: str, limit: int = MESSAGE_LIMIT) -> List[str]:
    """Split mentions into message-sized pieces. Every member lands in exactly one piece."""
    chunks: List[str] = []
    current: List[str] = []
    size = 0
    for m in members:
        piece = m.mention
        added = len(piece) + (len(sep) if current else 0)
        if current and size + added > limit:
            chunks.append(sep.join(current))
            current, size = [], 0
            added = len(piece)
        current.append(piece)
        size += added
    if current:
        chunks.append(sep.join(current))
    return chunks


PING_PREFIX = "⏰ Daily check: "
PING_SUFFIX = "\nPlease submit your 1000 bud and use **/done**."


def ping_messages(remaining: Sequence[Any]) -> List[str]:
    budget = MESSAGE_LIMIT - len(PING_PREFIX) - len(PING_SUFFIX)
    chunks = chunk_mentions(remaining, sep=" ", limit=budget)
    if not chunks:
        return []
    chunks[0] = PING_PREFIX + chunks[0]
    chunks[-1] = chunks[-1] + PING_SUFFIX
    return chunks


def remaining_messages(remaining: Sequence[Any]) -> List[str]:
    if not remaining:
        return ["Everyone is done. 🎉"]
    return chunk_mentions(remaining, sep="\n")
