from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import discord

from .models import Summary
from .state import ChecklistState

logger = logging.getLogger(__name__)


class GuildRoster:
    """Live role membership read from the gateway member cache."""

    def __init__(self, guild: Optional[discord.Guild]):
        self.guild = guild

    def role_members(self, role_id: str) -> Optional[List[discord.Member]]:
        if self.guild is None:
            return None
        try:
            role = self.guild.get_role(int(role_id))
        except (TypeError, ValueError):
            logger.warning("bad role id in checklist: %r", role_id)
            return None
        if role is None:
            return None
        return list(role.members)


def sort_by_name(members: Sequence[Any]) -> List[Any]:
    # sorted() is stable, equal names keep roster order
    return sorted(members, key=lambda m: (m.display_name or "").casefold())


async def summarize(state: ChecklistState, roster) -> Summary:
    await state.ensure_today()
    doc = state.doc

    members = None
    if doc.required_role_id is not None:
        members = roster.role_members(doc.required_role_id)

    if members is None:
        return Summary(total=None, done_count=len(doc.completed), remaining_count=None, remaining=[])

    done = set(doc.completed)
    total = len(members)
    finished = sum(1 for m in members if str(m.id) in done)
    remaining = sort_by_name([m for m in members if str(m.id) not in done])
    return Summary(
        total=total,
        done_count=min(finished, total),
        remaining_count=len(remaining),
        remaining=remaining,
    )
