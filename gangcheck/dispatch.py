from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import discord

from .actions import Action, Principal, Reply
from .embeds import (
    build_done_embed,
    build_help_embed,
    build_panel_embed,
    build_status_embed,
    ping_messages,
    remaining_messages,
)
from .roster import summarize
from .state import ChecklistState

logger = logging.getLogger(__name__)

ADMINS_ONLY = "🚫 Admins only."
NOT_IN_ROLE = "❌ You don’t have the required gang role to submit."
ROLE_FIRST = "Set a gang role with **/setgangrole** first."
EVERYONE_DONE = "Everyone is done. 🎉"

Notify = Callable[[], Awaitable[None]]


class Dispatcher:
    """Routes one command or button press to its handler and builds the reply.

    ``notify`` is the side channel used to refresh the live panel after a
    change. It is best effort: failures are logged and dropped, and never
    change the reply.
    """

    def __init__(self, state: ChecklistState, notify: Optional[Notify] = None, panel_view: Any = None):
        self.state = state
        self.notify = notify
        self.panel_view = panel_view
        self._handlers: Dict[Action, Callable[..., Awaitable[Reply]]] = {
            Action.DONE: self._done,
            Action.STATUS: self._status,
            Action.REMAINING: self._remaining,
            Action.SET_ROLE: self._set_role,
            Action.FORCE_RESET: self._force_reset,
            Action.PING_REMAINING: self._ping_remaining,
            Action.PANEL: self._panel,
            Action.HELP: self._help,
        }
        missing = set(Action) - set(self._handlers)
        if missing:
            raise RuntimeError(f"no handler for {sorted(a.value for a in missing)}")

    async def handle(
        self,
        action: Action,
        principal: Principal,
        roster,
        *,
        role: Any = None,
        channel: Any = None,
    ) -> Reply:
        if await self.state.ensure_today():
            await self.refresh()

        if action.admin_only and not principal.is_admin:
            logger.debug("rejected %s for user=%s", action.value, principal.id)
            return Reply(ADMINS_ONLY)

        handler = self._handlers[action]
        return await handler(principal, roster, role=role, channel=channel)

    async def refresh(self) -> None:
        if self.notify is None:
            return
        try:
            await self.notify()
        except Exception:
            logger.warning("panel refresh failed", exc_info=True)

    # =========================================================
    # Open to everyone
    # =========================================================
    async def _done(self, principal: Principal, roster, **_) -> Reply:
        doc = self.state.doc
        if not self.state.is_eligible(principal.role_ids):
            return Reply(NOT_IN_ROLE)
        if not await self.state.mark_done(principal.id):
            return Reply(f"✅ You’re already marked as done for **{doc.current_date}**.")

        logger.info("done user=%s date=%s", principal.id, doc.current_date)
        await self.refresh()
        summary = await summarize(self.state, roster)
        return Reply(embed=build_done_embed(doc, summary))

    async def _status(self, principal: Principal, roster, **_) -> Reply:
        summary = await summarize(self.state, roster)
        return Reply(embed=build_status_embed(self.state.doc, summary))

    async def _remaining(self, principal: Principal, roster, **_) -> Reply:
        summary = await summarize(self.state, roster)
        if not summary.tracked:
            return Reply(ROLE_FIRST)
        return Reply.chunked(remaining_messages(summary.remaining))

    async def _help(self, principal: Principal, roster, **_) -> Reply:
        return Reply(embed=build_help_embed())

    # =========================================================
    # Admin
    # =========================================================
    async def _set_role(self, principal: Principal, roster, role: Any = None, **_) -> Reply:
        if role is None:
            return Reply("⚠️ Pick a role.")
        await self.state.set_required_role(role.id)
        logger.info("gang role set role=%s by=%s", role.id, principal.id)
        await self.refresh()
        return Reply(f"✅ Gang role set to **{role.name}**.")

    async def _force_reset(self, principal: Principal, roster, **_) -> Reply:
        await self.state.force_reset()
        logger.info("force reset by=%s date=%s", principal.id, self.state.doc.current_date)
        await self.refresh()
        return Reply("♻️ Today’s checklist has been reset.")

    async def _ping_remaining(self, principal: Principal, roster, **_) -> Reply:
        summary = await summarize(self.state, roster)
        if not summary.tracked:
            return Reply(ROLE_FIRST)
        if not summary.remaining:
            return Reply(EVERYONE_DONE)
        return Reply.chunked(ping_messages(summary.remaining), ephemeral=False)

    async def _panel(self, principal: Principal, roster, channel: Any = None, **_) -> Reply:
        if channel is None:
            return Reply("⚠️ Use this in a text channel.")
        summary = await summarize(self.state, roster)
        embed = build_panel_embed(self.state.doc, summary)
        try:
            if self.panel_view is None:
                message = await channel.send(embed=embed)
            else:
                message = await channel.send(embed=embed, view=self.panel_view)
        except discord.HTTPException:
            logger.warning("could not post panel in channel=%s", getattr(channel, "id", None), exc_info=True)
            return Reply("⚠️ I couldn’t post the panel here — check my permissions.")

        await self.state.set_panel(channel.id, message.id)
        logger.info("panel posted channel=%s message=%s", channel.id, message.id)
        return Reply("📌 Panel posted. It updates itself as people submit.")
