from __future__ import annotations

import logging
from typing import Awaitable, Callable

import discord

from .actions import Action
from .embeds import build_panel_embed
from .roster import GuildRoster, summarize
from .state import ChecklistState

logger = logging.getLogger(__name__)

ActionRunner = Callable[[discord.Interaction, Action], Awaitable[None]]


# =========================================================
# UI: persistent panel buttons
# =========================================================
class PanelView(discord.ui.View):
    """Buttons under the panel message. Fixed custom ids so they survive restarts."""

    def __init__(self, run_action: ActionRunner):
        super().__init__(timeout=None)
        self.run_action = run_action

    @discord.ui.button(label="Mark Done", emoji="✅", style=discord.ButtonStyle.success, custom_id=Action.DONE.custom_id)
    async def mark_done(self, interaction: discord.Interaction, _button: discord.ui.Button):
        await self.run_action(interaction, Action.DONE)

    @discord.ui.button(label="Status", emoji="📊", style=discord.ButtonStyle.primary, custom_id=Action.STATUS.custom_id)
    async def status(self, interaction: discord.Interaction, _button: discord.ui.Button):
        await self.run_action(interaction, Action.STATUS)

    @discord.ui.button(label="Who’s Left", emoji="🕒", style=discord.ButtonStyle.secondary, custom_id=Action.REMAINING.custom_id)
    async def whos_left(self, interaction: discord.Interaction, _button: discord.ui.Button):
        await self.run_action(interaction, Action.REMAINING)

    @discord.ui.button(label="Ping Remaining", emoji="⏰", style=discord.ButtonStyle.danger, custom_id=Action.PING_REMAINING.custom_id)
    async def ping_remaining(self, interaction: discord.Interaction, _button: discord.ui.Button):
        await self.run_action(interaction, Action.PING_REMAINING)

    @discord.ui.button(label="Help", emoji="❓", style=discord.ButtonStyle.secondary, custom_id=Action.HELP.custom_id)
    async def help(self, interaction: discord.Interaction, _button: discord.ui.Button):
        await self.run_action(interaction, Action.HELP)

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item) -> None:
        logger.error("panel button %s failed", getattr(item, "custom_id", None), exc_info=error)
        if not interaction.response.is_done():
            await interaction.response.send_message("⚠️ Something went wrong.", ephemeral=True)


# =========================================================
# Refresh
# =========================================================
async def refresh_panel(client: discord.Client, state: ChecklistState) -> None:
    """Edit the recorded panel message in place. Raises on transient failures."""
    doc = state.doc
    if not doc.has_panel:
        return

    channel_id = int(doc.panel_channel_id)
    channel = client.get_channel(channel_id)
    try:
        if channel is None:
            channel = await client.fetch_channel(channel_id)
        message = channel.get_partial_message(int(doc.panel_message_id))
        summary = await summarize(state, GuildRoster(getattr(channel, "guild", None)))
        await message.edit(embed=build_panel_embed(doc, summary))
    except discord.NotFound:
        logger.warning("panel message %s/%s is gone, forgetting it", doc.panel_channel_id, doc.panel_message_id)
        await state.clear_panel()
