from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import discord
from discord import app_commands
from discord.ext import tasks

from .actions import BUTTON_PREFIX, Action, Principal, Reply, UnknownAction
from .clock import Clock
from .dispatch import Dispatcher
from .panel import PanelView, refresh_panel
from .roster import GuildRoster
from .state import ChecklistState

logger = logging.getLogger(__name__)

intents = discord.Intents.default()
intents.guilds = True
intents.members = True


class ChecklistBot(discord.Client):
    def __init__(self, store, clock: Clock, guild_id: int = 0):
        super().__init__(intents=intents)
        self.tree = app_commands.CommandTree(self)
        self.store = store
        self.clock = clock
        self.guild_id = guild_id
        self.state: Optional[ChecklistState] = None
        self.dispatcher: Optional[Dispatcher] = None
        self.panel_view: Optional[PanelView] = None
        self.tree.on_error = self.on_app_command_error
        register_commands(self)

    async def setup_hook(self):
        self.state = await ChecklistState.open(self.store, self.clock)
        self.panel_view = PanelView(self.run_action)
        self.dispatcher = Dispatcher(self.state, notify=self.refresh_panel, panel_view=self.panel_view)
        self.add_view(self.panel_view)
        await self.sync_commands()
        self.rollover_loop.start()

    async def on_ready(self):
        logger.info("Logged in as %s", self.user)

    async def sync_commands(self):
        try:
            if self.guild_id:
                guild = discord.Object(id=self.guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            logger.info("synced %d commands guild=%s", len(synced), self.guild_id or "global")
        except discord.HTTPException:
            logger.exception("command sync failed guild=%s", self.guild_id)

    async def refresh_panel(self):
        await refresh_panel(self, self.state)

    # =========================================================
    # Rollover timer
    # =========================================================
    @tasks.loop(minutes=1)
    async def rollover_loop(self):
        try:
            if await self.state.ensure_today():
                await self.dispatcher.refresh()
        except Exception:
            logger.exception("rollover check failed")

    @rollover_loop.before_loop
    async def _before_rollover(self):
        await self.wait_until_ready()

    # =========================================================
    # Interaction plumbing
    # =========================================================
    async def run_action(self, interaction: discord.Interaction, action: Action, role: Any = None):
        channel = interaction.channel if isinstance(interaction.channel, discord.abc.Messageable) else None
        reply = await self.dispatcher.handle(
            action,
            Principal.from_interaction(interaction),
            GuildRoster(interaction.guild),
            role=role,
            channel=channel,
        )
        await send_reply(interaction, reply)

    async def on_interaction(self, interaction: discord.Interaction):
        # PanelView answers its own buttons; other ids under our prefix get an explicit rejection.
        if interaction.type is not discord.InteractionType.component:
            return
        custom_id = (interaction.data or {}).get("custom_id", "")
        if not custom_id.startswith(BUTTON_PREFIX):
            return
        try:
            Action.parse(custom_id)
        except UnknownAction:
            logger.warning("unknown button %s", custom_id)
            if not interaction.response.is_done():
                await interaction.response.send_message("Unknown action.", ephemeral=True)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        logger.error("command %s failed", getattr(interaction.command, "name", None), exc_info=error)
        if not interaction.response.is_done():
            await interaction.response.send_message("⚠️ Something went wrong.", ephemeral=True)


async def send_reply(interaction: discord.Interaction, reply: Reply):
    kwargs: Dict[str, Any] = {"ephemeral": reply.ephemeral}
    if reply.content is not None:
        kwargs["content"] = reply.content
    if reply.embed is not None:
        kwargs["embed"] = reply.embed
    if interaction.response.is_done():
        await interaction.followup.send(**kwargs)
    else:
        await interaction.response.send_message(**kwargs)
    for content in reply.followups:
        await interaction.followup.send(content=content, ephemeral=reply.ephemeral)


# =========================================================
# Commands
# =========================================================
def register_commands(bot: ChecklistBot):
    tree = bot.tree

    @tree.command(name="done", description="Mark that you submitted today’s 1000 bud.")
    @app_commands.guild_only()
    async def done(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.DONE)

    @tree.command(name="status", description="See today’s progress (done vs remaining).")
    @app_commands.guild_only()
    async def status(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.STATUS)

    @tree.command(name="remaining", description="List members who still need to submit today.")
    @app_commands.guild_only()
    async def remaining(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.REMAINING)

    @tree.command(name="setgangrole", description="Set the required gang role for submissions.")
    @app_commands.describe(role="Select the gang role")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def setgangrole(interaction: discord.Interaction, role: discord.Role):
        await bot.run_action(interaction, Action.SET_ROLE, role=role)

    @tree.command(name="force-reset", description="Force reset today’s checklist (admin).")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def force_reset(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.FORCE_RESET)

    @tree.command(name="ping-remaining", description="Ping the members who haven’t submitted yet (admin).")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def ping_remaining(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.PING_REMAINING)

    @tree.command(name="panel", description="Post a live checklist panel with buttons (admin).")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def panel(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.PANEL)

    @tree.command(name="checklist-help", description="How the daily checklist works.")
    async def checklist_help(interaction: discord.Interaction):
        await bot.run_action(interaction, Action.HELP)
