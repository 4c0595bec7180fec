from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

import discord

BUTTON_PREFIX = "gangcheck:"


class UnknownAction(ValueError):
    pass


class Action(enum.Enum):
    DONE = "done"
    STATUS = "status"
    REMAINING = "remaining"
    SET_ROLE = "setgangrole"
    FORCE_RESET = "force-reset"
    PING_REMAINING = "ping-remaining"
    PANEL = "panel"
    HELP = "help"

    @property
    def custom_id(self) -> str:
        return BUTTON_PREFIX + self.value

    @property
    def admin_only(self) -> bool:
        return self in ADMIN_ACTIONS

    @classmethod
    def parse(cls, identifier: str) -> "Action":
        """Resolve a command name or button custom id."""
        name = identifier or ""
        if name.startswith(BUTTON_PREFIX):
            name = name[len(BUTTON_PREFIX):]
        try:
            return cls(name)
        except ValueError:
            raise UnknownAction(identifier) from None


ADMIN_ACTIONS = frozenset({Action.SET_ROLE, Action.FORCE_RESET, Action.PING_REMAINING, Action.PANEL})


@dataclass(frozen=True)
class Principal:
    id: str
    display_name: str
    mention: str
    is_admin: bool = False
    role_ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_interaction(cls, interaction: discord.Interaction) -> "Principal":
        user = interaction.user
        if not isinstance(user, discord.Member):
            return cls(id=str(user.id), display_name=user.display_name, mention=user.mention)
        perms = user.guild_permissions
        return cls(
            id=str(user.id),
            display_name=user.display_name,
            mention=user.mention,
            is_admin=perms.administrator or perms.manage_guild,
            role_ids=frozenset(str(r.id) for r in user.roles),
        )


@dataclass
class Reply:
    content: Optional[str] = None
    embed: Optional[discord.Embed] = None
    ephemeral: bool = True
    # sent after the first response, same visibility
    followups: List[str] = field(default_factory=list)

    @classmethod
    def chunked(cls, contents: List[str], ephemeral: bool = True) -> "Reply":
        return cls(contents[0], ephemeral=ephemeral, followups=list(contents[1:]))
