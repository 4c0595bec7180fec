from __future__ import annotations

import logging

import discord

from . import config
from .bot import ChecklistBot
from .clock import Clock
from .keepalive import start_keepalive
from .store import make_store

logger = logging.getLogger("gangcheck")


def main():
    discord.utils.setup_logging(level=getattr(logging, config.LOG_LEVEL, logging.INFO), root=True)

    for problem in config.validate():
        logger.warning("config: %s", problem)

    start_keepalive(config.PORT)

    clock = Clock(config.TIMEZONE)
    bot = ChecklistBot(make_store(clock), clock, guild_id=config.GUILD_ID)
    try:
        bot.run(config.TOKEN or "", log_handler=None)
    except discord.LoginFailure:
        logger.exception("login failed, not retrying")


if __name__ == "__main__":
    main()
