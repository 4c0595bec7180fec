from __future__ import annotations

import os
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TZ = "America/Detroit"
DEFAULT_PORT = 3000

_problems: List[str] = []


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _problems.append(f"{name}={raw!r} is not a number, using {default}")
        return default


def _env_zone(name: str, default: str) -> ZoneInfo:
    raw = os.getenv(name) or default
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        _problems.append(f"{name}={raw!r} is not a known time zone, using {default}")
        return ZoneInfo(default)


# =========================================================
# Discord
# =========================================================
TOKEN: Optional[str] = os.getenv("DISCORD_TOKEN") or os.getenv("TOKEN")
GUILD_ID = _env_int("GUILD_ID", 0)

# =========================================================
# Liveness / storage / time
# =========================================================
PORT = _env_int("PORT", DEFAULT_PORT)
DATA_FILE = os.getenv("DATA_FILE", "data.json")
TIMEZONE = _env_zone("CHECKLIST_TZ", DEFAULT_TZ)

GITHUB_REPO = os.getenv("GITHUB_REPO")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_FILE = os.getenv("GITHUB_FILE", "data.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def github_enabled() -> bool:
    return bool(GITHUB_REPO and GITHUB_TOKEN)


def validate() -> List[str]:
    """Return configuration problems; none of them stop the process."""
    problems = list(_problems)
    if not TOKEN:
        problems.append("DISCORD_TOKEN is missing, login will fail")
    if not GUILD_ID:
        problems.append("GUILD_ID is not set, commands will be registered globally")
    return problems
