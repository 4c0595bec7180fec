from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from gangcheck.actions import Principal
from gangcheck.clock import Clock
from gangcheck.models import DailyChecklist
from gangcheck.state import ChecklistState

DETROIT = ZoneInfo("America/Detroit")


class FakeClock(Clock):
    def __init__(self, when: datetime):
        self.when = when
        super().__init__(DETROIT, now=lambda: self.when)


@dataclass
class FakeMember:
    id: int
    display_name: str

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"


@dataclass
class FakeRole:
    id: int
    name: str


class FakeRoster:
    def __init__(self, roles=None):
        self.roles = roles or {}

    def role_members(self, role_id):
        members = self.roles.get(str(role_id))
        return None if members is None else list(members)


class MemoryStore:
    def __init__(self, doc=None, fail_save=False):
        self.doc = doc
        self.saves = []
        self.fail_save = fail_save

    async def load(self):
        if self.doc is None:
            return DailyChecklist.fresh("2026-10-18")
        return copy.deepcopy(self.doc)

    async def save(self, doc):
        if self.fail_save:
            raise OSError("disk full")
        self.saves.append(copy.deepcopy(doc))
        self.doc = copy.deepcopy(doc)


def principal(member: FakeMember, *, roles=(), admin=False) -> Principal:
    return Principal(
        id=str(member.id),
        display_name=member.display_name,
        mention=member.mention,
        is_admin=admin,
        role_ids=frozenset(str(r) for r in roles),
    )


@pytest.fixture
def clock():
    # 2026-10-18 12:00 in Detroit
    return FakeClock(datetime(2026, 10, 18, 16, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def state(store, clock):
    return ChecklistState(store, clock)
