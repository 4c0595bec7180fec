from __future__ import annotations

import logging
from typing import Iterable, Optional

import requests

from .clock import Clock
from .models import DailyChecklist
from .store import StoreError

logger = logging.getLogger(__name__)


class ChecklistState:
    """Owns the single in-memory checklist and writes it back after every change.

    Every mutation is synchronous up to the ``await`` on the store, so two
    handlers never interleave inside one load-mutate-save step. Writes are
    last-write-wins.
    """

    def __init__(self, store, clock: Clock, doc: Optional[DailyChecklist] = None):
        self.store = store
        self.clock = clock
        self.doc = doc if doc is not None else DailyChecklist.fresh(clock.today())

    @classmethod
    async def open(cls, store, clock: Clock) -> "ChecklistState":
        state = cls(store, clock, await store.load())
        await state.ensure_today()
        return state

    async def persist(self) -> None:
        try:
            await self.store.save(self.doc)
        except (OSError, StoreError, requests.RequestException):
            logger.exception("failed to save checklist date=%s", self.doc.current_date)

    async def ensure_today(self) -> bool:
        today = self.clock.today()
        if self.doc.current_date == today:
            return False
        logger.info("rollover %s -> %s cleared=%d", self.doc.current_date, today, len(self.doc.completed))
        self.doc.current_date = today
        self.doc.completed = []
        await self.persist()
        return True

    def is_eligible(self, role_ids: Iterable[str]) -> bool:
        role = self.doc.required_role_id
        if role is None:
            return True
        return role in {str(r) for r in role_ids}

    def is_done(self, member_id) -> bool:
        return str(member_id) in self.doc.completed

    async def mark_done(self, member_id) -> bool:
        mid = str(member_id)
        if mid in self.doc.completed:
            return False
        self.doc.completed.append(mid)
        await self.persist()
        return True

    async def set_required_role(self, role_id) -> None:
        self.doc.required_role_id = None if role_id is None else str(role_id)
        await self.persist()

    async def force_reset(self) -> None:
        self.doc.current_date = self.clock.today()
        self.doc.completed = []
        await self.persist()

    async def set_panel(self, channel_id, message_id) -> None:
        self.doc.panel_channel_id = str(channel_id)
        self.doc.panel_message_id = str(message_id)
        await self.persist()

    async def clear_panel(self) -> None:
        self.doc.panel_channel_id = None
        self.doc.panel_message_id = None
        await self.persist()
