from datetime import timedelta

import pytest

from gangcheck.models import DailyChecklist
from gangcheck.state import ChecklistState

from .conftest import MemoryStore


@pytest.mark.parametrize("stale", ["2026-10-17", "2025-01-01", "2026-10-19", "garbage"])
async def test_rollover_clears_and_is_idempotent(store, clock, stale):
    state = ChecklistState(store, clock, DailyChecklist(stale, ["1", "2"], "9"))

    assert await state.ensure_today() is True
    assert state.doc.current_date == clock.today()
    assert state.doc.completed == []
    assert state.doc.required_role_id == "9"
    assert len(store.saves) == 1

    assert await state.ensure_today() is False
    assert await state.ensure_today() is False
    assert state.doc.completed == []
    assert len(store.saves) == 1


async def test_rollover_at_midnight(store, clock):
    state = ChecklistState(store, clock)
    await state.mark_done("1")

    clock.when = clock.when + timedelta(hours=12)
    assert await state.ensure_today() is True
    assert state.doc.current_date == "2026-10-19"
    assert state.doc.completed == []


async def test_open_loads_and_rolls_over(clock):
    store = MemoryStore(DailyChecklist("2026-10-10", ["1"], "9", "5", "6"))
    state = await ChecklistState.open(store, clock)
    assert state.doc.current_date == "2026-10-18"
    assert state.doc.completed == []
    assert state.doc.has_panel
    assert store.doc.current_date == "2026-10-18"


async def test_mark_done_twice_keeps_one_entry(state, store):
    assert await state.mark_done(123) is True
    assert await state.mark_done("123") is False
    assert state.doc.completed == ["123"]
    assert len(store.saves) == 1


async def test_force_reset_keeps_date(state):
    await state.mark_done("1")
    await state.mark_done("2")
    await state.force_reset()
    assert state.doc.completed == []
    assert state.doc.current_date == "2026-10-18"


def test_eligibility(state):
    assert state.is_eligible([])
    state.doc.required_role_id = "9"
    assert not state.is_eligible(["1", "2"])
    assert state.is_eligible([1, 9])


async def test_panel_refs_set_and_cleared_together(state, store):
    await state.set_panel(10, 20)
    assert (state.doc.panel_channel_id, state.doc.panel_message_id) == ("10", "20")
    await state.clear_panel()
    assert not state.doc.has_panel
    assert store.doc.panel_message_id is None


async def test_save_failure_is_logged_not_raised(clock, caplog):
    state = ChecklistState(MemoryStore(fail_save=True), clock)
    assert await state.mark_done("1") is True
    assert state.doc.completed == ["1"]
    assert "failed to save checklist" in caplog.text
