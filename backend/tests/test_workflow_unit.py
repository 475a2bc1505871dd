import asyncio
from datetime import datetime

import pytest

from b1dialog.errors import ConflictError, NotFoundError
from b1dialog.workflow import SessionWorkflow, elapsed_seconds


def test_elapsed_seconds_floors_and_clamps():
	t0 = datetime(2024, 1, 1, 12, 0, 0)
	assert elapsed_seconds(t0, datetime(2024, 1, 1, 12, 1, 30, 999999)) == 90
	assert elapsed_seconds(t0, t0) == 0
	assert elapsed_seconds(datetime(2024, 1, 1, 12, 0, 5), t0) == 0


def test_start_records_clock_time(store, generator, clock):
	workflow = SessionWorkflow(store, generator, clock=clock)
	session_id = workflow.start("C1", "P1", "work")
	row = store.select_one("b1_sessions", {"id": session_id})
	assert row["start_time"] == clock.now
	assert row["completed"] is False
	assert row["difficulty_level"] is None


def test_submit_completes_and_writes_progress(store, generator, clock):
	workflow = SessionWorkflow(store, generator, clock=clock)
	session_id = workflow.start("C1", "P1", "work", "B1")
	clock.advance(42)
	outcome = asyncio.run(workflow.submit_results("C1", "P1", "work", "B1", 8, 10, {"ok": 1}, session_id=session_id))
	assert outcome == {"session_id": session_id, "duration_sec": 42}
	progress = workflow.read_progress("C1", "P1", "work")
	assert progress["progress_summary"] == "Summary #1"
	assert progress["updated_at"] == clock.now

	with pytest.raises(ConflictError):
		asyncio.run(workflow.submit_results("C1", "P1", "work", "B1", 8, 10, {"ok": 1}, session_id=session_id))


def test_lost_race_is_a_conflict(store, generator, clock, monkeypatch):
	workflow = SessionWorkflow(store, generator, clock=clock)
	session_id = workflow.start("C1", "P1", "work")
	# Another submission completes the row between the read and the conditional update
	monkeypatch.setattr(store, "complete_session", lambda sid, fields: False)
	with pytest.raises(ConflictError):
		asyncio.run(workflow.submit_results("C1", "P1", "work", "B1", 1, 2, {}, session_id=session_id))
	assert generator.calls == []


def test_unknown_session(store, generator):
	workflow = SessionWorkflow(store, generator)
	with pytest.raises(NotFoundError):
		asyncio.run(workflow.submit_results("C1", "P1", "work", "B1", 1, 2, {}, session_id="missing"))
