from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_store, get_workflow, require_param
from ..schemas import B1ResultsRequest, B1StartRequest
from ..store import RecordStore
from ..workflow import SESSIONS, SessionWorkflow

router = APIRouter(tags=["b1"])


@router.post("/b1-start")
def start_session(req: B1StartRequest, workflow: SessionWorkflow = Depends(get_workflow)):
	session_id = workflow.start(req.class_code, req.participant_id, req.topic_id, req.difficulty_level)
	return {"ok": True, "session_id": session_id}


@router.post("/b1-results")
async def submit_results(req: B1ResultsRequest, workflow: SessionWorkflow = Depends(get_workflow)):
	outcome = await workflow.submit_results(**req.model_dump())
	return {"ok": True, **outcome}


@router.get("/b1-results")
def list_results(
	class_code: Optional[str] = Query(default=None, alias="class"),
	participant: Optional[str] = Query(default=None),
	store: RecordStore = Depends(get_store),
):
	filters = {"class_code": require_param(class_code, "class")}
	if participant:
		filters["participant_id"] = participant
	rows = store.select(SESSIONS, filters, order_by="start_time")
	return {"ok": True, "rows": rows}


@router.get("/b1-progress")
def read_progress(
	class_code: Optional[str] = Query(default=None, alias="class"),
	participant: Optional[str] = Query(default=None),
	topic: Optional[str] = Query(default=None),
	workflow: SessionWorkflow = Depends(get_workflow),
):
	row = workflow.read_progress(
		require_param(class_code, "class"),
		require_param(participant, "participant"),
		require_param(topic, "topic"),
	)
	return {"ok": True, "row": row}
