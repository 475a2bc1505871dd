from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_store, require_param
from ..schemas import SessionCreate
from ..store import RecordStore

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("")
def create_session(req: SessionCreate, store: RecordStore = Depends(get_store)):
	store.insert("sessions", req.model_dump())
	return {"ok": True}


@router.get("")
def list_sessions(
	class_code: Optional[str] = Query(default=None, alias="class"),
	participant: Optional[str] = Query(default=None),
	store: RecordStore = Depends(get_store),
):
	filters = {"class_code": require_param(class_code, "class")}
	if participant:
		filters["participant_id"] = participant
	rows = store.select("sessions", filters, order_by="created_at")
	return {"ok": True, "rows": rows}
