from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_store, require_param
from ..schemas import DialogResultCreate
from ..store import RecordStore

# Append-only results, mounted when B1_RESULTS_MODE=simple
router = APIRouter(prefix="/b1-results", tags=["b1_results"])


@router.post("")
def create_result(req: DialogResultCreate, store: RecordStore = Depends(get_store)):
	store.insert("b1_dialog_results", req.model_dump())
	return {"ok": True}


@router.get("")
def list_results(
	class_code: Optional[str] = Query(default=None, alias="class"),
	store: RecordStore = Depends(get_store),
):
	rows = store.select(
		"b1_dialog_results",
		{"class_code": require_param(class_code, "class")},
		order_by="created_at",
	)
	return {"ok": True, "rows": rows}
