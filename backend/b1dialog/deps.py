from __future__ import annotations
from typing import Optional

from fastapi import Request

from .errors import ValidationError
from .store import RecordStore
from .workflow import SessionWorkflow


def get_store(request: Request) -> RecordStore:
	return request.app.state.store


def get_workflow(request: Request) -> SessionWorkflow:
	return request.app.state.workflow


def require_param(value: Optional[str], name: str) -> str:
	if value is None or not value.strip():
		raise ValidationError(f"Missing {name}")
	return value.strip()
