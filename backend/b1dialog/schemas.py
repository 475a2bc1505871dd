"""Request bodies accepted by the HTTP layer.

Identifiers must be non-empty (numbers are accepted and turned into strings);
unknown keys are rejected.
"""
from __future__ import annotations
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator

Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RequestBody(BaseModel):
	model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)


class SessionCreate(RequestBody):
	class_code: Identifier
	participant_id: Identifier
	lesson_id: Identifier
	session_type: Identifier
	score: Optional[float] = None
	max_score: Optional[float] = None
	duration_seconds: Optional[int] = None


class DialogResultCreate(RequestBody):
	class_code: Identifier
	participant_id: Identifier
	lesson_id: Identifier
	score: float
	max_score: float
	level: Identifier
	duration_seconds: Optional[int] = None
	result_json: Optional[Any] = None


class B1StartRequest(RequestBody):
	class_code: Identifier
	participant_id: Identifier
	topic_id: Identifier
	difficulty_level: Optional[str] = None


class B1ResultsRequest(RequestBody):
	class_code: Identifier
	participant_id: Identifier
	topic_id: Identifier
	difficulty_level: Identifier
	score_total: float
	max_score: float
	analysis_json: Any
	session_id: Optional[str] = None
	# Accepted for wire compatibility; the server measures duration itself
	duration_sec: Optional[int] = None

	@field_validator("analysis_json")
	@classmethod
	def _analysis_present(cls, value: Any) -> Any:
		if value is None:
			raise ValueError("analysis_json is required")
		return value
