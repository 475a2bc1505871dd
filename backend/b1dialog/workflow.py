"""Start / finish / progress-rewrite sequence for b1 dialog sessions.

Timing is server-authoritative: the duration of a session is the whole
number of seconds between the stored ``start_time`` and the moment the
results arrive. Nothing is kept between calls; every step reads what it
needs back from the store.
"""
from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .errors import ConflictError, GeneratorError, NotFoundError
from .models import utcnow
from .prompts import SYSTEM_PERSONA, TEMPERATURE, build_progress_prompt
from .store import RecordStore

logger = logging.getLogger(__name__)

SESSIONS = "b1_sessions"
PROGRESS = "b1_progress"
PROGRESS_KEY = ["class_code", "participant_id", "topic_id"]


def elapsed_seconds(start_time: datetime, end_time: datetime) -> int:
	return max(0, math.floor((end_time - start_time).total_seconds()))


class SessionWorkflow:
	def __init__(self, store: RecordStore, generator: Any, clock: Callable[[], datetime] = utcnow) -> None:
		self.store = store
		self.generator = generator
		self.clock = clock

	def start(self, class_code: str, participant_id: str, topic_id: str, difficulty_level: Optional[str] = None) -> str:
		now = self.clock()
		row = self.store.insert(
			SESSIONS,
			{
				"class_code": class_code,
				"participant_id": participant_id,
				"topic_id": topic_id,
				"difficulty_level": difficulty_level,
				"completed": False,
				"start_time": now,
				"created_at": now,
			},
		)
		logger.info("Started b1 session %s for %s/%s on %s", row["id"], class_code, participant_id, topic_id)
		return row["id"]

	def _finish_started(self, session_id: str, results: Dict[str, Any]) -> int:
		session = self.store.select_one(SESSIONS, {"id": session_id})
		if session is None:
			raise NotFoundError("Session not found")
		if session["completed"]:
			raise ConflictError("Session already completed")
		duration = elapsed_seconds(session["start_time"], self.clock())
		if not self.store.complete_session(session_id, {**results, "duration_sec": duration}):
			# Lost the race against a concurrent submission
			raise ConflictError("Session already completed")
		return duration

	def _record_unstarted(self, class_code: str, participant_id: str, topic_id: str, results: Dict[str, Any]) -> str:
		now = self.clock()
		row = self.store.insert(
			SESSIONS,
			{
				"class_code": class_code,
				"participant_id": participant_id,
				"topic_id": topic_id,
				**results,
				"duration_sec": None,
				"completed": True,
				"start_time": now,
				"created_at": now,
			},
		)
		return row["id"]

	async def submit_results(
		self,
		class_code: str,
		participant_id: str,
		topic_id: str,
		difficulty_level: str,
		score_total: float,
		max_score: float,
		analysis_json: Any,
		session_id: Optional[str] = None,
		duration_sec: Optional[int] = None,
	) -> Dict[str, Any]:
		if duration_sec is not None:
			logger.warning("Ignoring client-reported duration_sec=%s; duration is measured by the server", duration_sec)
		results = {
			"difficulty_level": difficulty_level,
			"score_total": score_total,
			"max_score": max_score,
			"analysis_json": analysis_json,
		}
		if session_id:
			duration: Optional[int] = self._finish_started(session_id, results)
		else:
			session_id = self._record_unstarted(class_code, participant_id, topic_id, results)
			duration = None
		logger.info("Completed b1 session %s (duration_sec=%s)", session_id, duration)

		key = {"class_code": class_code, "participant_id": participant_id, "topic_id": topic_id}
		previous = self.store.select_one(PROGRESS, key)
		prompt = build_progress_prompt(
			previous["progress_summary"] if previous else None,
			score_total,
			max_score,
			difficulty_level,
			analysis_json,
		)
		summary = (await self.generator.generate(SYSTEM_PERSONA, prompt, TEMPERATURE)).strip()
		if not summary:
			raise GeneratorError("Generator returned an empty progress summary")
		self.store.upsert(PROGRESS, {**key, "progress_summary": summary, "updated_at": self.clock()}, PROGRESS_KEY)
		logger.info("Progress summary %s for %s/%s on %s", "updated" if previous else "created", class_code, participant_id, topic_id)
		return {"session_id": session_id, "duration_sec": duration}

	def read_progress(self, class_code: str, participant_id: str, topic_id: str) -> Optional[Dict[str, Any]]:
		return self.store.select_one(
			PROGRESS,
			{"class_code": class_code, "participant_id": participant_id, "topic_id": topic_id},
		)
