from __future__ import annotations
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text, UniqueConstraint
from .db import Base


def utcnow() -> datetime:
	# Naive UTC, the form the store persists and returns
	return datetime.now(timezone.utc).replace(tzinfo=None)


def new_session_id() -> str:
	return str(uuid.uuid4())


class PracticeSession(Base):
	__tablename__ = "sessions"
	id = Column(Integer, primary_key=True, autoincrement=True)
	class_code = Column(String(64), nullable=False, index=True)
	participant_id = Column(String(128), nullable=False, index=True)
	lesson_id = Column(String(128), nullable=False)
	session_type = Column(String(64), nullable=False)
	score = Column(Float, nullable=True)
	max_score = Column(Float, nullable=True)
	duration_seconds = Column(Integer, nullable=True)
	created_at = Column(DateTime, default=utcnow, nullable=False)


class DialogResult(Base):
	__tablename__ = "b1_dialog_results"
	# Append-only; rows are never updated after insert
	id = Column(Integer, primary_key=True, autoincrement=True)
	class_code = Column(String(64), nullable=False, index=True)
	participant_id = Column(String(128), nullable=False)
	lesson_id = Column(String(128), nullable=False)
	score = Column(Float, nullable=False)
	max_score = Column(Float, nullable=False)
	level = Column(String(32), nullable=False)
	duration_seconds = Column(Integer, nullable=True)
	result_json = Column(JSON, nullable=True)
	created_at = Column(DateTime, default=utcnow, nullable=False)


class B1Session(Base):
	__tablename__ = "b1_sessions"
	id = Column(String(36), primary_key=True, default=new_session_id)
	class_code = Column(String(64), nullable=False, index=True)
	participant_id = Column(String(128), nullable=False, index=True)
	topic_id = Column(String(128), nullable=False)
	difficulty_level = Column(String(32), nullable=True)
	score_total = Column(Float, nullable=True)
	max_score = Column(Float, nullable=True)
	duration_sec = Column(Integer, nullable=True)
	analysis_json = Column(JSON, nullable=True)
	# false -> true exactly once, see RecordStore.complete_session
	completed = Column(Boolean, default=False, nullable=False)
	start_time = Column(DateTime, default=utcnow, nullable=False)
	created_at = Column(DateTime, default=utcnow, nullable=False)


class B1Progress(Base):
	__tablename__ = "b1_progress"
	__table_args__ = (UniqueConstraint("class_code", "participant_id", "topic_id", name="uq_b1_progress_key"),)
	id = Column(Integer, primary_key=True, autoincrement=True)
	class_code = Column(String(64), nullable=False)
	participant_id = Column(String(128), nullable=False)
	topic_id = Column(String(128), nullable=False)
	progress_summary = Column(Text, nullable=False)
	updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
