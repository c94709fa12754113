from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, String, DateTime, Integer, Text, UniqueConstraint
from .db import Base


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class Lesson(Base):
	__tablename__ = "lessons"
	id = Column(String(64), primary_key=True, index=True)
	title = Column(Text, nullable=False)
	description = Column(Text, nullable=True)
	# Path of the uploaded PDF the lesson was generated from, if any
	pdf_path = Column(Text, nullable=True)
	lesson_plan = Column(Text, nullable=True)  # JSON string: {title, description, items}
	created_at = Column(DateTime, default=_utcnow, nullable=False)
	# At most one row is active; enforced by LessonLifecycle, not the schema
	is_active = Column(Boolean, default=False, nullable=False)


class Answer(Base):
	__tablename__ = "answers"
	__table_args__ = (
		UniqueConstraint("lesson_id", "item_index", "student_id", name="uq_answer_per_student_item"),
	)
	id = Column(Integer, primary_key=True, autoincrement=True)
	lesson_id = Column(String(64), nullable=False, index=True)
	item_index = Column(Integer, nullable=False)
	item_id = Column(String(128), nullable=True)
	student_id = Column(String(128), nullable=False)
	answer = Column(Text, nullable=False)
	item_type = Column(String(16), nullable=True)  # 'quiz', 'poll', 'text'
	submitted_at = Column(DateTime, default=_utcnow, nullable=False)
