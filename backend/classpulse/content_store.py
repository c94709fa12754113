"""Content Store: persistence for lessons and answers.

No business rules live here; the single-active-lesson rule belongs to
``LessonLifecycle`` and duplicate prevention to ``AnswerCollector``. Every
mutating call is committed before it returns unless it runs inside
``ContentStore.transaction()``, in which case the outermost block commits.
"""

from __future__ import annotations
import functools
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import ConstraintError, DuplicateSubmissionError, NotFoundError, StorageError
from .items import LessonPlan
from .models import Answer, Lesson


logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


def _iso(value: Optional[datetime]) -> Optional[str]:
	return value.isoformat() if value is not None else None


@dataclass
class LessonRecord:
	id: str
	title: str
	description: Optional[str]
	pdf_path: Optional[str]
	plan: Optional[LessonPlan]
	created_at: datetime
	is_active: bool

	@property
	def items(self) -> List[Any]:
		return list(self.plan.items) if self.plan is not None else []

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"description": self.description,
			"pdf_path": self.pdf_path,
			"lesson_plan": self.plan.model_dump() if self.plan is not None else None,
			"created_at": _iso(self.created_at),
			"is_active": self.is_active,
		}


def _answer_row(a: Answer) -> Dict[str, Any]:
	return {
		"id": a.id,
		"lesson_id": a.lesson_id,
		"item_index": a.item_index,
		"item_id": a.item_id,
		"student_id": a.student_id,
		"answer": a.answer,
		"item_type": a.item_type,
		"submitted_at": _iso(a.submitted_at),
	}


def _storage_op(fn):
	"""Roll back and re-raise driver failures as StorageError."""
	@functools.wraps(fn)
	def wrapper(self: "ContentStore", *args, **kwargs):
		try:
			return fn(self, *args, **kwargs)
		except SQLAlchemyError as err:
			self._rollback()
			logger.exception("storage failure in %s", fn.__name__)
			raise StorageError("Storage unavailable", details=str(err)) from err
	return wrapper


class ContentStore:
	def __init__(self, db: Session) -> None:
		self.db = db
		self._depth = 0

	# -- transactions -------------------------------------------------------

	@contextmanager
	def transaction(self) -> Iterator["ContentStore"]:
		self._depth += 1
		try:
			yield self
			if self._depth == 1:
				self.db.commit()
		except SQLAlchemyError as err:
			self._rollback()
			raise StorageError("Storage unavailable", details=str(err)) from err
		except Exception:
			self._rollback()
			raise
		finally:
			self._depth -= 1

	def _commit(self) -> None:
		if self._depth == 0:
			self.db.commit()

	def _rollback(self) -> None:
		# Nested callers see the failure through the re-raised error
		if self._depth <= 1:
			self.db.rollback()

	# -- lessons ------------------------------------------------------------

	@_storage_op
	def create_lesson(
		self,
		lesson_id: str,
		title: str,
		description: Optional[str] = None,
		*,
		pdf_path: Optional[str] = None,
		plan: Optional[LessonPlan] = None,
		is_active: bool = False,
		created_at: Optional[datetime] = None,
	) -> LessonRecord:
		row = Lesson(
			id=lesson_id,
			title=title,
			description=description,
			pdf_path=pdf_path,
			lesson_plan=plan.to_json() if plan is not None else None,
			is_active=is_active,
		)
		if created_at is not None:
			row.created_at = created_at
		self.db.add(row)
		try:
			self.db.flush()
		except IntegrityError as err:
			self._rollback()
			raise ConstraintError(f"Lesson {lesson_id} already exists") from err
		self._commit()
		return self._to_record(row)

	@_storage_op
	def get_lesson(self, lesson_id: str) -> Optional[LessonRecord]:
		row = self.db.get(Lesson, lesson_id)
		if row is None:
			return None
		return self._to_record(row)

	@_storage_op
	def lesson_exists(self, lesson_id: str) -> bool:
		return self.db.scalar(select(func.count()).select_from(Lesson).where(Lesson.id == lesson_id)) > 0

	@_storage_op
	def list_lessons(self) -> List[Dict[str, Any]]:
		rows = self.db.execute(
			select(Lesson.id, Lesson.title, Lesson.description, Lesson.created_at, Lesson.is_active)
			.order_by(Lesson.created_at.desc())
		).all()
		return [
			{
				"id": r.id,
				"title": r.title,
				"description": r.description,
				"created_at": _iso(r.created_at),
				"is_active": bool(r.is_active),
			}
			for r in rows
		]

	@_storage_op
	def set_lesson_active(self, lesson_id: str, active: bool) -> int:
		res = self.db.execute(update(Lesson).where(Lesson.id == lesson_id).values(is_active=active))
		self._commit()
		return res.rowcount or 0

	@_storage_op
	def deactivate_all(self, *, except_id: Optional[str] = None) -> int:
		q = update(Lesson).where(Lesson.is_active.is_(True))
		if except_id is not None:
			q = q.where(Lesson.id != except_id)
		res = self.db.execute(q.values(is_active=False))
		self._commit()
		return res.rowcount or 0

	@_storage_op
	def active_lesson_ids(self) -> List[str]:
		return list(self.db.scalars(select(Lesson.id).where(Lesson.is_active.is_(True))))

	@_storage_op
	def delete_lesson(self, lesson_id: str) -> int:
		with self.transaction():
			removed_answers = self.db.execute(delete(Answer).where(Answer.lesson_id == lesson_id)).rowcount or 0
			res = self.db.execute(delete(Lesson).where(Lesson.id == lesson_id))
			if not res.rowcount:
				raise NotFoundError("Lesson not found")
		return removed_answers

	# -- answers ------------------------------------------------------------

	@_storage_op
	def insert_answer(
		self,
		lesson_id: str,
		item_index: int,
		student_id: str,
		answer: str,
		*,
		item_type: Optional[str] = None,
		item_id: Optional[str] = None,
	) -> Dict[str, Any]:
		row = Answer(
			lesson_id=lesson_id,
			item_index=item_index,
			item_id=item_id or f"item_{item_index}",
			student_id=student_id,
			answer=answer,
			item_type=item_type,
		)
		self.db.add(row)
		try:
			self.db.flush()
		except IntegrityError as err:
			# Unique (lesson_id, item_index, student_id) lost a concurrent race
			self._rollback()
			raise DuplicateSubmissionError("Answer already submitted for this item") from err
		self._commit()
		return _answer_row(row)

	@_storage_op
	def find_answer(self, lesson_id: str, item_index: int, student_id: str) -> Optional[Dict[str, Any]]:
		row = self.db.scalars(
			select(Answer).where(
				Answer.lesson_id == lesson_id,
				Answer.item_index == item_index,
				Answer.student_id == student_id,
			)
		).first()
		return _answer_row(row) if row is not None else None

	@_storage_op
	def answer_tally(self, lesson_id: str, item_index: int) -> List[Dict[str, Any]]:
		count = func.count(Answer.id).label("count")
		rows = self.db.execute(
			select(Answer.answer, count)
			.where(Answer.lesson_id == lesson_id, Answer.item_index == item_index)
			.group_by(Answer.answer)
			.order_by(count.desc(), Answer.answer.asc())
		).all()
		return [{"answer": r.answer, "count": r.count} for r in rows]

	@_storage_op
	def count_answers(self, lesson_id: str, item_index: Optional[int] = None) -> int:
		q = select(func.count(Answer.id)).where(Answer.lesson_id == lesson_id)
		if item_index is not None:
			q = q.where(Answer.item_index == item_index)
		return self.db.scalar(q) or 0

	@_storage_op
	def lesson_results(self, lesson_id: str) -> Dict[str, Any]:
		"""Flat per-(item, answer) tallies, distinct students and recent activity."""
		count = func.count(Answer.id).label("count")
		tallies = self.db.execute(
			select(Answer.item_index, func.max(Answer.item_type).label("item_type"), Answer.answer, count)
			.where(Answer.lesson_id == lesson_id)
			.group_by(Answer.item_index, Answer.answer)
			.order_by(Answer.item_index.asc(), count.desc(), Answer.answer.asc())
		).all()
		unique_students = self.db.scalar(
			select(func.count(func.distinct(Answer.student_id))).where(Answer.lesson_id == lesson_id)
		) or 0
		recent = self.db.execute(
			select(Answer.item_index, Answer.item_type, Answer.answer, Answer.submitted_at)
			.where(Answer.lesson_id == lesson_id)
			.order_by(Answer.submitted_at.desc(), Answer.id.desc())
			.limit(RECENT_ACTIVITY_LIMIT)
		).all()
		return {
			"tallies": [
				{"item_index": r.item_index, "item_type": r.item_type, "answer": r.answer, "count": r.count}
				for r in tallies
			],
			"unique_students": unique_students,
			"recent": [
				{
					"item_index": r.item_index,
					"item_type": r.item_type,
					"answer": r.answer,
					"submitted_at": _iso(r.submitted_at),
				}
				for r in recent
			],
		}

	@_storage_op
	def student_progress(self, lesson_id: str, student_id: str) -> List[Dict[str, Any]]:
		rows = self.db.execute(
			select(Answer.item_index, Answer.answer, Answer.submitted_at)
			.where(Answer.lesson_id == lesson_id, Answer.student_id == student_id)
			.order_by(Answer.item_index.asc())
		).all()
		return [
			{"item_index": r.item_index, "answer": r.answer, "submitted_at": _iso(r.submitted_at)}
			for r in rows
		]

	# -- helpers ------------------------------------------------------------

	def _to_record(self, row: Lesson) -> LessonRecord:
		plan = None
		if row.lesson_plan:
			try:
				plan = LessonPlan.from_json(row.lesson_plan)
			except (PydanticValidationError, json.JSONDecodeError) as err:
				raise StorageError(f"Lesson {row.id} has an unreadable lesson plan", details=str(err)) from err
		return LessonRecord(
			id=row.id,
			title=row.title,
			description=row.description,
			pdf_path=row.pdf_path,
			plan=plan,
			created_at=row.created_at,
			is_active=bool(row.is_active),
		)
