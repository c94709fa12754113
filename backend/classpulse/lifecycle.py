"""Lesson Lifecycle Manager.

Owns the single-active-lesson rule and the create/remove orchestration. Every
destructive step is preceded by an existence check so that a missing lesson
never leaves partial side effects behind.
"""

from __future__ import annotations
import logging
import uuid
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .content_store import ContentStore, LessonRecord
from .errors import NotFoundError, ValidationError
from .items import LessonPlan


logger = logging.getLogger(__name__)


def new_lesson_id() -> str:
	return str(uuid.uuid4())


def coerce_plan(data: Union[LessonPlan, Mapping[str, Any]]) -> LessonPlan:
	"""Schema-check generator output (or a client payload) as a LessonPlan."""
	if isinstance(data, LessonPlan):
		return data
	if not isinstance(data, Mapping):
		raise ValidationError("Lesson plan must be a JSON object")
	try:
		return LessonPlan.model_validate(dict(data))
	except PydanticValidationError as err:
		raise ValidationError(
			"Lesson plan does not match the expected schema",
			details=err.errors(include_url=False, include_context=False),
		) from err


class LessonLifecycle:
	def __init__(self, store: ContentStore) -> None:
		self.store = store

	def activate(self, lesson_id: str) -> LessonRecord:
		with self.store.transaction():
			if not self.store.lesson_exists(lesson_id):
				raise NotFoundError("Lesson not found")
			self.store.deactivate_all(except_id=lesson_id)
			self.store.set_lesson_active(lesson_id, True)
		logger.info("lesson %s activated", lesson_id)
		return self.store.get_lesson(lesson_id)

	def deactivate(self, lesson_id: str) -> LessonRecord:
		with self.store.transaction():
			if not self.store.set_lesson_active(lesson_id, False):
				raise NotFoundError("Lesson not found")
		logger.info("lesson %s deactivated", lesson_id)
		return self.store.get_lesson(lesson_id)

	def set_status(self, lesson_id: str, active: bool) -> LessonRecord:
		return self.activate(lesson_id) if active else self.deactivate(lesson_id)

	def create(
		self,
		title: str,
		description: Optional[str] = None,
		*,
		lesson_id: Optional[str] = None,
		pdf_path: Optional[str] = None,
		plan: Optional[Union[LessonPlan, Mapping[str, Any]]] = None,
	) -> LessonRecord:
		title = (title or "").strip()
		if not title:
			raise ValidationError.missing_fields(["title"])
		checked = coerce_plan(plan) if plan is not None else LessonPlan(title=title, description=description or "")
		record = self.store.create_lesson(
			lesson_id or new_lesson_id(),
			title,
			description,
			pdf_path=pdf_path,
			plan=checked,
		)
		logger.info("lesson %s created with %d items", record.id, len(record.items))
		return record

	def create_from_generated_content(
		self,
		generator_output: Union[LessonPlan, Mapping[str, Any]],
		*,
		pdf_path: Optional[str] = None,
		lesson_id: Optional[str] = None,
	) -> LessonRecord:
		plan = coerce_plan(generator_output)
		return self.create(
			plan.title,
			plan.description,
			lesson_id=lesson_id,
			pdf_path=pdf_path,
			plan=plan,
		)

	def remove(self, lesson_id: str) -> int:
		"""Delete a lesson and its answers; returns how many answers went with it."""
		with self.store.transaction():
			if not self.store.lesson_exists(lesson_id):
				raise NotFoundError("Lesson not found")
			removed = self.store.delete_lesson(lesson_id)
		logger.info("lesson %s deleted (%d answers)", lesson_id, removed)
		return removed
