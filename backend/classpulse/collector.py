"""Answer Collector: student submissions and the tallies built from them."""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .content_store import ContentStore
from .errors import DuplicateSubmissionError, NotFoundError, ValidationError


logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
	if value is None:
		return True
	if isinstance(value, str):
		return not value.strip()
	return False


def _coerce_index(value: Any) -> int:
	# bool is an int subclass; "true" is not a position
	if isinstance(value, bool):
		raise ValidationError("itemIndex must be an integer")
	try:
		index = int(value)
	except (TypeError, ValueError):
		raise ValidationError("itemIndex must be an integer") from None
	if isinstance(value, float) and value != index:
		raise ValidationError("itemIndex must be an integer")
	return index


class AnswerCollector:
	def __init__(self, store: ContentStore) -> None:
		self.store = store

	def submit(
		self,
		lesson_id: Optional[str],
		item_index: Any,
		student_id: Optional[str],
		answer_text: Optional[str],
		item_type: Optional[str] = None,
		item_id: Optional[str] = None,
	) -> Dict[str, Any]:
		missing = [
			name
			for name, value in (("lessonId", lesson_id), ("studentId", student_id), ("answer", answer_text))
			if _is_blank(value)
		]
		# Zero is a valid index, so only None counts as missing
		if item_index is None:
			missing.insert(1, "itemIndex")
		if missing:
			raise ValidationError.missing_fields(missing)

		index = _coerce_index(item_index)
		lesson = self.store.get_lesson(lesson_id)
		if lesson is None:
			raise NotFoundError("Lesson not found")
		items = lesson.items
		if index < 0 or index >= len(items):
			raise ValidationError(
				f"itemIndex {index} is out of range for a lesson with {len(items)} items",
				details={"itemIndex": index, "itemCount": len(items)},
			)

		authoritative_type = items[index].type
		if item_type and item_type != authoritative_type:
			logger.warning(
				"lesson %s item %d: client sent itemType=%r, storing %r",
				lesson_id, index, item_type, authoritative_type,
			)

		if self.store.find_answer(lesson_id, index, student_id) is not None:
			raise DuplicateSubmissionError("Answer already submitted for this item")

		row = self.store.insert_answer(
			lesson_id,
			index,
			student_id,
			str(answer_text),
			item_type=authoritative_type,
			item_id=item_id,
		)
		logger.debug("answer %s recorded for lesson %s item %d", row["id"], lesson_id, index)
		return {"id": row["id"], "timestamp": row["submitted_at"]}

	def item_statistics(self, lesson_id: str, item_index: int) -> Dict[str, Any]:
		return {
			"answers": self.store.answer_tally(lesson_id, item_index),
			"totalResponses": self.store.count_answers(lesson_id, item_index),
			"itemIndex": item_index,
		}

	def lesson_report(self, lesson_id: str) -> Dict[str, Any]:
		lesson = self.store.get_lesson(lesson_id)
		if lesson is None:
			raise NotFoundError("Lesson not found")
		results = self.store.lesson_results(lesson_id)

		by_item: Dict[int, Dict[str, Any]] = {}
		for stat in results["tallies"]:
			entry = by_item.setdefault(
				stat["item_index"],
				{
					"itemIndex": stat["item_index"],
					"itemType": stat["item_type"],
					"answers": [],
					"totalResponses": 0,
				},
			)
			entry["answers"].append({"answer": stat["answer"], "count": stat["count"]})
			entry["totalResponses"] += stat["count"]

		return {
			"lesson": {
				"id": lesson.id,
				"title": lesson.title,
				"isActive": lesson.is_active,
				"itemCount": len(lesson.items),
			},
			"uniqueStudents": results["unique_students"],
			"resultsByItem": [by_item[k] for k in sorted(by_item)],
			"recentActivity": results["recent"],
		}

	def progress_for(self, lesson_id: str, student_id: str) -> Dict[str, Any]:
		answers: List[Dict[str, Any]] = self.store.student_progress(lesson_id, student_id)
		return {
			"studentId": student_id,
			"lessonId": lesson_id,
			"answeredItems": [a["item_index"] for a in answers],
			"answers": answers,
		}
