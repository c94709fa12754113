from __future__ import annotations
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..collector import AnswerCollector
from ..deps import get_collector


router = APIRouter(prefix="/api/answers", tags=["answers"])


class SubmitAnswerRequest(BaseModel):
	# All optional here; the collector reports every missing field at once
	lessonId: Optional[str] = None
	itemIndex: Optional[Any] = None
	itemId: Optional[str] = None
	studentId: Optional[str] = None
	answer: Optional[str] = None
	itemType: Optional[str] = None


@router.post("", status_code=201)
def submit_answer(req: SubmitAnswerRequest, collector: AnswerCollector = Depends(get_collector)):
	result = collector.submit(
		req.lessonId,
		req.itemIndex,
		req.studentId,
		req.answer,
		item_type=req.itemType,
		item_id=req.itemId,
	)
	return {"message": "Answer submitted successfully", "timestamp": result["timestamp"]}


@router.get("/lesson/{lesson_id}/item/{item_index}")
def item_answers(lesson_id: str, item_index: int, collector: AnswerCollector = Depends(get_collector)):
	return collector.item_statistics(lesson_id, item_index)


@router.get("/lesson/{lesson_id}/results")
def lesson_results(lesson_id: str, collector: AnswerCollector = Depends(get_collector)):
	return collector.lesson_report(lesson_id)


@router.get("/lesson/{lesson_id}/student/{student_id}")
def student_progress(lesson_id: str, student_id: str, collector: AnswerCollector = Depends(get_collector)):
	return collector.progress_for(lesson_id, student_id)
