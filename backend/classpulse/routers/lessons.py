from __future__ import annotations
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..content_store import ContentStore
from ..deps import get_lifecycle, get_store
from ..errors import NotFoundError
from ..lifecycle import LessonLifecycle


router = APIRouter(prefix="/api/lessons", tags=["lessons"])


class CreateLessonRequest(BaseModel):
	id: Optional[str] = None
	title: Optional[str] = None
	description: Optional[str] = None
	pdfPath: Optional[str] = None
	# Schema-checked by the lifecycle so mismatches come back as 400 with details
	lessonPlan: Optional[Dict[str, Any]] = None


class StatusRequest(BaseModel):
	isActive: bool


@router.get("")
def list_lessons(store: ContentStore = Depends(get_store)) -> List[Dict[str, Any]]:
	return store.list_lessons()


@router.get("/{lesson_id}")
def get_lesson(lesson_id: str, store: ContentStore = Depends(get_store)):
	lesson = store.get_lesson(lesson_id)
	if lesson is None:
		raise NotFoundError("Lesson not found")
	return lesson.to_dict()


@router.post("", status_code=201)
def create_lesson(req: CreateLessonRequest, lifecycle: LessonLifecycle = Depends(get_lifecycle)):
	title = req.title
	if not title and req.lessonPlan:
		title = req.lessonPlan.get("title")
	description = req.description
	if description is None and req.lessonPlan:
		description = req.lessonPlan.get("description")
	lesson = lifecycle.create(
		title,
		description,
		lesson_id=req.id,
		pdf_path=req.pdfPath,
		plan=req.lessonPlan,
	)
	return {"message": "Lesson created successfully", "id": lesson.id}


@router.patch("/{lesson_id}/status")
def update_status(lesson_id: str, req: StatusRequest, lifecycle: LessonLifecycle = Depends(get_lifecycle)):
	lesson = lifecycle.set_status(lesson_id, req.isActive)
	return {
		"message": f"Lesson {'activated' if req.isActive else 'deactivated'} successfully",
		"id": lesson.id,
		"is_active": lesson.is_active,
	}


@router.delete("/{lesson_id}")
def delete_lesson(lesson_id: str, lifecycle: LessonLifecycle = Depends(get_lifecycle)):
	removed = lifecycle.remove(lesson_id)
	return {"message": "Lesson deleted successfully", "answersRemoved": removed}
