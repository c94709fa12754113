from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..content_store import ContentStore
from ..deps import get_store
from ..errors import NotFoundError
from ..renderers import render_lesson

router = APIRouter(tags=["pages"])


@router.get("/lesson/{lesson_id}", response_class=HTMLResponse, include_in_schema=False)
def lesson_page(lesson_id: str, store: ContentStore = Depends(get_store)):
	lesson = store.get_lesson(lesson_id)
	if lesson is None:
		raise NotFoundError("Lesson not found")
	return HTMLResponse(render_lesson(lesson))
