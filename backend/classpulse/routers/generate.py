from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .. import renderers
from ..analysis import analyze_text
from ..errors import ValidationError
from ..generators import ContentGenerator, get_generator
from ..pdf_text import extract_pdf_text


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])


class TextRequest(BaseModel):
	extractedText: Optional[str] = None
	details: str = ""


class QuizRequest(TextRequest):
	numQuestions: int = 5


class PollRequest(TextRequest):
	numOptions: int = 4


def _require_text(req: TextRequest) -> str:
	text = (req.extractedText or "").strip()
	if not text:
		raise ValidationError("No text content provided")
	logger.info("generating from %d characters of text", len(text))
	return text


@router.post("/process-pdf")
async def process_pdf(file: Optional[UploadFile] = File(None)):
	if file is None:
		raise ValidationError("No file provided")
	if file.content_type != "application/pdf":
		raise ValidationError("File must be a PDF")
	return extract_pdf_text(await file.read())


@router.post("/generate/quiz")
async def generate_quiz(req: QuizRequest, generator: ContentGenerator = Depends(get_generator)):
	text = _require_text(req)
	analysis = analyze_text(text)
	quiz, metadata = await generator.generate_quiz(text, req.numQuestions)
	filename = renderers.save_rendered("quiz", renderers.render_quiz(quiz))
	return {
		"success": True,
		"quiz": quiz.model_dump(),
		"analysis": analysis,
		"metadata": metadata,
		"htmlPath": renderers.rendered_path(filename),
	}


@router.post("/generate/poll")
async def generate_poll(req: PollRequest, generator: ContentGenerator = Depends(get_generator)):
	text = _require_text(req)
	poll, metadata = await generator.generate_poll(text, req.numOptions)
	return {"success": True, "poll": poll.model_dump(), "metadata": metadata}


@router.post("/generate/summary")
async def generate_summary(req: TextRequest, generator: ContentGenerator = Depends(get_generator)):
	summary = await generator.generate_summary(_require_text(req), req.details)
	filename = renderers.save_rendered("summary", renderers.render_summary(summary))
	return {"success": True, "summary": summary, "htmlPath": renderers.rendered_path(filename)}


@router.post("/generate/keypoints")
async def generate_key_points(req: TextRequest, generator: ContentGenerator = Depends(get_generator)):
	key_points = await generator.extract_key_points(_require_text(req), req.details)
	filename = renderers.save_rendered("keypoints", renderers.render_key_points(key_points))
	return {"success": True, "keyPoints": key_points, "htmlPath": renderers.rendered_path(filename)}


@router.post("/generate/flashcards")
async def generate_flashcards(req: TextRequest, generator: ContentGenerator = Depends(get_generator)):
	cards = await generator.generate_flashcards(_require_text(req), req.details)
	filename = renderers.save_rendered("flashcards", renderers.render_flashcards(cards))
	return {
		"success": True,
		"flashcards": [c.model_dump() for c in cards],
		"htmlPath": renderers.rendered_path(filename),
	}


@router.post("/generate/title")
async def generate_title(req: TextRequest, generator: ContentGenerator = Depends(get_generator)):
	return {"title": await generator.generate_title(_require_text(req))}


@router.get("/generated/{filename}", response_class=HTMLResponse)
def generated_file(filename: str):
	return HTMLResponse(renderers.load_rendered(filename))
