"""Standalone HTML documents for generated content and the student lesson page."""

from __future__ import annotations
import logging
import re
import time
from pathlib import Path
from typing import Any, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .content_store import LessonRecord
from .errors import NotFoundError, ValidationError
from .items import Quiz
from .settings import settings


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

env = Environment(
	loader=FileSystemLoader(str(TEMPLATES_DIR)),
	autoescape=select_autoescape(["html", "xml"]),
)

_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")


def _bullets(text: str) -> List[str]:
	points = []
	for line in (text or "").splitlines():
		line = _BULLET.sub("", line).strip().strip("*").strip()
		if line:
			points.append(line)
	return points


def _paragraphs(text: str) -> List[str]:
	return [p.strip() for p in re.split(r"\n\s*\n", text or "") if p.strip()]


def render_quiz(quiz: Quiz, title: str = "Interactive Quiz") -> str:
	questions = [q.model_dump() for q in quiz.questions]
	if not questions:
		raise ValidationError("Quiz has no questions to render")
	return env.get_template("quiz.html").render(title=title, questions=questions)


def render_flashcards(cards: List[Any], title: str = "Flashcards") -> str:
	return env.get_template("flashcards.html").render(title=title, cards=[c.model_dump() for c in cards])


def render_key_points(text: str, title: str = "Key Points") -> str:
	return env.get_template("keypoints.html").render(title=title, points=_bullets(text))


def render_summary(text: str, title: str = "Summary") -> str:
	return env.get_template("summary.html").render(title=title, paragraphs=_paragraphs(text))


def render_lesson(lesson: LessonRecord) -> str:
	items = [item.model_dump() for item in lesson.items]
	return env.get_template("lesson.html").render(lesson=lesson, items=items)


def _output_dir() -> Path:
	path = Path(settings.output_dir)
	path.mkdir(parents=True, exist_ok=True)
	return path


def save_rendered(kind: str, html: str) -> str:
	filename = f"{kind}-{int(time.time() * 1000)}.html"
	(_output_dir() / filename).write_text(html, encoding="utf-8")
	logger.info("saved rendered %s to %s", kind, filename)
	return filename


def safe_name(name: str) -> bool:
	return bool(name) and all(x not in name for x in ["..", "/", "\\"])


def load_rendered(filename: str) -> str:
	if not safe_name(filename) or not filename.endswith(".html"):
		raise ValidationError("Invalid file name")
	path = Path(settings.output_dir) / filename
	if not path.is_file():
		raise NotFoundError("Generated content not found")
	return path.read_text(encoding="utf-8")


def rendered_path(filename: Optional[str]) -> Optional[str]:
	return f"/api/generated/{filename}" if filename else None
