import os

# Must be set before classpulse.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from classpulse.collector import AnswerCollector
from classpulse.content_store import ContentStore
from classpulse.db import Base, SessionLocal, engine
from classpulse.errors import GeneratorError
from classpulse.generators import get_generator
from classpulse.items import Flashcard, LessonPlan, MCQQuestion, Poll4, Quiz, TFQuestion, count_item_types
from classpulse.lifecycle import LessonLifecycle
from classpulse.main import app
from classpulse.settings import settings


SCENARIO_PLAN = {
	"title": "Intro to AI",
	"description": "Narrow vs general AI",
	"items": [
		{"type": "text", "title": "What is AI", "content": "AI builds machines that learn."},
		{
			"type": "quiz",
			"questionType": "MCQ",
			"question": "Which is narrow AI?",
			"answerA": "Chess engine",
			"answerB": "AGI",
			"answerC": "A toaster",
			"answerD": "None",
			"correctAnswer": "A",
			"explanation": "Chess engines do one task.",
		},
		{
			"type": "poll",
			"pollType": "POLL_2",
			"question": "Heard of AGI before?",
			"optionA": "Yes",
			"optionB": "No",
		},
	],
}

FULL_PLAN = {
	"title": "Every item kind",
	"description": "One of each",
	"items": SCENARIO_PLAN["items"] + [
		{
			"type": "quiz",
			"questionType": "TF",
			"question": "Deep learning is a subset of machine learning.",
			"correctAnswer": "true",
			"explanation": "It uses layered neural networks.",
		},
		{
			"type": "poll",
			"pollType": "POLL_4",
			"question": "Which AI topic interests you most?",
			"optionA": "Vision",
			"optionB": "Language",
			"optionC": "Robotics",
			"optionD": "Ethics",
		},
	],
}


@pytest.fixture(autouse=True)
def tmp_dirs(tmp_path, monkeypatch):
	monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
	monkeypatch.setattr(settings, "output_dir", str(tmp_path / "generated"))
	monkeypatch.setattr(settings, "public_base_url", None)
	return tmp_path


@pytest.fixture
def db_session():
	Base.metadata.drop_all(bind=engine)
	Base.metadata.create_all(bind=engine)
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


@pytest.fixture
def store(db_session):
	return ContentStore(db_session)


@pytest.fixture
def lifecycle(store):
	return LessonLifecycle(store)


@pytest.fixture
def collector(store):
	return AnswerCollector(store)


@pytest.fixture
def scenario_lesson(lifecycle):
	return lifecycle.create_from_generated_content(SCENARIO_PLAN, lesson_id="L1")


class FakeGenerator:
	"""Stands in for the Gemini-backed ContentGenerator in route tests."""

	def __init__(self):
		self.fail_with = None
		self.calls = []

	def _record(self, name, *args):
		self.calls.append((name, args))
		if self.fail_with is not None:
			raise self.fail_with

	async def generate_lesson_plan(self, pdf_bytes, num_items):
		self._record("lesson_plan", len(pdf_bytes), num_items)
		plan = LessonPlan.model_validate(FULL_PLAN)
		return plan, {
			"pdfSize": len(pdf_bytes),
			"numItemsRequested": num_items,
			"actualItemsGenerated": len(plan.items),
			"itemTypes": count_item_types(plan.items),
		}

	async def generate_quiz(self, text, num_questions=5):
		self._record("quiz", text, num_questions)
		quiz = Quiz(questions=[
			MCQQuestion(
				question="What does <AI> stand for?",
				answerA="Artificial Intelligence",
				answerB="Automated Input",
				answerC="Applied Informatics",
				answerD="Analog Interface",
				correctAnswer="A",
				explanation="By definition.",
			),
			TFQuestion(question="AGI exists today.", correctAnswer="false", explanation="It is still a research goal."),
		])
		return quiz, {"textLength": len(text), "numQuestionsRequested": num_questions, "actualQuestionsGenerated": 2}

	async def generate_poll(self, text, num_options=4):
		self._record("poll", text, num_options)
		poll = Poll4(question="Most interesting?", optionA="Vision", optionB="Language", optionC="Robotics", optionD="Ethics")
		return poll, {"textLength": len(text), "pollType": poll.type, "numOptions": num_options}

	async def generate_summary(self, text, details=""):
		self._record("summary", text, details)
		return "AI is broad.\n\nNarrow AI does one thing."

	async def extract_key_points(self, text, details=""):
		self._record("keypoints", text, details)
		return "- Narrow AI is task specific\n- General AI does not exist yet"

	async def generate_flashcards(self, text, details=""):
		self._record("flashcards", text, details)
		return [Flashcard(front="AGI", back="Artificial general intelligence")]

	async def generate_title(self, text):
		self._record("title", text)
		return "Intro to AI"


@pytest.fixture
def fake_generator():
	return FakeGenerator()


@pytest.fixture
def client(db_session, fake_generator):
	app.dependency_overrides[get_generator] = lambda: fake_generator
	try:
		with TestClient(app) as c:
			yield c
	finally:
		app.dependency_overrides.clear()


@pytest.fixture
def failing_generator(fake_generator):
	fake_generator.fail_with = GeneratorError("Gemini request failed with HTTP 503", details="overloaded")
	return fake_generator
