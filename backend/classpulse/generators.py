"""LLM-backed content generators.

Each public method makes exactly one Gemini call and validates the result
against the pydantic item models; anything malformed surfaces as
``GeneratorError``.
"""

from __future__ import annotations
import base64
import json
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from . import llm_schemas
from .errors import GeneratorError, ValidationError
from .gemini_client import GeminiClient
from .items import FlashcardDeck, LessonPlan, Quiz, count_item_types, poll_adapter


logger = logging.getLogger(__name__)

MAX_ITEMS = 50
TITLE_MAX_CHARS = 50

M = TypeVar("M", bound=BaseModel)


def extract_json_object(text: str) -> Any:
	try:
		return json.loads(text)
	except ValueError:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except ValueError:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last > first:
		try:
			return json.loads(text[first : last + 1])
		except ValueError:
			pass
	raise GeneratorError("LLM did not return valid JSON.", details=text[:500])


def _validated(model: Type[M], raw: str) -> M:
	data = extract_json_object(raw)
	try:
		return model.model_validate(data)
	except PydanticValidationError as err:
		raise GeneratorError(
			f"LLM output does not match the {model.__name__} schema",
			details=err.errors(include_url=False, include_context=False),
		) from err


def _check_count(name: str, value: int) -> int:
	if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_ITEMS:
		raise ValidationError(f"{name} must be an integer between 1 and {MAX_ITEMS}")
	return value


def _requirements(details: str, fallback: str = "") -> str:
	details = (details or "").strip()
	return f"Additional requirements: {details}" if details else fallback


def _lesson_plan_prompt(num_items: int) -> str:
	return (
		f"Create a lesson plan with EXACTLY {num_items} items based on the attached PDF document.\n\n"
		"Mix three kinds of items:\n"
		"1. TEXT items (type \"text\", title, content): informational paragraphs explaining key concepts.\n"
		"2. QUIZ items (type \"quiz\"): questionType \"MCQ\" with question, answerA-answerD, correctAnswer "
		"(A-D) and explanation, or questionType \"TF\" with question, correctAnswer (\"true\"/\"false\") and explanation.\n"
		"3. POLL items (type \"poll\"): ungraded vibe checks, pollType \"POLL_2\" with optionA-optionB "
		"or \"POLL_4\" with optionA-optionD.\n\n"
		"Structure: open with text that introduces the topic, follow with polls that gauge understanding, "
		"and use quizzes to test specific facts. Text should give context for the questions after it. "
		"Use ONLY material from the document."
	)


def _quiz_prompt(text: str, num_questions: int) -> str:
	return (
		f"Generate EXACTLY {num_questions} quiz questions about the content below, mixing two types.\n"
		"MCQ: type \"MCQ\", question, answerA-answerD (four distinct, meaningful options without letter prefixes), "
		"correctAnswer as the letter only, explanation.\n"
		"TF: type \"TF\", question, correctAnswer \"true\" or \"false\", explanation. No options.\n"
		"If the content contains in-class activities, exercises or practice questions, base questions on those first.\n\n"
		f"Content:\n{text}"
	)


def _poll_prompt(text: str, num_options: int) -> str:
	poll_type = "POLL_2" if num_options == 2 else "POLL_4"
	return (
		"Create a single poll question for a lecture-hall vibe check (not a graded quiz) based on the content below.\n"
		f"Use type \"{poll_type}\" with {num_options} options that students might plausibly pick. "
		"There is no correct answer; gauge sentiment, confidence or interest.\n\n"
		f"Content:\n{text}"
	)


class ContentGenerator:
	def __init__(self, client: GeminiClient) -> None:
		self.client = client

	async def generate_lesson_plan(self, pdf_bytes: bytes, num_items: int) -> Tuple[LessonPlan, Dict[str, Any]]:
		_check_count("numItems", num_items)
		logger.info("generating lesson plan: %d items from %d-byte PDF", num_items, len(pdf_bytes))
		parts = [
			{"text": _lesson_plan_prompt(num_items)},
			{"inline_data": {"mime_type": "application/pdf", "data": base64.b64encode(pdf_bytes).decode("ascii")}},
		]
		raw = await self.client.generate_multimodal(parts, response_schema=llm_schemas.lesson_plan_schema(num_items))
		plan = _validated(LessonPlan, raw)
		if not plan.items:
			raise GeneratorError("LLM returned a lesson plan without items")
		metadata = {
			"pdfSize": len(pdf_bytes),
			"numItemsRequested": num_items,
			"actualItemsGenerated": len(plan.items),
			"itemTypes": count_item_types(plan.items),
		}
		return plan, metadata

	async def generate_quiz(self, text: str, num_questions: int = 5) -> Tuple[Quiz, Dict[str, Any]]:
		_check_count("numQuestions", num_questions)
		raw = await self.client.generate(_quiz_prompt(text, num_questions), response_schema=llm_schemas.quiz_schema(num_questions))
		quiz = _validated(Quiz, raw)
		metadata = {
			"textLength": len(text),
			"numQuestionsRequested": num_questions,
			"actualQuestionsGenerated": len(quiz.questions),
		}
		return quiz, metadata

	async def generate_poll(self, text: str, num_options: int = 4) -> Tuple[Any, Dict[str, Any]]:
		if num_options not in (2, 4):
			raise ValidationError("numOptions must be 2 or 4")
		raw = await self.client.generate(_poll_prompt(text, num_options), response_schema=llm_schemas.poll_schema(num_options))
		data = extract_json_object(raw)
		try:
			poll = poll_adapter.validate_python(data)
		except PydanticValidationError as err:
			raise GeneratorError(
				"LLM output does not match the poll schema",
				details=err.errors(include_url=False, include_context=False),
			) from err
		return poll, {"textLength": len(text), "pollType": poll.type, "numOptions": num_options}

	async def generate_summary(self, text: str, details: str = "") -> str:
		prompt = (
			"Write a concise, well-structured summary of the following educational content that captures "
			"the main points and key takeaways.\n"
			f"{_requirements(details)}\n\n"
			f"Content:\n{text}"
		)
		return (await self.client.generate(prompt)).strip()

	async def extract_key_points(self, text: str, details: str = "") -> str:
		prompt = (
			"Extract the key points from the following educational content as a bulleted list of clear, "
			"concise statements. Focus on the most important concepts, definitions and takeaways.\n"
			f"{_requirements(details)}\n\n"
			f"Content:\n{text}"
		)
		return (await self.client.generate(prompt)).strip()

	async def generate_flashcards(self, text: str, details: str = "") -> List[Any]:
		prompt = (
			"Generate study flashcards from the following content. Each card has a clear question or term "
			"on the front and a concise answer or definition on the back.\n"
			f"{_requirements(details, 'Create 10-15 flashcards covering the key concepts.')}\n\n"
			f"Content:\n{text}"
		)
		raw = await self.client.generate(prompt, response_schema=llm_schemas.FLASHCARDS)
		return list(_validated(FlashcardDeck, raw).flashcards)

	async def generate_title(self, text: str) -> str:
		prompt = (
			f"Based on the following content, write a concise lesson title of at most {TITLE_MAX_CHARS} characters "
			"that captures the main subject. Return only the title, without quotes or formatting.\n\n"
			f"{text}"
		)
		title = (await self.client.generate(prompt)).strip().strip("\"'").strip()
		if not title:
			raise GeneratorError("LLM returned an empty title")
		return title[:TITLE_MAX_CHARS]


async def get_generator() -> AsyncIterator[ContentGenerator]:
	"""FastAPI dependency: one Gemini client per request, closed afterwards."""
	client = GeminiClient()
	try:
		yield ContentGenerator(client)
	finally:
		await client.aclose()
