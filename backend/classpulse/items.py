"""Lesson content items and standalone generator shapes.

Items are a tagged union keyed on ``type`` with a second tag for quizzes
(``questionType``) and polls (``pollType``). Lessons persist the plan as a JSON
blob; it is parsed back into these models at the storage boundary.
"""

from __future__ import annotations
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Item(BaseModel):
	model_config = ConfigDict(extra="ignore")


class TextItem(_Item):
	type: Literal["text"] = "text"
	title: str
	content: str


class QuizMCQItem(_Item):
	type: Literal["quiz"] = "quiz"
	questionType: Literal["MCQ"] = "MCQ"
	question: str
	answerA: str
	answerB: str
	answerC: str
	answerD: str
	correctAnswer: Literal["A", "B", "C", "D"]
	explanation: str


class QuizTFItem(_Item):
	type: Literal["quiz"] = "quiz"
	questionType: Literal["TF"] = "TF"
	question: str
	correctAnswer: Literal["true", "false"]
	explanation: str


class Poll2Item(_Item):
	type: Literal["poll"] = "poll"
	pollType: Literal["POLL_2"] = "POLL_2"
	question: str
	optionA: str
	optionB: str


class Poll4Item(_Item):
	type: Literal["poll"] = "poll"
	pollType: Literal["POLL_4"] = "POLL_4"
	question: str
	optionA: str
	optionB: str
	optionC: str
	optionD: str


QuizItem = Annotated[Union[QuizMCQItem, QuizTFItem], Field(discriminator="questionType")]
PollItem = Annotated[Union[Poll2Item, Poll4Item], Field(discriminator="pollType")]
LessonItem = Annotated[Union[TextItem, QuizItem, PollItem], Field(discriminator="type")]


class LessonPlan(BaseModel):
	title: str
	description: str = ""
	items: List[LessonItem] = Field(default_factory=list)

	def to_json(self) -> str:
		return self.model_dump_json()

	@classmethod
	def from_json(cls, raw: str) -> "LessonPlan":
		return cls.model_validate_json(raw)


_items_adapter = TypeAdapter(List[LessonItem])


def parse_items(raw: Any) -> List[Any]:
	return _items_adapter.validate_python(raw)


def item_type_key(item: Any) -> str:
	if isinstance(item, (QuizMCQItem, QuizTFItem)):
		return f"quiz_{item.questionType}"
	if isinstance(item, (Poll2Item, Poll4Item)):
		return f"poll_{item.pollType}"
	return item.type


def count_item_types(items: List[Any]) -> Dict[str, int]:
	counts: Dict[str, int] = {}
	for item in items:
		key = item_type_key(item)
		counts[key] = counts.get(key, 0) + 1
	return counts


# Standalone quiz / poll / flashcard shapes produced by the generators

class MCQQuestion(_Item):
	type: Literal["MCQ"] = "MCQ"
	question: str
	answerA: str
	answerB: str
	answerC: str
	answerD: str
	correctAnswer: Literal["A", "B", "C", "D"]
	explanation: str


class TFQuestion(_Item):
	type: Literal["TF"] = "TF"
	question: str
	correctAnswer: Literal["true", "false"]
	explanation: str


QuizQuestion = Annotated[Union[MCQQuestion, TFQuestion], Field(discriminator="type")]


class Quiz(BaseModel):
	questions: List[QuizQuestion]


class Poll2(_Item):
	type: Literal["POLL_2"] = "POLL_2"
	question: str
	optionA: str
	optionB: str


class Poll4(_Item):
	type: Literal["POLL_4"] = "POLL_4"
	question: str
	optionA: str
	optionB: str
	optionC: str
	optionD: str


Poll = Annotated[Union[Poll2, Poll4], Field(discriminator="type")]
poll_adapter = TypeAdapter(Poll)


class Flashcard(_Item):
	front: str
	back: str


class FlashcardDeck(BaseModel):
	flashcards: List[Flashcard]
