"""Gemini ``responseSchema`` definitions (OpenAPI subset) for structured output."""

from __future__ import annotations
from typing import Any, Dict, List


def _string(description: str, enum: List[str] | None = None) -> Dict[str, Any]:
	field: Dict[str, Any] = {"type": "STRING", "description": description}
	if enum:
		field["enum"] = enum
	return field


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
	names = list(properties)
	return {
		"type": "OBJECT",
		"properties": properties,
		"required": names,
		"propertyOrdering": names,
	}


def _answers(prefix: str, letters: str) -> Dict[str, Any]:
	ordinals = ["First", "Second", "Third", "Fourth"]
	return {f"{prefix}{letter}": _string(f"{ordinals[i]} option") for i, letter in enumerate(letters)}


TEXT_ITEM = _object({
	"type": _string("Item type - always text", ["text"]),
	"title": _string("Brief heading for this section"),
	"content": _string("A paragraph explaining what the lecture is currently discussing"),
})

QUIZ_MCQ_ITEM = _object({
	"type": _string("Item type - always quiz", ["quiz"]),
	"questionType": _string("Quiz question type - MCQ", ["MCQ"]),
	"question": _string("The multiple choice question text"),
	**_answers("answer", "ABCD"),
	"correctAnswer": _string("The correct answer letter", ["A", "B", "C", "D"]),
	"explanation": _string("Brief explanation of why the answer is correct"),
})

QUIZ_TF_ITEM = _object({
	"type": _string("Item type - always quiz", ["quiz"]),
	"questionType": _string("Quiz question type - TF", ["TF"]),
	"question": _string("The true/false statement"),
	"correctAnswer": _string("The correct answer - true or false", ["true", "false"]),
	"explanation": _string("Brief explanation of why the answer is correct"),
})

POLL_2_ITEM = _object({
	"type": _string("Item type - always poll", ["poll"]),
	"pollType": _string("Poll with 2 options", ["POLL_2"]),
	"question": _string("The poll question for the audience"),
	**_answers("option", "AB"),
})

POLL_4_ITEM = _object({
	"type": _string("Item type - always poll", ["poll"]),
	"pollType": _string("Poll with 4 options", ["POLL_4"]),
	"question": _string("The poll question for the audience"),
	**_answers("option", "ABCD"),
})


def lesson_plan_schema(num_items: int) -> Dict[str, Any]:
	return {
		"type": "OBJECT",
		"properties": {
			"title": _string("Title of the lesson based on the document"),
			"description": _string("Brief description of what this lesson covers"),
			"items": {
				"type": "ARRAY",
				"minItems": num_items,
				"maxItems": num_items,
				"items": {"anyOf": [TEXT_ITEM, QUIZ_MCQ_ITEM, QUIZ_TF_ITEM, POLL_2_ITEM, POLL_4_ITEM]},
			},
		},
		"required": ["title", "description", "items"],
		"propertyOrdering": ["title", "description", "items"],
	}


MCQ_QUESTION = _object({
	"question": _string("The multiple choice question text"),
	"type": _string("Question type - always MCQ", ["MCQ"]),
	**_answers("answer", "ABCD"),
	"correctAnswer": _string("The correct answer letter", ["A", "B", "C", "D"]),
	"explanation": _string("Brief explanation of why the answer is correct"),
})

TF_QUESTION = _object({
	"question": _string("The true/false statement"),
	"type": _string("Question type - always TF", ["TF"]),
	"correctAnswer": _string("The correct answer - true or false", ["true", "false"]),
	"explanation": _string("Brief explanation of why the answer is correct"),
})


def quiz_schema(num_questions: int) -> Dict[str, Any]:
	return {
		"type": "OBJECT",
		"properties": {
			"questions": {
				"type": "ARRAY",
				"minItems": num_questions,
				"maxItems": num_questions,
				"items": {"anyOf": [MCQ_QUESTION, TF_QUESTION]},
			},
		},
		"required": ["questions"],
	}


def poll_schema(num_options: int) -> Dict[str, Any]:
	poll_type = "POLL_2" if num_options == 2 else "POLL_4"
	return _object({
		"question": _string("The poll question for the audience"),
		"type": _string(f"Poll type with {num_options} options", [poll_type]),
		**_answers("option", "ABCD"[:num_options]),
	})


FLASHCARDS = {
	"type": "OBJECT",
	"properties": {
		"flashcards": {
			"type": "ARRAY",
			"items": _object({
				"front": _string("Question or term on the front of the card"),
				"back": _string("Answer or definition on the back of the card"),
			}),
		},
	},
	"required": ["flashcards"],
}
