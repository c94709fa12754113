import pytest
from pydantic import ValidationError

from classpulse.items import (
	LessonPlan,
	Poll2Item,
	Poll4Item,
	QuizMCQItem,
	QuizTFItem,
	TextItem,
	count_item_types,
	item_type_key,
	parse_items,
)

from .conftest import FULL_PLAN


def test_each_variant_survives_json_round_trip():
	plan = LessonPlan.model_validate(FULL_PLAN)
	restored = LessonPlan.from_json(plan.to_json())

	assert [type(i) for i in restored.items] == [TextItem, QuizMCQItem, Poll2Item, QuizTFItem, Poll4Item]
	assert restored.model_dump() == plan.model_dump()
	assert restored.model_dump()["items"] == FULL_PLAN["items"]


def test_item_type_keys():
	items = LessonPlan.model_validate(FULL_PLAN).items
	assert [item_type_key(i) for i in items] == ["text", "quiz_MCQ", "poll_POLL_2", "quiz_TF", "poll_POLL_4"]
	assert count_item_types(items) == {"text": 1, "quiz_MCQ": 1, "poll_POLL_2": 1, "quiz_TF": 1, "poll_POLL_4": 1}


def test_unknown_item_type_is_rejected():
	with pytest.raises(ValidationError):
		parse_items([{"type": "video", "url": "x"}])


def test_quiz_without_question_type_is_rejected():
	with pytest.raises(ValidationError):
		parse_items([{"type": "quiz", "question": "?", "correctAnswer": "A", "explanation": ""}])


def test_mcq_correct_answer_must_be_a_letter():
	item = dict(FULL_PLAN["items"][1], correctAnswer="E")
	with pytest.raises(ValidationError):
		parse_items([item])


def test_poll4_requires_all_four_options():
	item = dict(FULL_PLAN["items"][4])
	del item["optionD"]
	with pytest.raises(ValidationError):
		parse_items([item])
