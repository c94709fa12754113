"""Keyword scan that tells the quiz generator what kind of material it got."""

from __future__ import annotations
from typing import Any, Dict, List

ACTIVITY_KEYWORDS = [
	"exercise", "activity", "practice", "problem", "worksheet",
	"hands-on", "lab", "assignment", "homework", "quiz",
	"discussion", "group work", "collaborative", "interactive",
]
QUESTION_KEYWORDS = [
	"question", "problem", "solve", "calculate", "determine",
	"what is", "how many", "which of", "true or false",
	"multiple choice", "fill in", "complete",
]
EXAMPLE_KEYWORDS = ["example", "for instance", "such as", "case study", "demonstration", "illustration", "sample"]
CONCEPT_KEYWORDS = [
	"definition", "theorem", "principle", "concept", "theory",
	"important", "key", "fundamental", "essential", "critical",
]


def _matches(haystack: str, keywords: List[str]) -> List[str]:
	return [k for k in keywords if k in haystack]


def analyze_text(text: str) -> Dict[str, Any]:
	lowered = (text or "").lower()
	activities = _matches(lowered, ACTIVITY_KEYWORDS)
	questions = _matches(lowered, QUESTION_KEYWORDS)
	examples = _matches(lowered, EXAMPLE_KEYWORDS)
	concepts = _matches(lowered, CONCEPT_KEYWORDS)

	content_types: List[str] = []
	suggestions: List[str] = []
	if activities:
		content_types.append("In-class activities")
		suggestions.append(f"Found activity keywords: {', '.join(activities)}")
	if questions:
		content_types.append("Practice questions")
		suggestions.append(f"Found question keywords: {', '.join(questions)}")
	if examples:
		content_types.append("Examples and case studies")
	if concepts:
		content_types.append("Key concepts and definitions")

	if activities:
		suggestions.append("Prioritize questions based on in-class activities")
	if questions:
		suggestions.append("Focus on practice questions and problems")
	if examples:
		suggestions.append("Include questions about examples and case studies")
	if not activities and not questions:
		suggestions.append("No obvious activities found - will focus on key concepts")

	return {
		"totalLength": len(text or ""),
		"hasActivities": bool(activities),
		"hasPracticeQuestions": bool(questions),
		"hasExamples": bool(examples),
		"hasKeyConcepts": bool(concepts),
		"contentTypes": content_types,
		"suggestions": suggestions,
	}
