"""Error taxonomy shared by the store, lifecycle, collector and generators.

Each error carries the HTTP status it maps to; ``main.py`` renders them as
``{"error": message, "details": ...}``.
"""

from __future__ import annotations
from typing import Any, List, Optional


class ClasspulseError(Exception):
	status_code = 500

	def __init__(self, message: str, *, details: Any = None) -> None:
		super().__init__(message)
		self.message = message
		self.details = details

	def to_dict(self) -> dict:
		body: dict = {"error": self.message}
		if self.details is not None:
			body["details"] = self.details
		return body


class ValidationError(ClasspulseError):
	status_code = 400

	def __init__(self, message: str, *, missing: Optional[List[str]] = None, details: Any = None) -> None:
		super().__init__(message, details=details)
		self.missing = list(missing or [])

	@classmethod
	def missing_fields(cls, fields: List[str]) -> "ValidationError":
		return cls(f"Missing required fields: {', '.join(fields)}", missing=fields, details={"missing": fields})


class NotFoundError(ClasspulseError):
	status_code = 404


class DuplicateSubmissionError(ClasspulseError):
	status_code = 409


class StorageError(ClasspulseError):
	status_code = 500


class ConstraintError(StorageError):
	pass


class GeneratorError(ClasspulseError):
	status_code = 500
