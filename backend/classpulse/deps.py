from __future__ import annotations
from fastapi import Depends
from sqlalchemy.orm import Session

from .collector import AnswerCollector
from .content_store import ContentStore
from .db import get_db
from .lifecycle import LessonLifecycle


def get_store(db: Session = Depends(get_db)) -> ContentStore:
	return ContentStore(db)


def get_lifecycle(store: ContentStore = Depends(get_store)) -> LessonLifecycle:
	return LessonLifecycle(store)


def get_collector(store: ContentStore = Depends(get_store)) -> AnswerCollector:
	return AnswerCollector(store)
