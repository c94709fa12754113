from __future__ import annotations
import logging
import time
from pathlib import Path
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import Answer, Lesson


logger = logging.getLogger(__name__)


def purge_orphan_answers(db: Session) -> int:
	# answers.lesson_id has no FK constraint; drop rows whose lesson is gone
	res = db.execute(
		delete(Answer)
		.where(Answer.lesson_id.not_in(select(Lesson.id)))
		.execution_options(synchronize_session=False)
	)
	db.commit()
	removed = res.rowcount or 0
	if removed:
		logger.info("purged %d orphaned answers", removed)
	return removed


def purge_stale_generated(output_dir: str, max_age_days: int) -> int:
	root = Path(output_dir)
	if not root.is_dir():
		return 0
	threshold = time.time() - max_age_days * 24 * 60 * 60
	removed = 0
	for path in root.glob("*.html"):
		if path.stat().st_mtime < threshold:
			path.unlink(missing_ok=True)
			removed += 1
	if removed:
		logger.info("purged %d rendered files older than %d days", removed, max_age_days)
	return removed
