from __future__ import annotations
import logging
import time
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from qrcode.exceptions import DataOverflowError

from ..deps import get_lifecycle
from ..errors import ClasspulseError, ValidationError
from ..generators import ContentGenerator, get_generator
from ..lifecycle import LessonLifecycle, new_lesson_id
from ..qr import lesson_url, qr_data_url
from ..settings import settings


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

PDF_MIME = "application/pdf"


def public_base_url(request: Request) -> str:
	return settings.public_base_url or str(request.base_url)


def _parse_num_items(raw: Optional[str]) -> int:
	if raw is None or not str(raw).strip():
		return settings.default_num_items
	try:
		return int(raw)
	except ValueError:
		raise ValidationError("numItems must be an integer") from None


def _save_upload(data: bytes, original_name: Optional[str]) -> Path:
	upload_dir = Path(settings.upload_dir)
	upload_dir.mkdir(parents=True, exist_ok=True)
	name = Path(original_name or "lecture.pdf").name.replace(" ", "_")
	path = upload_dir / f"{int(time.time() * 1000)}-{uuid.uuid4()}-{name}"
	path.write_bytes(data)
	return path


def _try_qr(url: str, width: int) -> Optional[str]:
	try:
		return qr_data_url(url, width)
	except (DataOverflowError, ValueError, OSError) as err:
		logger.warning("failed to generate QR code for %s: %s", url, err)
		return None


@router.post("/upload-pdf", status_code=201)
async def upload_pdf(
	request: Request,
	pdf: Optional[UploadFile] = File(None),
	numItems: Optional[str] = Form(None),
	lifecycle: LessonLifecycle = Depends(get_lifecycle),
	generator: ContentGenerator = Depends(get_generator),
):
	if pdf is None:
		raise ValidationError("No PDF file uploaded")
	if pdf.content_type != PDF_MIME:
		raise ValidationError("Only PDF files are allowed")
	num_items = _parse_num_items(numItems)
	limit = settings.max_upload_mb * 1024 * 1024
	data = await pdf.read(limit + 1)
	if len(data) > limit:
		raise ValidationError(f"File too large. Maximum size is {settings.max_upload_mb}MB.")

	pdf_path = _save_upload(data, pdf.filename)
	logger.info("processing PDF %s (%d bytes), %d items", pdf.filename, len(data), num_items)
	try:
		plan, metadata = await generator.generate_lesson_plan(data, num_items)
		lesson_id = new_lesson_id()
		url = lesson_url(public_base_url(request), lesson_id)
		qr_code = _try_qr(url, settings.qr_width)
		lesson = lifecycle.create_from_generated_content(plan, pdf_path=str(pdf_path), lesson_id=lesson_id)
	except Exception:
		# Never leave an upload behind without a lesson row pointing at it
		pdf_path.unlink(missing_ok=True)
		raise

	return {
		"success": True,
		"lesson": {
			"id": lesson.id,
			"title": lesson.title,
			"description": lesson.description,
			"url": url,
			"qrCode": qr_code,
			"itemCount": len(lesson.items),
			"metadata": metadata,
		},
		"message": "Lesson generated successfully",
	}


@router.get("/qr/{lesson_id}")
def lesson_qr(lesson_id: str, request: Request):
	url = lesson_url(public_base_url(request), lesson_id)
	qr_code = _try_qr(url, settings.qr_width_standalone)
	if qr_code is None:
		raise ClasspulseError("Failed to generate QR code")
	return {"lessonId": lesson_id, "url": url, "qrCode": qr_code}
