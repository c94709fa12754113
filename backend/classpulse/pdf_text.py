from __future__ import annotations
import io
import logging
from typing import Any, Dict

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from .errors import ValidationError


logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> Dict[str, Any]:
	try:
		reader = PdfReader(io.BytesIO(data))
		if reader.is_encrypted:
			reader.decrypt("")
		pages = [page.extract_text() or "" for page in reader.pages]
		meta = reader.metadata or {}
	except (PdfReadError, ValueError, OSError) as err:
		raise ValidationError("Could not read PDF", details=str(err)) from err
	info = {str(k).lstrip("/"): str(v) for k, v in meta.items()}
	content = "\n".join(pages)
	logger.info("extracted %d characters from %d pages", len(content), len(pages))
	return {"content": content, "pages": len(pages), "info": info}
