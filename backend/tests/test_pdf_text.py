import io

import pytest
from PyPDF2 import PdfWriter

from classpulse.errors import ValidationError
from classpulse.pdf_text import extract_pdf_text


def _blank_pdf(pages=2):
	writer = PdfWriter()
	for _ in range(pages):
		writer.add_blank_page(width=612, height=792)
	writer.add_metadata({"/Title": "Week 3"})
	buffer = io.BytesIO()
	writer.write(buffer)
	return buffer.getvalue()


def test_extract_pdf_text_counts_pages_and_reads_metadata():
	result = extract_pdf_text(_blank_pdf(2))
	assert result["pages"] == 2
	assert result["content"].strip() == ""
	assert result["info"]["Title"] == "Week 3"


def test_extract_pdf_text_rejects_garbage():
	with pytest.raises(ValidationError):
		extract_pdf_text(b"this is not a pdf")


def test_process_pdf_route(client):
	res = client.post("/api/process-pdf", files={"file": ("w3.pdf", _blank_pdf(1), "application/pdf")})
	assert res.status_code == 200
	assert res.json()["pages"] == 1
