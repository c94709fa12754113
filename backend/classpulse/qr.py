from __future__ import annotations
import base64
import io

import qrcode
from PIL import Image


def lesson_url(base_url: str, lesson_id: str) -> str:
	return f"{base_url.rstrip('/')}/lesson/{lesson_id}"


def qr_png(url: str, width: int = 256) -> bytes:
	qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=1)
	qr.add_data(url)
	qr.make(fit=True)
	img = qr.make_image(fill_color="black", back_color="white").get_image()
	img = img.convert("RGB").resize((width, width), Image.NEAREST)
	buffered = io.BytesIO()
	img.save(buffered, format="PNG")
	return buffered.getvalue()


def qr_data_url(url: str, width: int = 256) -> str:
	return "data:image/png;base64," + base64.b64encode(qr_png(url, width)).decode("ascii")
