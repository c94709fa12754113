import asyncio
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .cleanup import purge_orphan_answers, purge_stale_generated
from .db import SessionLocal, init_db
from .errors import ClasspulseError
from .settings import settings
from .routers import health
from .routers import lessons
from .routers import answers
from .routers import upload
from .routers import generate
from .routers import pages

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger("classpulse")

app = FastAPI(title="Classpulse API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(lessons.router)
app.include_router(answers.router)
app.include_router(upload.router)
app.include_router(generate.router)
app.include_router(pages.router)


@app.exception_handler(ClasspulseError)
async def classpulse_error_handler(request: Request, exc: ClasspulseError):
	if exc.status_code >= 500:
		logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
	else:
		logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
	return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
	logger.warning("%s %s -> 400: invalid request", request.method, request.url.path)
	details = [
		{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
		for e in exc.errors()
	]
	return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
	if exc.status_code == 404:
		return JSONResponse(status_code=404, content={"error": "Not found", "path": request.url.path})
	return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
	logger.exception("%s %s crashed", request.method, request.url.path, exc_info=exc)
	return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})


def run_maintenance() -> None:
	db = SessionLocal()
	try:
		purge_orphan_answers(db)
	finally:
		db.close()
	purge_stale_generated(settings.output_dir, settings.generated_retention_days)


async def _maintenance_watcher():
	# Startup already ran one pass; repeat daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		try:
			run_maintenance()
		except Exception:
			logger.exception("daily maintenance failed")


@app.on_event("startup")
async def startup_event():
	init_db()
	for folder in (settings.upload_dir, settings.output_dir):
		Path(folder).mkdir(parents=True, exist_ok=True)
	try:
		run_maintenance()
	except Exception:
		logger.exception("startup maintenance failed")
	app.state.maintenance_task = asyncio.create_task(_maintenance_watcher())
	logger.info("Classpulse ready; student pages at /lesson/<id>, API under /api")


@app.on_event("shutdown")
async def shutdown_event():
	task = getattr(app.state, "maintenance_task", None)
	if task is not None:
		task.cancel()
