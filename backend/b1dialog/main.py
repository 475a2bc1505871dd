from __future__ import annotations
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import make_engine
from .errors import ApiError
from .gemini_client import GeminiClient
from .settings import Settings, settings as default_settings
from .store import RecordStore
from .workflow import SessionWorkflow
from .routers import b1, dialog_results, sessions

logger = logging.getLogger(__name__)

RESULTS_MODES = ("workflow", "simple")


def configure_logging(level: str) -> None:
	if not logging.getLogger().handlers:
		logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _envelope(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def _validation_message(exc: RequestValidationError) -> str:
	errors = exc.errors()
	if any(e.get("type") == "missing" for e in errors):
		return "Missing required fields"
	details = []
	for e in errors:
		field = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
		details.append(f"{field}: {e.get('msg')}" if field else str(e.get("msg")))
	return "Invalid request: " + "; ".join(details)


def _register_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(ApiError)
	async def handle_api_error(request: Request, exc: ApiError):
		if exc.status_code >= 500:
			logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
		else:
			logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
		return _envelope(exc.status_code, exc.message)

	@app.exception_handler(StarletteHTTPException)
	async def handle_http_error(request: Request, exc: StarletteHTTPException):
		return _envelope(exc.status_code, str(exc.detail))

	@app.exception_handler(RequestValidationError)
	async def handle_validation_error(request: Request, exc: RequestValidationError):
		message = _validation_message(exc)
		logger.info("%s %s rejected (400): %s", request.method, request.url.path, message)
		return _envelope(400, message)

	@app.exception_handler(Exception)
	async def handle_unexpected(request: Request, exc: Exception):
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		return _envelope(500, str(exc))


def create_app(
	config: Optional[Settings] = None,
	*,
	store: Optional[RecordStore] = None,
	generator: Optional[Any] = None,
) -> FastAPI:
	cfg = config or default_settings
	configure_logging(cfg.log_level)
	mode = cfg.b1_results_mode.lower()
	if mode not in RESULTS_MODES:
		raise ValueError(f"B1_RESULTS_MODE must be one of {RESULTS_MODES}, got {cfg.b1_results_mode!r}")

	if store is None:
		store = RecordStore(make_engine(cfg.database_url, cfg.database_password))
	store.create_schema()
	if generator is None:
		generator = GeminiClient(config=cfg)

	app = FastAPI(title="B1 Dialog API")
	app.state.settings = cfg
	app.state.store = store
	app.state.generator = generator
	app.state.workflow = SessionWorkflow(store, generator)
	_register_error_handlers(app)

	app.include_router(sessions.router)
	if mode == "simple":
		app.include_router(dialog_results.router)
	else:
		app.include_router(b1.router)

	@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
	def root():
		return "B1 Dialog API running"

	@app.get("/info")
	def info():
		return {
			"ok": True,
			"generator_configured": bool(getattr(generator, "configured", True)),
			"results_mode": mode,
		}

	@app.on_event("shutdown")
	async def shutdown_event():
		aclose = getattr(generator, "aclose", None)
		if aclose is not None:
			await aclose()
		store.dispose()

	logger.info("B1 Dialog API ready (results mode: %s)", mode)
	return app


def run() -> None:
	import uvicorn

	uvicorn.run(create_app(), host="0.0.0.0", port=default_settings.port)


if __name__ == "__main__":
	run()
