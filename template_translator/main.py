"""
/**
 * @file template_translator/main.py
 * @description FastAPI 应用入口（仅装配路由、中间件与配置监听）。
 */
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from template_translator.config import load_settings, reload_settings, CONFIG_PATH, CONFIG_LOCAL_PATH
from template_translator.controllers import antiforgery_router, health_router, translate_router
from template_translator.middlewares import CorrelationIdMiddleware, ErrorHandlingMiddleware
from template_translator.models import ValidationProblem
from template_translator.utils import configure_logging

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Template Translator",
    description="Generates translated copies of SendGrid dynamic templates from JSON/YAML translation files.",
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
)


class ConfigEventHandler(FileSystemEventHandler):
    """Handler for config file changes"""
    def on_modified(self, event):
        if event.is_directory:
            return
        if event.src_path in (CONFIG_PATH, CONFIG_LOCAL_PATH):
            reloaded = reload_settings()
            logging.getLogger().setLevel(getattr(logging, reloaded.log_level, logging.INFO))


_observer = None


@app.on_event("startup")
async def startup_event():
    global _observer
    try:
        event_handler = ConfigEventHandler()
        _observer = Observer()
        config_dir = os.path.dirname(CONFIG_PATH)
        _observer.schedule(event_handler, config_dir, recursive=False)
        _observer.start()
        logger.info(f"Config watcher started on {config_dir}")
    except OSError as e:
        logger.warning(f"Failed to start config watcher: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    global _observer

    if _observer:
        _observer.stop()
        _observer.join()
        _observer = None


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "header")]
        problems.append(ValidationProblem(member_names=loc[-1:], error_message=item.get("msg", "Invalid value")).model_dump())
    return JSONResponse(status_code=400, content=problems)


# Order matters: the last middleware added runs first
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(antiforgery_router)
app.include_router(translate_router)
