"""
/**
 * @file template_translator/controllers/translate_controller.py
 * @description 翻译控制器：上传翻译文件，生成翻译后的 SendGrid 模板。
 */
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Header, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from template_translator.config import load_settings
from template_translator.models import TranslateRequest, TranslateResponse, TranslationFile, ValidationProblem
from template_translator.services import TranslationService
from template_translator.services.antiforgery_service import COOKIE_NAME, FORM_FIELD_NAME, validate_tokens

logger = logging.getLogger(__name__)

router = APIRouter()
translation_service = TranslationService()

DISCONNECT_POLL_INTERVAL = 0.5


def get_translation_service() -> TranslationService:
    return translation_service


def validation_problems(error: ValidationError) -> List[dict]:
    problems = []
    for item in error.errors():
        loc = [str(part) for part in item.get("loc", ()) if not isinstance(part, int)]
        member = loc[-1] if loc else ""
        message = item.get("msg", "Invalid value")
        if item.get("type") in ("missing", "too_short") or item.get("input") is None or "blank" in message:
            message = f"The {member} field is required."
        problems.append(ValidationProblem(member_names=[member], error_message=message).model_dump())
    return problems


async def _watch_disconnect(request: Request, cancel_event: threading.Event, done: asyncio.Event) -> None:
    # Stopped through `done`; is_disconnected() runs in an anyio cancel scope that swallows Task.cancel()
    done_waiter = asyncio.ensure_future(done.wait())
    try:
        while not done.is_set() and not cancel_event.is_set():
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling translation")
                cancel_event.set()
                return
            await asyncio.wait({done_waiter}, timeout=DISCONNECT_POLL_INTERVAL)
    finally:
        if not done_waiter.done():
            done_waiter.cancel()


async def _read_files(files: List[UploadFile]) -> List[TranslationFile]:
    result = []
    try:
        for f in files:
            result.append(TranslationFile(filename=f.filename or "", content=await f.read()))
    finally:
        for f in files:
            await f.close()
    return result


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={400: {"model": List[ValidationProblem]}},
)
async def translate(
    request: Request,
    send_grid_api_key: Optional[str] = Form(None),
    template_id: Optional[str] = Form(None),
    version_id: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    form_token: Optional[str] = Form(None, alias=FORM_FIELD_NAME),
    header_token: Optional[str] = Header(None, alias="RequestVerificationToken"),
    service: TranslationService = Depends(get_translation_service),
):
    if load_settings().antiforgery_enabled:
        if not validate_tokens(request.cookies.get(COOKIE_NAME), form_token or header_token):
            problem = ValidationProblem(
                member_names=[FORM_FIELD_NAME],
                error_message="The antiforgery token is missing or invalid.",
            )
            return JSONResponse(status_code=400, content=[problem.model_dump()])

    try:
        req = TranslateRequest(
            send_grid_api_key=send_grid_api_key,
            template_id=template_id,
            version_id=version_id,
            files=files or [],
        )
    except ValidationError as e:
        if files:
            for f in files:
                await f.close()
        return JSONResponse(status_code=400, content=validation_problems(e))

    translation_files = await _read_files(req.files)

    cancel_event = threading.Event()
    done = asyncio.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel_event, done))
    try:
        generated = await run_in_threadpool(
            service.translate,
            req.send_grid_api_key,
            req.template_id,
            req.version_id,
            translation_files,
            cancel_event,
        )
    finally:
        done.set()
        await watcher

    return TranslateResponse(generated_templates=generated)
