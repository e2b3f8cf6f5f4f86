"""
/**
 * @file template_translator/middlewares/error_handling_middleware.py
 * @description 全局异常处理中间件：记录异常，返回带关联 ID 的 500 错误体。
 */
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from template_translator.utils import get_correlation_id

logger = logging.getLogger(__name__)

MAX_INNER_DEPTH = 5


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__module__}.{type(exc).__qualname__}: {exc}"


def _inner(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def format_exception_chain(exc: BaseException, max_depth: int = MAX_INNER_DEPTH) -> str:
    lines = [_describe(exc)]
    inner = _inner(exc)
    depth = 0
    while inner is not None and depth < max_depth:
        lines.append(f" ---> {_describe(inner)}")
        inner = _inner(inner)
        depth += 1
    return "\n".join(lines)


def build_error_body(exc: BaseException) -> Dict[str, Any]:
    return {
        "error": format_exception_chain(exc),
        "error_description": None,
        "correlation_id": get_correlation_id() or str(uuid.uuid4()),
    }


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
            return JSONResponse(status_code=500, content=build_error_body(exc))
