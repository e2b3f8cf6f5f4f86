"""
/**
 * @file template_translator/middlewares/correlation_middleware.py
 * @description 关联 ID 中间件：读取或生成 X-Correlation-ID，写入日志上下文与响应头。
 */
"""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from template_translator.utils import CORRELATION_ID_HEADER, set_correlation_id
from template_translator.utils.logging_utils import reset_correlation_id


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        correlation_id = (request.headers.get(CORRELATION_ID_HEADER) or "").strip() or str(uuid.uuid4())
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
