"""
/**
 * @file template_translator/middlewares/__init__.py
 * @description 中间件导出。
 */
"""

from .correlation_middleware import CorrelationIdMiddleware
from .error_handling_middleware import ErrorHandlingMiddleware, format_exception_chain

__all__ = ["CorrelationIdMiddleware", "ErrorHandlingMiddleware", "format_exception_chain"]
