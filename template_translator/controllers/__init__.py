"""
/**
 * @file template_translator/controllers/__init__.py
 * @description 控制器（路由）导出。
 */
"""

from .antiforgery_controller import router as antiforgery_router
from .health_controller import router as health_router
from .translate_controller import router as translate_router

__all__ = [
    "antiforgery_router",
    "health_router",
    "translate_router",
]
