"""
/**
 * @file template_translator/models/__init__.py
 * @description 数据模型导出。
 */
"""

from .template_model import Template, TemplateVersion
from .translate_request_model import TranslateRequest, TranslateResponse, ValidationProblem
from .translation_model import (
    TranslationFile,
    TranslationMapping,
    TranslationNode,
    TranslationResult,
    TranslationScalar,
)

__all__ = [
    "Template",
    "TemplateVersion",
    "TranslateRequest",
    "TranslateResponse",
    "ValidationProblem",
    "TranslationFile",
    "TranslationMapping",
    "TranslationNode",
    "TranslationResult",
    "TranslationScalar",
]
