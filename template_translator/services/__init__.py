"""
/**
 * @file template_translator/services/__init__.py
 * @description 业务服务层导出。
 */
"""

from .sendgrid_client_service import SendGridClient
from .token_service import extract_translation_keys, translate_text
from .translation_file_service import get_translation_for_key, parse_translation_file, register_parser
from .translation_service import TranslationService

__all__ = [
    "SendGridClient",
    "extract_translation_keys",
    "translate_text",
    "get_translation_for_key",
    "parse_translation_file",
    "register_parser",
    "TranslationService",
]
