"""
/**
 * @file template_translator/utils/__init__.py
 * @description 工具函数导出。
 */
"""

from .file_utils import derive_translation_id, file_extension
from .logging_utils import (
    CORRELATION_ID_HEADER,
    CorrelationIdFilter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from .validators import is_blank, require_not_blank

__all__ = [
    "derive_translation_id",
    "file_extension",
    "CORRELATION_ID_HEADER",
    "CorrelationIdFilter",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
    "is_blank",
    "require_not_blank",
]
