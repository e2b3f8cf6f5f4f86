"""
/**
 * @file template_translator/exceptions.py
 * @description 业务异常定义。
 */
"""

from __future__ import annotations

from typing import Optional


class TemplateTranslatorError(Exception):
    """Base class for domain errors raised by the translator."""


class TemplateApiError(TemplateTranslatorError):
    """A SendGrid call did not succeed or returned an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            return f"{message} (status {self.status_code})"
        return message


class TemplateVersionNotFoundError(TemplateTranslatorError):
    pass


class EmptyTemplateContentError(TemplateTranslatorError):
    pass


class NoTranslationKeysError(TemplateTranslatorError):
    pass


class UnsupportedTranslationFileError(TemplateTranslatorError):
    pass


class TranslationFileParseError(TemplateTranslatorError):
    pass


class DuplicateTranslationError(TemplateTranslatorError):
    pass


class OperationCancelledError(TemplateTranslatorError):
    pass
