"""
/**
 * @file template_translator/services/token_service.py
 * @description 模板占位符（[[key]]）提取与替换。
 */
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Iterable, List, Optional

from template_translator.exceptions import NoTranslationKeysError
from template_translator.models.translation_model import TranslationMapping
from template_translator.services.translation_file_service import get_translation_for_key

logger = logging.getLogger(__name__)

TRANSLATION_KEY_RE = re.compile(r"\[{2}[ \t]*(?P<tlkey>[\w\-.]+)[ \t]*\]{2}", re.IGNORECASE)


@functools.lru_cache(maxsize=1024)
def _key_pattern(key: str) -> re.Pattern:
    return re.compile(r"\[{2}[ \t]*" + re.escape(key) + r"[ \t]*\]{2}", re.IGNORECASE)


def extract_translation_keys(text: Optional[str], required: bool = True) -> List[str]:
    keys = [m.group("tlkey") for m in TRANSLATION_KEY_RE.finditer(text or "")]
    if required and not keys:
        raise NoTranslationKeysError("The template does not contain any translation keys")
    return keys


def translate_text(
    text: Optional[str],
    keys: Iterable[str],
    translations: TranslationMapping,
    source: str = "",
) -> Optional[str]:
    if text is None:
        return None

    translated = text
    for key in dict.fromkeys(keys):
        value = get_translation_for_key(translations, key)
        if value is None:
            logger.debug(f"Translation for key {key} not found in file {source}")
            continue
        # Callable replacement keeps backslashes in the value literal
        translated = _key_pattern(key).sub(lambda _m, v=value: v, translated)
    return translated
