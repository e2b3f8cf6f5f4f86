"""
/**
 * @file template_translator/utils/file_utils.py
 * @description 文件处理工具：扩展名解析、由文件名推导语言标识。
 */
"""

from __future__ import annotations

import os
import re
from typing import Optional

# messages.fr.json, messages.fr-ca.yml, de.yaml
LANG_CODE_RE = re.compile(r"([\w\-.]+\.|^)(?P<lang>[a-z]{2}(-[a-z]{2})?)\.\w+$", re.IGNORECASE)


def file_extension(filename: Optional[str]) -> str:
    _, ext = os.path.splitext(os.path.basename(filename or ""))
    return ext.lower()


def derive_translation_id(filename: Optional[str], ordinal: int) -> str:
    """Language code from a trailing ``.xx[-yy].ext`` in the file name, else the 1-based ordinal."""
    match = LANG_CODE_RE.search(os.path.basename(filename or ""))
    if match:
        return match.group("lang").lower()
    return str(ordinal)
