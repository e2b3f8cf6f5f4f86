"""
/**
 * @file template_translator/services/translation_file_service.py
 * @description 翻译文件解析（JSON / YAML）与点分路径键查找。
 */
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

import yaml

from template_translator.exceptions import TranslationFileParseError, UnsupportedTranslationFileError
from template_translator.models.translation_model import (
    TranslationFile,
    TranslationMapping,
    TranslationNode,
    TranslationScalar,
)
from template_translator.utils import file_extension, require_not_blank

logger = logging.getLogger(__name__)


def _parse_json(text: str) -> Any:
    return json.loads(text)


def _parse_yaml(text: str) -> Any:
    # BaseLoader keeps every scalar as a string, so `count: 5` translates to "5"
    return yaml.load(text, Loader=yaml.BaseLoader)


_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".json": _parse_json,
    ".yml": _parse_yaml,
    ".yaml": _parse_yaml,
}


def register_parser(extension: str, parser: Callable[[str], Any]) -> None:
    ext = extension.lower()
    if not ext.startswith("."):
        ext = "." + ext
    _PARSERS[ext] = parser


def supported_extensions():
    return sorted(_PARSERS.keys())


def _to_node(value: Any) -> Optional[TranslationNode]:
    if isinstance(value, str):
        return TranslationScalar(value)
    if isinstance(value, dict):
        children: Dict[str, TranslationNode] = {}
        for key, child in value.items():
            node = _to_node(child)
            if node is not None:
                children[str(key)] = node
        return TranslationMapping(children)
    # numbers, booleans, lists and nulls have no translation to offer
    return None


def build_translation_tree(document: Any) -> TranslationMapping:
    if not isinstance(document, dict):
        raise TranslationFileParseError("Translation file root must be a mapping")
    return _to_node(document)


def parse_translation_file(file: TranslationFile) -> TranslationMapping:
    if file is None:
        raise ValueError("file must not be None")

    extension = file_extension(file.filename)
    parser = _PARSERS.get(extension)
    if parser is None:
        raise UnsupportedTranslationFileError(
            f"Unsupported translation file extension: {extension or '(none)'} "
            f"(supported: {', '.join(supported_extensions())})"
        )

    try:
        text = (file.content or b"").decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise TranslationFileParseError(f"Translation file {file.filename} is not valid UTF-8") from e

    if not text.strip():
        raise TranslationFileParseError(f"Translation file {file.filename} is empty")

    try:
        document = parser(text)
        tree = build_translation_tree(document)
    except (ValueError, RecursionError, yaml.YAMLError) as e:
        raise TranslationFileParseError(f"Failed to parse translation file {file.filename}") from e

    logger.debug(f"Parsed translation file {file.filename} with {len(tree)} top-level keys")
    return tree


def get_translation_for_key(translations: TranslationMapping, key: str) -> Optional[str]:
    """
    Resolve a dotted key path such as ``email.greeting.hi``.
    Returns None when a segment is missing or the path does not end on a string.
    """
    if translations is None:
        raise ValueError("translations must not be None")
    require_not_blank(key, "key")

    current: TranslationNode = translations
    for part in key.split("."):
        if not isinstance(current, TranslationMapping):
            return None
        current = current.get(part)
        if current is None:
            return None

    if isinstance(current, TranslationScalar):
        return current.value
    return None
