"""
/**
 * @file template_translator/models/translation_model.py
 * @description 翻译文件、翻译树（标签联合类型）与翻译结果模型。
 */
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class TranslationScalar:
    value: str


@dataclass(frozen=True)
class TranslationMapping:
    children: Dict[str, "TranslationNode"] = field(default_factory=dict)

    def get(self, key: str) -> Optional["TranslationNode"]:
        return self.children.get(key)

    def __len__(self) -> int:
        return len(self.children)


TranslationNode = Union[TranslationScalar, TranslationMapping]


@dataclass(frozen=True)
class TranslationFile:
    """An uploaded translation file, already read into memory."""

    filename: str
    content: bytes


@dataclass(frozen=True)
class TranslationResult:
    translation_id: str
    content: str
    subject: Optional[str]
    filename: str
