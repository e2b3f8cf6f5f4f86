"""
/**
 * @file template_translator/models/template_model.py
 * @description SendGrid 模板与模板版本模型（Pydantic）。
 */
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TemplateVersion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    template_id: Optional[str] = None
    name: Optional[str] = None
    subject: Optional[str] = None
    html_content: Optional[str] = None
    editor: Optional[str] = None
    active: Optional[int] = None


class Template(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    generation: Optional[str] = None
    versions: List[TemplateVersion] = Field(default_factory=list)

    def find_version(self, version_id: str) -> Optional[TemplateVersion]:
        for version in self.versions:
            if version.id == version_id:
                return version
        return None
