"""
/**
 * @file template_translator/models/translate_request_model.py
 * @description 翻译请求/响应模型（Pydantic）。
 */
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class TranslateRequest(BaseModel):
    send_grid_api_key: str = Field(..., description="API key used to authorize requests to SendGrid.")
    template_id: str = Field(
        ...,
        description="ID of the template to translate.",
        examples=["d-9dd8fcef9530466ba771e22ba08b85df"],
    )
    version_id: str = Field(..., description="ID of the template version to translate.")
    files: List[Any] = Field(..., min_length=1, description="Translation files (.json, .yml, .yaml).")

    @field_validator("send_grid_api_key", "template_id", "version_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class TranslateResponse(BaseModel):
    generated_templates: Dict[str, Optional[str]] = Field(
        ...,
        description="Translation IDs mapped to the generated template IDs (null when the upload failed).",
    )


class ValidationProblem(BaseModel):
    member_names: List[str]
    error_message: str
