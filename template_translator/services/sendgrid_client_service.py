"""
/**
 * @file template_translator/services/sendgrid_client_service.py
 * @description SendGrid 模板 API 调用封装：获取模板、创建模板、创建模板版本。
 */
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from template_translator.config import Settings, load_settings
from template_translator.exceptions import OperationCancelledError, TemplateApiError
from template_translator.models.template_model import Template, TemplateVersion
from template_translator.utils import require_not_blank

logger = logging.getLogger(__name__)

DYNAMIC_TEMPLATE_GENERATION = "dynamic"
DESIGN_EDITOR = "design"
DEFAULT_VERSION_NAME = "Default version"


class SendGridClient:
    def __init__(
        self,
        api_key: str,
        settings: Optional[Settings] = None,
        cancel_event: Optional[threading.Event] = None,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = require_not_blank(api_key, "api_key")
        self._initial_settings = settings
        self._cancel_event = cancel_event
        self._session = session or requests.Session()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    @property
    def base_url(self) -> str:
        return self.settings.sendgrid_endpoint

    def __enter__(self) -> "SendGridClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]], failure: str) -> Any:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise OperationCancelledError(f"{method} {path} cancelled")

        url = self.base_url + path
        logger.debug(f"SendGrid {method} {url}")
        try:
            response = self._session.request(
                method,
                url,
                headers=self._get_headers(),
                json=payload,
                timeout=self.settings.sendgrid_timeout,
            )
        except requests.RequestException as e:
            raise TemplateApiError(failure) from e

        if not 200 <= response.status_code < 300:
            logger.debug(f"SendGrid {method} {url} returned {response.status_code}: {response.text}")
            raise TemplateApiError(failure, status_code=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as e:
            raise TemplateApiError(
                f"{failure}: response body is not JSON", status_code=response.status_code, body=response.text
            ) from e

    def get_template(self, template_id: str) -> Template:
        require_not_blank(template_id, "template_id")
        data = self._request("GET", f"templates/{template_id}", None, "Failed to retrieve template")
        try:
            return Template.model_validate(data)
        except ValidationError as e:
            raise TemplateApiError("Failed to deserialize template") from e

    def create_template(self, name: str) -> Template:
        require_not_blank(name, "name")
        payload = {"name": name, "generation": DYNAMIC_TEMPLATE_GENERATION}
        data = self._request("POST", "templates", payload, "Failed to create template")
        try:
            return Template.model_validate(data)
        except ValidationError as e:
            raise TemplateApiError("Failed to deserialize created template") from e

    def create_template_version(
        self,
        template_id: str,
        name: Optional[str],
        subject: Optional[str],
        html_content: str,
    ) -> TemplateVersion:
        require_not_blank(template_id, "template_id")
        if html_content is None:
            raise ValueError("html_content must not be None")

        payload = {
            "name": name or DEFAULT_VERSION_NAME,
            "subject": subject or "",
            "html_content": html_content,
            "editor": DESIGN_EDITOR,
        }
        data = self._request(
            "POST", f"templates/{template_id}/versions", payload, "Failed to create version for template"
        )
        try:
            return TemplateVersion.model_validate(data)
        except ValidationError as e:
            raise TemplateApiError("Failed to deserialize created version") from e
