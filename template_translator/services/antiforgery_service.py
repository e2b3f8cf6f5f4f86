"""
/**
 * @file template_translator/services/antiforgery_service.py
 * @description 防 CSRF 令牌：签发（cookie 令牌 + 请求令牌）与校验。
 */
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Optional

from template_translator.config import Settings, load_settings

COOKIE_NAME = ".AntiForgery"
FORM_FIELD_NAME = "__RequestVerificationToken"
HEADER_NAME = "RequestVerificationToken"

# Used when no secret is configured; tokens then only survive until restart
_PROCESS_SECRET = secrets.token_bytes(32)


@dataclass(frozen=True)
class AntiforgeryTokenSet:
    cookie_token: str
    request_token: str


def _secret(settings: Settings) -> bytes:
    configured = settings.antiforgery_secret
    return configured.encode("utf-8") if configured else _PROCESS_SECRET


def _sign(cookie_token: str, settings: Settings) -> str:
    return hmac.new(_secret(settings), cookie_token.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_tokens(cookie_token: Optional[str] = None, settings: Optional[Settings] = None) -> AntiforgeryTokenSet:
    """Reuses a valid cookie token so several tabs can share one cookie."""
    s = settings or load_settings()
    if not cookie_token or len(cookie_token) < 16:
        cookie_token = secrets.token_urlsafe(32)
    return AntiforgeryTokenSet(cookie_token=cookie_token, request_token=f"{cookie_token}.{_sign(cookie_token, s)}")


def validate_tokens(
    cookie_token: Optional[str],
    request_token: Optional[str],
    settings: Optional[Settings] = None,
) -> bool:
    if not cookie_token or not request_token:
        return False
    s = settings or load_settings()
    embedded, _, signature = request_token.rpartition(".")
    if not embedded or not signature:
        return False
    if not hmac.compare_digest(embedded, cookie_token):
        return False
    return hmac.compare_digest(signature, _sign(cookie_token, s))
