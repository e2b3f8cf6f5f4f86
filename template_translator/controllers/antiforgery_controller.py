"""
/**
 * @file template_translator/controllers/antiforgery_controller.py
 * @description 防 CSRF 令牌签发控制器。
 */
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from template_translator.services.antiforgery_service import COOKIE_NAME, issue_tokens


router = APIRouter()


@router.get("/antiforgery/token")
def antiforgery_token(request: Request):
    tokens = issue_tokens(request.cookies.get(COOKIE_NAME))
    response = JSONResponse(content=tokens.request_token)
    response.set_cookie(COOKIE_NAME, tokens.cookie_token, httponly=True, samesite="strict")
    return response
