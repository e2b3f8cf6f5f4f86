"""
/**
 * @file template_translator/controllers/health_controller.py
 * @description 健康检查控制器。
 */
"""

from fastapi import APIRouter


router = APIRouter()


@router.get("/health")
def health():
    from template_translator.config import load_settings

    settings = load_settings()

    config_status = {
        "sendgrid_endpoint": bool(settings.endpoints.get("sendgrid")),
        "antiforgery_secret": bool(settings.antiforgery_secret) or not settings.antiforgery_enabled,
    }

    return {
        "status": "ok" if all(config_status.values()) else "degraded",
        "checks": {
            "config": config_status,
        },
    }
