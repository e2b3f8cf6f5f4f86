"""
/**
 * @file template_translator/config/settings.py
 * @description 配置加载与合并（config.json + config.local.json），支持环境变量覆盖与热加载。
 */
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(REPO_ROOT, "config.json")
CONFIG_LOCAL_PATH = os.path.join(REPO_ROOT, "config.local.json")
CONFIG_EXAMPLE_PATH = os.path.join(REPO_ROOT, "config.example.json")

DEFAULT_SENDGRID_ENDPOINT = "https://api.sendgrid.com/v3/"
DEFAULT_MAX_WORKERS = 8

logger = logging.getLogger(__name__)


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            value = json.load(f)
            return value if isinstance(value, dict) else {}
    except FileNotFoundError:
        return {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge_dicts(base[key], value)
        else:
            base[key] = value
    return base


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    @property
    def endpoints(self) -> Dict[str, str]:
        return _section(self.raw, "endpoints")

    @property
    def sendgrid_endpoint(self) -> str:
        value = os.getenv("SENDGRID_ENDPOINT") or self.endpoints.get("sendgrid")
        if not isinstance(value, str) or not value.strip():
            return DEFAULT_SENDGRID_ENDPOINT
        return value if value.endswith("/") else value + "/"

    @property
    def sendgrid_timeout(self) -> Optional[float]:
        value = _section(self.raw, "sendgrid").get("timeout")
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return float(value)
        return None

    @property
    def max_workers(self) -> int:
        value = _section(self.raw, "executor").get("max_workers")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            return value
        return DEFAULT_MAX_WORKERS

    @property
    def log_level(self) -> str:
        value = os.getenv("LOG_LEVEL") or _section(self.raw, "logging").get("level")
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
        return "INFO"

    @property
    def environment(self) -> str:
        return (os.getenv("APP_ENV") or "production").strip().lower()

    @property
    def docs_enabled(self) -> bool:
        # Swagger UI is on in development, or when explicitly enabled
        if self.environment == "development":
            return True
        return bool(_section(self.raw, "docs").get("enabled", False))

    @property
    def antiforgery_enabled(self) -> bool:
        env = _env_flag("ANTIFORGERY_ENABLED")
        if env is not None:
            return env
        return bool(_section(self.raw, "antiforgery").get("enabled", True))

    @property
    def antiforgery_secret(self) -> Optional[str]:
        value = os.getenv("ANTIFORGERY_SECRET") or _section(self.raw, "antiforgery").get("secret")
        return value if isinstance(value, str) and value else None

    @property
    def cors_origins(self) -> List[str]:
        value = _section(self.raw, "cors").get("allow_origins", ["*"])
        if isinstance(value, list):
            return [str(v) for v in value]
        return ["*"]


_CACHED_SETTINGS: Optional[Settings] = None
_LAST_LOAD_TIME = 0.0
_CONFIG_HASH = ""
_SETTINGS_LOCK = threading.Lock()


def _deep_diff(d1: Dict[str, Any], d2: Dict[str, Any], path="") -> list:
    diffs = []
    for k in set(d1.keys()) | set(d2.keys()):
        p = f"{path}.{k}" if path else k
        if k not in d1:
            diffs.append(f"Added: {p}")
        elif k not in d2:
            diffs.append(f"Removed: {p}")
        elif isinstance(d1[k], dict) and isinstance(d2[k], dict):
            diffs.extend(_deep_diff(d1[k], d2[k], p))
        elif d1[k] != d2[k]:
            # Values may carry secrets, only the path is logged
            diffs.append(f"Changed: {p}")
    return diffs


def _read_merged(base_path: str, local_path: str, example_path: str) -> Dict[str, Any]:
    base_cfg = _load_json(base_path)
    if not base_cfg.get("endpoints") and os.path.exists(example_path):
        base_cfg = _merge_dicts(_load_json(example_path), base_cfg)
    local_cfg = _load_json(local_path)
    return _merge_dicts(base_cfg, local_cfg)


def reload_settings(
    base_path: str = CONFIG_PATH,
    local_path: str = CONFIG_LOCAL_PATH,
    example_path: str = CONFIG_EXAMPLE_PATH,
) -> Settings:
    global _CACHED_SETTINGS, _LAST_LOAD_TIME, _CONFIG_HASH

    with _SETTINGS_LOCK:
        now = time.time()
        # Debounce: 500ms
        if _CACHED_SETTINGS and (now - _LAST_LOAD_TIME < 0.5):
            return _CACHED_SETTINGS

        try:
            merged = _read_merged(base_path, local_path, example_path)

            # Sort keys to ensure consistent hash for same content
            new_hash = hashlib.md5(json.dumps(merged, sort_keys=True).encode("utf-8")).hexdigest()

            if _CACHED_SETTINGS and new_hash == _CONFIG_HASH:
                _LAST_LOAD_TIME = now
                return _CACHED_SETTINGS

            is_reload = _CACHED_SETTINGS is not None
            if is_reload:
                diffs = _deep_diff(_CACHED_SETTINGS.raw, merged)
                if diffs:
                    logger.info(f"Config changes detected: {'; '.join(diffs)}")

            _CACHED_SETTINGS = Settings(raw=merged)
            _CONFIG_HASH = new_hash
            _LAST_LOAD_TIME = now

            if is_reload:
                logger.info("Configuration reloaded successfully.")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to reload config: {e}. Keeping old config.")
            if not _CACHED_SETTINGS:
                logger.warning("Initializing with empty settings due to load failure.")
                _CACHED_SETTINGS = Settings(raw={})

    return _CACHED_SETTINGS


def load_settings(
    base_path: Optional[str] = None,
    local_path: Optional[str] = None,
    example_path: Optional[str] = None,
) -> Settings:
    """
    Get current settings. Lazy loads on first call.
    Subsequent reloads are handled by the file watcher calling reload_settings().
    Explicit paths bypass the cache and build a one-off Settings.
    """
    if base_path or local_path or example_path:
        return Settings(
            raw=_read_merged(
                base_path or CONFIG_PATH,
                local_path or CONFIG_LOCAL_PATH,
                example_path or CONFIG_EXAMPLE_PATH,
            )
        )
    if _CACHED_SETTINGS is None:
        return reload_settings()
    return _CACHED_SETTINGS
