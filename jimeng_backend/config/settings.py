"""
/**
 * @file jimeng_backend/config/settings.py
 * @description 后端配置加载与合并（config.json + config.local.json），含模型快照路径与厂商接口参数。
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
from typing import Any, Dict, Optional


PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(PACKAGE_ROOT, "config.json")
CONFIG_LOCAL_PATH = os.path.join(PACKAGE_ROOT, "config.local.json")
CONFIG_EXAMPLE_PATH = os.path.join(PACKAGE_ROOT, "config.example.json")
DEFAULT_SNAPSHOT_PATH = os.path.join(PACKAGE_ROOT, "configs", "model-configs.json")

SNAPSHOT_PATH_ENV = "JIMENG_MODEL_CONFIG_PATH"

_INTL_IMAGE_URL = "https://mweb-api-sg.capcut.com/mweb/v1/get_common_config"
_INTL_VIDEO_URL = "https://mweb-api-sg.capcut.com/mweb/v1/video_generate/get_common_config"

DEFAULT_ENDPOINTS: Dict[str, Dict[str, str]] = {
    "china": {
        "agent_config": "https://jimeng.jianying.com/mweb/v1/creation_agent/v2/get_agent_config",
        "image_config": "https://jimeng.jianying.com/mweb/v1/get_common_config",
        "video_config": "https://jimeng.jianying.com/mweb/v1/video_generate/get_common_config",
    },
    "US": {"image_config": _INTL_IMAGE_URL, "video_config": _INTL_VIDEO_URL},
    "HK": {"image_config": _INTL_IMAGE_URL, "video_config": _INTL_VIDEO_URL},
    "JP": {"image_config": _INTL_IMAGE_URL, "video_config": _INTL_VIDEO_URL},
    "SG": {"image_config": _INTL_IMAGE_URL, "video_config": _INTL_VIDEO_URL},
}


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
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


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    @property
    def catalog(self) -> Dict[str, Any]:
        value = self.raw.get("catalog", {})
        return value if isinstance(value, dict) else {}

    @property
    def vendor(self) -> Dict[str, Any]:
        value = self.raw.get("vendor", {})
        return value if isinstance(value, dict) else {}

    @property
    def snapshot_path(self) -> str:
        env = os.getenv(SNAPSHOT_PATH_ENV)
        if env:
            return env
        path = self.catalog.get("snapshot_path")
        if isinstance(path, str) and path:
            return path if os.path.isabs(path) else os.path.join(PACKAGE_ROOT, path)
        return DEFAULT_SNAPSHOT_PATH

    @property
    def refresh_workers(self) -> int:
        try:
            return max(1, int(self.catalog.get("refresh_workers", 5)))
        except (TypeError, ValueError):
            return 5

    @property
    def request_timeout(self) -> float:
        try:
            return float(self.vendor.get("timeout", 30))
        except (TypeError, ValueError):
            return 30.0

    @property
    def app_version(self) -> str:
        return str(self.vendor.get("app_version", "8.4.0"))

    @property
    def web_version(self) -> str:
        return str(self.vendor.get("web_version", "7.5.0"))

    @property
    def da_version(self) -> str:
        return str(self.vendor.get("da_version", "3.3.4"))

    @property
    def platform_code(self) -> str:
        return str(self.vendor.get("platform_code", "7"))

    @property
    def use_agent_config_for_china(self) -> bool:
        return bool(self.vendor.get("china_agent_config", True))

    def endpoint(self, site: str, kind: str) -> Optional[str]:
        overrides = self.vendor.get("endpoints", {})
        site_cfg = overrides.get(site) if isinstance(overrides, dict) else None
        if isinstance(site_cfg, dict) and isinstance(site_cfg.get(kind), str) and site_cfg[kind]:
            return site_cfg[kind]
        return DEFAULT_ENDPOINTS.get(site, {}).get(kind)


logger = logging.getLogger("config_loader")

_CACHED_SETTINGS: Optional[Settings] = None
_LAST_LOAD_TIME = 0.0
_CONFIG_HASH = ""
_SETTINGS_LOCK = threading.Lock()


def _deep_diff(d1: Dict[str, Any], d2: Dict[str, Any], path="") -> list:
    diffs = []
    for k in sorted(set(d1.keys()) | set(d2.keys())):
        p = f"{path}.{k}" if path else k
        if k not in d1:
            diffs.append(f"Added: {p}")
        elif k not in d2:
            diffs.append(f"Removed: {p}")
        elif isinstance(d1[k], dict) and isinstance(d2[k], dict):
            diffs.extend(_deep_diff(d1[k], d2[k], p))
        elif d1[k] != d2[k]:
            diffs.append(f"Changed: {p} ({d1[k]} -> {d2[k]})")
    return diffs


def reload_settings(
    base_path: str = CONFIG_PATH,
    local_path: str = CONFIG_LOCAL_PATH,
    example_path: str = CONFIG_EXAMPLE_PATH,
    force: bool = False,
) -> Settings:
    global _CACHED_SETTINGS, _LAST_LOAD_TIME, _CONFIG_HASH

    with _SETTINGS_LOCK:
        now = time.time()
        # Debounce: 500ms
        if not force and _CACHED_SETTINGS and (now - _LAST_LOAD_TIME < 0.5):
            return _CACHED_SETTINGS

        try:
            base_cfg = _load_json(base_path)
            if not base_cfg and os.path.exists(example_path):
                base_cfg = _load_json(example_path)
            merged = _merge_dicts(base_cfg, _load_json(local_path))

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


def load_settings() -> Settings:
    """
    Get current settings. Lazy loads on first call.
    Subsequent reloads are handled by the file watcher calling reload_settings().
    """
    if _CACHED_SETTINGS is None:
        return reload_settings()
    return _CACHED_SETTINGS
