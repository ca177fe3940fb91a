"""
/**
 * @file jimeng_backend/services/vendor_config_client.py
 * @description 厂商模型配置接口调用封装：按站点拉取图片 / 视频模型列表。
 */
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from jimeng_backend.config import Settings, load_settings
from jimeng_backend.services.errors import VendorFetchError
from jimeng_backend.services.region_service import SITE_CHINA, SITE_INFO


logger = logging.getLogger("vendor_config")

KIND_IMAGE = "image"
KIND_VIDEO = "video"

RawModelList = Optional[List[Dict[str, Any]]]


class VendorConfigClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self._initial_settings = settings
        self._session = session or requests.Session()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    def _get_headers(self, site: str) -> Dict[str, str]:
        info = SITE_INFO[site]
        return {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "appid": info.appid,
            "appvr": self.settings.app_version,
            "lan": info.lan,
            "loc": info.loc,
            "pf": self.settings.platform_code,
        }

    def _query_params(self, site: str, with_cache: bool) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if with_cache:
            params.update({"needCache": "true", "needRefresh": "false"})
        params.update({
            "aid": SITE_INFO[site].appid,
            "web_version": self.settings.web_version,
            "da_version": self.settings.da_version,
            "aigc_features": "app_lip_sync",
        })
        return params

    def _post(self, site: str, kind: str, url: Optional[str], body: Dict[str, Any], with_cache: bool) -> Dict[str, Any]:
        if not url:
            raise VendorFetchError(site, kind, f"No {kind} config endpoint configured for site {site}")
        try:
            response = self._session.post(
                url,
                params=self._query_params(site, with_cache),
                json=body,
                headers=self._get_headers(site),
                timeout=self.settings.request_timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise VendorFetchError(site, kind, f"request failed: {e}") from e
        except ValueError as e:
            raise VendorFetchError(site, kind, f"invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise VendorFetchError(site, kind, "unexpected response shape")
        if str(data.get("ret")) != "0":
            raise VendorFetchError(site, kind, data.get("errmsg") or "vendor returned an error")
        payload = data.get("data")
        return payload if isinstance(payload, dict) else {}

    def fetch_image_models(self, site: str) -> RawModelList:
        body = {} if site == SITE_CHINA else {"is_client_filter": True, "need_beta_model": True}
        data = self._post(site, KIND_IMAGE, self.settings.endpoint(site, "image_config"), body, with_cache=True)
        return data.get("model_list") or None

    def fetch_video_models(self, site: str) -> RawModelList:
        # 国内站和国际站使用不同的 scene
        scene = "lip_sync_image_generate_video" if site == SITE_CHINA else "generate_video"
        data = self._post(
            site, KIND_VIDEO, self.settings.endpoint(site, "video_config"), {"scene": scene, "params": {}}, with_cache=False
        )
        return data.get("model_list") or None

    def fetch_agent_config(self, site: str = SITE_CHINA) -> Tuple[RawModelList, RawModelList]:
        """国内站合并接口，同时返回图片和视频模型。"""
        data = self._post(site, KIND_IMAGE, self.settings.endpoint(site, "agent_config"), {}, with_cache=True)
        image_data = data.get("image_data") if isinstance(data.get("image_data"), dict) else {}
        video_data = data.get("video_data") if isinstance(data.get("video_data"), dict) else {}
        return image_data.get("model_list") or None, video_data.get("model_list") or None
