"""
/**
 * @file jimeng_backend/services/catalog_store.py
 * @description 站点模型目录存储：启动时从本地快照加载，支持手动从厂商接口刷新并回写快照。
 * @note 每个站点的 SiteCatalog 在旁路构建完成后整体替换，读者只会看到旧目录或新目录。
 */
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from jimeng_backend.config import Settings, load_settings
from jimeng_backend.models.catalog_models import SiteCatalog
from jimeng_backend.services.catalog_parser import image_model_id, parse_site
from jimeng_backend.services.errors import (
    CatalogError,
    CatalogNotInitializedError,
    ConfigMalformedError,
    ConfigMissingError,
    PersistenceError,
    VendorFetchError,
)
from jimeng_backend.services.region_service import SITE_CHINA, SITE_INFO, SITES, RegionDescriptor, site_from_region
from jimeng_backend.services.vendor_config_client import KIND_IMAGE, KIND_VIDEO, VendorConfigClient
from jimeng_backend.utils import read_json_file, write_json_atomic


logger = logging.getLogger("catalog_store")

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _outcome(status: str, message: str, count: int = 0) -> Dict[str, Any]:
    return {"status": status, "message": message, "count": count}


class CatalogStore:
    _instance: Optional["CatalogStore"] = None

    def __init__(
        self,
        snapshot_path: Optional[str] = None,
        client: Optional[VendorConfigClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings
        self._snapshot_path = snapshot_path
        self._client = client
        self._catalogs: Dict[str, SiteCatalog] = {}
        self._initialized = False
        self._init_lock = threading.Lock()
        self._swap_lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    @classmethod
    def instance(cls) -> "CatalogStore":
        if cls._instance is None:
            cls._instance = CatalogStore()
        return cls._instance

    @property
    def settings(self) -> Settings:
        return self._settings or load_settings()

    @property
    def snapshot_path(self) -> str:
        return self._snapshot_path or self.settings.snapshot_path

    @property
    def client(self) -> VendorConfigClient:
        if self._client is None:
            self._client = VendorConfigClient(settings=self._settings)
        return self._client

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # ==================== lifecycle ====================

    def initialize(self) -> None:
        """
        Load the persisted snapshot and parse every site. Raises on a missing
        or malformed snapshot, or when any site has no image models; nothing
        is installed unless all sites parse.
        """
        with self._init_lock:
            if self._initialized:
                return
            logger.info(f"Loading model configs from {self.snapshot_path}")
            stored = self._load_snapshot()
            last_updated = stored.get("lastUpdated") or _utc_now()

            catalogs: Dict[str, SiteCatalog] = {}
            for site in SITES:
                site_cfg = stored.get(site)
                if site_cfg is not None and not isinstance(site_cfg, dict):
                    raise ConfigMalformedError(self.snapshot_path, f"entry for site {site} is not an object")
                site_cfg = site_cfg or {}
                try:
                    catalog = parse_site(site, site_cfg.get("imageModels"), site_cfg.get("videoModels"), last_updated)
                except CatalogError:
                    raise
                except Exception as e:
                    raise ConfigMalformedError(self.snapshot_path, f"site {site}: {e}") from e
                catalogs[site] = catalog
                logger.info(
                    f"{SITE_INFO[site].name} loaded {len(catalog.image_models)} image models, "
                    f"{len(catalog.video_models)} video models"
                )

            with self._swap_lock:
                self._catalogs = catalogs
            self._initialized = True
            if stored.get("lastUpdated"):
                logger.info(f"Model configs last updated at {stored['lastUpdated']}")

    def teardown(self) -> None:
        with self._init_lock:
            with self._swap_lock:
                self._catalogs = {}
            self._initialized = False

    def _load_snapshot(self) -> Dict[str, Any]:
        path = self.snapshot_path
        try:
            stored = read_json_file(path)
        except FileNotFoundError:
            raise ConfigMissingError(path)
        except (OSError, ValueError) as e:
            raise ConfigMalformedError(path, str(e))
        if not isinstance(stored, dict):
            raise ConfigMalformedError(path, "root is not an object")
        return stored

    # ==================== refresh ====================

    def _fetch_site(self, site: str) -> Tuple[Dict[str, Any], Dict[str, Any], Optional[list], Optional[list]]:
        image_models = video_models = None
        image_result: Dict[str, Any]
        video_result: Dict[str, Any]

        if site == SITE_CHINA and self.settings.use_agent_config_for_china:
            try:
                image_models, video_models = self.client.fetch_agent_config(site)
            except VendorFetchError as e:
                logger.error(f"{SITE_INFO[site].name} agent config refresh failed: {e.message}")
                failed = _outcome(STATUS_ERROR, f"failed: {e.message}")
                return failed, dict(failed), None, None
            image_result = self._describe(site, KIND_IMAGE, image_models)
            video_result = self._describe(site, KIND_VIDEO, video_models)
            return image_result, video_result, image_models, video_models

        try:
            image_models = self.client.fetch_image_models(site)
            image_result = self._describe(site, KIND_IMAGE, image_models)
        except VendorFetchError as e:
            logger.error(f"{SITE_INFO[site].name} image model refresh failed: {e.message}")
            image_result = _outcome(STATUS_ERROR, f"failed: {e.message}")
        try:
            video_models = self.client.fetch_video_models(site)
            video_result = self._describe(site, KIND_VIDEO, video_models)
        except VendorFetchError as e:
            logger.error(f"{SITE_INFO[site].name} video model refresh failed: {e.message}")
            video_result = _outcome(STATUS_ERROR, f"failed: {e.message}")
        return image_result, video_result, image_models, video_models

    @staticmethod
    def _describe(site: str, kind: str, models: Optional[list]) -> Dict[str, Any]:
        if not models:
            return _outcome(STATUS_EMPTY, "vendor returned no models")
        logger.info(f"{SITE_INFO[site].name} {kind} models refreshed, {len(models)} models")
        return _outcome(STATUS_OK, f"ok, {len(models)} models", len(models))

    def refresh(self) -> Dict[str, Any]:
        """
        Re-fetch every site from the vendor. Each site is swapped on its own
        when its image list came back non-empty; failures end up in the
        report instead of being raised.
        """
        with self._refresh_lock:
            logger.info("Refreshing model configs from vendor API...")
            refreshed_at = _utc_now()
            details: Dict[str, Dict[str, Any]] = {}
            snapshot: Dict[str, Any] = {}
            swapped: List[str] = []

            with ThreadPoolExecutor(max_workers=self.settings.refresh_workers) as pool:
                results = dict(zip(SITES, pool.map(self._fetch_site, SITES)))

            for site in SITES:
                image_result, video_result, image_models, video_models = results[site]
                details[site] = {"image": image_result, "video": video_result}
                if image_result["status"] == STATUS_OK:
                    try:
                        catalog = parse_site(site, image_models, video_models or [], refreshed_at)
                    except Exception as e:
                        # 单个站点数据异常只影响该站点
                        logger.error(f"{SITE_INFO[site].name} parse failed: {e!r}")
                        details[site]["image"] = _outcome(STATUS_ERROR, f"failed: {e}")
                    else:
                        self._swap(site, catalog)
                        swapped.append(site)
                        snapshot[site] = catalog.to_snapshot()
                        continue
                previous = self._catalogs.get(site)
                snapshot[site] = previous.to_snapshot() if previous else {"imageModels": None, "videoModels": None}

            snapshot["lastUpdated"] = refreshed_at
            report: Dict[str, Any] = {
                "success": bool(swapped),
                "message": (
                    "all sites refreshed"
                    if len(swapped) == len(SITES)
                    else f"{len(swapped)}/{len(SITES)} sites refreshed"
                ),
                "details": details,
                "persisted": False,
                "persistError": None,
            }

            if swapped:
                try:
                    self._persist(snapshot)
                    report["persisted"] = True
                except PersistenceError as e:
                    logger.error(f"Saving model configs failed: {e}")
                    report["success"] = False
                    report["persistError"] = str(e)
                    report["message"] = f"refreshed but saving failed: {e}"
            return report

    def _swap(self, site: str, catalog: SiteCatalog) -> None:
        with self._swap_lock:
            catalogs = dict(self._catalogs)
            catalogs[site] = catalog
            self._catalogs = catalogs

    def _persist(self, snapshot: Dict[str, Any]) -> None:
        try:
            write_json_atomic(self.snapshot_path, snapshot)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(str(e)) from e
        logger.info(f"Model configs saved to {self.snapshot_path}")

    # ==================== readers ====================

    def get_catalog(self, site: str) -> SiteCatalog:
        catalog = self._catalogs.get(site)
        if catalog is None:
            raise CatalogNotInitializedError(f"Model catalog for site {site} is not loaded")
        return catalog

    def catalog_for(self, region: RegionDescriptor) -> SiteCatalog:
        return self.get_catalog(site_from_region(region))

    def status(self) -> Dict[str, Any]:
        catalogs = self._catalogs
        sites: Dict[str, Dict[str, Any]] = {}
        for site in SITES:
            catalog = catalogs.get(site)
            sites[site] = {
                "imageModelCount": len(catalog.image_models) if catalog else 0,
                "videoModelCount": len(catalog.video_models) if catalog else 0,
                "lastUpdated": catalog.last_updated if catalog else None,
            }
        return {"sites": sites, "configFilePath": self.snapshot_path, "initialized": self._initialized}

    def list_site_configs(self) -> List[Dict[str, Any]]:
        catalogs = self._catalogs
        result = []
        for site in SITES:
            catalog = catalogs.get(site)
            if catalog is None:
                continue
            info = SITE_INFO[site]
            model_list = [
                {
                    "model_name": raw.get("model_name"),
                    "model_req_key": raw.get("model_req_key"),
                    "model_id": image_model_id(raw.get("model_req_key"), raw.get("model_name") or ""),
                    "model_tip": raw.get("model_tip"),
                    "icon_url": raw.get("icon_url"),
                    "is_new_model": raw.get("is_new_model"),
                    "resolution_map": raw.get("resolution_map"),
                }
                for raw in catalog.raw_image_models
                if isinstance(raw, dict) and raw.get("model_req_key")
            ]
            result.append({
                "code": info.code,
                "name": info.name,
                "description": info.description,
                "home_url": info.home_url,
                "model_list": model_list,
                "default_model_index": 0,
            })
        return result


def get_catalog_store() -> CatalogStore:
    return CatalogStore.instance()
