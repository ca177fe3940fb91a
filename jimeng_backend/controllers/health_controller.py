"""
/**
 * @file jimeng_backend/controllers/health_controller.py
 * @description 健康检查控制器。
 */
"""

import os

from fastapi import APIRouter

from jimeng_backend.services import get_catalog_store


router = APIRouter()


@router.get("/health")
def health():
    store = get_catalog_store()
    status = store.status()
    catalog_status = {
        "initialized": store.is_initialized,
        "sites_loaded": all(s["imageModelCount"] > 0 for s in status["sites"].values()),
    }
    fs_status = {"snapshot_exists": os.path.isfile(store.snapshot_path)}

    is_healthy = all(catalog_status.values()) and all(fs_status.values())
    return {
        "status": "ok" if is_healthy else "degraded",
        "checks": {
            "catalog": catalog_status,
            "filesystem": fs_status,
        },
    }
