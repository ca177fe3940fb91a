"""
/**
 * @file jimeng_backend/controllers/models_controller.py
 * @description 模型列表 / 配置状态 / 刷新 / 尺寸解析控制器。
 */
"""

from typing import Dict, List

from fastapi import APIRouter, HTTPException

from jimeng_backend.models import ResolveRequest
from jimeng_backend.services import ResolutionResolver, get_catalog_store
from jimeng_backend.services.errors import SizeLookupInconsistencyError, UnsupportedParamError
from jimeng_backend.services.region_service import SITE_REGIONS, SITES, region_from_code


router = APIRouter(prefix="/v1")
resolver = ResolutionResolver()


def _merge_model_list(per_site: Dict[str, List[str]], model_type: str) -> List[dict]:
    merged: List[str] = []
    for site in SITES:
        for model_id in per_site[site]:
            if model_id not in merged:
                merged.append(model_id)
    return [
        {
            "id": model_id,
            "object": "model",
            "owned_by": "jimeng-api",
            "type": model_type,
            "supported_regions": {site: model_id in per_site[site] for site in SITES},
        }
        for model_id in merged
    ]


@router.get("/models")
def list_models():
    image_models = {site: resolver.supported_models(region) for site, region in SITE_REGIONS.items()}
    video_models = {site: resolver.supported_video_models(region) for site, region in SITE_REGIONS.items()}
    return {"data": _merge_model_list(image_models, "image") + _merge_model_list(video_models, "video")}


@router.get("/models/image")
def list_image_models():
    return {"data": {site: resolver.supported_models(region) for site, region in SITE_REGIONS.items()}}


@router.get("/models/video")
def list_video_models():
    return {
        "data": {
            site: [m.to_dict() for m in resolver.video_model_details(region)]
            for site, region in SITE_REGIONS.items()
        }
    }


@router.get("/models/config/status")
def config_status():
    return get_catalog_store().status()


@router.get("/models/config/sites")
def config_sites():
    return {"data": get_catalog_store().list_site_configs()}


@router.post("/models/config/refresh")
def refresh_config():
    return get_catalog_store().refresh()


@router.post("/models/resolve")
def resolve_size(payload: ResolveRequest):
    try:
        region = region_from_code(payload.region)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})
    try:
        result = resolver.resolve(payload.model, region, payload.resolution, payload.ratio)
    except UnsupportedParamError as e:
        raise HTTPException(status_code=400, detail={"error": e.message, "supported": e.supported})
    except SizeLookupInconsistencyError as e:
        raise HTTPException(status_code=500, detail={"error": str(e)})
    return {
        "model": payload.model,
        "modelReqKey": resolver.vendor_key(payload.model, region),
        "width": result.width,
        "height": result.height,
        "ratioType": result.image_ratio,
        "resolutionType": result.resolution_type,
    }
