"""
/**
 * @file jimeng_backend/controllers/generate_controller.py
 * @description 生成请求编译控制器：校验尺寸后输出厂商提交信封（不负责发送）。
 */
"""

import logging

from fastapi import APIRouter, HTTPException

from jimeng_backend.models import DraftRequest, GenerationRequest
from jimeng_backend.services import ResolutionResolver, compile_generation_request
from jimeng_backend.services.errors import SizeLookupInconsistencyError, UnsupportedParamError
from jimeng_backend.services.region_service import region_from_code


logger = logging.getLogger("generate_controller")

router = APIRouter(prefix="/v1")
resolver = ResolutionResolver()


@router.post("/images/draft")
def compile_draft(req: DraftRequest):
    try:
        region = region_from_code(req.region)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})

    user_model = req.model or resolver.default_model(region)
    logger.info(f"Draft request: model={user_model}, resolution={req.resolution}, ratio={req.ratio}, images={len(req.images)}")
    try:
        resolution = resolver.resolve(user_model, region, req.resolution, req.ratio)
    except UnsupportedParamError as e:
        raise HTTPException(status_code=400, detail={"error": e.message, "supported": e.supported})
    except SizeLookupInconsistencyError as e:
        logger.error(f"Catalog inconsistency: {e}")
        raise HTTPException(status_code=500, detail={"error": str(e)})

    generation = GenerationRequest(
        user_model=user_model,
        model=resolver.vendor_key(user_model, region),
        prompt=req.prompt,
        negative_prompt=req.negative_prompt,
        seed=req.seed,
        sample_strength=req.sample_strength,
        resolution=resolution,
        mode="img2img" if req.images else "text2img",
        intelligent_ratio=req.intelligent_ratio,
        image_uris=req.images,
    )
    submission = compile_generation_request(generation, region, submit_id=req.submit_id)
    return submission.model_dump()
