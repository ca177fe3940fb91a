"""
/**
 * @file jimeng_backend/services/payload_compiler.py
 * @description 生成请求编译：按模型 / 站点 / 模式规则组装厂商所需的 draft_content 与 metrics_extra。
 * @note 本模块不做校验，调用前分辨率、比例、模型须已通过 ResolutionResolver 校验。
 */
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from jimeng_backend.models.draft_models import (
    Abilities,
    BlendAbility,
    BlendAbilityItem,
    ComponentMetadata,
    CoreParam,
    DraftContent,
    GenerateAbility,
    GenerateSubmission,
    GenOption,
    HttpCommonInfo,
    ImageBaseComponent,
    LargeImageInfo,
    MetricsExtra,
    PromptPlaceholder,
    ReportParams,
    SceneOption,
    SubmissionExtend,
    UploadedImage,
    dump_node,
)
from jimeng_backend.models.generate_request_model import AbilitySource, GenerationRequest, MetricsAbility, ResolutionResult
from jimeng_backend.services.region_service import RegionDescriptor, get_assistant_id, get_benefit_count


logger = logging.getLogger("payload_compiler")

DRAFT_VERSION = "3.3.4"
DRAFT_MIN_VERSION = "3.0.2"
BLEND_MIN_VERSION = "3.2.9"

GENERATE_TYPE_GENERATE = "generate"
GENERATE_TYPE_BLEND = "blend"

SCENE_BASIC = "ImageBasicGenerate"
SCENE_MULTI = "ImageMultiGenerate"

BLEND_ABILITY_NAME = "byte_edit"
BLOB_URL_PREFIX = "blob:https://dreamina.capcut.com/"

# intelligent_ratio 仅对这些模型生效
INTELLIGENT_RATIO_MODELS = ("jimeng-4.0", "jimeng-4.1")


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def effective_intelligent_ratio(user_model: str, requested: bool) -> bool:
    return requested if user_model in INTELLIGENT_RATIO_MODELS else False


def prompt_prefix(mode: str, image_count: int) -> str:
    # 图生图时每张图片对应 2 个 #：1 张 → ##，3 张 → ######
    if mode != "img2img":
        return ""
    return "#" * (image_count * 2)


def build_core_param(
    user_model: str,
    model: str,
    prompt: str,
    sample_strength: float,
    resolution: ResolutionResult,
    image_count: int = 0,
    negative_prompt: Optional[str] = None,
    seed: Optional[int] = None,
    intelligent_ratio: bool = False,
    mode: str = "text2img",
) -> CoreParam:
    """
    - 图生图: image_ratio 始终保留，prompt 前缀为 ## * imageCount
    - 文生图: intelligent_ratio 生效时移除 image_ratio
    """
    auto_ratio = effective_intelligent_ratio(user_model, intelligent_ratio)
    keep_ratio = mode == "img2img" or not auto_ratio
    return CoreParam(
        model=model,
        prompt=f"{prompt_prefix(mode, image_count)}{prompt}",
        sample_strength=sample_strength,
        large_image_info=LargeImageInfo(
            height=resolution.height,
            width=resolution.width,
            resolution_type=resolution.resolution_type,
        ),
        intelligent_ratio=auto_ratio,
        image_ratio=resolution.image_ratio if keep_ratio else None,
        negative_prompt=negative_prompt,
        seed=seed,
    )


def build_metrics_extra(
    model_req_key: str,
    user_model: str,
    region: RegionDescriptor,
    submit_id: str,
    scene: str,
    resolution_type: str,
    ability_list: Optional[List[MetricsAbility]] = None,
    is_multi_image: bool = False,
) -> MetricsExtra:
    benefit_count = get_benefit_count(user_model, region, is_multi_image)
    # modelReqKey / extraVipFunctionKey 上报的是厂商模型 key（如 high_aes_general_v40），不是对外模型 ID
    scene_option = SceneOption(
        scene=scene,
        model_req_key=model_req_key,
        resolution_type=resolution_type,
        ability_list=[dump_node(a) for a in ability_list or []],
        report_params=ReportParams(extra_vip_function_key=f"{model_req_key}-{resolution_type}"),
        benefit_count=benefit_count,
    )
    metrics = MetricsExtra(scene_options=_json([dump_node(scene_option)]), generate_id=submit_id)
    if is_multi_image:
        metrics.template_id = ""
        metrics.template_source = ""
        metrics.last_request_id = ""
        metrics.origin_request_id = ""
    return metrics


def build_metrics_ability_list(image_count: int, strength: float) -> List[MetricsAbility]:
    """
    metrics 中每张参考图对应一个 byte_edit 能力项。前端这里传的是 blob URL，
    服务端没有该值，按同样格式生成占位符。
    """
    return [
        MetricsAbility(
            ability_name=BLEND_ABILITY_NAME,
            strength=strength,
            source=AbilitySource(image_url=f"{BLOB_URL_PREFIX}{uuid.uuid4()}"),
        )
        for _ in range(image_count)
    ]


def build_blend_ability_list(uploaded_image_ids: List[str], strength: float) -> List[BlendAbilityItem]:
    return [
        BlendAbilityItem(
            image_uri_list=[image_id],
            image_list=[UploadedImage(image_uri=image_id, uri=image_id)],
            strength=strength,
        )
        for image_id in uploaded_image_ids
    ]


def build_prompt_placeholder_list(count: int) -> List[PromptPlaceholder]:
    return [PromptPlaceholder(ability_index=index) for index in range(count)]


def build_draft_content(
    component_id: str,
    generate_type: str,
    core_param: CoreParam,
    ability_list: Optional[List[BlendAbilityItem]] = None,
    prompt_placeholder_info_list: Optional[List[PromptPlaceholder]] = None,
    postedit_param: Optional[Dict[str, Any]] = None,
    image_count: int = 0,
) -> DraftContent:
    is_blend = generate_type == GENERATE_TYPE_BLEND
    if is_blend:
        abilities = Abilities(
            blend=BlendAbility(
                min_version=BLEND_MIN_VERSION if image_count >= 2 else None,
                core_param=core_param,
                ability_list=ability_list or [],
                prompt_placeholder_info_list=prompt_placeholder_info_list or [],
                postedit_param=postedit_param,
            ),
            gen_option=GenOption(),
        )
    else:
        abilities = Abilities(generate=GenerateAbility(core_param=core_param))

    return DraftContent(
        min_version=BLEND_MIN_VERSION if is_blend else DRAFT_MIN_VERSION,
        version=DRAFT_VERSION,
        main_component_id=component_id,
        component_list=[
            ImageBaseComponent(
                id=component_id,
                min_version=DRAFT_MIN_VERSION,
                metadata=ComponentMetadata(created_time_in_ms=str(int(time.time() * 1000))),
                generate_type=generate_type,
                abilities=abilities,
            )
        ],
    )


def build_generate_request(
    model: str,
    region: RegionDescriptor,
    submit_id: str,
    draft_content: DraftContent,
    metrics_extra: MetricsExtra,
) -> GenerateSubmission:
    return GenerateSubmission(
        extend=SubmissionExtend(root_model=model),
        submit_id=submit_id,
        metrics_extra=_json(dump_node(metrics_extra)),
        draft_content=_json(dump_node(draft_content)),
        http_common_info=HttpCommonInfo(aid=get_assistant_id(region)),
    )


def compile_generation_request(
    request: GenerationRequest,
    region: RegionDescriptor,
    submit_id: Optional[str] = None,
    component_id: Optional[str] = None,
) -> GenerateSubmission:
    """Turn one already-validated request into the vendor submission envelope."""
    submit_id = submit_id or str(uuid.uuid4())
    component_id = component_id or str(uuid.uuid4())
    is_blend = request.mode == "img2img"

    core_param = build_core_param(
        user_model=request.user_model,
        model=request.model,
        prompt=request.prompt,
        sample_strength=request.sample_strength,
        resolution=request.resolution,
        image_count=request.image_count,
        negative_prompt=request.negative_prompt,
        seed=request.seed,
        intelligent_ratio=request.intelligent_ratio,
        mode=request.mode,
    )

    if is_blend:
        draft = build_draft_content(
            component_id=component_id,
            generate_type=GENERATE_TYPE_BLEND,
            core_param=core_param,
            ability_list=build_blend_ability_list(request.image_uris, request.sample_strength),
            prompt_placeholder_info_list=build_prompt_placeholder_list(request.image_count),
            postedit_param=request.postedit_param,
            image_count=request.image_count,
        )
    else:
        draft = build_draft_content(component_id=component_id, generate_type=GENERATE_TYPE_GENERATE, core_param=core_param)

    metrics_abilities = request.abilities
    if is_blend and not metrics_abilities:
        metrics_abilities = build_metrics_ability_list(request.image_count, request.sample_strength)

    metrics = build_metrics_extra(
        model_req_key=request.model,
        user_model=request.user_model,
        region=region,
        submit_id=submit_id,
        scene=SCENE_MULTI if is_blend else SCENE_BASIC,
        resolution_type=request.resolution.resolution_type,
        ability_list=metrics_abilities,
        is_multi_image=request.is_multi_image,
    )
    logger.debug(
        f"Compiled {draft.component_list[0].generate_type} draft for {request.user_model} "
        f"({request.model}) submit_id={submit_id}"
    )
    return build_generate_request(request.model, region, submit_id, draft, metrics)
