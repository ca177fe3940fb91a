"""
/**
 * @file jimeng_backend/models/draft_models.py
 * @description 厂商提交信封的节点类型：draft / component / abilities / core_param / metrics 等。
 */
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def new_node_id() -> str:
    return str(uuid.uuid4())


class LargeImageInfo(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    height: int
    width: int
    resolution_type: str


class CoreParam(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    model: str
    prompt: str
    sample_strength: float
    large_image_info: LargeImageInfo
    intelligent_ratio: bool
    image_ratio: Optional[int] = None
    negative_prompt: Optional[str] = None
    seed: Optional[int] = None


class GenOption(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    generate_all: bool = False


class GenerateAbility(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    core_param: CoreParam
    gen_option: GenOption = Field(default_factory=GenOption)


class UploadedImage(BaseModel):
    type: str = "image"
    id: str = Field(default_factory=new_node_id)
    source_from: str = "upload"
    platform_type: int = 1
    name: str = ""
    image_uri: str
    width: int = 0
    height: int = 0
    format: str = ""
    uri: str


class BlendAbilityItem(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    name: str = "byte_edit"
    image_uri_list: List[str]
    image_list: List[UploadedImage]
    strength: float


class PromptPlaceholder(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    ability_index: int


class BlendAbility(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    min_version: Optional[str] = None
    min_features: List[str] = Field(default_factory=list)
    core_param: CoreParam
    ability_list: List[BlendAbilityItem] = Field(default_factory=list)
    prompt_placeholder_info_list: List[PromptPlaceholder] = Field(default_factory=list)
    postedit_param: Optional[Dict[str, Any]] = None


class Abilities(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    generate: Optional[GenerateAbility] = None
    blend: Optional[BlendAbility] = None
    # blend 模式下 gen_option 与 blend 同级；generate 模式下在 generate 内部
    gen_option: Optional[GenOption] = None


class ComponentMetadata(BaseModel):
    type: str = ""
    id: str = Field(default_factory=new_node_id)
    created_platform: int = 3
    created_platform_version: str = ""
    created_time_in_ms: str
    created_did: str = ""


class ImageBaseComponent(BaseModel):
    type: str = "image_base_component"
    id: str
    min_version: str
    aigc_mode: str = "workbench"
    metadata: ComponentMetadata
    generate_type: str
    abilities: Abilities


class DraftContent(BaseModel):
    type: str = "draft"
    id: str = Field(default_factory=new_node_id)
    min_version: str
    min_features: List[str] = Field(default_factory=list)
    is_from_tsn: bool = True
    version: str
    main_component_id: str
    component_list: List[ImageBaseComponent]


class ReportParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enter_source: str = Field("generate", alias="enterSource")
    vip_source: str = Field("generate", alias="vipSource")
    extra_vip_function_key: str = Field(..., alias="extraVipFunctionKey")
    use_vip_function_details_reporter_hoc: bool = Field(True, alias="useVipFunctionDetailsReporterHoc")


class SceneOption(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = "image"
    scene: str
    model_req_key: str = Field(..., alias="modelReqKey")
    resolution_type: str = Field(..., alias="resolutionType")
    ability_list: List[Dict[str, Any]] = Field(default_factory=list, alias="abilityList")
    report_params: ReportParams = Field(..., alias="reportParams")
    benefit_count: Optional[int] = Field(None, alias="benefitCount")


class MetricsExtra(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_source: str = Field("custom", alias="promptSource")
    generate_count: int = Field(1, alias="generateCount")
    enter_from: str = Field("click", alias="enterFrom")
    scene_options: str = Field(..., alias="sceneOptions")
    generate_id: str = Field(..., alias="generateId")
    is_regenerate: bool = Field(False, alias="isRegenerate")
    template_id: Optional[str] = Field(None, alias="templateId")
    template_source: Optional[str] = Field(None, alias="templateSource")
    last_request_id: Optional[str] = Field(None, alias="lastRequestId")
    origin_request_id: Optional[str] = Field(None, alias="originRequestId")


class SubmissionExtend(BaseModel):
    root_model: str


class HttpCommonInfo(BaseModel):
    aid: int


class GenerateSubmission(BaseModel):
    extend: SubmissionExtend
    submit_id: str
    metrics_extra: str
    draft_content: str
    http_common_info: HttpCommonInfo


def dump_node(node: BaseModel) -> Dict[str, Any]:
    """Absent optional fields are dropped, never serialized as null."""
    return node.model_dump(by_alias=True, exclude_none=True)
