"""
/**
 * @file jimeng_backend/models/generate_request_model.py
 * @description 生成请求模型（Pydantic）：单次编译使用的 GenerationRequest 及 HTTP 请求体。
 */
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


GenerateMode = Literal["text2img", "img2img"]


class ResolutionResult(BaseModel):
    width: int
    height: int
    image_ratio: int
    resolution_type: str
    is_forced: bool = False


class AbilitySource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # 前端使用 blob URL，如 blob:https://dreamina.capcut.com/[uuid]
    image_url: str = Field(..., alias="imageUrl")


class MetricsAbility(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ability_name: str = Field(..., alias="abilityName")
    strength: float
    source: Optional[AbilitySource] = None


class GenerationRequest(BaseModel):
    user_model: str
    model: str
    prompt: str
    negative_prompt: Optional[str] = None
    seed: Optional[int] = None
    sample_strength: float = 0.5
    resolution: ResolutionResult
    mode: GenerateMode = "text2img"
    intelligent_ratio: bool = False
    image_uris: List[str] = Field(default_factory=list)
    abilities: List[MetricsAbility] = Field(default_factory=list)
    postedit_param: Optional[Dict[str, Any]] = None

    @property
    def image_count(self) -> int:
        return len(self.image_uris)

    @property
    def is_multi_image(self) -> bool:
        return self.mode == "img2img"


class ResolveRequest(BaseModel):
    model: str
    resolution: str = "2k"
    ratio: str = "1:1"
    region: Optional[str] = None


class DraftRequest(BaseModel):
    model: Optional[str] = None
    prompt: str = Field(..., min_length=1)
    negative_prompt: Optional[str] = None
    seed: Optional[int] = None
    sample_strength: float = Field(0.5, ge=0, le=1)
    resolution: str = "2k"
    ratio: str = "1:1"
    region: Optional[str] = None
    intelligent_ratio: bool = False
    images: List[str] = Field(default_factory=list)
    submit_id: Optional[str] = None
