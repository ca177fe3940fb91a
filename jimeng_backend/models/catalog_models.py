"""
/**
 * @file jimeng_backend/models/catalog_models.py
 * @description 规范化后的站点模型目录（不可变）。
 */
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ImageModelEntry:
    model_id: str
    vendor_key: str
    display_name: str
    resolution_table: Mapping[str, Mapping[str, ImageSize]]
    supported_resolutions: Tuple[str, ...]
    tip: Optional[str] = None
    icon_url: Optional[str] = None
    is_new: Optional[bool] = None
    features: FrozenSet[str] = frozenset()

    def supported_ratios(self, resolution: str) -> List[str]:
        return list(self.resolution_table.get(resolution, {}).keys())

    def size_for(self, resolution: str, ratio: str) -> Optional[ImageSize]:
        return self.resolution_table.get(resolution, {}).get(ratio)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modelId": self.model_id,
            "modelReqKey": self.vendor_key,
            "modelName": self.display_name,
            "modelTip": self.tip,
            "iconUrl": self.icon_url,
            "isNew": self.is_new,
            "feats": sorted(self.features),
            "resolutionMap": {
                res: {ratio: size.to_dict() for ratio, size in sizes.items()}
                for res, sizes in self.resolution_table.items()
            },
            "supportedResolutions": list(self.supported_resolutions),
            "supportedRatios": {res: self.supported_ratios(res) for res in self.supported_resolutions},
        }


@dataclass(frozen=True)
class EnumOption:
    key: str
    values: Tuple[Union[str, int, float], ...]
    default_index: Optional[int] = None
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "valueType": "enum",
            "values": list(self.values),
            "defaultIndex": self.default_index,
            "hidden": self.hidden,
        }


@dataclass(frozen=True)
class SliderOption:
    key: str
    min: float
    max: float
    step: float
    default: float
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "valueType": "slide_bar",
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "defaultValue": self.default,
            "hidden": self.hidden,
        }


@dataclass(frozen=True)
class RawOption:
    """An option whose value_type carries no schema we understand."""

    key: str
    value_type: str
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "valueType": self.value_type, "hidden": self.hidden}


OptionSpec = Union[EnumOption, SliderOption, RawOption]


@dataclass(frozen=True)
class VideoModelEntry:
    model_id: str
    vendor_key: str
    display_name: str
    options: Tuple[OptionSpec, ...] = ()
    tip: Optional[str] = None
    icon_url: Optional[str] = None
    source_tag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modelId": self.model_id,
            "modelReqKey": self.vendor_key,
            "modelName": self.display_name,
            "modelTip": self.tip,
            "iconUrl": self.icon_url,
            "modelSource": self.source_tag,
            "options": [opt.to_dict() for opt in self.options],
        }


@dataclass(frozen=True)
class SkippedRatio:
    model_id: str
    resolution: str
    ratio_type: Any


def _frozen(value: Dict) -> Mapping:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class SiteCatalog:
    site: str
    image_models: Mapping[str, ImageModelEntry]
    vendor_key_of: Mapping[str, str]
    video_models: Mapping[str, VideoModelEntry]
    video_vendor_key_of: Mapping[str, str]
    last_updated: str
    raw_image_models: Tuple[Dict[str, Any], ...] = ()
    raw_video_models: Tuple[Dict[str, Any], ...] = ()
    skipped_ratios: Tuple[SkippedRatio, ...] = ()
    model_id_of: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        site: str,
        image_models: Dict[str, ImageModelEntry],
        video_models: Dict[str, VideoModelEntry],
        last_updated: str,
        raw_image_models: List[Dict[str, Any]],
        raw_video_models: List[Dict[str, Any]],
        skipped_ratios: List[SkippedRatio],
        model_id_of: Dict[str, str],
    ) -> "SiteCatalog":
        return cls(
            site=site,
            image_models=_frozen(image_models),
            vendor_key_of=_frozen({mid: m.vendor_key for mid, m in image_models.items()}),
            video_models=_frozen(video_models),
            video_vendor_key_of=_frozen({mid: m.vendor_key for mid, m in video_models.items()}),
            last_updated=last_updated,
            raw_image_models=tuple(raw_image_models),
            raw_video_models=tuple(raw_video_models),
            skipped_ratios=tuple(skipped_ratios),
            model_id_of=_frozen(model_id_of),
        )

    @property
    def image_model_ids(self) -> List[str]:
        return list(self.image_models.keys())

    @property
    def video_model_ids(self) -> List[str]:
        return list(self.video_models.keys())

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "imageModels": list(self.raw_image_models) or None,
            "videoModels": list(self.raw_video_models) or None,
        }
