"""
/**
 * @file jimeng_backend/services/catalog_parser.py
 * @description 将单个站点的厂商原始模型列表解析为不可变的 SiteCatalog。
 * @note 模型 ID 推导规则按顺序匹配（先命中先返回），规则顺序本身即契约。
 */
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from jimeng_backend.models.catalog_models import (
    EnumOption,
    ImageModelEntry,
    ImageSize,
    RawOption,
    SiteCatalog,
    SkippedRatio,
    SliderOption,
    VideoModelEntry,
)
from jimeng_backend.services import ratio_codec
from jimeng_backend.services.errors import ConfigEmptyError


logger = logging.getLogger("catalog_parser")

Rule = Tuple[Callable[[str, str], bool], str]

# model_req_key -> 对外模型 ID
MODEL_REQ_KEY_TO_ID: Dict[str, str] = {
    "high_aes_general_v41": "jimeng-4.1",
    "high_aes_general_v40l": "jimeng-4.5",
    "high_aes_general_v40": "jimeng-4.0",
    "high_aes_general_v30l_art:general_v3.0_18b": "jimeng-3.1",
    "high_aes_general_v30l_art_fangzhou:general_v3.0_18b": "jimeng-3.1",
    "high_aes_general_v30l:general_v3.0_18b": "jimeng-3.0",
    "high_aes_general_v20_L:general_v2.0_L": "jimeng-2.1",
    "high_aes_general_v21_L:general_v2.1_L": "jimeng-2.1",
    "high_aes_general_v20:general_v2.0": "jimeng-2.0",
    "high_aes_general_v14:general_v1.4": "jimeng-1.4",
    "high_aes_general_v14_xl:xl_v1.4": "jimeng-xl-pro",
    "text2img_xl_sft": "jimeng-xl-pro",
    "external_model_gemini_flash_image_v25": "nanobanana",
    "dreamina_image_lib_1": "nanobananapro",
}

IMAGE_KEY_PREFIX = "high_aes_general_"
IMAGE_ID_PREFIX = "jimeng-"

VIDEO_KEY_PREFIXES = ("dreamina_ic_generate_video_model_", "dreamina_")


def _has(*markers: str) -> Callable[[str, str], bool]:
    """Any marker found in the lower-cased name."""
    return lambda lower, _name: any(m in lower for m in markers)


def _has_all(*markers: str) -> Callable[[str, str], bool]:
    return lambda lower, _name: all(m in lower for m in markers)


def _raw_has(marker: str) -> Callable[[str, str], bool]:
    return lambda _lower, name: marker in name


def _either(*preds: Callable[[str, str], bool]) -> Callable[[str, str], bool]:
    return lambda lower, name: any(p(lower, name) for p in preds)


# 更具体的版本号必须排在前面
IMAGE_NAME_RULES: Sequence[Rule] = (
    (_has("4.5"), "jimeng-4.5"),
    (_has("4.1"), "jimeng-4.1"),
    (_has("4.0"), "jimeng-4.0"),
    (_has("3.1"), "jimeng-3.1"),
    (_has("3.0"), "jimeng-3.0"),
    (_has("2.1", "2.0 pro"), "jimeng-2.1"),
    (_has("2.0"), "jimeng-2.0"),
    (_has_all("banana", "pro"), "nanobananapro"),
    (_has("banana"), "nanobanana"),
)

VIDEO_NAME_RULES: Sequence[Rule] = (
    (_either(_has("video 3.0 pro", "3.0 pro"), _raw_has("视频 3.0 Pro")), "video-3.0-pro"),
    (_either(_has("video 3.0 fast", "3.0 fast"), _raw_has("视频 3.0 Fast")), "video-3.0-fast"),
    (_either(_has("video 3.0"), _raw_has("视频 3.0")), "video-3.0"),
    (_has("video s2.0 pro", "s2.0 pro"), "video-s2.0-pro"),
    (_has("sora 2", "sora2"), "sora-2"),
    (_has("veo 3.1", "veo3.1"), "veo-3.1"),
    (_has("veo 3", "veo3"), "veo-3"),
)


def _match_rules(rules: Sequence[Rule], name: str) -> Optional[str]:
    lower = name.lower()
    for predicate, model_id in rules:
        if predicate(lower, name):
            return model_id
    return None


def image_model_id(vendor_key: str, display_name: str) -> str:
    if vendor_key in MODEL_REQ_KEY_TO_ID:
        return MODEL_REQ_KEY_TO_ID[vendor_key]
    matched = _match_rules(IMAGE_NAME_RULES, display_name or "")
    if matched:
        return matched
    return vendor_key.split(":")[0].replace(IMAGE_KEY_PREFIX, IMAGE_ID_PREFIX, 1)


def video_model_id(vendor_key: str, display_name: str) -> str:
    matched = _match_rules(VIDEO_NAME_RULES, display_name or "")
    if matched:
        return matched
    value = vendor_key
    for prefix in VIDEO_KEY_PREFIXES:
        value = value.replace(prefix, "", 1)
    return value.replace("_", "-")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_resolutions(model_id: str, raw_map: Any, skipped: List[SkippedRatio]):
    table: Dict[str, Dict[str, ImageSize]] = {}
    if not isinstance(raw_map, dict):
        return table
    for resolution, config in raw_map.items():
        sizes: Dict[str, ImageSize] = {}
        table[resolution] = sizes
        ratio_sizes = config.get("image_ratio_sizes") if isinstance(config, dict) else None
        for size in ratio_sizes if isinstance(ratio_sizes, list) else []:
            ratio_type = size.get("ratio_type") if isinstance(size, dict) else None
            ratio = ratio_codec.try_ratio(ratio_type) if isinstance(ratio_type, int) else None
            if ratio is None:
                logger.warning(f"Dropping unknown ratio_type={ratio_type!r} for {model_id} @ {resolution}")
                skipped.append(SkippedRatio(model_id, resolution, ratio_type))
                continue
            try:
                sizes[ratio] = ImageSize(width=int(size.get("width", 0)), height=int(size.get("height", 0)))
            except (TypeError, ValueError):
                logger.warning(
                    f"Dropping {ratio} for {model_id} @ {resolution}: "
                    f"bad size {size.get('width')!r}x{size.get('height')!r}"
                )
                skipped.append(SkippedRatio(model_id, resolution, ratio_type))
    return table


def _parse_option(opt: Dict[str, Any]):
    key = opt.get("key", "")
    value_type = opt.get("value_type", "")
    hidden = bool(opt.get("forbidden_display", False))
    enum_val = opt.get("enum_val")
    slide_val = opt.get("slide_bar_val")
    if value_type == "enum" and isinstance(enum_val, dict):
        values: List[Any] = []
        for field_name in ("string_value", "int_value", "double_value"):
            # 空数组也算命中，不再继续尝试后续类型
            if enum_val.get(field_name) is not None:
                values = enum_val[field_name]
                break
        return EnumOption(key=key, values=tuple(values), default_index=enum_val.get("default_val_idx"), hidden=hidden)
    if value_type == "slide_bar" and isinstance(slide_val, dict):
        return SliderOption(
            key=key,
            min=slide_val.get("min"),
            max=slide_val.get("max"),
            step=slide_val.get("step"),
            default=slide_val.get("default"),
            hidden=hidden,
        )
    return RawOption(key=key, value_type=value_type, hidden=hidden)


def parse_image_models(site: str, raw_models: List[Dict[str, Any]]):
    models: Dict[str, ImageModelEntry] = {}
    model_id_of: Dict[str, str] = {}
    skipped: List[SkippedRatio] = []
    for raw in raw_models:
        vendor_key = raw.get("model_req_key") if isinstance(raw, dict) else None
        if not vendor_key:
            continue
        display_name = raw.get("model_name") or ""
        model_id = image_model_id(vendor_key, display_name)
        if model_id in models:
            # 后出现的条目覆盖先前条目，被替换的 vendor key 不再反查到该 ID
            displaced = models[model_id].vendor_key
            logger.warning(f"[{site}] {vendor_key} resolves to {model_id}, replacing {displaced}")
            model_id_of.pop(displaced, None)
        table = _parse_resolutions(model_id, raw.get("resolution_map"), skipped)
        models[model_id] = ImageModelEntry(
            model_id=model_id,
            vendor_key=vendor_key,
            display_name=display_name,
            resolution_table=MappingProxyType({res: MappingProxyType(sizes) for res, sizes in table.items()}),
            supported_resolutions=tuple(table.keys()),
            tip=raw.get("model_tip"),
            icon_url=raw.get("icon_url"),
            is_new=raw.get("is_new_model"),
            features=frozenset(f for f in raw.get("feats") or [] if isinstance(f, str)),
        )
        model_id_of[vendor_key] = model_id
    return models, model_id_of, skipped


def parse_video_models(site: str, raw_models: List[Dict[str, Any]]) -> Dict[str, VideoModelEntry]:
    models: Dict[str, VideoModelEntry] = {}
    for raw in raw_models:
        vendor_key = raw.get("model_req_key") if isinstance(raw, dict) else None
        if not vendor_key:
            continue
        display_name = raw.get("model_name") or ""
        model_id = video_model_id(vendor_key, display_name)
        if model_id in models:
            logger.warning(f"[{site}] video {vendor_key} resolves to {model_id}, replacing {models[model_id].vendor_key}")
        icon = raw.get("icon") if isinstance(raw.get("icon"), dict) else {}
        extra = raw.get("extra") if isinstance(raw.get("extra"), dict) else {}
        models[model_id] = VideoModelEntry(
            model_id=model_id,
            vendor_key=vendor_key,
            display_name=display_name,
            options=tuple(_parse_option(o) for o in raw.get("options") or [] if isinstance(o, dict)),
            tip=raw.get("model_tip"),
            icon_url=icon.get("image_url"),
            source_tag=extra.get("model_source"),
        )
    return models


def parse_site(
    site: str,
    image_models: Optional[List[Dict[str, Any]]],
    video_models: Optional[List[Dict[str, Any]]] = None,
    last_updated: Optional[str] = None,
) -> SiteCatalog:
    """
    Build one site's catalog. An empty image list means the site cannot be
    served and raises ConfigEmptyError; a missing video list is fine.
    """
    if not image_models:
        raise ConfigEmptyError(site)
    images, model_id_of, skipped = parse_image_models(site, image_models)
    if not images:
        raise ConfigEmptyError(site)
    videos = parse_video_models(site, video_models or [])
    return SiteCatalog.build(
        site=site,
        image_models=images,
        video_models=videos,
        last_updated=last_updated or _now_iso(),
        raw_image_models=list(image_models),
        raw_video_models=list(video_models or []),
        skipped_ratios=skipped,
        model_id_of=model_id_of,
    )
