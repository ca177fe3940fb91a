"""
/**
 * @file jimeng_backend/tests/fixtures.py
 * @description 测试用厂商原始模型数据与快照构造。
 */
"""

import copy
import json
import os

from jimeng_backend.services.region_service import SITES


def raw_image_model(model_req_key, model_name, resolutions=None, **extra):
    if resolutions is None:
        resolutions = {
            "2k": [(1, 2048, 2048), (3, 1664, 936), (5, 936, 1664)],
            "4k": [(1, 4096, 4096), (3, 3328, 1872)],
        }
    model = {
        "model_name": model_name,
        "model_req_key": model_req_key,
        "resolution_map": {
            name: {
                "resolution_name": name,
                "image_ratio_sizes": [{"ratio_type": t, "width": w, "height": h} for t, w, h in sizes],
            }
            for name, sizes in resolutions.items()
        },
    }
    model.update(extra)
    return model


def raw_video_model(model_req_key, model_name, options=None):
    return {
        "model_name": model_name,
        "model_req_key": model_req_key,
        "icon": {"image_url": "https://example.invalid/icon.png"},
        "extra": {"model_source": "dreamina"},
        "options": options if options is not None else [
            {
                "key": "duration",
                "value_type": "enum",
                "enum_val": {"enum_type": "int", "int_value": [5, 10], "default_val_idx": 0},
            },
            {
                "key": "motion_strength",
                "value_type": "slide_bar",
                "slide_bar_val": {"min": 0, "max": 1, "step": 0.1, "default": 0.5},
                "forbidden_display": True,
            },
        ],
    }


CN_IMAGE_MODELS = [
    raw_image_model("high_aes_general_v41", "图片 4.1"),
    raw_image_model("high_aes_general_v40", "图片 4.0"),
    raw_image_model("high_aes_general_v30l:general_v3.0_18b", "图片 3.0"),
]

INTL_IMAGE_MODELS = [
    raw_image_model("high_aes_general_v41", "Image 4.1"),
    raw_image_model("high_aes_general_v40", "Image 4.0"),
    raw_image_model("high_aes_general_v30l:general_v3.0_18b", "Image 3.0"),
    raw_image_model("external_model_gemini_flash_image_v25", "Nano Banana"),
    raw_image_model("dreamina_image_lib_1", "Nano Banana Pro"),
]

VIDEO_MODELS = [
    raw_video_model("dreamina_ic_generate_video_model_vgfm_3.0_pro", "Video 3.0 Pro"),
    raw_video_model("dreamina_ic_generate_video_model_vgfm_3.0", "Video 3.0"),
]


def build_snapshot(last_updated="2026-01-01T00:00:00Z", **overrides):
    snapshot = {}
    for site in SITES:
        images = CN_IMAGE_MODELS if site == "china" else INTL_IMAGE_MODELS
        snapshot[site] = {"imageModels": copy.deepcopy(images), "videoModels": copy.deepcopy(VIDEO_MODELS)}
    snapshot.update(overrides)
    snapshot["lastUpdated"] = last_updated
    return snapshot


def write_snapshot(directory, snapshot, name="model-configs.json"):
    path = os.path.join(directory, name)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, ensure_ascii=False)
    return path
