"""
/**
 * @file jimeng_backend/services/ratio_codec.py
 * @description 比例字符串与厂商 ratio_type 整数编码的双向映射。
 */
"""

from __future__ import annotations

import logging
from typing import Dict, Optional


logger = logging.getLogger("ratio_codec")

RATIO_TYPE_MAP: Dict[int, str] = {
    1: "1:1",
    2: "3:4",
    3: "16:9",
    4: "4:3",
    5: "9:16",
    6: "2:3",
    7: "3:2",
    8: "21:9",
}

RATIO_STRING_MAP: Dict[str, int] = {v: k for k, v in RATIO_TYPE_MAP.items()}

DEFAULT_RATIO = "1:1"


def to_code(ratio: str) -> int:
    code = RATIO_STRING_MAP.get(ratio)
    if code is None:
        # TODO: reject unknown ratio strings once API clients stop relying on the 1:1 fallback
        logger.warning(f"Unknown ratio {ratio!r}, falling back to {DEFAULT_RATIO}")
        return RATIO_STRING_MAP[DEFAULT_RATIO]
    return code


def to_ratio(code: int) -> str:
    return RATIO_TYPE_MAP[code]


def try_ratio(code) -> Optional[str]:
    return RATIO_TYPE_MAP.get(code)
