"""
/**
 * @file jimeng_backend/models/__init__.py
 * @description 数据模型导出。
 */
"""

from .catalog_models import EnumOption, ImageModelEntry, SiteCatalog, SliderOption, VideoModelEntry
from .generate_request_model import DraftRequest, GenerationRequest, ResolutionResult, ResolveRequest

__all__ = [
    "DraftRequest",
    "EnumOption",
    "GenerationRequest",
    "ImageModelEntry",
    "ResolutionResult",
    "ResolveRequest",
    "SiteCatalog",
    "SliderOption",
    "VideoModelEntry",
]
