"""
/**
 * @file jimeng_backend/services/resolution_resolver.py
 * @description 模型 / 分辨率 / 比例校验与像素尺寸查询。
 */
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from jimeng_backend.models.catalog_models import ImageModelEntry, VideoModelEntry
from jimeng_backend.models.generate_request_model import ResolutionResult
from jimeng_backend.services import ratio_codec
from jimeng_backend.services.catalog_store import CatalogStore, get_catalog_store
from jimeng_backend.services.errors import (
    SizeLookupInconsistencyError,
    UnsupportedModelError,
    UnsupportedParamError,
    UnsupportedRatioError,
    UnsupportedResolutionError,
)
from jimeng_backend.services.region_service import RegionDescriptor, site_label


DEFAULT_IMAGE_MODEL = "jimeng-4.1"
DEFAULT_RESOLUTION = "2k"
DEFAULT_RATIO = "1:1"


@dataclass(frozen=True)
class ResolvedSize:
    width: int
    height: int
    ratio_code: int


class ResolutionResolver:
    def __init__(self, store: Optional[CatalogStore] = None):
        self._store = store

    @property
    def store(self) -> CatalogStore:
        return self._store or get_catalog_store()

    # ==================== image models ====================

    def supported_models(self, region: RegionDescriptor) -> List[str]:
        return self.store.catalog_for(region).image_model_ids

    def is_model_supported(self, model_id: str, region: RegionDescriptor) -> bool:
        return model_id in self.store.catalog_for(region).image_models

    def model_detail(self, model_id: str, region: RegionDescriptor) -> Optional[ImageModelEntry]:
        return self.store.catalog_for(region).image_models.get(model_id)

    def vendor_key(self, model_id: str, region: RegionDescriptor) -> Optional[str]:
        return self.store.catalog_for(region).vendor_key_of.get(model_id)

    def model_id_for_vendor_key(self, vendor_key: str, region: RegionDescriptor) -> Optional[str]:
        return self.store.catalog_for(region).model_id_of.get(vendor_key)

    def default_model(self, region: RegionDescriptor) -> str:
        catalog = self.store.catalog_for(region)
        for raw in catalog.raw_image_models:
            if not isinstance(raw, dict):
                continue
            model_id = catalog.model_id_of.get(raw.get("model_req_key"))
            if model_id:
                return model_id
        return DEFAULT_IMAGE_MODEL

    def validate(
        self, model_id: str, resolution: str, ratio: str, region: RegionDescriptor
    ) -> Optional[UnsupportedParamError]:
        """
        Checks model, then resolution, then ratio. A resolution that declares
        no ratios accepts any ratio.
        """
        catalog = self.store.catalog_for(region)
        detail = catalog.image_models.get(model_id)
        if detail is None:
            supported = catalog.image_model_ids
            return UnsupportedModelError(
                f'{site_label(region)} does not support model "{model_id}". '
                f"Supported models: {', '.join(supported)}",
                supported,
            )

        if resolution not in detail.supported_resolutions:
            supported = list(detail.supported_resolutions)
            return UnsupportedResolutionError(
                f'Model "{model_id}" does not support resolution "{resolution}". '
                f"Supported resolutions: {', '.join(supported)}",
                supported,
            )

        ratios = detail.supported_ratios(resolution)
        if ratios and ratio not in ratios:
            return UnsupportedRatioError(
                f'Model "{model_id}" does not support ratio "{ratio}" at resolution "{resolution}". '
                f"Supported ratios: {', '.join(ratios)}",
                ratios,
            )
        return None

    def resolve_size(self, model_id: str, resolution: str, ratio: str, region: RegionDescriptor) -> ResolvedSize:
        detail = self.model_detail(model_id, region)
        size = detail.size_for(resolution, ratio) if detail else None
        if size is None:
            raise SizeLookupInconsistencyError(model_id, resolution, ratio)
        return ResolvedSize(width=size.width, height=size.height, ratio_code=ratio_codec.to_code(ratio))

    def resolve(
        self,
        model_id: str,
        region: RegionDescriptor,
        resolution: str = DEFAULT_RESOLUTION,
        ratio: str = DEFAULT_RATIO,
    ) -> ResolutionResult:
        error = self.validate(model_id, resolution, ratio, region)
        if error is not None:
            raise error
        size = self.resolve_size(model_id, resolution, ratio, region)
        return ResolutionResult(
            width=size.width,
            height=size.height,
            image_ratio=size.ratio_code,
            resolution_type=resolution,
            is_forced=False,
        )

    # ==================== video models ====================

    def supported_video_models(self, region: RegionDescriptor) -> List[str]:
        return self.store.catalog_for(region).video_model_ids

    def is_video_model_supported(self, model_id: str, region: RegionDescriptor) -> bool:
        return model_id in self.store.catalog_for(region).video_models

    def video_vendor_key(self, model_id: str, region: RegionDescriptor) -> Optional[str]:
        return self.store.catalog_for(region).video_vendor_key_of.get(model_id)

    def video_model_detail(self, model_id: str, region: RegionDescriptor) -> Optional[VideoModelEntry]:
        return self.store.catalog_for(region).video_models.get(model_id)

    def video_model_details(self, region: RegionDescriptor) -> List[VideoModelEntry]:
        return list(self.store.catalog_for(region).video_models.values())
