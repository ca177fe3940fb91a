"""
/**
 * @file jimeng_backend/services/errors.py
 * @description 目录与请求编译相关的异常类型。
 */
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class CatalogError(Exception):
    """Base class for every catalog / payload error raised by the services."""


class CatalogNotInitializedError(CatalogError):
    pass


class ConfigMissingError(CatalogError):
    def __init__(self, path: str):
        super().__init__(f"Model config snapshot not found: {path}")
        self.path = path


class ConfigMalformedError(CatalogError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Model config snapshot is malformed ({path}): {reason}")
        self.path = path
        self.reason = reason


class ConfigEmptyError(CatalogError):
    def __init__(self, site: str):
        super().__init__(f"Image model list for site {site} is empty")
        self.site = site


class UnsupportedParamError(CatalogError):
    """
    Caller error from validation. The message is meant to be shown to the
    end user as is and always lists the accepted values.
    """

    def __init__(self, message: str, supported: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.message = message
        self.supported: List[str] = list(supported or [])


class UnsupportedModelError(UnsupportedParamError):
    pass


class UnsupportedResolutionError(UnsupportedParamError):
    pass


class UnsupportedRatioError(UnsupportedParamError):
    pass


class SizeLookupInconsistencyError(CatalogError):
    def __init__(self, model_id: str, resolution: str, ratio: str):
        super().__init__(
            f'No size entry for model "{model_id}" at resolution "{resolution}" ratio "{ratio}"'
        )
        self.model_id = model_id
        self.resolution = resolution
        self.ratio = ratio


class VendorFetchError(CatalogError):
    def __init__(self, site: str, kind: str, message: str):
        super().__init__(message)
        self.site = site
        self.kind = kind
        self.message = message


class PersistenceError(CatalogError):
    pass
