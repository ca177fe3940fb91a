"""
/**
 * @file jimeng_backend/services/__init__.py
 * @description 业务服务层导出。
 */
"""

from .catalog_store import CatalogStore, get_catalog_store
from .payload_compiler import compile_generation_request
from .resolution_resolver import ResolutionResolver
from .vendor_config_client import VendorConfigClient

__all__ = [
    "CatalogStore",
    "ResolutionResolver",
    "VendorConfigClient",
    "compile_generation_request",
    "get_catalog_store",
]
