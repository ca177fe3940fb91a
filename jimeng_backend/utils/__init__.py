"""
/**
 * @file jimeng_backend/utils/__init__.py
 * @description 工具函数导出。
 */
"""

from .file_utils import read_json_file, write_json_atomic

__all__ = ["read_json_file", "write_json_atomic"]
