"""
/**
 * @file jimeng_backend/controllers/__init__.py
 * @description 控制器（路由）导出。
 */
"""

from .generate_controller import router as generate_router
from .health_controller import router as health_router
from .models_controller import router as models_router

__all__ = [
    "generate_router",
    "health_router",
    "models_router",
]
