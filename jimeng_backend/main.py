"""
/**
 * @file jimeng_backend/main.py
 * @description FastAPI 应用入口（MVC：仅装配路由与中间件）。
 */
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from jimeng_backend.config import CONFIG_LOCAL_PATH, CONFIG_PATH, load_settings, reload_settings
from jimeng_backend.controllers import generate_router, health_router, models_router
from jimeng_backend.services import get_catalog_store

app = FastAPI(title="jimeng-backend")
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("main")


class ConfigEventHandler(FileSystemEventHandler):
    """Handler for config file changes"""

    def on_modified(self, event):
        if event.is_directory:
            return
        if event.src_path in (CONFIG_PATH, CONFIG_LOCAL_PATH):
            reload_settings()


_observer = None


@app.on_event("startup")
def startup_event():
    global _observer
    load_settings()
    # 目录加载失败时直接中止启动，不允许部分初始化提供服务
    get_catalog_store().initialize()
    try:
        _observer = Observer()
        config_dir = os.path.dirname(CONFIG_PATH)
        _observer.schedule(ConfigEventHandler(), config_dir, recursive=False)
        _observer.start()
        logger.info(f"Config watcher started on {config_dir}")
    except OSError as e:
        logger.warning(f"Failed to start config watcher: {e}")
        _observer = None


@app.on_event("shutdown")
def shutdown_event():
    global _observer
    if _observer:
        _observer.stop()
        _observer.join()
        _observer = None
    get_catalog_store().teardown()


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(models_router)
app.include_router(generate_router)
