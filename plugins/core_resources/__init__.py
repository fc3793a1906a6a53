# plugins/core_resources/__init__.py
import os
import logging
from pathlib import Path

from skinswap.core.contracts import Container, HookManager, HOOK_APP_SHUTDOWN
from .loader import FileSystemResourceLoader

logger = logging.getLogger(__name__)

def _create_resource_loader() -> FileSystemResourceLoader:
    root_dir = os.getenv("SKINSWAP_RESOURCE_ROOT", ".")
    return FileSystemResourceLoader(root_dir=Path(root_dir))

def release_resources(container: Container):
    """钩子实现：应用关闭时清空资源缓存。"""
    loader: FileSystemResourceLoader = container.resolve("resource_loader")
    loader.clear_cache()
    logger.debug("Resource cache cleared on shutdown.")

def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_resources] 插件...")
    container.register("resource_loader", _create_resource_loader, singleton=True)
    hook_manager.add_implementation(
        HOOK_APP_SHUTDOWN, release_resources, plugin_name="core_resources"
    )
    logger.info("插件 [core_resources] 注册成功。")
