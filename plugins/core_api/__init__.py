# plugins/core_api/__init__.py
import logging
from typing import List
from fastapi import APIRouter

from skinswap.core.contracts import Container, HookManager, HOOK_COLLECT_API_ROUTERS


logger = logging.getLogger(__name__)


def provide_own_routers(routers: List[APIRouter]) -> List[APIRouter]:
    """
    Hook implementation: adds this plugin's routers to the application's collection.
    Router modules are imported here so they are only executed once the
    application is collecting them.
    """
    from .system_router import system_api_router

    logger.debug(f"[core_api] Appending system_api_router (prefix='{system_api_router.prefix}', {len(system_api_router.routes)} routes)")
    routers.append(system_api_router)
    return routers

def register_plugin(container: Container, hook_manager: HookManager):
    """Registers platform-level introspection endpoints."""
    logger.info("--> 正在注册 [core_api] 插件...")

    hook_manager.add_implementation(
        HOOK_COLLECT_API_ROUTERS,
        provide_own_routers,
        priority=100,
        plugin_name="core_api"
    )
    logger.info("插件 [core_api] 注册成功。")
