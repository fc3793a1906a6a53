# plugins/resource_override/__init__.py
import os
import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter

from skinswap.core.contracts import (
    Container, HookManager,
    HOOK_COLLECT_API_ROUTERS, HOOK_OVERRIDE_APPLIED, HOOK_SERVICES_POST_REGISTER
)
from .component import ResourceOverride
from .registry import OverrideRegistry
from .resolver import OverrideResolver, build_candidate_paths
from .scene import SceneNode, load_scene
from . import hooks

logger = logging.getLogger(__name__)

__all__ = [
    "OverrideResolver",
    "ResourceOverride",
    "OverrideRegistry",
    "SceneNode",
    "build_candidate_paths",
    "load_scene",
]

# --- 服务工厂 ---
def _create_override_resolver(container: Container) -> OverrideResolver:
    return OverrideResolver(container.resolve("resource_loader"))

# --- 钩子实现 ---
def load_startup_scene(container: Container):
    """Loads the scene named by SKINSWAP_SCENE_FILE, if any, into the override registry."""
    scene_file = os.getenv("SKINSWAP_SCENE_FILE")
    if not scene_file:
        logger.debug("SKINSWAP_SCENE_FILE not set; starting without a scene.")
        return

    registry: OverrideRegistry = container.resolve("override_registry")
    scene = load_scene(
        Path(scene_file),
        container.resolve("override_resolver"),
        hook_manager=container.resolve("hook_manager"),
    )
    registry.attach_scene(scene)

def provide_api_router(routers: List[APIRouter]) -> List[APIRouter]:
    from .api import override_router
    routers.append(override_router)
    logger.debug("Provided 'override_router' to the application.")
    return routers

# --- 主注册函数 ---
def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [resource_override] 插件...")

    container.register("override_resolver", _create_override_resolver, singleton=True)
    container.register("override_registry", lambda: OverrideRegistry(), singleton=True)

    hook_manager.add_implementation(
        HOOK_SERVICES_POST_REGISTER, load_startup_scene, priority=50, plugin_name="resource_override"
    )
    hook_manager.add_implementation(
        HOOK_COLLECT_API_ROUTERS, provide_api_router, plugin_name="resource_override"
    )
    hook_manager.add_implementation(
        HOOK_OVERRIDE_APPLIED, hooks.on_override_applied, priority=100, plugin_name="resource_override"
    )

    logger.info("插件 [resource_override] 注册成功。")
