# skinswap/app.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple

from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from skinswap.container import Container
from skinswap.core.contracts import (
    HOOK_APP_SHUTDOWN, HOOK_COLLECT_API_ROUTERS, HOOK_SERVICES_POST_REGISTER
)
from skinswap.core.hooks import HookManager
from skinswap.core.loader import PluginLoader

logger = logging.getLogger(__name__)


def bootstrap(only: Optional[List[str]] = None, announce: bool = True) -> Tuple[Container, HookManager]:
    """Builds the container and hook manager and loads every plugin into them."""
    container = Container()
    hook_manager = HookManager(container)

    # 1. 注册平台核心服务
    container.register("container", lambda: container)
    container.register("hook_manager", lambda: hook_manager)

    # 2. 加载插件（同步注册）
    loader = PluginLoader(container, hook_manager, announce=announce)
    loader.load_plugins(only=only)

    # 3. 插件全部注册后的初始化（例如加载启动场景）
    hook_manager.trigger(HOOK_SERVICES_POST_REGISTER)
    return container, hook_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- 启动阶段 ---
    container, hook_manager = bootstrap()
    app.state.container = container
    hook_manager.add_shared_context("app", app)

    logger.info("正在从所有插件收集 API 路由...")
    routers_to_add: List[APIRouter] = hook_manager.filter(HOOK_COLLECT_API_ROUTERS, [])
    if routers_to_add:
        for router in routers_to_add:
            app.include_router(router)
            logger.debug(f"已添加路由: prefix='{router.prefix}', tags={router.tags}")
    else:
        logger.warning("未从插件中收集到任何 API 路由。")

    logger.info("--- skinswap 已就绪 ---")
    yield
    # --- 关闭阶段 ---
    logger.info("--- skinswap 正在关闭 ---")
    hook_manager.trigger(HOOK_APP_SHUTDOWN)


def create_app() -> FastAPI:
    """应用工厂函数"""
    app = FastAPI(
        title="skinswap (Resource Override Plugin Host)",
        version="0.3.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
