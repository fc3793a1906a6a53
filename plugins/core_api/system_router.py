# plugins/core_api/system_router.py

import json
import logging
from pathlib import Path
from typing import List, Dict, Any

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

# __file__ -> .../plugins/core_api/system_router.py
PLUGINS_DIR = Path(__file__).resolve().parent.parent

system_api_router = APIRouter(
    prefix="/api",
    tags=["System Platform API"]
)

@system_api_router.get("/plugins/manifest", response_model=List[Dict[str, Any]], summary="Get All Plugin Manifests")
def get_all_plugins_manifest():
    """
    Retrieves the manifest.json content for all discovered plugins.
    """
    if not PLUGINS_DIR.is_dir():
        return []

    manifests = []
    for plugin_path in sorted(PLUGINS_DIR.iterdir()):
        if not plugin_path.is_dir() or plugin_path.name.startswith(('__', '.')):
            continue

        manifest_file = plugin_path / "manifest.json"
        if manifest_file.is_file():
            try:
                with open(manifest_file, 'r', encoding='utf-8') as f:
                    manifests.append(json.load(f))
            except json.JSONDecodeError:
                logger.warning(f"Could not parse manifest.json for plugin: {plugin_path.name}")
    return manifests

@system_api_router.get("/system/hooks/manifest", response_model=Dict[str, List[str]], summary="Get Backend Hooks Manifest")
def get_backend_hooks_manifest(request: Request):
    """
    Lists every hook name that has at least one implementation registered.
    """
    hook_manager = request.app.state.container.resolve("hook_manager")
    return {"hooks": sorted(hook_manager.hook_names)}
