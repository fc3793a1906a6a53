# plugins/resource_override/dependencies.py

from fastapi import HTTPException, Request

from skinswap.core.contracts import ResourceLoaderInterface
from .component import ResourceOverride
from .registry import OverrideRegistry
from .resolver import OverrideResolver


def get_resource_loader(request: Request) -> ResourceLoaderInterface:
    return request.app.state.container.resolve("resource_loader")

def get_override_resolver(request: Request) -> OverrideResolver:
    return request.app.state.container.resolve("override_resolver")

def get_override_registry(request: Request) -> OverrideRegistry:
    return request.app.state.container.resolve("override_registry")

def get_override(name: str, request: Request) -> ResourceOverride:
    override = get_override_registry(request).get(name)
    if override is None:
        raise HTTPException(status_code=404, detail=f"Override '{name}' not found.")
    return override
