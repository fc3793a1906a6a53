# plugins/resource_override/api.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from skinswap.core.contracts import PropertyPathError, Resource, ResourceLoaderInterface
from skinswap.core.utils import get_indexed
from .component import ResourceOverride
from .dependencies import get_override, get_override_registry, get_override_resolver, get_resource_loader
from .models import (
    AddPropertyRequest, ApplyResponse, AssetListing, OverrideState, PropertyValues,
    ResolveResponse, SetFlagsRequest, SetSuffixRequest, SuffixChangeResponse
)
from .registry import OverrideRegistry
from .resolver import OverrideResolver, build_candidate_paths

logger = logging.getLogger(__name__)

override_router = APIRouter(
    prefix="/api",
    tags=["Resource-Override"]
)


# --- 资源浏览 ---

@override_router.get("/assets", response_model=AssetListing)
def list_assets(
    directory: str = Query("res://"),
    loader: ResourceLoaderInterface = Depends(get_resource_loader)
):
    """列出资源目录中的所有文件，供前端文件浏览器使用。"""
    try:
        files = loader.list_dir(directory)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetListing(directory=directory, files=files)

@override_router.get("/resolve", response_model=ResolveResponse)
def resolve_path(
    path: str = Query(..., min_length=1),
    suffix: str = Query(""),
    resolver: OverrideResolver = Depends(get_override_resolver)
):
    """
    Shows how a resource path resolves for a suffix: both candidates,
    whether each exists, and the path that would be used.
    """
    loader = resolver.loader
    candidates = build_candidate_paths(path, suffix)
    resource = loader.load(path) if loader.exists(path) else Resource(path=path)
    resolved = resolver.resolve(resource, suffix)
    return ResolveResponse(
        path=path,
        suffix=suffix,
        override_path=candidates.override_path,
        override_exists=bool(suffix) and loader.exists(candidates.override_path),
        default_path=candidates.default_path,
        default_exists=loader.exists(candidates.default_path),
        resolved_path=resolved.path if resolved is not None else None,
    )


# --- 覆盖组件 ---

@override_router.get("/overrides", response_model=List[OverrideState])
def list_overrides(registry: OverrideRegistry = Depends(get_override_registry)):
    return [OverrideState.from_component(registry.get(name)) for name in registry.names()]

@override_router.get("/overrides/{name}", response_model=OverrideState)
def get_override_state(override: ResourceOverride = Depends(get_override)):
    return OverrideState.from_component(override)

@override_router.put("/overrides/{name}/suffix", response_model=SuffixChangeResponse)
def set_override_suffix(
    body: SetSuffixRequest,
    override: ResourceOverride = Depends(get_override)
):
    before = override.applied_count
    try:
        override.set_suffix(body.suffix)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return SuffixChangeResponse(
        state=OverrideState.from_component(override),
        applied=override.applied_count > before,
    )

@override_router.patch("/overrides/{name}/flags", response_model=OverrideState)
def set_override_flags(
    body: SetFlagsRequest,
    override: ResourceOverride = Depends(get_override)
):
    if body.auto_apply is not None:
        override.set_auto_apply(body.auto_apply)
    if body.apply_in_editor is not None:
        override.set_apply_in_editor(body.apply_in_editor)
    return OverrideState.from_component(override)

@override_router.post("/overrides/{name}/apply", response_model=ApplyResponse)
def apply_override(
    preview: bool = Query(False),
    override: ResourceOverride = Depends(get_override)
):
    changed = override.apply(preview=preview)
    return ApplyResponse(changed=changed, skipped=override.last_skipped)

@override_router.post("/overrides/{name}/properties", response_model=OverrideState, status_code=201)
def add_override_property(
    body: AddPropertyRequest,
    override: ResourceOverride = Depends(get_override)
):
    try:
        override.add_property(body.path)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid property path '{body.path}': {e}")
    return OverrideState.from_component(override)

@override_router.delete("/overrides/{name}/properties", response_model=OverrideState)
def remove_override_property(
    path: str = Query(..., min_length=1),
    override: ResourceOverride = Depends(get_override)
):
    try:
        removed = override.remove_property(path)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid property path '{path}': {e}")
    if not removed:
        raise HTTPException(status_code=404, detail=f"Property '{path}' is not configured on override '{override.name}'.")
    return OverrideState.from_component(override)

@override_router.get("/overrides/{name}/values", response_model=PropertyValues)
def get_override_values(override: ResourceOverride = Depends(get_override)):
    """当前每个已配置属性上的资源路径，用于界面反馈。"""
    target = override.resolve_target()
    if target is None:
        return PropertyValues(target_found=False)

    values = {}
    for property_path in override.get_property_paths():
        try:
            value = get_indexed(target, property_path)
        except PropertyPathError:
            value = None
        values[str(property_path)] = value.path if isinstance(value, Resource) else None
    return PropertyValues(target_found=True, values=values)
