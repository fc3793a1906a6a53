# plugins/resource_override/models.py

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .component import ResourceOverride


class OverrideState(BaseModel):
    name: str
    target_path: str
    properties: List[str]
    suffix: str
    auto_apply: bool
    apply_in_editor: bool
    active: bool
    applied_count: int
    last_skipped: List[str] = Field(default_factory=list)

    @classmethod
    def from_component(cls, override: ResourceOverride) -> "OverrideState":
        return cls(
            name=override.name,
            target_path=override.config.target_path,
            properties=[str(p) for p in override.get_property_paths()],
            suffix=override.suffix,
            auto_apply=override.config.auto_apply,
            apply_in_editor=override.config.apply_in_editor,
            active=override.is_active,
            applied_count=override.applied_count,
            last_skipped=list(override.last_skipped),
        )

class SetSuffixRequest(BaseModel):
    suffix: str = ""

class SetFlagsRequest(BaseModel):
    auto_apply: Optional[bool] = None
    apply_in_editor: Optional[bool] = None

class AddPropertyRequest(BaseModel):
    path: str

class SuffixChangeResponse(BaseModel):
    state: OverrideState
    # 本次修改是否触发了一次实际生效的 apply
    applied: bool

class ApplyResponse(BaseModel):
    changed: int
    skipped: List[str]

class ResolveResponse(BaseModel):
    path: str
    suffix: str
    override_path: str
    override_exists: bool
    default_path: str
    default_exists: bool
    resolved_path: Optional[str]

class AssetListing(BaseModel):
    directory: str
    files: List[str]

class PropertyValues(BaseModel):
    target_found: bool
    values: Dict[str, Optional[str]] = Field(default_factory=dict)
