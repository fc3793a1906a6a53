# plugins/resource_override/scene.py

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from skinswap.core.contracts import (
    HookManager, OverrideConfig, PropertyTarget, ResourceLoaderInterface
)
from .component import ResourceOverride
from .resolver import OverrideResolver

logger = logging.getLogger(__name__)

RESOURCE_PREFIX = "res://"


class SceneNode(PropertyTarget):
    """
    A minimal scene-graph node: a property table plus named children.
    Properties may hold nested dicts/lists; nested access goes through
    the property path utilities.
    """
    def __init__(self, name: str, properties: Optional[Dict[str, Any]] = None):
        self.name = name
        self.parent: Optional["SceneNode"] = None
        self._properties: Dict[str, Any] = dict(properties or {})
        self._children: Dict[str, "SceneNode"] = {}
        self._freed = False

    def __repr__(self) -> str:
        return f"SceneNode({self.get_path()!r})"

    # PropertyTarget
    def get_property(self, name: str) -> Any:
        if name in self._properties:
            return self._properties[name]
        if name in self._children:
            return self._children[name]
        raise KeyError(name)

    def set_property(self, name: str, value: Any) -> None:
        if name not in self._properties:
            raise KeyError(name)
        self._properties[name] = value

    def is_valid(self) -> bool:
        return not self._freed

    @property
    def properties(self) -> Dict[str, Any]:
        return self._properties

    # tree
    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.name in self._children:
            raise ValueError(f"Node '{self.get_path()}' already has a child named '{child.name}'.")
        child.parent = self
        self._children[child.name] = child
        return child

    @property
    def children(self) -> List["SceneNode"]:
        return list(self._children.values())

    def get_node(self, path: str) -> Optional["SceneNode"]:
        """Looks a node up by a `/`-separated path relative to this one (`.` and `..` allowed)."""
        current: Optional[SceneNode] = self
        for part in [p for p in path.split('/') if p]:
            if current is None:
                return None
            if part == '.':
                continue
            if part == '..':
                current = current.parent
                continue
            current = current._children.get(part)
        if current is not None and not current.is_valid():
            return None
        return current

    def get_path(self) -> str:
        parts = []
        node: Optional[SceneNode] = self
        while node is not None:
            parts.append(node.name)
            node = node.parent
        return '/'.join(reversed(parts))

    def free(self) -> None:
        """Invalidates this node and its subtree and detaches it from its parent."""
        for child in self.children:
            child.free()
        if self.parent is not None:
            self.parent._children.pop(self.name, None)
        self._freed = True


# --- YAML scene definitions ---

class NodeDefinition(BaseModel):
    properties: Dict[str, Any] = Field(default_factory=dict)
    children: Dict[str, "NodeDefinition"] = Field(default_factory=dict)

class OverrideDefinition(OverrideConfig):
    owner: str = "."

class SceneDefinition(BaseModel):
    root: NodeDefinition = Field(default_factory=NodeDefinition)
    overrides: Dict[str, OverrideDefinition] = Field(default_factory=dict)

NodeDefinition.model_rebuild()


class Scene:
    def __init__(self, root: SceneNode, overrides: Dict[str, ResourceOverride]):
        self.root = root
        self.overrides = overrides


def _load_resources(value: Any, loader: ResourceLoaderInterface) -> Any:
    if isinstance(value, str) and value.startswith(RESOURCE_PREFIX):
        return loader.load(value)
    if isinstance(value, dict):
        return {k: _load_resources(v, loader) for k, v in value.items()}
    if isinstance(value, list):
        return [_load_resources(v, loader) for v in value]
    return value


def _build_node(name: str, definition: NodeDefinition, loader: ResourceLoaderInterface) -> SceneNode:
    node = SceneNode(name, _load_resources(definition.properties, loader))
    for child_name, child_definition in definition.children.items():
        node.add_child(_build_node(child_name, child_definition, loader))
    return node


def build_scene(
    definition: SceneDefinition,
    resolver: OverrideResolver,
    hook_manager: Optional[HookManager] = None,
    preview: bool = False,
) -> Scene:
    """
    Instantiates the node tree, then the override components, then activates
    them so configuration made while building is applied once.
    """
    root = _build_node("root", definition.root, resolver.loader)

    overrides: Dict[str, ResourceOverride] = {}
    for override_name, override_definition in definition.overrides.items():
        owner = root.get_node(override_definition.owner)
        if owner is None:
            raise ValueError(f"Override '{override_name}': owner node '{override_definition.owner}' does not exist.")
        config = OverrideConfig(**override_definition.model_dump(exclude={"owner"}))
        component = ResourceOverride(
            resolver, config=config, owner=owner, hook_manager=hook_manager, name=override_name
        )
        # 激活前配置，激活时统一应用
        component.set_suffix(config.suffix)
        overrides[override_name] = component

    for component in overrides.values():
        component.activate(preview=preview)

    logger.info(f"Scene built with {len(overrides)} override component(s).")
    return Scene(root, overrides)


def load_scene(
    scene_file: Path,
    resolver: OverrideResolver,
    hook_manager: Optional[HookManager] = None,
    preview: bool = False,
) -> Scene:
    with open(scene_file, 'r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}
    definition = SceneDefinition.model_validate(raw)
    return build_scene(definition, resolver, hook_manager=hook_manager, preview=preview)
