# skinswap/core/contracts.py

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, List, NamedTuple, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- 1. 核心服务接口与类型别名 ---

T = TypeVar('T')

# 插件注册函数的标准签名
PluginRegisterFunc = Callable[['Container', 'HookManager'], None]

class Container(ABC):
    @abstractmethod
    def register(self, name: str, factory: Callable, singleton: bool = True) -> None: raise NotImplementedError
    @abstractmethod
    def resolve(self, name: str) -> Any: raise NotImplementedError

class HookManager(ABC):
    @abstractmethod
    def add_implementation(self, hook_name: str, implementation: Callable, priority: int = 10, plugin_name: str = "<unknown>"): raise NotImplementedError
    @abstractmethod
    def trigger(self, hook_name: str, **kwargs: Any) -> None: raise NotImplementedError
    @abstractmethod
    def filter(self, hook_name: str, data: T, **kwargs: Any) -> T: raise NotImplementedError


# --- 2. 资源模型 ---

class Resource(BaseModel):
    """
    An opaque handle to a loadable asset, identified by its path.
    Instances are owned by the resource loader; the override system only
    reads and swaps references, so identity (`is`) is what matters.
    """
    path: str
    size_bytes: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def base_dir(self) -> str:
        return split_resource_path(self.path)[0]

    @property
    def file_name(self) -> str:
        return split_resource_path(self.path)[1]

    @property
    def stem(self) -> str:
        """File name with every extension stripped: `b.c.png` -> `b`."""
        return self.file_name.split('.', 1)[0]

    @property
    def extension(self) -> str:
        """Final extension only, without the dot: `b.c.png` -> `png`."""
        name = self.file_name
        return name.rsplit('.', 1)[1] if '.' in name else ""

class Texture(Resource):
    width: int = 0
    height: int = 0
    mode: str = ""

class AudioStream(Resource):
    pass


class ResolvedPathPair(NamedTuple):
    override_path: str
    default_path: str


def split_resource_path(path: str) -> Tuple[str, str]:
    """
    Splits a resource path into (directory, file name).
    Scheme roots such as `res://` stay attached to the directory part.
    """
    index = path.rfind('/')
    if index < 0:
        return "", path
    head, name = path[:index], path[index + 1:]
    if head.endswith(':/') or head == "":
        # "res://x.png" -> ("res://", "x.png"), "/x.png" -> ("/", "x.png")
        head += '/'
    return head, name

def join_resource_path(directory: str, file_name: str) -> str:
    if not directory:
        return file_name
    if directory.endswith('/'):
        return directory + file_name
    return f"{directory}/{file_name}"


# --- 3. 宿主服务接口 ---

class ResourceLoaderInterface(ABC):
    """The host's resource subsystem: existence checks and (cached) loads."""
    @abstractmethod
    def exists(self, path: str) -> bool: raise NotImplementedError
    @abstractmethod
    def load(self, path: str) -> Resource: raise NotImplementedError
    @abstractmethod
    def list_dir(self, directory: str) -> List[str]: raise NotImplementedError

class PropertyTarget(ABC):
    """
    Capability a target object must provide so property paths can be
    read and written on it.
    """
    @abstractmethod
    def get_property(self, name: str) -> Any: raise NotImplementedError
    @abstractmethod
    def set_property(self, name: str, value: Any) -> None: raise NotImplementedError

    def has_property(self, name: str) -> bool:
        try:
            self.get_property(name)
        except KeyError:
            return False
        return True

    def is_valid(self) -> bool:
        return True


# --- 4. 属性路径与覆盖配置 ---

class PropertyPathError(KeyError):
    """A property path could not be followed on a target."""
    def __init__(self, path: str, segment: str, reason: str = "not found"):
        self.path = path
        self.segment = segment
        self.reason = reason
        super().__init__(f"Property path '{path}': segment '{segment}' {reason}.")

    def __str__(self) -> str:
        return self.args[0]

class PropertyPath(BaseModel):
    """
    A parsed address into a target's nested properties.
    `sprite:texture` and `sprite.texture` both parse to ('sprite', 'texture');
    the canonical string form uses ':'.
    """
    segments: Tuple[str, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator('segments')
    @classmethod
    def check_segments(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("A property path needs at least one segment.")
        for segment in v:
            if not segment or segment != segment.strip():
                raise ValueError(f"Invalid property path segment: '{segment}'.")
        return v

    @classmethod
    def parse(cls, raw: "str | PropertyPath") -> "PropertyPath":
        if isinstance(raw, PropertyPath):
            return raw
        if not isinstance(raw, str) or not raw:
            raise ValueError(f"Property path must be a non-empty string, got {raw!r}.")
        return cls(segments=tuple(raw.replace('.', ':').split(':')))

    @property
    def property_name(self) -> str:
        return self.segments[0]

    @property
    def sub_path(self) -> Tuple[str, ...]:
        return self.segments[1:]

    def __str__(self) -> str:
        return ':'.join(self.segments)


class OverrideConfig(BaseModel):
    target_path: str = ""
    properties: List[PropertyPath] = Field(default_factory=list)
    suffix: str = ""
    auto_apply: bool = True
    apply_in_editor: bool = False

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('properties', mode='before')
    @classmethod
    def parse_properties(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [PropertyPath.parse(p) if isinstance(p, str) else p for p in v]
        return v

    @field_validator('suffix')
    @classmethod
    def check_suffix(cls, v: str) -> str:
        if '/' in v or '\\' in v:
            raise ValueError("Suffix cannot contain path separators.")
        return v


# --- 5. 系统事件 (钩子名称) ---

HOOK_OVERRIDE_APPLIED = "override_applied"
HOOK_COLLECT_API_ROUTERS = "collect_api_routers"
HOOK_SERVICES_POST_REGISTER = "services_post_register"
HOOK_APP_SHUTDOWN = "app_shutdown"
