# plugins/resource_override/component.py

import logging
from typing import Any, Iterable, List, Optional, Union

from skinswap.core.contracts import (
    HOOK_OVERRIDE_APPLIED, HookManager, OverrideConfig, PropertyPath,
    PropertyPathError, PropertyTarget, Resource
)
from skinswap.core.utils import get_indexed, set_indexed
from .resolver import OverrideResolver

logger = logging.getLogger(__name__)

PathLike = Union[str, PropertyPath]


class ResourceOverride:
    """
    Swaps resource references on a target's properties for suffixed variants.

    Lifecycle is two-phase: the component is configured first and activated
    once its owner is ready. Auto-apply requests made before activation are
    held as pending and run once by `activate()`.

    The target is either set directly (`set_target`) or looked up from the
    owner node through `config.target_path`.
    """

    def __init__(
        self,
        resolver: OverrideResolver,
        config: Optional[OverrideConfig] = None,
        owner: Any = None,
        hook_manager: Optional[HookManager] = None,
        name: str = "",
    ):
        self.name = name
        self.config = config or OverrideConfig()
        self.owner = owner
        self._resolver = resolver
        self._hook_manager = hook_manager
        self._target: Any = None
        self._active = False
        self._preview = False
        self._pending_apply = False
        self.last_skipped: List[str] = []
        self.applied_count = 0

    # --- lifecycle ---

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def has_pending_apply(self) -> bool:
        return self._pending_apply

    def activate(self, preview: bool = False) -> int:
        """Marks the component ready and flushes a pending auto-apply, if any."""
        self._active = True
        self._preview = preview
        if not self._pending_apply:
            return 0
        self._pending_apply = False
        return self.apply(preview=self._preview)

    def _request_apply(self) -> None:
        if not self.config.auto_apply:
            return
        if not self._active:
            self._pending_apply = True
            return
        self.apply(preview=self._preview)

    # --- configuration ---

    @property
    def suffix(self) -> str:
        return self.config.suffix

    def set_suffix(self, suffix: str) -> None:
        self.config.suffix = suffix
        self._request_apply()

    def set_auto_apply(self, enabled: bool) -> None:
        self.config.auto_apply = enabled

    def set_apply_in_editor(self, enabled: bool) -> None:
        self.config.apply_in_editor = enabled

    def set_target(self, target: Any) -> None:
        self._target = target
        self._request_apply()

    def set_target_path(self, target_path: str) -> None:
        self._target = None
        self.config.target_path = target_path
        self._request_apply()

    def resolve_target(self) -> Optional[Any]:
        target = self._target
        if target is None and self.config.target_path and self.owner is not None:
            get_node = getattr(self.owner, "get_node", None)
            if get_node is not None:
                target = get_node(self.config.target_path)
        if target is None:
            return None
        if isinstance(target, PropertyTarget) and not target.is_valid():
            return None
        return target

    # --- property list ---

    def set_properties(self, paths: Iterable[PathLike]) -> None:
        parsed: List[PropertyPath] = []
        for path in paths:
            property_path = PropertyPath.parse(path)
            if str(property_path) not in {str(p) for p in parsed}:
                parsed.append(property_path)
        self.config.properties = parsed
        self._request_apply()

    def add_property(self, path: PathLike) -> bool:
        property_path = PropertyPath.parse(path)
        if self.has_property(property_path):
            return False
        self.config.properties.append(property_path)
        self._request_apply()
        return True

    def remove_property(self, path: PathLike) -> bool:
        key = str(PropertyPath.parse(path))
        for index, existing in enumerate(self.config.properties):
            if str(existing) == key:
                del self.config.properties[index]
                return True
        return False

    def has_property(self, path: PathLike) -> bool:
        key = str(PropertyPath.parse(path))
        return any(str(p) == key for p in self.config.properties)

    def get_property_paths(self) -> List[PropertyPath]:
        return list(self.config.properties)

    # --- apply ---

    def apply(self, preview: bool = False) -> int:
        """
        Re-resolves every configured property for the current suffix.

        Only properties whose resolved reference differs (by identity) from the
        current one are written. Returns how many were written; a single
        `override_applied` notification follows when that count is non-zero.
        A property whose path cannot be followed is skipped and listed in
        `last_skipped`.
        """
        self.last_skipped = []

        if preview and not self.config.apply_in_editor:
            logger.debug(f"Override '{self.name}': skipped in preview context (apply_in_editor is off).")
            return 0

        target = self.resolve_target()
        if target is None:
            logger.debug(f"Override '{self.name}': no live target, nothing to apply.")
            return 0

        suffix = self.config.suffix
        changed = 0
        for property_path in list(self.config.properties):
            try:
                current = get_indexed(target, property_path)
                if current is not None and not isinstance(current, Resource):
                    raise PropertyPathError(str(property_path), property_path.segments[-1], "does not hold a resource")
                resolved = self._resolver.resolve(current, suffix)
                if resolved is current:
                    continue
                set_indexed(target, property_path, resolved)
            except PropertyPathError as e:
                logger.warning(f"Override '{self.name}': skipping property. {e}")
                self.last_skipped.append(str(property_path))
                continue
            changed += 1

        if changed > 0:
            self.applied_count += 1
            logger.info(f"Override '{self.name}': suffix '{suffix}' changed {changed} propert{'y' if changed == 1 else 'ies'}.")
            if self._hook_manager is not None:
                self._hook_manager.trigger(HOOK_OVERRIDE_APPLIED, override=self)

        return changed
