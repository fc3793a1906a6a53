# plugins/resource_override/registry.py

import logging
from typing import Dict, List, Optional

from .component import ResourceOverride
from .scene import Scene

logger = logging.getLogger(__name__)


class OverrideRegistry:
    """Named override components known to the running application."""

    def __init__(self):
        self._overrides: Dict[str, ResourceOverride] = {}
        self.scene: Optional[Scene] = None

    def register(self, override: ResourceOverride) -> None:
        if not override.name:
            raise ValueError("Only named override components can be registered.")
        if override.name in self._overrides:
            logger.warning(f"Overwriting override component registration for '{override.name}'")
        self._overrides[override.name] = override

    def get(self, name: str) -> Optional[ResourceOverride]:
        return self._overrides.get(name)

    def names(self) -> List[str]:
        return list(self._overrides.keys())

    def attach_scene(self, scene: Scene) -> None:
        self.scene = scene
        for override in scene.overrides.values():
            self.register(override)
        logger.info(f"Attached scene with overrides: {list(scene.overrides.keys())}")
