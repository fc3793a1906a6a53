# skinswap/container.py

import logging
import threading
from typing import Dict, Any, Callable, List

from skinswap.core.contracts import Container as ContainerInterface

logger = logging.getLogger(__name__)


class Container(ContainerInterface):
    """A small service container with singleton caching and circular dependency detection."""
    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, bool] = {}
        self._instances: Dict[str, Any] = {}
        self._lock = threading.RLock()
        self._local = threading.local()

    def _get_resolution_stack(self) -> List[str]:
        if not hasattr(self._local, 'resolution_stack'):
            self._local.resolution_stack = []
        return self._local.resolution_stack

    def register(self, name: str, factory: Callable, singleton: bool = True) -> None:
        """注册一个服务工厂。"""
        if name in self._factories:
            logger.warning(f"Overwriting service registration for '{name}'")
            self._instances.pop(name, None)
        self._factories[name] = factory
        self._singletons[name] = singleton

    def is_registered(self, name: str) -> bool:
        return name in self._factories

    def _build(self, name: str) -> Any:
        factory = self._factories[name]
        try:
            return factory(self)
        except TypeError:
            return factory()

    def resolve(self, name: str) -> Any:
        """
        Returns the service instance registered under `name`.
        Factories may accept the container as their single argument.
        """
        resolution_stack = self._get_resolution_stack()
        if name in resolution_stack:
            path = " -> ".join(resolution_stack + [name])
            raise RuntimeError(f"Circular dependency detected: {path}")

        resolution_stack.append(name)
        try:
            is_singleton = self._singletons.get(name, True)
            if is_singleton and name in self._instances:
                return self._instances[name]

            if name not in self._factories:
                raise ValueError(f"Service '{name}' not found in container.")

            if not is_singleton:
                return self._build(name)

            with self._lock:
                if name in self._instances:
                    return self._instances[name]
                instance = self._build(name)
                logger.debug(f"Resolved service '{name}'. Singleton: True")
                self._instances[name] = instance
                return instance
        finally:
            resolution_stack.pop()
