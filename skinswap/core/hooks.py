# skinswap/core/hooks.py
import logging
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, TypeVar, Optional

from skinswap.core.contracts import HookManager as HookManagerInterface, Container

logger = logging.getLogger(__name__)

T = TypeVar('T')

HookCallable = Callable[..., Any]

@dataclass(order=True)
class HookImplementation:
    """封装一个钩子实现及其元数据。"""
    priority: int
    func: HookCallable = field(compare=False)
    plugin_name: str = field(compare=False, default="<unknown>")

class HookManager(HookManagerInterface):
    """
    A central, context-aware dispatcher for hook implementations.

    Everything runs synchronously on the caller's thread: the host drives
    node lifecycle and property mutation from a single control flow, so
    listeners observe state exactly as the emitter left it.
    Shared context (container, hook_manager, ...) is injected into
    implementations by parameter name.
    """
    def __init__(self, container: Optional[Container] = None):
        self._hooks: Dict[str, List[HookImplementation]] = defaultdict(list)
        self._shared_context: Dict[str, Any] = {
            "container": container,
            "hook_manager": self
        }
        logger.debug("HookManager initialized.")

    @property
    def hook_names(self) -> List[str]:
        return list(self._hooks.keys())

    def add_shared_context(self, name: str, service: Any) -> None:
        """允许在启动过程中向钩子系统添加更多的共享服务。"""
        if name in self._shared_context:
            logger.warning(f"Overwriting shared context for hooks: '{name}'")
        self._shared_context[name] = service

    def _prepare_hook_args(
        self,
        func: HookCallable,
        call_context: Dict[str, Any],
        positional_data: Optional[Any] = None,
        has_positional: bool = False
    ) -> tuple[list, dict]:
        params = list(inspect.signature(func).parameters.values())

        hook_args = []
        if has_positional:
            # filter 钩子的数据总是第一个参数
            hook_args.append(positional_data)
            if params and params[0].kind in (params[0].POSITIONAL_ONLY, params[0].POSITIONAL_OR_KEYWORD):
                params = params[1:]

        accepts_var_kwargs = any(p.kind == p.VAR_KEYWORD for p in params)
        hook_kwargs = {}
        for param in params:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD, param.POSITIONAL_ONLY):
                continue
            if param.name in call_context:
                hook_kwargs[param.name] = call_context[param.name]
        if accepts_var_kwargs:
            for name, value in call_context.items():
                hook_kwargs.setdefault(name, value)

        return hook_args, hook_kwargs

    def add_implementation(
        self,
        hook_name: str,
        implementation: HookCallable,
        priority: int = 10,
        plugin_name: str = "<core>"
    ):
        """向管理器注册一个钩子实现。"""
        if inspect.iscoroutinefunction(implementation):
            raise TypeError(f"Hook implementation for '{hook_name}' must be a regular (synchronous) function.")
        if not callable(implementation):
            raise TypeError(f"Hook implementation for '{hook_name}' must be callable.")

        hook_impl = HookImplementation(priority=priority, func=implementation, plugin_name=plugin_name)
        self._hooks[hook_name].append(hook_impl)
        self._hooks[hook_name].sort() # 保持列表按优先级排序（从小到大）
        logger.debug(f"Registered hook '{hook_name}' from plugin '{plugin_name}' with priority {priority}.")

    def trigger(self, hook_name: str, **kwargs: Any) -> None:
        """
        Fires a notification hook. Implementations run in priority order;
        return values are ignored and a failing listener never stops the others.
        """
        if hook_name not in self._hooks:
            return

        call_context = {**self._shared_context, **kwargs}

        for impl in list(self._hooks[hook_name]):
            try:
                _, prepared_kwargs = self._prepare_hook_args(impl.func, call_context)
                impl.func(**prepared_kwargs)
            except Exception as e:
                logger.error(
                    f"Error in NOTIFICATION hook '{hook_name}' from plugin '{impl.plugin_name}': {e}",
                    exc_info=e
                )

    def filter(self, hook_name: str, data: T, **kwargs: Any) -> T:
        """
        Fires a filter hook: each implementation receives the previous one's output.
        """
        if hook_name not in self._hooks:
            return data

        call_context = {**self._shared_context, **kwargs}
        current_data = data

        for impl in list(self._hooks[hook_name]):
            try:
                prepared_args, prepared_kwargs = self._prepare_hook_args(
                    impl.func, call_context, positional_data=current_data, has_positional=True
                )
                current_data = impl.func(*prepared_args, **prepared_kwargs)
            except Exception as e:
                logger.error(
                    f"Error in FILTER hook '{hook_name}' from plugin '{impl.plugin_name}'. Skipping. Error: {e}",
                    exc_info=e
                )

        return current_data

