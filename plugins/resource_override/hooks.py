# plugins/resource_override/hooks.py
import logging

from .component import ResourceOverride

logger = logging.getLogger(__name__)

def on_override_applied(override: ResourceOverride) -> None:
    """通知型钩子：记录一次生效的覆盖应用。"""
    logger.info(
        f"PLUGIN-HOOK: override '{override.name}' applied suffix "
        f"'{override.suffix or '<default>'}' (apply #{override.applied_count})."
    )
