# plugins/resource_override/resolver.py

import logging
from typing import Optional

from skinswap.core.contracts import (
    Resource, ResourceLoaderInterface, ResolvedPathPair,
    join_resource_path, split_resource_path
)

logger = logging.getLogger(__name__)


def build_candidate_paths(path: str, suffix: str) -> ResolvedPathPair:
    """
    Builds the (override, default) candidate paths for a resource path.

    Every dot-segment of the file name except the final extension is dropped
    before the suffix goes in, so `a/b.c.png` with suffix `x` gives
    `a/b.x.png` and `a/b.png`.
    """
    directory, file_name = split_resource_path(path)
    stem = file_name.split('.', 1)[0]
    extension = file_name.rsplit('.', 1)[1] if '.' in file_name else ""

    if extension:
        override_name = f"{stem}.{suffix}.{extension}"
        default_name = f"{stem}.{extension}"
    else:
        override_name = f"{stem}.{suffix}"
        default_name = stem

    return ResolvedPathPair(
        override_path=join_resource_path(directory, override_name),
        default_path=join_resource_path(directory, default_name),
    )


class OverrideResolver:
    """Resolves a resource reference to its suffixed variant, its default, or itself."""

    def __init__(self, loader: ResourceLoaderInterface):
        self._loader = loader

    @property
    def loader(self) -> ResourceLoaderInterface:
        return self._loader

    def resolve(self, resource: Optional[Resource], suffix: str) -> Optional[Resource]:
        if resource is None:
            return None

        candidates = build_candidate_paths(resource.path, suffix)

        if suffix and self._loader.exists(candidates.override_path):
            logger.debug(f"'{resource.path}' -> override '{candidates.override_path}'")
            return self._loader.load(candidates.override_path)

        if self._loader.exists(candidates.default_path):
            logger.debug(f"'{resource.path}' -> default '{candidates.default_path}'")
            return self._loader.load(candidates.default_path)

        # 不符合命名约定，或者是内嵌/生成的资源
        logger.debug(f"'{resource.path}' has no candidate on disk for suffix '{suffix}'; keeping it.")
        return resource
