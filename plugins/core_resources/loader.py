# plugins/core_resources/loader.py

import logging
import threading
from pathlib import Path
from typing import Dict, List, Type

from PIL import Image, UnidentifiedImageError

from skinswap.core.contracts import AudioStream, Resource, ResourceLoaderInterface, Texture

logger = logging.getLogger(__name__)

RES_SCHEME = "res://"

TEXTURE_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "bmp", "tga", "gif"}
AUDIO_EXTENSIONS = {"wav", "ogg", "mp3", "flac"}


class FileSystemResourceLoader(ResourceLoaderInterface):
    """
    Filesystem-backed resource loader.

    `res://` paths map onto `root_dir`; other relative paths are taken relative
    to `root_dir` as well. Absolute paths are accepted only when they point
    inside `root_dir`.
    Loaded resources are cached per path, so loading the same path twice
    returns the same instance.
    """
    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir)
        self._cache: Dict[str, Resource] = {}
        self._lock = threading.Lock()
        logger.info(f"FileSystemResourceLoader initialized. Resource root: {self.root_dir.resolve()}")

    def to_filesystem_path(self, path: str) -> Path:
        """
        Maps a resource path onto the filesystem. Whatever the form, the
        result must lie inside `root_dir` (after resolving `..` and symlinks).
        """
        raw = path[len(RES_SCHEME):] if path.startswith(RES_SCHEME) else path
        candidate = Path(raw)
        fs_path = candidate if candidate.is_absolute() else self.root_dir / candidate
        if not fs_path.resolve().is_relative_to(self.root_dir.resolve()):
            raise ValueError(f"Resource path escapes the resource root: '{path}'")
        return fs_path

    def exists(self, path: str) -> bool:
        try:
            return self.to_filesystem_path(path).is_file()
        except ValueError:
            return False

    def load(self, path: str) -> Resource:
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        with self._lock:
            if path in self._cache:
                return self._cache[path]
            resource = self._read_resource(path)
            self._cache[path] = resource
            logger.debug(f"Loaded resource '{path}' as {type(resource).__name__}.")
            return resource

    def list_dir(self, directory: str) -> List[str]:
        """Lists the file names inside a resource directory, sorted."""
        fs_dir = self.to_filesystem_path(directory)
        if not fs_dir.is_dir():
            return []
        return sorted(p.name for p in fs_dir.iterdir() if p.is_file())

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _resource_class_for(self, path: str) -> Type[Resource]:
        extension = path.rsplit('.', 1)[-1].lower() if '.' in path else ""
        if extension in TEXTURE_EXTENSIONS:
            return Texture
        if extension in AUDIO_EXTENSIONS:
            return AudioStream
        return Resource

    def _read_resource(self, path: str) -> Resource:
        fs_path = self.to_filesystem_path(path)
        if not fs_path.is_file():
            raise FileNotFoundError(f"Resource '{path}' not found at {fs_path}")

        size_bytes = fs_path.stat().st_size
        resource_class = self._resource_class_for(path)
        if resource_class is Texture:
            try:
                with Image.open(fs_path) as image:
                    return Texture(
                        path=path, size_bytes=size_bytes,
                        width=image.width, height=image.height, mode=image.mode
                    )
            except UnidentifiedImageError:
                logger.warning(f"'{path}' has an image extension but could not be decoded; loading as plain resource.")
                return Resource(path=path, size_bytes=size_bytes)
        return resource_class(path=path, size_bytes=size_bytes)
