# conftest.py

import pytest
from pathlib import Path
from typing import Callable, Iterator

from PIL import Image
from fastapi.testclient import TestClient

from skinswap.core.hooks import HookManager
from plugins.core_resources.loader import FileSystemResourceLoader
from plugins.resource_override.resolver import OverrideResolver


# --- 1. 资源目录 Fixtures ---

def _write_png(path: Path, size=(4, 4), color=(255, 255, 255, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


@pytest.fixture
def make_asset(tmp_path: Path) -> Callable[..., Path]:
    """
    Writes a file under the temporary resource root.
    Image extensions get a real (tiny) image so the loader can read its size.
    """
    def _make_asset(relative: str, size=(4, 4), data: bytes = b"\x00") -> Path:
        target = tmp_path / relative
        if target.suffix.lower() in (".png", ".webp", ".bmp"):
            return _write_png(target, size=size)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target
    return _make_asset


@pytest.fixture
def medal_assets(make_asset) -> None:
    """ui/medal.png (default), ui/medal.silver.png (override); no gold variant."""
    make_asset("ui/medal.png", size=(8, 8))
    make_asset("ui/medal.silver.png", size=(16, 16))


@pytest.fixture
def loader(tmp_path: Path) -> FileSystemResourceLoader:
    return FileSystemResourceLoader(root_dir=tmp_path)


@pytest.fixture
def resolver(loader: FileSystemResourceLoader) -> OverrideResolver:
    return OverrideResolver(loader)


@pytest.fixture
def hook_manager() -> HookManager:
    return HookManager()


# --- 2. 应用与客户端 Fixtures ---

SCENE_YAML = """
root:
  children:
    medal:
      properties:
        label: "Medal"
      children:
        sprite:
          properties:
            texture: res://ui/medal.png
overrides:
  medal_skin:
    owner: medal
    target_path: "."
    properties: ["sprite:texture"]
    suffix: ""
"""


@pytest.fixture
def scene_file(tmp_path: Path, medal_assets) -> Path:
    path = tmp_path / "scene.yaml"
    path.write_text(SCENE_YAML, encoding="utf-8")
    return path


@pytest.fixture
def client(monkeypatch, tmp_path: Path, scene_file: Path) -> Iterator[TestClient]:
    """A TestClient over a fully bootstrapped application (lifespan included)."""
    from skinswap.app import create_app

    monkeypatch.setenv("SKINSWAP_RESOURCE_ROOT", str(tmp_path))
    monkeypatch.setenv("SKINSWAP_SCENE_FILE", str(scene_file))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    with TestClient(create_app()) as test_client:
        yield test_client
