# skinswap/core/loader.py

import sys
import json
import logging
import importlib
import importlib.resources
import traceback
from typing import List, Dict, Optional

from skinswap.core.contracts import Container, HookManager, PluginRegisterFunc

logger = logging.getLogger(__name__)

class PluginLoader:
    def __init__(
        self,
        container: Container,
        hook_manager: HookManager,
        package: str = "plugins",
        announce: bool = True
    ):
        self._container = container
        self._hook_manager = hook_manager
        self._package = package
        self._announce = announce
        self.loaded: List[Dict] = []

    def load_plugins(self, only: Optional[List[str]] = None):
        """执行插件加载的全过程：发现、排序、注册。"""
        # 使用 print 是因为此时日志系统可能还未配置
        self._print("\n--- skinswap 插件系统：开始加载 ---")

        all_plugins = self.discover_plugins()
        if only is not None:
            all_plugins = [p for p in all_plugins if p['name'] in only]
        if not all_plugins:
            self._print("警告：未发现任何插件。")
            self._print("--- skinswap 插件系统：加载完成 ---\n")
            return

        sorted_plugins = sorted(all_plugins, key=lambda p: (p['manifest'].get('priority', 100), p['name']))

        self._print("插件加载顺序已确定：")
        for i, p_info in enumerate(sorted_plugins):
            self._print(f"  {i+1}. {p_info['name']} (优先级: {p_info['manifest'].get('priority', 100)})")

        self._register_plugins(sorted_plugins)
        self.loaded = sorted_plugins

        logger.info("所有插件均已加载并注册完毕。")
        self._print("--- skinswap 插件系统：加载完成 ---\n")

    def _print(self, line: str) -> None:
        # 启动横幅；命令行工具关闭它以保持 stdout 干净
        if self._announce:
            print(line)

    def discover_plugins(self) -> List[Dict]:
        """Scans the plugins package and reads every sub-package's manifest.json."""
        discovered = []
        try:
            plugins_package_path = importlib.resources.files(self._package)
        except ModuleNotFoundError:
            return discovered

        for plugin_path in plugins_package_path.iterdir():
            if not plugin_path.is_dir() or plugin_path.name.startswith(('__', '.')):
                continue

            manifest_path = plugin_path / "manifest.json"
            if not manifest_path.is_file():
                continue

            try:
                manifest = json.loads(manifest_path.read_text(encoding='utf-8'))
            except json.JSONDecodeError:
                logger.warning(f"Could not parse manifest.json for plugin: {plugin_path.name}")
                continue

            discovered.append({
                "name": manifest.get('name', plugin_path.name),
                "manifest": manifest,
                "import_path": f"{self._package}.{plugin_path.name}",
            })

        return discovered

    def _register_plugins(self, plugins: List[Dict]):
        for plugin_info in plugins:
            plugin_name = plugin_info['name']
            import_path = plugin_info['import_path']

            try:
                plugin_module = importlib.import_module(import_path)
                register_func: PluginRegisterFunc = getattr(plugin_module, "register_plugin")
                register_func(self._container, self._hook_manager)
            except Exception as e:
                print("\n" + "="*80, file=sys.stderr)
                print(f"!!! 致命错误：加载插件 '{plugin_name}' ({import_path}) 失败 !!!", file=sys.stderr)
                print("="*80, file=sys.stderr)
                traceback.print_exc()
                print("="*80, file=sys.stderr)
                # 插件之间存在依赖，加载失败时停止
                raise RuntimeError(f"无法加载插件 {plugin_name}") from e
