# tests/test_platform_core.py

import pytest
from unittest.mock import MagicMock

from skinswap.container import Container
from skinswap.core.hooks import HookManager
from skinswap.core.loader import PluginLoader


class TestContainer:
    """对 DI 容器的单元测试。"""

    def test_register_and_resolve_singleton(self):
        container = Container()
        mock_factory = MagicMock(return_value="service_instance")

        container.register("my_service", mock_factory, singleton=True)

        instance1 = container.resolve("my_service")
        instance2 = container.resolve("my_service")
        assert instance1 == "service_instance"
        assert instance1 is instance2
        mock_factory.assert_called_once()

    def test_register_and_resolve_transient(self):
        container = Container()
        mock_factory = MagicMock(side_effect=["instance1", "instance2"])

        container.register("my_service", mock_factory, singleton=False)

        assert container.resolve("my_service") == "instance1"
        assert container.resolve("my_service") == "instance2"
        assert mock_factory.call_count == 2

    def test_resolve_nonexistent_service(self):
        container = Container()
        with pytest.raises(ValueError, match="Service 'nonexistent' not found"):
            container.resolve("nonexistent")

    def test_factory_with_container_dependency(self):
        container = Container()

        def dependent_factory(c: Container):
            return f"dependent_on_{c.resolve('base_service')}"

        container.register("base_service", lambda: "base_instance")
        container.register("dependent_service", dependent_factory)

        assert container.resolve("dependent_service") == "dependent_on_base_instance"

    def test_circular_dependency_is_detected(self):
        container = Container()
        container.register("a", lambda c: c.resolve("b"))
        container.register("b", lambda c: c.resolve("a"))

        with pytest.raises(RuntimeError, match="Circular dependency detected: a -> b -> a"):
            container.resolve("a")

    def test_reregistering_drops_cached_instance(self):
        container = Container()
        container.register("svc", lambda: "old")
        assert container.resolve("svc") == "old"

        container.register("svc", lambda: "new")
        assert container.resolve("svc") == "new"


class TestHookManager:
    """对同步事件总线 HookManager 的单元测试。"""

    def test_filter_hook_runs_in_priority_order(self):
        hook_manager = HookManager()

        def low_priority_filter(data: list, **kwargs):
            data.append("low")
            return data

        def high_priority_filter(data: list, **kwargs):
            data.append("high")
            return data

        hook_manager.add_implementation("test_filter", low_priority_filter, priority=20)
        hook_manager.add_implementation("test_filter", high_priority_filter, priority=10)

        assert hook_manager.filter("test_filter", ["start"]) == ["start", "high", "low"]

    def test_trigger_calls_every_implementation(self):
        hook_manager = HookManager()
        call_log = []

        hook_manager.add_implementation("test_trigger", lambda: call_log.append("hook1"))
        hook_manager.add_implementation("test_trigger", lambda: call_log.append("hook2"))

        hook_manager.trigger("test_trigger")

        assert call_log == ["hook1", "hook2"]

    def test_trigger_injects_context_by_parameter_name(self):
        container = Container()
        hook_manager = HookManager(container)
        received = {}

        def listener(override, container):
            received["override"] = override
            received["container"] = container

        hook_manager.add_implementation("override_applied", listener)
        hook_manager.trigger("override_applied", override="sentinel")

        assert received == {"override": "sentinel", "container": container}

    def test_failing_listener_does_not_stop_others(self, caplog):
        hook_manager = HookManager()
        calls = []

        def broken():
            raise RuntimeError("boom")

        hook_manager.add_implementation("evt", broken, priority=1, plugin_name="broken_plugin")
        hook_manager.add_implementation("evt", lambda: calls.append("ok"), priority=2)

        hook_manager.trigger("evt")

        assert calls == ["ok"]
        assert "broken_plugin" in caplog.text

    def test_failing_filter_is_skipped(self):
        hook_manager = HookManager()

        def broken(data):
            raise ValueError("nope")

        hook_manager.add_implementation("f", broken, priority=1)
        hook_manager.add_implementation("f", lambda data: data + 1, priority=2)

        assert hook_manager.filter("f", 1) == 2

    def test_async_implementations_are_rejected(self):
        hook_manager = HookManager()

        async def coroutine_hook():
            pass

        with pytest.raises(TypeError, match="synchronous"):
            hook_manager.add_implementation("evt", coroutine_hook)

    def test_hooks_with_no_implementations(self):
        hook_manager = HookManager()
        assert hook_manager.filter("nonexistent_filter", "data") == "data"
        hook_manager.trigger("nonexistent_trigger")
        assert hook_manager.hook_names == []


class TestPluginLoader:

    def test_discovers_bundled_plugins(self):
        loader = PluginLoader(Container(), HookManager())
        names = {p["name"] for p in loader.discover_plugins()}
        assert {"core_logging", "core_resources", "resource_override", "core_api"} <= names

    def test_load_registers_services_in_priority_order(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SKINSWAP_RESOURCE_ROOT", str(tmp_path))
        container = Container()
        hook_manager = HookManager(container)
        container.register("hook_manager", lambda: hook_manager)

        loader = PluginLoader(container, hook_manager)
        loader.load_plugins(only=["core_resources", "resource_override"])

        assert [p["name"] for p in loader.loaded] == ["core_resources", "resource_override"]
        resolver = container.resolve("override_resolver")
        assert resolver.loader is container.resolve("resource_loader")
        assert "override_applied" in hook_manager.hook_names

    def test_quiet_loading_prints_nothing(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("SKINSWAP_RESOURCE_ROOT", str(tmp_path))
        loader = PluginLoader(Container(), HookManager(), announce=False)
        loader.load_plugins(only=["core_resources"])

        assert [p["name"] for p in loader.loaded] == ["core_resources"]
        assert capsys.readouterr().out == ""

    def test_missing_package_discovers_nothing(self):
        loader = PluginLoader(Container(), HookManager(), package="no_such_plugins_pkg")
        assert loader.discover_plugins() == []
