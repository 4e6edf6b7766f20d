"""Tests for the plugin system"""
from unittest.mock import Mock
import pytest

from environment_detector.core.cache import TimedCache
from environment_detector.core.detector import BaseDetector, DetectorRegistry
from environment_detector.errors import (
    PluginAlreadyInstalledError,
    PluginError,
    PluginInstallError,
    PluginNotInstalledError,
    PluginRemoveError,
)
from environment_detector.plugins import (
    BasePlugin,
    PluginContext,
    PluginEventType,
    PluginFailed,
    PluginInstalled,
    PluginManager,
    PluginRemoved,
)


class GPUDetector(BaseDetector[bool]):
    """Sample plugin detector"""

    name = "gpu"

    def _perform_detection(self) -> bool:
        return True


class GPUPlugin(BasePlugin):
    """Sample plugin with one detector"""

    name = "gpu-plugin"
    version = "1.2.0"
    description = "Detects GPUs"

    def __init__(self):
        self.installed_with = None
        self.uninstalled = False
        super().__init__()

    def create_detectors(self):
        return [GPUDetector(cache=TimedCache())]

    def on_install(self, context):
        self.installed_with = context

    def on_uninstall(self):
        self.uninstalled = True


class BrokenInstallPlugin(GPUPlugin):
    """Registers its detector, then fails"""

    name = "broken-install"

    def on_install(self, context):
        raise RuntimeError("driver missing")


class BrokenUninstallPlugin(GPUPlugin):
    """Fails while uninstalling"""

    name = "broken-uninstall"

    def on_uninstall(self):
        raise RuntimeError("busy")


class HooklessPlugin:
    """Plain object plugin without install/uninstall hooks"""

    name = "hookless"
    version = "0.1.0"
    detectors = []


class TestPluginContext:
    """Test the plugin context and event hub"""

    def setup_method(self):
        """Setup test fixtures"""
        self.context = PluginContext()

    def test_detector_delegation(self):
        """Test that detector calls go to the registry"""
        detector = GPUDetector()
        self.context.register_detector(detector)

        assert self.context.get_detector("gpu") is detector
        assert self.context.get_all_detectors() == [detector]

        self.context.unregister_detector("gpu")
        assert self.context.get_detector("gpu") is None

    def test_uses_given_registry(self):
        """Test that the context wraps the registry it is given"""
        registry = DetectorRegistry()
        context = PluginContext(registry)
        context.register_detector(GPUDetector())

        assert registry.has("gpu")

    def test_on_emit_off(self):
        """Test subscribing, emitting and unsubscribing"""
        handler = Mock()
        event = PluginInstalled(HooklessPlugin())

        self.context.on(PluginEventType.INSTALLED, handler)
        self.context.emit(event)
        handler.assert_called_once_with(event)

        self.context.off("plugin:installed", handler)
        self.context.emit(event)
        handler.assert_called_once()

    def test_handlers_only_see_their_event(self):
        """Test that events are keyed by type"""
        handler = Mock()
        self.context.on(PluginEventType.REMOVED, handler)

        self.context.emit(PluginInstalled(HooklessPlugin()))

        handler.assert_not_called()

    def test_handler_errors_are_contained(self):
        """Test that a failing handler does not stop the others"""
        failing = Mock(side_effect=ValueError("boom"))
        working = Mock()
        self.context.on(PluginEventType.INSTALLED, failing)
        self.context.on(PluginEventType.INSTALLED, working)

        self.context.emit(PluginInstalled(HooklessPlugin()))

        working.assert_called_once()

    def test_unknown_event_type(self):
        """Test that only known event types can be subscribed"""
        with pytest.raises(ValueError):
            self.context.on("detection:complete", Mock())

    def test_event_types(self):
        """Test the event tags"""
        plugin = HooklessPlugin()
        error = RuntimeError("x")

        assert PluginInstalled(plugin).type.value == "plugin:installed"
        assert PluginRemoved(plugin).type.value == "plugin:removed"
        failed = PluginFailed(plugin, error)
        assert failed.type.value == "plugin:error"
        assert failed.error is error


class TestPluginManager:
    """Test plugin install and removal"""

    def setup_method(self):
        """Setup test fixtures"""
        self.manager = PluginManager()
        self.events = []
        for event_type in PluginEventType:
            self.manager.context.on(event_type, self.events.append)

    def test_use_installs_plugin(self):
        """Test a successful install"""
        plugin = GPUPlugin()

        self.manager.use(plugin)

        assert self.manager.get("gpu-plugin") is plugin
        assert self.manager.get_all() == [plugin]
        assert self.manager.context.get_detector("gpu") is plugin.detectors[0]
        assert plugin.installed_with is self.manager.context
        assert [type(e) for e in self.events] == [PluginInstalled]

    def test_use_twice_fails(self):
        """Test that a plugin name can only be installed once"""
        self.manager.use(GPUPlugin())

        with pytest.raises(PluginAlreadyInstalledError) as exc_info:
            self.manager.use(GPUPlugin())

        assert exc_info.value.plugin_name == "gpu-plugin"
        assert "already installed" in str(exc_info.value)

    def test_install_failure_rolls_back(self):
        """Test that a failing install leaves no trace"""
        with pytest.raises(PluginInstallError) as exc_info:
            self.manager.use(BrokenInstallPlugin())

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.reason is exc_info.value.__cause__
        assert self.manager.get("broken-install") is None
        assert self.manager.context.get_detector("gpu") is None
        assert [type(e) for e in self.events] == [PluginFailed]

    def test_install_failure_restores_replaced_detector(self):
        """Test that a detector overwritten during a failed install is restored"""
        original = GPUDetector()
        self.manager.context.register_detector(original)

        with pytest.raises(PluginInstallError):
            self.manager.use(BrokenInstallPlugin())

        assert self.manager.context.get_detector("gpu") is original

    def test_hookless_plugin(self):
        """Test plugins without install/uninstall hooks"""
        self.manager.use(HooklessPlugin())
        self.manager.remove("hookless")

        assert self.manager.get_all() == []

    def test_remove(self):
        """Test a successful removal"""
        plugin = GPUPlugin()
        self.manager.use(plugin)

        self.manager.remove("gpu-plugin")

        assert plugin.uninstalled is True
        assert self.manager.get("gpu-plugin") is None
        assert self.manager.context.get_detector("gpu") is None
        assert [type(e) for e in self.events] == [PluginInstalled, PluginRemoved]

    def test_remove_unknown(self):
        """Test removing a plugin that was never installed"""
        with pytest.raises(PluginNotInstalledError):
            self.manager.remove("nope")

    def test_remove_failure_keeps_plugin(self):
        """Test that a failing uninstall keeps the plugin and its detectors"""
        self.manager.use(BrokenUninstallPlugin())

        with pytest.raises(PluginRemoveError):
            self.manager.remove("broken-uninstall")

        assert self.manager.get("broken-uninstall") is not None
        assert self.manager.context.get_detector("gpu") is not None
        assert [type(e) for e in self.events] == [PluginInstalled, PluginFailed]

    def test_remove_keeps_detector_replaced_by_other_plugin(self):
        """Test that removing a plugin leaves a same-named detector owned by another plugin"""
        class OtherGPUPlugin(GPUPlugin):
            name = "other-gpu-plugin"

        first = GPUPlugin()
        second = OtherGPUPlugin()
        self.manager.use(first)
        self.manager.use(second)

        self.manager.remove("gpu-plugin")

        assert self.manager.context.get_detector("gpu") is second.detectors[0]
        assert self.manager.get("other-gpu-plugin") is second

    def test_clear_logs_failures(self):
        """Test that clear() removes what it can and does not raise"""
        self.manager.use(HooklessPlugin())
        self.manager.use(BrokenUninstallPlugin())

        self.manager.clear()

        assert [p.name for p in self.manager.get_all()] == ["broken-uninstall"]

    def test_errors_share_a_base(self):
        """Test the plugin error hierarchy"""
        for error_class in (PluginInstallError, PluginRemoveError,
                            PluginAlreadyInstalledError, PluginNotInstalledError):
            assert issubclass(error_class, PluginError)

    def test_managers_are_isolated(self):
        """Test that two managers do not share plugins"""
        other = PluginManager()
        self.manager.use(GPUPlugin())

        assert other.get("gpu-plugin") is None
