"""Plugin manager: installs and removes plugins against a shared context"""
from typing import Dict, List, Optional

from .base import Plugin, PluginContext, PluginFailed, PluginInstalled, PluginRemoved
from ..errors import PluginAlreadyInstalledError, PluginError, PluginInstallError, PluginNotInstalledError, PluginRemoveError
from ..logging_config import get_logger, log_error, log_plugin_event

logger = get_logger(__name__)


class PluginManager:
    """Install/remove plugins, keeping the detector registry consistent on failure"""

    def __init__(self, context: Optional[PluginContext] = None):
        self.context = context if context is not None else PluginContext()
        self._plugins: Dict[str, Plugin] = {}

    def use(self, plugin: Plugin) -> None:
        """Install a plugin

        On a failing install hook any detectors it registered are rolled
        back, a PluginFailed event is emitted and PluginInstallError raised.
        """
        if plugin.name in self._plugins:
            raise PluginAlreadyInstalledError(plugin.name)

        registry = self.context.registry
        previous = {name: registry.get(name) for name in registry.names()}

        install = getattr(plugin, "install", None)
        try:
            if install is not None:
                install(self.context)
        except Exception as e:
            self._restore_registry(previous)
            self._fail(plugin, e, "install")
            raise PluginInstallError(plugin.name, e) from e

        self._plugins[plugin.name] = plugin
        self._emit(PluginInstalled(plugin))

    def remove(self, plugin_name: str) -> None:
        """Remove a plugin

        The uninstall hook runs first; if it raises, the plugin and its
        detectors stay registered and PluginRemoveError is raised.
        """
        plugin = self._plugins.get(plugin_name)
        if plugin is None:
            raise PluginNotInstalledError(plugin_name)

        uninstall = getattr(plugin, "uninstall", None)
        try:
            if uninstall is not None:
                uninstall()
        except Exception as e:
            self._fail(plugin, e, "uninstall")
            raise PluginRemoveError(plugin_name, e) from e

        # Leave detectors another plugin has since replaced
        for detector in plugin.detectors:
            if self.context.get_detector(detector.name) is detector:
                self.context.unregister_detector(detector.name)

        del self._plugins[plugin_name]
        self._emit(PluginRemoved(plugin))

    def get(self, plugin_name: str) -> Optional[Plugin]:
        return self._plugins.get(plugin_name)

    def get_all(self) -> List[Plugin]:
        return list(self._plugins.values())

    def clear(self) -> None:
        """Remove every plugin, logging individual failures"""
        for plugin_name in list(self._plugins.keys()):
            try:
                self.remove(plugin_name)
            except PluginError as e:
                log_error(logger, e, {"plugin": plugin_name, "operation": "clear"})

    def _restore_registry(self, previous: dict) -> None:
        registry = self.context.registry
        for name in registry.names():
            if name not in previous:
                registry.unregister(name)
        for name, detector in previous.items():
            if registry.get(name) is not detector:
                registry.register(detector)

    def _fail(self, plugin: Plugin, error: Exception, operation: str) -> None:
        log_error(logger, error, {"plugin": plugin.name, "operation": operation})
        self.context.emit(PluginFailed(plugin, error))

    def _emit(self, event) -> None:
        log_plugin_event(logger, event)
        self.context.emit(event)
