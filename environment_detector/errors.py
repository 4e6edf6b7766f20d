"""Exceptions raised by environment_detector

Detection itself never raises; these cover the plugin lifecycle only.
"""
from typing import Optional


class EnvironmentDetectorError(Exception):
    """Base exception for environment_detector errors"""

    def __init__(self, message: str = "An unexpected environment detection error occurred"):
        self.message = message
        super().__init__(self.message)


class PluginError(EnvironmentDetectorError):
    """Error tied to a specific plugin"""

    def __init__(self, plugin_name: str, message: str):
        self.plugin_name = plugin_name
        super().__init__(message)


class PluginAlreadyInstalledError(PluginError):
    """Raised when a plugin with the same name is already installed"""

    def __init__(self, plugin_name: str):
        super().__init__(plugin_name, f"Plugin '{plugin_name}' is already installed")


class PluginNotInstalledError(PluginError):
    """Raised when removing a plugin that was never installed"""

    def __init__(self, plugin_name: str):
        super().__init__(plugin_name, f"Plugin '{plugin_name}' is not installed")


class PluginInstallError(PluginError):
    """Raised when a plugin's install hook fails

    The plugin is left unregistered.
    """

    def __init__(self, plugin_name: str, reason: Optional[BaseException] = None):
        self.reason = reason
        detail = f": {reason}" if reason is not None else ""
        super().__init__(plugin_name, f"Failed to install plugin '{plugin_name}'{detail}")


class PluginRemoveError(PluginError):
    """Raised when a plugin's uninstall hook fails

    The plugin and its detectors stay registered.
    """

    def __init__(self, plugin_name: str, reason: Optional[BaseException] = None):
        self.reason = reason
        detail = f": {reason}" if reason is not None else ""
        super().__init__(plugin_name, f"Failed to remove plugin '{plugin_name}'{detail}")
