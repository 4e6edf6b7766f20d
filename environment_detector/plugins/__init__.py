"""Plugin extension point for third-party detectors"""
from .base import (
    BasePlugin,
    EventHandler,
    Plugin,
    PluginContext,
    PluginEvent,
    PluginEventType,
    PluginFailed,
    PluginInstalled,
    PluginRemoved,
)
from .manager import PluginManager

__all__ = [
    'BasePlugin',
    'EventHandler',
    'Plugin',
    'PluginContext',
    'PluginEvent',
    'PluginEventType',
    'PluginFailed',
    'PluginInstalled',
    'PluginRemoved',
    'PluginManager',
]
