"""Detect the operating system, container, CI, cloud and privileges of the running process"""
import logging

from .config import DetectorOptions, DetectorSettings
from .context import EnvironmentDetector
from .core.cache import CacheEntry, TimedCache
from .core.detector import BaseDetector, Detector, DetectorRegistry
from .errors import (
    EnvironmentDetectorError,
    PluginAlreadyInstalledError,
    PluginError,
    PluginInstallError,
    PluginNotInstalledError,
    PluginRemoveError,
)
from .models import (
    CIInfo,
    CIProvider,
    CloudInfo,
    CloudProvider,
    ContainerInfo,
    ContainerType,
    EnvironmentInfo,
    EnvironmentMode,
    OSInfo,
    OSType,
    PrivilegeInfo,
    RuntimeInfo,
)
from .plugins import (
    BasePlugin,
    Plugin,
    PluginContext,
    PluginEventType,
    PluginFailed,
    PluginInstalled,
    PluginManager,
    PluginRemoved,
)
from .version import VERSION

__version__ = VERSION

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'EnvironmentDetector',
    'DetectorOptions',
    'DetectorSettings',
    'CacheEntry',
    'TimedCache',
    'BaseDetector',
    'Detector',
    'DetectorRegistry',
    'EnvironmentDetectorError',
    'PluginError',
    'PluginAlreadyInstalledError',
    'PluginNotInstalledError',
    'PluginInstallError',
    'PluginRemoveError',
    'CIInfo',
    'CIProvider',
    'CloudInfo',
    'CloudProvider',
    'ContainerInfo',
    'ContainerType',
    'EnvironmentInfo',
    'EnvironmentMode',
    'OSInfo',
    'OSType',
    'PrivilegeInfo',
    'RuntimeInfo',
    'BasePlugin',
    'Plugin',
    'PluginContext',
    'PluginEventType',
    'PluginFailed',
    'PluginInstalled',
    'PluginManager',
    'PluginRemoved',
    'VERSION',
    '__version__',
]
