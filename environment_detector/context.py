"""EnvironmentDetector: the facade over the built-in detectors and plugins"""
import asyncio
import inspect
import time
from typing import Any, Dict, Optional

from .config import DetectorOptions, DetectorSettings
from .core.cache import TimedCache
from .core.constants import DEFAULT_COMMAND_TIMEOUT, MODE_ENV_VAR
from .core.detector import BaseDetector
from .detectors import (
    CIDetector,
    CloudDetector,
    ContainerDetector,
    ModeDetector,
    OSDetector,
    PrivilegeDetector,
    RuntimeDetector,
)
from .logging_config import get_logger
from .models import CIInfo, CloudInfo, ContainerInfo, EnvironmentInfo, EnvironmentMode, OSInfo, PrivilegeInfo, RuntimeInfo
from .plugins import Plugin, PluginManager
from .version import VERSION

logger = get_logger(__name__)


class EnvironmentDetector:
    """Aggregate environment detection

    Owns one cache shared by its seven built-in detectors and a plugin
    manager whose registry holds plugin-provided detectors.
    """

    def __init__(self, options: Optional[DetectorOptions] = None, cache: Optional[TimedCache] = None,
                 command_timeout: float = DEFAULT_COMMAND_TIMEOUT, mode_variable: str = MODE_ENV_VAR,
                 plugin_manager: Optional[PluginManager] = None):
        self.options = options or DetectorOptions()
        self.cache = cache if cache is not None else TimedCache()
        self.plugins = plugin_manager if plugin_manager is not None else PluginManager()

        if not self.options.cache:
            self.cache.disable()

        self.os_detector = OSDetector(self.options, self.cache)
        self.container_detector = ContainerDetector(self.options, self.cache)
        self.ci_detector = CIDetector(self.options, self.cache)
        self.cloud_detector = CloudDetector(self.options, self.cache)
        self.runtime_detector = RuntimeDetector(self.options, self.cache)
        self.privilege_detector = PrivilegeDetector(self.options, self.cache, command_timeout=command_timeout)
        self.mode_detector = ModeDetector(self.options, self.cache, variable=mode_variable)

    @classmethod
    def from_settings(cls, settings: Optional[DetectorSettings] = None) -> "EnvironmentDetector":
        """Build a detector from ENV_DETECTOR_* settings"""
        settings = settings or DetectorSettings()
        return cls(
            options=settings.to_detector_options(),
            command_timeout=settings.command_timeout,
            mode_variable=settings.mode_variable,
        )

    @property
    def builtin_detectors(self) -> Dict[str, BaseDetector]:
        return {
            detector.name: detector
            for detector in (
                self.os_detector,
                self.container_detector,
                self.ci_detector,
                self.cloud_detector,
                self.runtime_detector,
                self.privilege_detector,
                self.mode_detector,
            )
        }

    # Snapshots

    def get_snapshot(self) -> EnvironmentInfo:
        """Run every built-in detector in turn"""
        started = time.perf_counter()
        info = EnvironmentInfo(
            os=self.os_detector.detect_sync(),
            container=self.container_detector.detect_sync(),
            ci=self.ci_detector.detect_sync(),
            cloud=self.cloud_detector.detect_sync(),
            runtime=self.runtime_detector.detect_sync(),
            privileges=self.privilege_detector.detect_sync(),
            mode=self.mode_detector.detect_sync(),
        )
        self._log_snapshot(started, concurrent=False)
        return info

    async def get_snapshot_async(self) -> EnvironmentInfo:
        """Run every built-in detector concurrently"""
        started = time.perf_counter()
        os_info, container, ci, cloud, runtime, privileges, mode = await asyncio.gather(
            self.os_detector.detect_async(),
            self.container_detector.detect_async(),
            self.ci_detector.detect_async(),
            self.cloud_detector.detect_async(),
            self.runtime_detector.detect_async(),
            self.privilege_detector.detect_async(),
            self.mode_detector.detect_async(),
        )
        self._log_snapshot(started, concurrent=True)
        return EnvironmentInfo(
            os=os_info,
            container=container,
            ci=ci,
            cloud=cloud,
            runtime=runtime,
            privileges=privileges,
            mode=mode,
        )

    def get_summary(self) -> str:
        """One-line summary such as ``linux+docker+ci``"""
        info = self.get_snapshot()
        parts = [info.os.type.value]

        if info.container.is_container:
            parts.append(info.container.container_type.value if info.container.container_type else "container")
        if info.ci.is_ci:
            parts.append("ci")
        if info.cloud.is_cloud:
            parts.append("cloud")
        if info.privileges.is_elevated:
            parts.append("elevated")

        return "+".join(parts)

    # Single-detector accessors

    @property
    def os(self) -> OSInfo:
        return self.os_detector.detect_sync()

    @property
    def container(self) -> ContainerInfo:
        return self.container_detector.detect_sync()

    @property
    def ci(self) -> CIInfo:
        return self.ci_detector.detect_sync()

    @property
    def cloud(self) -> CloudInfo:
        return self.cloud_detector.detect_sync()

    @property
    def runtime(self) -> RuntimeInfo:
        return self.runtime_detector.detect_sync()

    @property
    def privileges(self) -> PrivilegeInfo:
        return self.privilege_detector.detect_sync()

    @property
    def mode(self) -> EnvironmentMode:
        return self.mode_detector.detect_sync()

    @property
    def is_windows(self) -> bool:
        return self.os.is_windows

    @property
    def is_macos(self) -> bool:
        return self.os.is_macos

    @property
    def is_linux(self) -> bool:
        return self.os.is_linux

    @property
    def is_wsl(self) -> bool:
        return self.container.is_wsl

    @property
    def is_docker(self) -> bool:
        return self.container.is_docker

    @property
    def is_kubernetes(self) -> bool:
        return self.container.is_kubernetes

    @property
    def is_container(self) -> bool:
        return self.container.is_container

    @property
    def is_ci(self) -> bool:
        return self.ci.is_ci

    @property
    def is_cloud(self) -> bool:
        return self.cloud.is_cloud

    @property
    def is_serverless(self) -> bool:
        return self.cloud.is_serverless

    @property
    def is_elevated(self) -> bool:
        return self.privileges.is_elevated

    @property
    def is_root(self) -> bool:
        return self.privileges.is_root

    @property
    def is_admin(self) -> bool:
        return self.privileges.is_admin

    # Cache management

    def clear_cache(self) -> None:
        self.cache.clear()

    def enable_cache(self) -> None:
        self.cache.enable()

    def disable_cache(self) -> None:
        self.cache.disable()

    def reset_all(self) -> None:
        """Drop every built-in detector's cached result"""
        for detector in self.builtin_detectors.values():
            detector.reset()

    # Plugins

    def use(self, plugin: Plugin) -> None:
        self.plugins.use(plugin)

    def remove_plugin(self, plugin_name: str) -> None:
        self.plugins.remove(plugin_name)

    def detect_plugins(self) -> Dict[str, Any]:
        """Run every plugin-registered detector

        Detectors built on BaseDetector run their synchronous path; any
        other detector returning an awaitable must go through
        detect_plugins_async().
        """
        results = {}
        for detector in self.plugins.context.get_all_detectors():
            if isinstance(detector, BaseDetector):
                results[detector.name] = detector.detect_sync()
                continue

            result = detector.detect()
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(f"Detector '{detector.name}' is asynchronous; use detect_plugins_async()")
            results[detector.name] = result
        return results

    async def detect_plugins_async(self) -> Dict[str, Any]:
        """Run every plugin-registered detector concurrently"""
        detectors = self.plugins.context.get_all_detectors()
        results = await asyncio.gather(*(self._detect_async(detector) for detector in detectors))
        return {detector.name: result for detector, result in zip(detectors, results)}

    # Package information

    def get_version(self) -> str:
        return VERSION

    def get_package_info(self) -> Dict[str, Any]:
        return {
            "version": VERSION,
            "detectors": list(self.builtin_detectors.keys()),
            "plugin_detectors": self.plugins.context.registry.names(),
            "plugins": [plugin.name for plugin in self.plugins.get_all()],
            "cache_enabled": self.cache.is_enabled(),
        }

    @staticmethod
    async def _detect_async(detector) -> Any:
        if isinstance(detector, BaseDetector):
            return await detector.detect_async()

        result = detector.detect()
        if inspect.isawaitable(result):
            return await result
        return result

    def _log_snapshot(self, started: float, concurrent: bool) -> None:
        logger.debug(
            "Environment snapshot completed",
            concurrent=concurrent,
            duration_seconds=round(time.perf_counter() - started, 6),
            cache_enabled=self.cache.is_enabled(),
            event_type="snapshot",
        )
