"""Plugin contract, plugin context and lifecycle events"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

from ..core.detector import Detector, DetectorRegistry
from ..logging_config import get_logger, log_error

logger = get_logger(__name__)


@runtime_checkable
class Plugin(Protocol):
    """A named, versioned bundle of detectors

    install(context) and uninstall() hooks are optional.
    """

    name: str
    version: str
    detectors: Sequence[Detector]


class PluginEventType(str, Enum):
    """Lifecycle events emitted by the plugin manager"""
    INSTALLED = "plugin:installed"
    REMOVED = "plugin:removed"
    ERROR = "plugin:error"


@dataclass(frozen=True)
class PluginInstalled:
    plugin: Plugin
    type: PluginEventType = PluginEventType.INSTALLED


@dataclass(frozen=True)
class PluginRemoved:
    plugin: Plugin
    type: PluginEventType = PluginEventType.REMOVED


@dataclass(frozen=True)
class PluginFailed:
    """An install or uninstall hook raised"""
    plugin: Plugin
    error: BaseException
    type: PluginEventType = PluginEventType.ERROR


PluginEvent = Union[PluginInstalled, PluginRemoved, PluginFailed]
EventHandler = Callable[[PluginEvent], Any]


class PluginContext:
    """What a plugin sees while installing: the detector registry and the event hub"""

    def __init__(self, registry: Optional[DetectorRegistry] = None):
        self.registry = registry if registry is not None else DetectorRegistry()
        self._handlers: Dict[PluginEventType, List[EventHandler]] = {}

    def register_detector(self, detector: Detector) -> None:
        self.registry.register(detector)

    def unregister_detector(self, name: str) -> None:
        self.registry.unregister(name)

    def get_detector(self, name: str) -> Optional[Detector]:
        return self.registry.get(name)

    def get_all_detectors(self) -> List[Detector]:
        return self.registry.get_all()

    def on(self, event_type: Union[PluginEventType, str], handler: EventHandler) -> None:
        """Subscribe handler to an event type"""
        self._handlers.setdefault(PluginEventType(event_type), []).append(handler)

    def off(self, event_type: Union[PluginEventType, str], handler: EventHandler) -> None:
        handlers = self._handlers.get(PluginEventType(event_type))
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: PluginEvent) -> None:
        """Deliver event to its subscribers; handler errors are logged, never raised"""
        for handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception as e:
                log_error(logger, e, {"event_type": event.type.value, "plugin": event.plugin.name})


class BasePlugin(ABC):
    """Convenience base: registers its detectors on install

    Subclasses set name/version and implement create_detectors(); the
    on_install/on_uninstall hooks are optional.
    """

    name: str = ""
    version: str = "0.0.0"
    description: Optional[str] = None

    def __init__(self):
        self.detectors: List[Detector] = list(self.create_detectors())

    @abstractmethod
    def create_detectors(self) -> Sequence[Detector]:
        pass

    def install(self, context: PluginContext) -> None:
        for detector in self.detectors:
            context.register_detector(detector)
        self.on_install(context)

    def uninstall(self) -> None:
        self.on_uninstall()

    def on_install(self, context: PluginContext) -> None:
        pass

    def on_uninstall(self) -> None:
        pass
