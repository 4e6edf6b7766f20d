"""Detector contract and the named detector registry"""
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, Generic, List, Optional, Protocol, TypeVar, Union, runtime_checkable

from .cache import TimedCache, cache_or_compute, cache_or_compute_async
from .constants import CACHE_KEY_PREFIX
from ..config import DetectorOptions
from ..logging_config import get_logger, log_detection

T = TypeVar("T")

logger = get_logger(__name__)


@runtime_checkable
class Detector(Protocol):
    """Anything with a name, a detect() and a reset() can be registered"""

    name: str

    def detect(self) -> Any:
        ...

    def reset(self) -> None:
        ...


class BaseDetector(ABC, Generic[T]):
    """Base class for all detectors

    Subclasses set ``name`` and implement ``_perform_detection``; caching,
    reset and the sync/async plumbing live here.
    """

    name: str = ""

    def __init__(self, options: Optional[DetectorOptions] = None, cache: Optional[TimedCache] = None):
        self.options = options or DetectorOptions()
        self.cache = cache if cache is not None else TimedCache()

    def detect(self) -> Union[T, Awaitable[T]]:
        """Run detection; returns a coroutine when async_mode is set"""
        if self.options.async_mode:
            return self.detect_async()
        return self.detect_sync()

    def detect_sync(self) -> T:
        """Synchronous cache-or-compute path"""
        started = time.perf_counter()
        computed = []

        def compute() -> T:
            computed.append(True)
            return self._perform_detection()

        result = cache_or_compute(
            self.cache, self.get_cache_key(), self.options.cache_timeout, self.options.cache, compute
        )
        log_detection(logger, self.name, cached=not computed, duration=time.perf_counter() - started)
        return result

    async def detect_async(self) -> T:
        """Asynchronous cache-or-compute path"""
        started = time.perf_counter()
        computed = []

        async def compute() -> T:
            computed.append(True)
            return await self._perform_detection_async()

        result = await cache_or_compute_async(
            self.cache, self.get_cache_key(), self.options.cache_timeout, self.options.cache, compute
        )
        log_detection(logger, self.name, cached=not computed, duration=time.perf_counter() - started)
        return result

    def reset(self) -> None:
        """Drop this detector's cached result, even while caching is disabled"""
        self.cache.delete(self.get_cache_key())

    def get_cache_key(self) -> str:
        return f"{CACHE_KEY_PREFIX}{self.name}"

    @abstractmethod
    def _perform_detection(self) -> T:
        """Gather signals and decide; must not raise"""
        pass

    async def _perform_detection_async(self) -> T:
        return self._perform_detection()


class DetectorRegistry:
    """Named lookup table of detector instances"""

    def __init__(self):
        self._detectors: Dict[str, Detector] = {}

    def register(self, detector: Detector) -> None:
        """Register a detector, replacing any detector with the same name"""
        if not isinstance(detector, Detector):
            raise TypeError("Detector must provide name, detect() and reset()")

        self._detectors[detector.name] = detector
        logger.debug("Registered detector", detector=detector.name)

    def unregister(self, name: str) -> None:
        if self._detectors.pop(name, None) is not None:
            logger.debug("Unregistered detector", detector=name)

    def get(self, name: str) -> Optional[Detector]:
        return self._detectors.get(name)

    def get_all(self) -> List[Detector]:
        return list(self._detectors.values())

    def names(self) -> List[str]:
        return list(self._detectors.keys())

    def has(self, name: str) -> bool:
        return name in self._detectors

    def clear(self) -> None:
        self._detectors.clear()

    def __len__(self) -> int:
        return len(self._detectors)

    def __contains__(self, name: str) -> bool:
        return self.has(name)
