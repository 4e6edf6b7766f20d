"""Interpreter runtime and environment mode detection"""
import platform
import sys
from typing import Optional

from ..config import DetectorOptions
from ..core.cache import TimedCache
from ..core.constants import MODE_ENV_VAR, MODE_VALUES
from ..core.detector import BaseDetector
from ..models import EnvironmentMode, RuntimeInfo
from ..utils.process import get_arch, get_env, get_platform

_MODES = {value: EnvironmentMode(value) for value in MODE_VALUES.values()}


class RuntimeDetector(BaseDetector[RuntimeInfo]):
    """Report the running Python interpreter"""

    name = "runtime"

    def _perform_detection(self) -> RuntimeInfo:
        major, minor, patch = sys.version_info[:3]
        return RuntimeInfo(
            version=platform.python_version(),
            major=major,
            minor=minor,
            patch=patch,
            implementation=platform.python_implementation(),
            arch=get_arch(),
            platform=get_platform(),
        )


class ModeDetector(BaseDetector[EnvironmentMode]):
    """Read the environment mode from a single variable

    Unset or unrecognized values resolve to development.
    """

    name = "mode"

    def __init__(self, options: Optional[DetectorOptions] = None, cache: Optional[TimedCache] = None,
                 variable: str = MODE_ENV_VAR):
        super().__init__(options, cache)
        self.variable = variable

    def _perform_detection(self) -> EnvironmentMode:
        value = (get_env(self.variable) or "").lower()
        return _MODES.get(value, EnvironmentMode.DEVELOPMENT)
