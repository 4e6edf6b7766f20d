"""Operating system detection"""
import platform

from ..core.detector import BaseDetector
from ..logging_config import get_logger
from ..models import OSInfo, OSType
from ..utils.process import get_platform

logger = get_logger(__name__)

_PLATFORM_TYPES = {
    "win32": OSType.WINDOWS,
    "darwin": OSType.MACOS,
    "linux": OSType.LINUX,
}

FALLBACK_OS_INFO = OSInfo(
    platform="unknown",
    type=OSType.UNKNOWN,
    version="unknown",
    release="unknown",
    arch="unknown",
)


class OSDetector(BaseDetector[OSInfo]):
    """Map the platform identifier to an OS family"""

    name = "os"

    def _perform_detection(self) -> OSInfo:
        try:
            platform_id = get_platform()
            release = platform.release()
            version = platform.version() or release
            arch = platform.machine() or "unknown"
        except Exception as e:
            logger.warning("OS detection failed, using fallback", error=str(e))
            return FALLBACK_OS_INFO

        os_type = _PLATFORM_TYPES.get(platform_id, OSType.UNKNOWN)

        return OSInfo(
            platform=platform_id,
            type=os_type,
            version=version,
            release=release,
            arch=arch,
            is_windows=os_type == OSType.WINDOWS,
            is_macos=os_type == OSType.MACOS,
            is_linux=os_type == OSType.LINUX,
        )
