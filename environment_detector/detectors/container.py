"""Container detection: Docker, WSL and Kubernetes

Each signal is probed independently; the reported container_type follows
the fixed precedence docker > wsl > kubernetes.
"""
import re
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    CONTAINER_FILES,
    DOCKER_CGROUP_MARKERS,
    KUBERNETES_ENV_VARS,
    KUBERNETES_HOSTNAME_PATTERN,
    OS_RELEASE_FILE,
    PROC_FILES,
    WSL_ENV_VARS,
    WSL_INDICATORS,
)
from ..core.detector import BaseDetector
from ..logging_config import get_logger
from ..models import ContainerInfo, ContainerType
from ..utils.file import file_exists, is_directory, read_file
from ..utils.process import get_env, get_hostname, get_platform, has_env

logger = get_logger(__name__)

_KERNEL_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")
_OS_RELEASE_NAME_RE = re.compile(r'^NAME="?(.+?)"?$', re.MULTILINE)
_KUBERNETES_HOSTNAME_RE = re.compile(KUBERNETES_HOSTNAME_PATTERN)


@dataclass
class WSLResult:
    """Outcome of the WSL probe"""
    is_wsl: bool = False
    version: Optional[int] = None
    distro: Optional[str] = None


def parse_wsl_version(proc_version: Optional[str]) -> Optional[int]:
    """Infer the WSL generation from /proc/version text

    An explicit WSL2 marker wins; otherwise a Microsoft/WSL kernel with
    major version >= 5 is WSL 2 and anything older is WSL 1.
    """
    if not proc_version:
        return None

    if "WSL2" in proc_version or "microsoft-standard-WSL2" in proc_version:
        return 2

    lowered = proc_version.lower()
    if "microsoft" in lowered or "wsl" in lowered:
        match = _KERNEL_VERSION_RE.search(proc_version)
        if match and int(match.group(1)) >= 5:
            return 2
        return 1

    return None


def parse_os_release_name(os_release: Optional[str]) -> Optional[str]:
    """Extract NAME from /etc/os-release content"""
    if not os_release:
        return None
    match = _OS_RELEASE_NAME_RE.search(os_release)
    return match.group(1) if match else None


class ContainerDetector(BaseDetector[ContainerInfo]):
    """Detect Docker, WSL and Kubernetes"""

    name = "container"

    def _perform_detection(self) -> ContainerInfo:
        is_docker = self._detect_docker()
        wsl = self._detect_wsl()
        is_kubernetes = self._detect_kubernetes()

        container_type = None
        if is_docker:
            container_type = ContainerType.DOCKER
        elif wsl.is_wsl:
            container_type = ContainerType.WSL
        elif is_kubernetes:
            container_type = ContainerType.KUBERNETES

        return ContainerInfo(
            is_docker=is_docker,
            is_wsl=wsl.is_wsl,
            is_kubernetes=is_kubernetes,
            container_type=container_type,
            wsl_version=wsl.version,
            wsl_distro=wsl.distro,
        )

    def _detect_docker(self) -> bool:
        if file_exists(CONTAINER_FILES["DOCKER_ENV"]) or file_exists(CONTAINER_FILES["DOCKER_INIT"]):
            return True

        for cgroup_path in (PROC_FILES["SELF_CGROUP"], PROC_FILES["INIT_CGROUP"]):
            content = read_file(cgroup_path)
            if content and any(marker in content for marker in DOCKER_CGROUP_MARKERS):
                return True

        mountinfo = read_file(PROC_FILES["SELF_MOUNTINFO"])
        if mountinfo and "docker" in mountinfo:
            return True

        return False

    def _detect_wsl(self) -> WSLResult:
        # Native Windows is never WSL
        if get_platform() == "win32":
            return WSLResult()

        env_distro = get_env(WSL_INDICATORS["ENV_VAR"])
        if env_distro:
            return WSLResult(is_wsl=True, version=self._get_wsl_version(), distro=env_distro)

        proc_version = read_file(PROC_FILES["VERSION"])
        if proc_version and WSL_INDICATORS["PROC_VERSION"].lower() in proc_version.lower():
            return self._wsl_detected()

        if file_exists(WSL_INDICATORS["PROC_SYS"]) or is_directory(CONTAINER_FILES["WSL_INTEROP"]):
            return self._wsl_detected()

        if any(has_env(var) for var in WSL_ENV_VARS):
            return self._wsl_detected()

        return WSLResult()

    def _wsl_detected(self) -> WSLResult:
        return WSLResult(is_wsl=True, version=self._get_wsl_version(), distro=self._get_wsl_distro())

    def _detect_kubernetes(self) -> bool:
        if is_directory(CONTAINER_FILES["KUBERNETES_SERVICE"]):
            return True

        if any(has_env(var) for var in KUBERNETES_ENV_VARS):
            return True

        # A pod-like hostname alone is not enough
        hostname = get_hostname()
        if hostname and _KUBERNETES_HOSTNAME_RE.match(hostname):
            if file_exists(CONTAINER_FILES["KUBERNETES_TOKEN"]):
                return True

        return False

    def _get_wsl_version(self) -> Optional[int]:
        return parse_wsl_version(read_file(PROC_FILES["VERSION"]))

    def _get_wsl_distro(self) -> Optional[str]:
        env_distro = get_env(WSL_INDICATORS["ENV_VAR"])
        if env_distro:
            return env_distro
        return parse_os_release_name(read_file(OS_RELEASE_FILE))
