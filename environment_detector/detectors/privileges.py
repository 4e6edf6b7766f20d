"""Privilege detection: root, administrator and elevated status

Admin checks shell out to OS commands. Each command goes through
run_command, whose None result moves the check to the next fallback.
These are best-effort signals, not an authorization check.
"""
from typing import Optional

from ..config import DetectorOptions
from ..core.cache import TimedCache
from ..core.constants import ADMIN_GROUPS, DEFAULT_COMMAND_TIMEOUT, WINDOWS_ADMIN_SID
from ..core.detector import BaseDetector
from ..logging_config import get_logger
from ..models import PrivilegeInfo
from ..utils.process import get_gid, get_platform, get_uid, get_username, run_command

logger = get_logger(__name__)


class PrivilegeDetector(BaseDetector[PrivilegeInfo]):
    """Detect root and administrator privileges"""

    name = "privileges"

    def __init__(self, options: Optional[DetectorOptions] = None, cache: Optional[TimedCache] = None,
                 command_timeout: float = DEFAULT_COMMAND_TIMEOUT):
        super().__init__(options, cache)
        self.command_timeout = command_timeout

    def _perform_detection(self) -> PrivilegeInfo:
        uid = get_uid()
        is_root = uid == 0

        return PrivilegeInfo(
            is_root=is_root,
            is_admin=self._is_admin(get_platform(), is_root),
            uid=uid,
            gid=get_gid(),
            username=get_username(),
        )

    def _is_admin(self, platform_id: str, is_root: bool) -> bool:
        if platform_id == "win32":
            return self._is_windows_admin()
        if platform_id in ("darwin", "linux"):
            return is_root or self._is_unix_admin()
        return False

    def _run(self, command, shell: bool = False) -> Optional[str]:
        return run_command(command, timeout=self.command_timeout, shell=shell)

    def _is_windows_admin(self) -> bool:
        # net session only succeeds from an elevated prompt
        if self._run(["net", "session"]) is not None:
            return True

        groups = self._run(["whoami", "/groups"])
        if groups is not None:
            lowered = groups.lower()
            return WINDOWS_ADMIN_SID in lowered or "administrators" in lowered

        # dir is a cmd builtin, so it needs a shell
        return self._run('dir "%SystemRoot%\\System32\\config"', shell=True) is not None

    def _is_unix_admin(self) -> bool:
        groups = self._run(["groups"])
        if groups is not None:
            lowered = groups.lower()
            return any(group in lowered for group in ADMIN_GROUPS)

        logger.debug("groups command failed, falling back to sudo check")
        return self._run(["sudo", "-n", "true"]) is not None
