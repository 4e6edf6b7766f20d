"""Process, environment and command probes that never raise"""
import getpass
import os
import platform
import socket
import subprocess
import sys
from typing import List, Optional, Union

from ..core.constants import DEFAULT_COMMAND_TIMEOUT
from ..logging_config import get_logger

logger = get_logger(__name__)


def get_env(key: str) -> Optional[str]:
    return os.environ.get(key)


def has_env(key: str) -> bool:
    """True when key is present, even if set to an empty string"""
    return key in os.environ


def get_env_boolean(key: str, default: bool = False) -> bool:
    """Parse "true" (any case) or "1" as True; unset or empty gives default"""
    value = get_env(key)
    if not value:
        return default
    return value.lower() == "true" or value == "1"


def get_platform() -> str:
    """Raw platform identifier: win32, darwin, linux, ..."""
    return sys.platform


def get_hostname() -> Optional[str]:
    try:
        return socket.gethostname()
    except OSError:
        return None


def get_uid() -> Optional[int]:
    if hasattr(os, "getuid"):
        return os.getuid()
    return None


def get_gid() -> Optional[int]:
    if hasattr(os, "getgid"):
        return os.getgid()
    return None


def get_username() -> Optional[str]:
    try:
        return getpass.getuser()
    except Exception as e:
        # getpass raises OSError, KeyError or ImportError depending on platform
        logger.debug("Could not resolve username", error=str(e))
        return None


def is_root() -> bool:
    return get_uid() == 0


def get_arch() -> str:
    return platform.machine() or "unknown"


def run_command(command: Union[str, List[str]], timeout: float = DEFAULT_COMMAND_TIMEOUT,
                shell: bool = False) -> Optional[str]:
    """Run a command and return its stripped stdout

    Returns None on non-zero exit, missing binary or timeout. stderr is
    discarded.
    """
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            text=True,
            timeout=timeout,
            shell=shell,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out", command=command, timeout=timeout)
        return None
    except (OSError, subprocess.SubprocessError, ValueError) as e:
        logger.debug("Command failed to start", command=command, error=str(e))
        return None

    if result.returncode != 0:
        logger.debug("Command exited non-zero", command=command, returncode=result.returncode)
        return None

    return result.stdout.strip()
