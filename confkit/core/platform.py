"""
Platform detection for confkit.

Maps the raw host OS identifier (as reported by ``uname -s``) onto the
closed set of platforms the project knows how to configure. Anything
outside that set is a fatal configuration error.

Usage:
    from confkit.core.platform import detect_platform, host_os_string

    platform_tag = detect_platform(host_os_string(runner))
    print(platform_tag.value)  # 'linux'
"""

import logging
import platform
from enum import Enum
from typing import Optional

from confkit.core.exceptions import UnknownPlatformError
from confkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class Platform(Enum):
    """Supported host platforms; the value is the CFG_OSTYPE tag."""

    LINUX = "linux"
    FREEBSD = "freebsd"
    DARWIN = "darwin"
    MINGW32 = "mingw32"

    def __str__(self) -> str:
        return self.value


# Exact matches on the uname string
_EXACT_OS_NAMES = {
    "Linux": Platform.LINUX,
    "FreeBSD": Platform.FREEBSD,
    "Darwin": Platform.DARWIN,
}

# MinGW reports a versioned string such as 'MINGW32_NT-6.1'
_MINGW_PREFIX = "MINGW32"


def detect_platform(raw_os: str) -> Platform:
    """
    Map a raw OS identifier to a Platform.

    Args:
        raw_os: Output of ``uname -s`` (e.g., 'Linux', 'Darwin', 'MINGW32_NT-6.1')

    Returns:
        The matching Platform

    Raises:
        UnknownPlatformError: If the identifier is not supported

    Example:
        >>> detect_platform("FreeBSD")
        <Platform.FREEBSD: 'freebsd'>
    """
    tag = _EXACT_OS_NAMES.get(raw_os)
    if tag is None and raw_os.startswith(_MINGW_PREFIX):
        tag = Platform.MINGW32

    if tag is None:
        raise UnknownPlatformError(raw_os)

    logger.debug(f"Detected platform {tag.value} from '{raw_os}'")
    return tag


def host_os_string(runner: Optional[ProcessRunner] = None) -> str:
    """
    Get the raw host OS identifier.

    Runs ``uname -s`` through the runner when one is given; without a
    runner (or if uname produced nothing) the interpreter's own view of
    the system name is used.

    Args:
        runner: Process runner used to invoke uname

    Returns:
        Raw OS identifier string
    """
    if runner is not None:
        result = runner.run_capturing_output(["uname", "-s"])
        raw = result.first_line().strip()
        if result.ok and raw:
            return raw
        logger.debug("uname -s produced no output, using platform.system()")

    return platform.system()


__all__ = [
    "Platform",
    "detect_platform",
    "host_os_string",
]
