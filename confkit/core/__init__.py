"""
Core framework for confkit.

Platform detection, process execution, change-detecting file operations,
locking and the exception hierarchy shared by every other package.
"""

from confkit.core.exceptions import (
    ConfkitError,
    FatalConfigurationError,
    ManifestError,
)
from confkit.core.platform import Platform, detect_platform, host_os_string
from confkit.core.process import ProcessRunner, RunResult, SubprocessRunner

__all__ = [
    "ConfkitError",
    "FatalConfigurationError",
    "ManifestError",
    "Platform",
    "detect_platform",
    "host_os_string",
    "ProcessRunner",
    "RunResult",
    "SubprocessRunner",
]
