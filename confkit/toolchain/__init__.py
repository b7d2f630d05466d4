"""
Toolchain probing and compiler selection.
"""

from confkit.toolchain.prober import ProbeResult, ToolchainProber, extract_version
from confkit.toolchain.selection import (
    DEFAULT_CLANG_VERSIONS,
    extract_clang_version,
    resolve_rustc,
    select_c_compiler,
)

__all__ = [
    "ProbeResult",
    "ToolchainProber",
    "extract_version",
    "DEFAULT_CLANG_VERSIONS",
    "extract_clang_version",
    "resolve_rustc",
    "select_c_compiler",
]
