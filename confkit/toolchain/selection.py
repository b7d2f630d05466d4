"""
Compiler and rustc selection for confkit.

Decides which C compiler the build uses and which rustc binary drives
the Rust side of the build, based on the probe results and the resolved
options.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from confkit.core.exceptions import (
    FatalConfigurationError,
    LocalRustError,
    UnsupportedCompilerVersionError,
)
from confkit.core.process import ProcessRunner
from confkit.toolchain.prober import ProbeResult, ToolchainProber

logger = logging.getLogger(__name__)

# clang releases known to build the C++ modules
DEFAULT_CLANG_VERSIONS = ("3.0svn", "3.0", "3.1", "4.0")

_CLANG_VERSION_PATTERN = re.compile(r".*\bversion (\S+)")


def extract_clang_version(output: str) -> str:
    """
    Extract the clang version from its --version output.

    Uses the first line mentioning 'version' and takes the token that
    follows the last 'version ' on that line.

    Args:
        output: Output of ``clang++ --version``

    Returns:
        Version token (e.g., '3.1', '3.0svn') or empty string

    Example:
        >>> extract_clang_version("clang version 3.0 (tags/RELEASE_30/final)")
        '3.0'
    """
    for line in output.splitlines():
        if "version" not in line:
            continue
        match = _CLANG_VERSION_PATTERN.match(line)
        return match.group(1) if match else ""
    return ""


def select_c_compiler(
    runner: ProcessRunner,
    use_clang: bool,
    clang: ProbeResult,
    gcc: ProbeResult,
    accepted_clang_versions: Optional[Sequence[str]] = None,
) -> str:
    """
    Choose the C compiler.

    With use_clang, clang must have been found and report one of the
    accepted versions. Otherwise gcc is used and must have been found.

    Args:
        runner: Process runner used to query the clang version
        use_clang: Whether --enable-clang was given
        clang: Probe result for clang
        gcc: Probe result for gcc
        accepted_clang_versions: Accepted clang versions (defaults if None)

    Returns:
        'clang' or 'gcc'

    Raises:
        FatalConfigurationError: If the requested compiler is unavailable
        UnsupportedCompilerVersionError: If clang's version is not accepted
    """
    if use_clang:
        accepted = list(accepted_clang_versions or DEFAULT_CLANG_VERSIONS)
        if not clang.found:
            raise FatalConfigurationError("clang requested but not found")

        result = runner.run_capturing_output([clang.path, "--version"])
        version = extract_clang_version(result.stdout)
        if version not in accepted:
            raise UnsupportedCompilerVersionError("clang", version, accepted)

        logger.info(f"found ok version of CLANG: {version}")
        return "clang"

    if not gcc.found:
        raise FatalConfigurationError("either clang or gcc is required")
    return "gcc"


def resolve_rustc(
    runner: ProcessRunner, prober: ToolchainProber, local_rust_root: str = ""
) -> str:
    """
    Find the rustc binary to use.

    A non-empty local_rust_root pins rustc to ``<root>/bin/rustc``;
    otherwise rustc is a required probe on the search path.

    Args:
        runner: Process runner used to query the local rustc version
        prober: Prober used for the search path lookup
        local_rust_root: Value of --local-rust-root

    Returns:
        Path to rustc

    Raises:
        LocalRustError: If local_rust_root has no bin/rustc
        RequiredToolMissingError: If rustc is not on the search path
    """
    if local_rust_root:
        rustc = Path(local_rust_root) / "bin" / "rustc"
        if not rustc.is_file():
            raise LocalRustError(local_rust_root)

        version = runner.run_capturing_output([str(rustc), "--version"]).first_line()
        logger.info(f"using rustc at: {local_rust_root} with version: {version}")
        return str(rustc)

    return prober.probe_need("CFG_RUSTC", "rustc").path


__all__ = [
    "DEFAULT_CLANG_VERSIONS",
    "extract_clang_version",
    "select_c_compiler",
    "resolve_rustc",
]
