"""
Toolchain probing for confkit.

A logical tool (e.g. CFG_AUTOCONF213) may be installed under several
program names. The prober tries the candidates in order, binds the tool
to the first one present on the search path, and scrapes a version
string from its ``--version`` output.

Finding the program is what makes a probe succeed; an unparseable
version only leaves the version empty.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from confkit.config.store import ConfigurationStore
from confkit.core.exceptions import RequiredToolMissingError
from confkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)

# Optional v/V prefix, a digit, more digits and dots, then any non-space run
_VERSION_PATTERN = re.compile(r"[vV]?\d[\d.]*\S*")


def extract_version(text: str) -> Optional[str]:
    """
    Extract a version token from the first line of a --version output.

    Args:
        text: Program output

    Returns:
        Version string (e.g., '2.43.0', 'v18.1.8', '0.6-pre') or None

    Example:
        >>> extract_version("git version 2.43.0\\n")
        '2.43.0'
        >>> extract_version("rustc 0.6-pre (8b98e5a 2013-03-21)")
        '0.6-pre'
    """
    lines = text.splitlines() if text else []
    if not lines:
        return None

    match = _VERSION_PATTERN.search(lines[0])
    if match:
        return match.group(0)
    return None


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of probing one logical tool.

    Attributes:
        logical_name: Configuration variable name (e.g., 'CFG_GIT')
        path: Resolved program path, empty if nothing was found
        version: Detected version, always empty when path is empty
    """

    logical_name: str
    path: str = ""
    version: str = ""

    def __post_init__(self):
        if not self.path and self.version:
            object.__setattr__(self, "version", "")

    @property
    def found(self) -> bool:
        return bool(self.path)


class ToolchainProber:
    """
    Locates tools among ranked candidates and records the results.

    Every probe result is stored in the configuration store under its
    logical name, with the version shown as a note in status output.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        store: Optional[ConfigurationStore] = None,
        version_flag: str = "--version",
    ):
        self.runner = runner
        self.store = store
        self.version_flag = version_flag
        self.results: Dict[str, ProbeResult] = {}

    def probe_version(self, path: str) -> str:
        """
        Run a program with the version flag and scrape its version.

        Args:
            path: Program path

        Returns:
            Version string, or empty string if none could be extracted
        """
        result = self.runner.run_capturing_output([path, self.version_flag])
        output = result.stdout or result.stderr
        version = extract_version(output) if result.ok else None
        if not version:
            logger.debug(f"No version found for {path}")
        return version or ""

    def probe(
        self, logical_name: str, candidates: Sequence[str], required: bool = False
    ) -> ProbeResult:
        """
        Find the first candidate present on the search path.

        Candidates after the first hit are never tried, even if its
        version cannot be extracted.

        Args:
            logical_name: Configuration variable receiving the path
            candidates: Program names in order of preference
            required: Abort the run if no candidate is found

        Returns:
            ProbeResult (empty path if nothing was found and not required)

        Raises:
            RequiredToolMissingError: If required and no candidate was found
        """
        result = ProbeResult(logical_name)

        for candidate in candidates:
            path = self.runner.find_on_path(candidate)
            if path:
                logger.debug(f"{logical_name}: found {candidate} at {path}")
                result = ProbeResult(logical_name, path, self.probe_version(path))
                break
            logger.debug(f"{logical_name}: {candidate} not on search path")

        self.results[logical_name] = result
        if self.store is not None:
            note = f"({result.version})" if result.version else ""
            self.store.put(logical_name, result.path, note)

        if required and not result.found:
            raise RequiredToolMissingError(logical_name, candidates)

        return result

    def probe_need(self, logical_name: str, *candidates: str) -> ProbeResult:
        """Probe a required tool; shorthand for probe(..., required=True)."""
        return self.probe(logical_name, candidates, required=True)


__all__ = [
    "ProbeResult",
    "ToolchainProber",
    "extract_version",
]
