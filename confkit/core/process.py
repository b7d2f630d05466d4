"""
External process access for confkit.

Every interaction with the outside world that involves another program
goes through a ProcessRunner: locating a program on the search path,
running it to capture its output, and running it in a working directory
to collect its exit status. The configure engine only depends on the
interface, so tests substitute a runner that returns scripted results.

All calls are blocking and have no timeout: a hung external program
hangs the run.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """
    Outcome of a captured process run.

    Attributes:
        returncode: Process exit status (127 if the program could not be started)
        stdout: Captured standard output (text)
        stderr: Captured standard error (text)
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True if the process exited with status 0."""
        return self.returncode == 0

    def first_line(self) -> str:
        """First line of standard output, or empty string."""
        lines = self.stdout.splitlines()
        return lines[0] if lines else ""


class ProcessRunner(ABC):
    """
    Abstract interface for running external programs.

    Implementations must be synchronous: each method returns only after
    the underlying program has finished.
    """

    @abstractmethod
    def find_on_path(self, name: str) -> Optional[str]:
        """
        Locate a program on the search path.

        Args:
            name: Program name (e.g., 'git', 'gcc')

        Returns:
            Absolute path to the program, or None if not found
        """
        pass

    @abstractmethod
    def run_capturing_output(self, argv: Sequence[str]) -> RunResult:
        """
        Run a program and capture its output.

        Args:
            argv: Program and arguments

        Returns:
            RunResult with exit status and captured output
        """
        pass

    @abstractmethod
    def run_in_directory(
        self, argv: Sequence[str], cwd: Optional[Union[str, Path]] = None
    ) -> int:
        """
        Run a program with its output passed through to the terminal.

        Args:
            argv: Program and arguments
            cwd: Working directory (current directory if None)

        Returns:
            Process exit status
        """
        pass


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by shutil.which and subprocess.run."""

    def find_on_path(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def run_capturing_output(self, argv: Sequence[str]) -> RunResult:
        args: List[str] = [str(a) for a in argv]
        logger.debug(f"Running (captured): {' '.join(args)}")
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            logger.debug(f"Could not start {args[0]}: {e}")
            return RunResult(returncode=127, stderr=str(e))

        return RunResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    def run_in_directory(
        self, argv: Sequence[str], cwd: Optional[Union[str, Path]] = None
    ) -> int:
        args: List[str] = [str(a) for a in argv]
        logger.debug(f"Running in {cwd or '.'}: {' '.join(args)}")
        try:
            result = subprocess.run(
                args, cwd=str(cwd) if cwd else None, check=False
            )
        except OSError as e:
            logger.debug(f"Could not start {args[0]}: {e}")
            return 127
        return result.returncode


__all__ = [
    "RunResult",
    "ProcessRunner",
    "SubprocessRunner",
]
