"""
Centralized exception hierarchy for confkit.

This module defines all custom exceptions raised while resolving a
configuration. Anything derived from FatalConfigurationError aborts the
run; the CLI turns it into a single diagnostic line and an exit code.
"""

from typing import Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class ConfkitError(Exception):
    """Base exception for all confkit errors."""

    exit_code = 1


# ============================================================================
# Fatal Configuration Errors
# ============================================================================


class FatalConfigurationError(ConfkitError):
    """Raised when a check fails and the run cannot continue."""

    def __init__(self, message: str, exit_code: int = 1):
        self.exit_code = exit_code if exit_code else 1
        super().__init__(message)


class UnknownPlatformError(FatalConfigurationError):
    """Raised when the host OS identifier is not a supported platform."""

    def __init__(self, raw_os: str):
        self.raw_os = raw_os
        super().__init__(f"unknown OS type: {raw_os}")


class RequiredToolMissingError(FatalConfigurationError):
    """Raised when none of the candidates for a required tool is found."""

    def __init__(self, logical_name: str, candidates: Sequence[str]):
        self.logical_name = logical_name
        self.candidates = list(candidates)
        super().__init__(
            f"needed, but unable to find any of: {' '.join(self.candidates)}"
        )


class UnsupportedCompilerVersionError(FatalConfigurationError):
    """Raised when a version-gated compiler reports an unaccepted version."""

    def __init__(self, compiler: str, version: str, accepted: Sequence[str]):
        self.compiler = compiler
        self.version = version
        self.accepted = list(accepted)
        super().__init__(
            f"bad {compiler.upper()} version: {version or '<unknown>'}, "
            f"need one of: {', '.join(self.accepted)}"
        )


class PrerequisiteStepError(FatalConfigurationError):
    """Raised when an explicitly checked external step exits non-zero."""

    def __init__(self, step: str, exit_code: int):
        self.step = step
        super().__init__(f"{step} (exit status {exit_code})", exit_code=exit_code)


class SubmoduleConfigureError(FatalConfigurationError):
    """Raised in strict mode when a module's configure script fails."""

    def __init__(self, module: str, exit_code: int):
        self.module = module
        super().__init__(
            f"configure for module {module} failed (exit status {exit_code})",
            exit_code=exit_code,
        )


class LocalRustError(FatalConfigurationError):
    """Raised when --local-rust-root does not contain a rustc binary."""

    def __init__(self, root: str):
        self.root = root
        super().__init__(f"no local rust to use (looked in {root}/bin/rustc)")


# ============================================================================
# Manifest Errors
# ============================================================================


class ManifestError(ConfkitError):
    """Project manifest parsing or validation error."""

    pass


__all__ = [
    "ConfkitError",
    "FatalConfigurationError",
    "UnknownPlatformError",
    "RequiredToolMissingError",
    "UnsupportedCompilerVersionError",
    "PrerequisiteStepError",
    "SubmoduleConfigureError",
    "LocalRustError",
    "ManifestError",
]
