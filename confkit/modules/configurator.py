"""
Module configurator for confkit.

Walks the module set and, for every module:

1. creates its build-output directory under ``<build>/src/<name>``
2. locates its configure script under ``<src>/src/<name>/`` (honoring
   the per-module override from the special-case table)
3. runs it with the module's extra arguments from inside the build-output
   directory

A module without a configure script is a plain dependency and is
skipped. A configure script exiting non-zero is reported as a warning;
only in strict mode does it abort the run.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from confkit.core.exceptions import PrerequisiteStepError, SubmoduleConfigureError
from confkit.core.filesystem import ensure_directory
from confkit.core.process import ProcessRunner
from confkit.modules.module_set import Module

logger = logging.getLogger(__name__)

DEFAULT_CONFIGURE_ENTRY = "configure"


class ConfigureStatus(Enum):
    """Outcome of configuring one module."""

    CONFIGURED = "configured"
    SKIPPED = "skipped"  # No configure script
    FAILED = "failed"  # Configure script exited non-zero


@dataclass
class ModuleConfigureResult:
    """Result of configuring a single module."""

    module: str
    status: ConfigureStatus
    exit_code: Optional[int] = None
    configure_script: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.status is not ConfigureStatus.FAILED


class ModuleConfigurator:
    """
    Configures the modules of a source tree into a build tree.

    Attributes:
        src_dir: Source root (contains src/<module>/)
        build_dir: Build root (receives src/<module>/)
        strict: Treat a failing configure script as fatal
    """

    def __init__(
        self,
        runner: ProcessRunner,
        src_dir: Union[str, Path],
        build_dir: Union[str, Path],
        strict: bool = False,
    ):
        self.runner = runner
        self.src_dir = Path(src_dir)
        self.build_dir = Path(build_dir)
        self.strict = strict

    def module_source_dir(self, module: Module) -> Path:
        return self.src_dir / "src" / module.name

    def module_build_dir(self, module: Module) -> Path:
        return self.build_dir / "src" / module.name

    def configure_entry(self, module: Module) -> Path:
        """
        Resolve the configure script of a module.

        Args:
            module: Module to look up

        Returns:
            Path to the configure script (may not exist)
        """
        relative = module.configure_entry_override or DEFAULT_CONFIGURE_ENTRY
        return self.module_source_dir(module) / relative

    def prepare_directories(
        self, modules: Iterable[Module], extra_dirs: Sequence[str] = ()
    ) -> List[Path]:
        """
        Create missing build-output directories.

        Args:
            modules: Modules needing a build directory
            extra_dirs: Additional directories relative to the build root

        Returns:
            Directories that were newly created
        """
        created = []
        targets = [self.module_build_dir(m) for m in modules]
        targets.extend(self.build_dir / extra for extra in extra_dirs)

        for target in targets:
            if ensure_directory(target):
                created.append(target)

        return created

    def regenerate(self, modules: Iterable[Module], autoconf: str) -> None:
        """
        Regenerate configure scripts that are built with autoconf 2.13.

        Args:
            modules: Module set; only modules with an autoconf_dir are touched
            autoconf: Path of the autoconf 2.13 program

        Raises:
            PrerequisiteStepError: If autoconf exits non-zero
        """
        for module in modules:
            if not module.autoconf_dir:
                continue

            work_dir = self.module_source_dir(module) / module.autoconf_dir
            logger.info(f"{module.name}: running autoconf in {work_dir}")
            exit_code = self.runner.run_in_directory([autoconf], cwd=work_dir)
            if exit_code != 0:
                raise PrerequisiteStepError(
                    f"autoconf failed for {module.name}", exit_code
                )

    def configure(self, module: Module) -> ModuleConfigureResult:
        """
        Run the configure script of one module.

        Args:
            module: Module to configure

        Returns:
            ModuleConfigureResult describing what happened

        Raises:
            SubmoduleConfigureError: In strict mode, if the script fails
        """
        script = self.configure_entry(module)
        if not script.is_file():
            logger.debug(f"{module.name}: no configure script at {script}, skipping")
            return ModuleConfigureResult(module.name, ConfigureStatus.SKIPPED)

        build_out = self.module_build_dir(module)
        cwd = build_out if build_out.is_dir() else None
        argv = ["sh", str(script), *module.extra_args]

        logger.info(f"{module.name}: {' '.join(argv)}")
        exit_code = self.runner.run_in_directory(argv, cwd=cwd)

        if exit_code == 0:
            return ModuleConfigureResult(
                module.name, ConfigureStatus.CONFIGURED, 0, script
            )

        if self.strict:
            raise SubmoduleConfigureError(module.name, exit_code)

        logger.warning(
            f"configure for {module.name} exited with status {exit_code}"
        )
        return ModuleConfigureResult(module.name, ConfigureStatus.FAILED, exit_code, script)

    def configure_all(self, modules: Iterable[Module]) -> List[ModuleConfigureResult]:
        """
        Configure every module in order.

        Args:
            modules: Module set

        Returns:
            One result per module
        """
        results = [self.configure(module) for module in modules]

        failed = [r.module for r in results if not r.ok]
        if failed:
            logger.warning(
                f"{len(failed)} module(s) failed to configure: {' '.join(failed)}"
            )
        return results


__all__ = [
    "ConfigureStatus",
    "ModuleConfigureResult",
    "ModuleConfigurator",
]
