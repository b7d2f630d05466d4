"""
Configure pipeline for confkit.

Runs the whole configuration resolution in order:

1. check the utilities the run itself needs
2. detect the host platform
3. resolve command-line options
4. probe build tools and pick the C compiler and rustc
5. synchronize git submodules (unless disabled)
6. regenerate autoconf-2.13 based configure scripts
7. create build directories and configure every module
8. persist the configuration artifact (only if it changed)

Any FatalConfigurationError aborts the run before the artifact is
written. The run is strictly sequential.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from confkit.config.manifest import MANIFEST_FILE_NAME, ProjectManifest, load_manifest
from confkit.config.store import ConfigurationStore
from confkit.core.exceptions import FatalConfigurationError
from confkit.core.filesystem import copy_if_changed, touch
from confkit.core.locking import build_dir_lock
from confkit.core.platform import Platform, detect_platform, host_os_string
from confkit.core.process import ProcessRunner, SubprocessRunner
from confkit.modules.configurator import ModuleConfigurator, ModuleConfigureResult
from confkit.modules.module_set import Module, build_module_set
from confkit.modules.submodules import SubmoduleManager
from confkit.options import defaults
from confkit.options.model import OptionModel, ResolvedOptions
from confkit.toolchain.prober import ToolchainProber
from confkit.toolchain.selection import resolve_rustc, select_c_compiler

logger = logging.getLogger(__name__)

# Utilities the run itself shells out to
REQUIRED_COMMANDS = ("uname", "sh")

CONFIG_TMP = "config.tmp"
CONFIG_MK = "config.mk"
CONFIG_STAMP = "config.stamp"
MAKEFILE_IN = "Makefile.in"


def step(message: str) -> None:
    """Log a stage banner."""
    logger.info("")
    logger.info(message)
    logger.info("")


def dir_value(path: Path) -> str:
    """Absolute directory path with a trailing slash, as the makefiles expect."""
    return str(path.resolve()).rstrip("/") + "/"


@dataclass
class ConfigureReport:
    """Everything a successful run determined."""

    platform: Platform
    options: ResolvedOptions
    modules: List[Module]
    results: List[ModuleConfigureResult]
    store: ConfigurationStore
    c_compiler: str
    artifact_changed: bool = False
    created_dirs: List[Path] = field(default_factory=list)


class ConfigurePipeline:
    """
    End-to-end configure run.

    Attributes:
        runner: Process runner for every external program
        src_dir: Source root (contains src/<module>/, Makefile.in)
        build_dir: Build root (receives src/<module>/, Makefile, config.mk)
        raw_args: Arguments resolved by the option model
        configure_args: Arguments recorded as CFG_CONFIGURE_ARGS
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        src_dir: Union[str, Path] = ".",
        build_dir: Union[str, Path] = ".",
        raw_args: Sequence[str] = (),
        configure_args: Optional[Sequence[str]] = None,
        manifest: Optional[ProjectManifest] = None,
        manifest_path: Optional[Path] = None,
        option_model: Optional[OptionModel] = None,
        lock_timeout: float = 30,
    ):
        self.runner = runner or SubprocessRunner()
        self.src_dir = Path(src_dir)
        self.build_dir = Path(build_dir)
        self.raw_args = list(raw_args)
        self.configure_args = list(
            configure_args if configure_args is not None else raw_args
        )
        if manifest is None:
            manifest = load_manifest(
                manifest_path or self.src_dir / MANIFEST_FILE_NAME,
                required=manifest_path is not None,
            )
        self.manifest = manifest
        self.option_model = option_model or defaults.default_option_model()
        self.lock_timeout = lock_timeout
        self.store = ConfigurationStore()

    def check_required_commands(self) -> None:
        """
        Verify the utilities the run shells out to are present.

        Raises:
            FatalConfigurationError: If one is missing
        """
        logger.info("looking for configure programs")
        for name in REQUIRED_COMMANDS:
            if self.runner.find_on_path(name):
                logger.info(f"found {name}")
            else:
                raise FatalConfigurationError(f"need {name}")

    def run(self) -> ConfigureReport:
        """
        Execute the configure run.

        Returns:
            ConfigureReport of the completed run

        Raises:
            FatalConfigurationError: On any fatal check
        """
        self.check_required_commands()

        logger.info("inspecting environment")
        platform_tag = detect_platform(host_os_string(self.runner))

        step(f"processing {self.src_dir} args")
        options = self.option_model.resolve(self.raw_args, self.store)

        step("looking for build programs")
        prober = ToolchainProber(self.runner, self.store)
        git = prober.probe_need("CFG_GIT", "git")
        clang = prober.probe("CFG_CLANG", ["clang++"])
        gcc = prober.probe("CFG_GCC", ["gcc"])
        prober.probe("CFG_LD", ["ld"])
        # SpiderMonkey requires autoconf 2.13 exactly
        autoconf = prober.probe_need(
            "CFG_AUTOCONF213", "autoconf213", "autoconf2.13", "autoconf-2.13"
        )
        rustc = resolve_rustc(
            self.runner, prober, options.value(defaults.LOCAL_RUST_ROOT)
        )
        c_compiler = select_c_compiler(
            self.runner,
            options.enabled(defaults.CLANG),
            clang,
            gcc,
            self.manifest.clang_versions,
        )

        step("configuring submodules")
        if options.enabled(defaults.MANAGE_SUBMODULES):
            SubmoduleManager(self.runner, git.path, self.src_dir).sync()
        else:
            logger.info("submodule management disabled")

        modules = build_module_set(platform_tag, self.manifest.layout)
        configurator = ModuleConfigurator(
            self.runner,
            self.src_dir,
            self.build_dir,
            strict=options.enabled(defaults.STRICT_SUBMODULE_CONFIGURE),
        )

        step("running submodule autoconf scripts")
        configurator.regenerate(modules, autoconf.path)

        with build_dir_lock(self.build_dir, timeout=self.lock_timeout):
            step("making build directories")
            created = configurator.prepare_directories(
                modules, self.manifest.extra_build_dirs
            )

            step("running submodule configure scripts")
            results = configurator.configure_all(modules)

            step("writing configuration")
            self._put_computed(platform_tag, options, c_compiler, modules, rustc)
            changed = self.persist()

        step("complete")
        return ConfigureReport(
            platform=platform_tag,
            options=options,
            modules=modules,
            results=results,
            store=self.store,
            c_compiler=c_compiler,
            artifact_changed=changed,
            created_dirs=created,
        )

    def _put_computed(
        self,
        platform_tag: Platform,
        options: ResolvedOptions,
        c_compiler: str,
        modules: List[Module],
        rustc: str,
    ) -> None:
        manage = options[defaults.MANAGE_SUBMODULES]

        self.store.put("CFG_OSTYPE", platform_tag.value)
        self.store.put("CFG_SRC_DIR", dir_value(self.src_dir))
        self.store.put("CFG_BUILD_DIR", dir_value(self.build_dir))
        self.store.put("CFG_CONFIGURE_ARGS", " ".join(self.configure_args))
        self.store.put("CFG_C_COMPILER", c_compiler)
        self.store.put("CFG_SUBMODULES", " ".join(m.name for m in modules))
        self.store.put(manage.variable, manage.value)
        self.store.put("CFG_RUSTC", rustc)

    def persist(self) -> bool:
        """
        Write config.mk and the build-tree copies, only where content changed.

        Returns:
            True if the source-tree config.mk was replaced
        """
        logger.info("")
        tmp_path = self.src_dir / CONFIG_TMP
        final_path = self.src_dir / CONFIG_MK

        makefile_in = self.src_dir / MAKEFILE_IN
        if makefile_in.is_file():
            copy_if_changed(makefile_in, self.build_dir / "Makefile")
        else:
            logger.warning(f"{makefile_in} not found, no Makefile generated")

        changed = self.store.commit(tmp_path, final_path)
        copy_if_changed(final_path, self.build_dir / CONFIG_MK)

        tmp_path.unlink(missing_ok=True)
        touch(self.src_dir / CONFIG_STAMP)
        return changed


__all__ = [
    "REQUIRED_COMMANDS",
    "ConfigureReport",
    "ConfigurePipeline",
]
