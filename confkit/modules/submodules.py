"""
Git submodule management for confkit.

Brings every module checkout in the source tree to the revision recorded
by the superproject and wipes local changes, so a configure run always
starts from pristine module sources. The version-control tool is only
invoked, never reimplemented.
"""

import logging
from pathlib import Path
from typing import List, NamedTuple, Union

from confkit.core.exceptions import PrerequisiteStepError
from confkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class GitStep(NamedTuple):
    """One git invocation; checked steps abort the run on failure."""

    label: str
    args: List[str]
    checked: bool


SUBMODULE_STEPS = [
    GitStep("submodule sync", ["submodule", "--quiet", "sync"], True),
    # Only for getting the submodule SHA1s and status into the build log
    GitStep("submodule status", ["submodule", "status", "--recursive"], False),
    GitStep(
        "submodule update",
        ["submodule", "--quiet", "update", "--init", "--recursive"],
        True,
    ),
    GitStep(
        "submodule clobber",
        ["submodule", "--quiet", "foreach", "--recursive", "git", "clean", "-dxf"],
        True,
    ),
    GitStep(
        "submodule checkout",
        ["submodule", "--quiet", "foreach", "--recursive", "git", "checkout", "."],
        True,
    ),
]


class SubmoduleManager:
    """Runs the submodule synchronization steps in the source root."""

    def __init__(self, runner: ProcessRunner, git: str, src_dir: Union[str, Path]):
        self.runner = runner
        self.git = git
        self.src_dir = Path(src_dir)

    def sync(self) -> None:
        """
        Synchronize, update and clean all submodules.

        Raises:
            PrerequisiteStepError: If a checked git step exits non-zero
        """
        for step in SUBMODULE_STEPS:
            logger.info(f"git: {step.label}")
            exit_code = self.runner.run_in_directory(
                [self.git, *step.args], cwd=self.src_dir
            )
            if exit_code != 0:
                if step.checked:
                    raise PrerequisiteStepError("git failed", exit_code)
                logger.debug(f"git {step.label} exited with {exit_code}, ignored")


__all__ = [
    "GitStep",
    "SUBMODULE_STEPS",
    "SubmoduleManager",
]
