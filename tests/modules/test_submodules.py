"""
Tests for git submodule synchronization.
"""

import pytest

from confkit.core.exceptions import PrerequisiteStepError
from confkit.modules.submodules import SUBMODULE_STEPS, SubmoduleManager
from tests.fixtures.runners import FakeRunner

GIT = "/usr/bin/git"


def step_argv(label):
    step = next(s for s in SUBMODULE_STEPS if s.label == label)
    return (GIT, *step.args)


class TestSubmoduleManager:
    """Test SubmoduleManager.sync()."""

    def test_runs_every_step_in_source_root(self, tmp_path):
        runner = FakeRunner()

        SubmoduleManager(runner, GIT, tmp_path).sync()

        assert runner.executed_argv() == [(GIT, *s.args) for s in SUBMODULE_STEPS]
        assert all(cwd == tmp_path for _, cwd in runner.executed)

    def test_step_order(self):
        assert [s.label for s in SUBMODULE_STEPS] == [
            "submodule sync",
            "submodule status",
            "submodule update",
            "submodule clobber",
            "submodule checkout",
        ]

    def test_update_is_recursive_and_initializing(self):
        assert step_argv("submodule update")[-2:] == ("--init", "--recursive")

    def test_status_failure_ignored(self, tmp_path):
        runner = FakeRunner(exit_codes={step_argv("submodule status"): 1})

        SubmoduleManager(runner, GIT, tmp_path).sync()

        assert len(runner.executed) == len(SUBMODULE_STEPS)

    @pytest.mark.parametrize(
        "label",
        ["submodule sync", "submodule update", "submodule clobber", "submodule checkout"],
    )
    def test_checked_step_failure_is_fatal(self, tmp_path, label):
        runner = FakeRunner(exit_codes={step_argv(label): 128})

        with pytest.raises(PrerequisiteStepError, match="git failed") as excinfo:
            SubmoduleManager(runner, GIT, tmp_path).sync()

        assert excinfo.value.exit_code == 128
        assert runner.executed_argv()[-1] == step_argv(label)
