"""
Tests for toolchain probing.
"""

import logging
import os
import sys

import pytest

from confkit.core.exceptions import RequiredToolMissingError
from confkit.core.process import RunResult, SubprocessRunner
from confkit.toolchain.prober import ProbeResult, ToolchainProber, extract_version
from tests.fixtures.runners import FakeRunner


class TestExtractVersion:
    """Test extract_version()."""

    @pytest.mark.parametrize(
        "output, expected",
        [
            ("git version 2.43.0\n", "2.43.0"),
            ("Autoconf version 2.13\n", "2.13"),
            ("node v18.1.8", "v18.1.8"),
            ("rustc 0.6-pre (8b98e5a 2013-03-21)\nhost: x\n", "0.6-pre"),
            ("GNU ld (GNU Binutils) 2.23.1\n", "2.23.1"),
        ],
    )
    def test_version_found(self, output, expected):
        assert extract_version(output) == expected

    def test_only_first_line_considered(self):
        assert extract_version("no digits here\nversion 1.2.3\n") is None

    @pytest.mark.parametrize("output", ["", "\n", "unknown option"])
    def test_no_version(self, output):
        assert extract_version(output) is None


class TestProbeResult:
    """Test the ProbeResult invariant."""

    def test_version_cleared_without_path(self):
        assert ProbeResult("CFG_X", "", "1.0").version == ""

    def test_found(self):
        assert ProbeResult("CFG_X", "/bin/x").found
        assert not ProbeResult("CFG_X").found


class TestProbe:
    """Test ToolchainProber.probe()."""

    def test_first_present_candidate_wins(self):
        runner = FakeRunner(
            programs={"toolA": "/opt/toolA", "toolB": "/usr/bin/toolB"},
            outputs={("/opt/toolA", "--version"): RunResult(0, "toolA 1.2\n")},
        )
        prober = ToolchainProber(runner)

        result = prober.probe("CFG_X", ["toolA", "toolB"])

        assert result == ProbeResult("CFG_X", "/opt/toolA", "1.2")
        assert runner.lookups == ["toolA"]

    def test_falls_through_to_later_candidate(self):
        runner = FakeRunner(
            programs={"toolB": "/usr/bin/toolB"},
            outputs={("/usr/bin/toolB", "--version"): RunResult(0, "toolB 3.4.5\n")},
        )

        result = ToolchainProber(runner).probe("CFG_X", ["toolA", "toolB"])

        assert result.path == "/usr/bin/toolB"
        assert result.version == "3.4.5"
        assert runner.lookups == ["toolA", "toolB"]

    def test_unparseable_version_still_found(self):
        """Test a hit with no version does not move on to later candidates."""
        runner = FakeRunner(
            programs={"toolA": "/opt/toolA", "toolB": "/usr/bin/toolB"},
            outputs={("/opt/toolA", "--version"): RunResult(0, "toolA dev build\n")},
        )

        result = ToolchainProber(runner).probe("CFG_X", ["toolA", "toolB"])

        assert result.found
        assert result.path == "/opt/toolA"
        assert result.version == ""

    def test_version_from_stderr(self):
        runner = FakeRunner(
            programs={"tool": "/bin/tool"},
            outputs={("/bin/tool", "--version"): RunResult(0, "", "tool 9.1\n")},
        )

        assert ToolchainProber(runner).probe("CFG_T", ["tool"]).version == "9.1"

    def test_failed_version_run_gives_empty_version(self):
        runner = FakeRunner(
            programs={"tool": "/bin/tool"},
            outputs={("/bin/tool", "--version"): RunResult(2, "tool 9.1\n")},
        )

        assert ToolchainProber(runner).probe("CFG_T", ["tool"]).version == ""

    def test_custom_version_flag(self):
        runner = FakeRunner(
            programs={"tool": "/bin/tool"},
            outputs={("/bin/tool", "-V"): RunResult(0, "tool 2.0\n")},
        )

        assert ToolchainProber(runner, version_flag="-V").probe(
            "CFG_T", ["tool"]
        ).version == "2.0"

    def test_missing_optional_tool(self):
        runner = FakeRunner()
        prober = ToolchainProber(runner)

        result = prober.probe("CFG_X", ["toolA", "toolB"])

        assert result == ProbeResult("CFG_X")
        assert runner.captured == []
        assert prober.results["CFG_X"] is result

    def test_missing_required_tool(self):
        prober = ToolchainProber(FakeRunner())

        with pytest.raises(RequiredToolMissingError) as excinfo:
            prober.probe("CFG_X", ["toolA", "toolB"], required=True)

        assert "toolA toolB" in str(excinfo.value)
        assert excinfo.value.exit_code == 1

    def test_probe_need(self):
        runner = FakeRunner(programs={"autoconf-2.13": "/usr/bin/autoconf-2.13"})

        result = ToolchainProber(runner).probe_need(
            "CFG_AUTOCONF213", "autoconf213", "autoconf2.13", "autoconf-2.13"
        )

        assert result.path == "/usr/bin/autoconf-2.13"


class TestProbeStore:
    """Test store side effects."""

    def test_result_stored(self, store):
        runner = FakeRunner(
            programs={"git": "/usr/bin/git"},
            outputs={("/usr/bin/git", "--version"): RunResult(0, "git version 2.43.0\n")},
        )

        ToolchainProber(runner, store).probe("CFG_GIT", ["git"])

        assert store.get("CFG_GIT") == "/usr/bin/git"

    def test_status_shows_version_note(self, store, caplog):
        runner = FakeRunner(
            programs={"git": "/usr/bin/git"},
            outputs={("/usr/bin/git", "--version"): RunResult(0, "git version 2.43.0\n")},
        )

        with caplog.at_level(logging.INFO, logger="confkit.config.store"):
            ToolchainProber(runner, store).probe("CFG_GIT", ["git"])

        assert "CFG_GIT              := /usr/bin/git (2.43.0)" in caplog.messages

    def test_miss_stored_as_empty(self, store):

        ToolchainProber(FakeRunner(), store).probe("CFG_CLANG", ["clang++"])

        assert "CFG_CLANG" in store
        assert store.get("CFG_CLANG") == ""

    def test_required_miss_stored_before_raising(self, store):

        with pytest.raises(RequiredToolMissingError):
            ToolchainProber(FakeRunner(), store).probe_need("CFG_GIT", "git")

        assert store.get("CFG_GIT", None) == ""


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
class TestProbeRealProcess:
    """Probe a real program on a temporary search path."""

    def test_undecodable_version_output(self, tmp_path, monkeypatch):
        tool = tmp_path / "weirdtool"
        tool.write_text("#!/bin/sh\nprintf 'weirdtool \\377\\376 1.2.3\\n'\n")
        tool.chmod(0o755)
        monkeypatch.setenv("PATH", f"{tmp_path}{os.pathsep}{os.environ.get('PATH', '')}")

        result = ToolchainProber(SubprocessRunner()).probe("CFG_WEIRD", ["weirdtool"])

        assert result.found
        assert result.path == str(tool)
        assert result.version == "1.2.3"
