"""
Pytest configuration and shared fixtures for confkit tests.
"""

import os
from pathlib import Path

import pytest

from confkit.config.store import ConfigurationStore
from tests.fixtures.runners import FakeRunner, linux_runner


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def fake_runner() -> FakeRunner:
    """FakeRunner for a Linux host with every build tool installed."""
    return linux_runner()


@pytest.fixture
def store() -> ConfigurationStore:
    """Empty configuration store."""
    return ConfigurationStore()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Create a minimal project source tree.

    Layout:
        Makefile.in
        src/rust-azure/configure
        src/mozjs/js/src/configure
        src/rust-geom/            (no configure script)
    """
    root = tmp_path / "servo"
    root.mkdir()
    (root / "Makefile.in").write_text("include config.mk\n\nall:\n\t@echo built\n")

    azure = root / "src" / "rust-azure"
    azure.mkdir(parents=True)
    (azure / "configure").write_text("#!/bin/sh\nexit 0\n")

    mozjs = root / "src" / "mozjs" / "js" / "src"
    mozjs.mkdir(parents=True)
    (mozjs / "configure").write_text("#!/bin/sh\nexit 0\n")

    (root / "src" / "rust-geom").mkdir(parents=True)
    return root


@pytest.fixture
def build_tree(tmp_path: Path) -> Path:
    """Empty build directory next to the source tree."""
    build = tmp_path / "build"
    build.mkdir()
    return build


@pytest.fixture
def umask_022():
    """Run the test under umask 022, restoring the previous umask after."""
    previous = os.umask(0o022)
    yield
    os.umask(previous)
