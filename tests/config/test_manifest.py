"""
Tests for the project manifest loader.
"""

import pytest

from confkit.config.manifest import (
    DEFAULT_EXTRA_BUILD_DIRS,
    ProjectManifest,
    load_manifest,
    parse_manifest,
)
from confkit.core.exceptions import ManifestError
from confkit.core.platform import Platform
from confkit.modules.module_set import DEFAULT_BASE_MODULES, ModuleSpec
from confkit.toolchain.selection import DEFAULT_CLANG_VERSIONS


class TestLoadManifest:
    """Test load_manifest()."""

    def test_missing_file_gives_defaults(self, tmp_path):
        manifest = load_manifest(tmp_path / "confkit.yaml")

        assert manifest == ProjectManifest()
        assert manifest.layout.base == list(DEFAULT_BASE_MODULES)
        assert manifest.extra_build_dirs == DEFAULT_EXTRA_BUILD_DIRS

    def test_none_gives_defaults(self):
        assert load_manifest(None).clang_versions == list(DEFAULT_CLANG_VERSIONS)

    def test_missing_required_file(self, tmp_path):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "nope.yaml", required=True)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "confkit.yaml"
        path.write_text("")

        assert load_manifest(path) == ProjectManifest()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "confkit.yaml"
        path.write_text("modules: [unclosed\n")

        with pytest.raises(ManifestError, match="Invalid YAML"):
            load_manifest(path)

    def test_full_manifest(self, tmp_path):
        path = tmp_path / "confkit.yaml"
        path.write_text(
            """
modules:
  base:
    - libfoo
    - rust-foo
  platforms:
    linux: [rust-x11]
    freebsd: [rust-bsd]
  special:
    libfoo:
      configure: build/configure
      args: [--static]
extra_build_dirs:
  - src/generated
clang_versions: ["3.1", "3.2"]
"""
        )

        manifest = load_manifest(path)

        assert manifest.layout.base == ["libfoo", "rust-foo"]
        assert manifest.layout.platform_prefixes == {
            Platform.LINUX: ["rust-x11"],
            Platform.FREEBSD: ["rust-bsd"],
        }
        assert manifest.layout.special["libfoo"] == ModuleSpec(
            configure_entry_override="build/configure", extra_args=("--static",)
        )
        assert manifest.extra_build_dirs == ["src/generated"]
        assert manifest.clang_versions == ["3.1", "3.2"]


class TestParseManifest:
    """Test parse_manifest() validation."""

    def test_special_entries_extend_builtin_table(self):
        manifest = parse_manifest(
            {"modules": {"special": {"skia": {"args": ["--no-gpu"]}}}}
        )

        assert manifest.layout.special["skia"].extra_args == ("--no-gpu",)
        assert manifest.layout.special["mozjs"].configure_entry_override == (
            "js/src/configure"
        )

    def test_special_entry_can_replace_builtin(self):
        manifest = parse_manifest(
            {"modules": {"special": {"mozjs": {"configure": "configure"}}}}
        )

        assert manifest.layout.special["mozjs"] == ModuleSpec(
            configure_entry_override="configure"
        )

    def test_numeric_versions_become_strings(self):
        manifest = parse_manifest({"clang_versions": [3.1, "4.0"]})

        assert manifest.clang_versions == ["3.1", "4.0"]

    def test_platform_with_null_list(self):
        manifest = parse_manifest({"modules": {"platforms": {"darwin": None}}})

        assert manifest.layout.platform_prefixes == {Platform.DARWIN: []}

    @pytest.mark.parametrize(
        "data, message",
        [
            (["not", "a", "mapping"], "must be a mapping"),
            ({"modules": ["x"]}, "modules must be a mapping"),
            ({"modules": {"base": "libfoo"}}, "modules.base must be a list"),
            ({"modules": {"base": [{"a": 1}]}}, "entries must be strings"),
            ({"modules": {"platforms": {"windows": []}}}, "Invalid platform"),
            ({"modules": {"special": []}}, "modules.special must be a mapping"),
            ({"modules": {"special": {"x": "y"}}}, "modules.special.x must be a mapping"),
            ({"modules": {"special": {"x": {"cflags": "-O2"}}}}, "Unknown keys"),
            (
                {"modules": {"special": {"x": {"configure": 5}}}},
                "modules.special.x.configure must be a non-empty string",
            ),
            (
                {"modules": {"special": {"x": {"autoconf_dir": ["js"]}}}},
                "modules.special.x.autoconf_dir must be a non-empty string",
            ),
            (
                {"modules": {"special": {"x": {"configure": ""}}}},
                "must be a non-empty string",
            ),
            ({"extra_build_dirs": "src/x"}, "extra_build_dirs must be a list"),
            ({"clang_versions": []}, "must not be empty"),
        ],
    )
    def test_invalid_manifests(self, data, message):
        with pytest.raises(ManifestError, match=message):
            parse_manifest(data)

    def test_defaults_not_shared_between_manifests(self):
        first = parse_manifest({})
        first.layout.base.append("extra")
        first.extra_build_dirs.append("extra")

        second = parse_manifest({})
        assert "extra" not in second.layout.base
        assert "extra" not in second.extra_build_dirs
