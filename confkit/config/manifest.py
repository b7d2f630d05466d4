"""YAML project manifest for confkit.

This module parses the optional confkit.yaml file at the root of the
source tree. The manifest can replace the module lists, extend the
per-module special-case table, list extra build directories and change
the accepted clang versions. Without a manifest the built-in project
definition is used.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from confkit.core.exceptions import ManifestError
from confkit.core.platform import Platform
from confkit.modules.module_set import ModuleLayout, ModuleSpec
from confkit.toolchain.selection import DEFAULT_CLANG_VERSIONS

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "confkit.yaml"

DEFAULT_EXTRA_BUILD_DIRS = ["src/servo-gfx", "src/test/ref"]


@dataclass
class ProjectManifest:
    """Complete project definition."""

    layout: ModuleLayout = field(default_factory=ModuleLayout)
    extra_build_dirs: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXTRA_BUILD_DIRS)
    )
    clang_versions: List[str] = field(
        default_factory=lambda: list(DEFAULT_CLANG_VERSIONS)
    )


def load_manifest(manifest_path: Optional[Path], required: bool = False) -> ProjectManifest:
    """
    Load the project manifest.

    Args:
        manifest_path: Path to confkit.yaml (None for built-in defaults)
        required: If True, a missing file is an error

    Returns:
        Parsed manifest, or the built-in defaults if the file is absent

    Raises:
        ManifestError: If the manifest is missing (when required) or invalid
    """
    if manifest_path is None or not manifest_path.exists():
        if required:
            raise ManifestError(f"Manifest not found: {manifest_path}")
        logger.debug(f"No manifest at {manifest_path}, using built-in project")
        return ProjectManifest()

    logger.debug(f"Loading manifest from {manifest_path}")
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {manifest_path}: {e}")

    return parse_manifest(data or {})


def parse_manifest(data: dict) -> ProjectManifest:
    """Parse and validate manifest data."""
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a mapping")

    manifest = ProjectManifest()

    modules = data.get("modules", {})
    if not isinstance(modules, dict):
        raise ManifestError("modules must be a mapping")

    if "base" in modules:
        manifest.layout.base = _string_list(modules["base"], "modules.base")

    if "platforms" in modules:
        manifest.layout.platform_prefixes = _parse_platforms(modules["platforms"])

    if "special" in modules:
        special = modules["special"]
        if not isinstance(special, dict):
            raise ManifestError("modules.special must be a mapping")
        for name, spec_data in special.items():
            manifest.layout.special[str(name)] = _parse_special(name, spec_data)

    if "extra_build_dirs" in data:
        manifest.extra_build_dirs = _string_list(
            data["extra_build_dirs"], "extra_build_dirs"
        )

    if "clang_versions" in data:
        manifest.clang_versions = _string_list(
            data["clang_versions"], "clang_versions"
        )
        if not manifest.clang_versions:
            raise ManifestError("clang_versions must not be empty")

    return manifest


def _string_list(value, key: str) -> List[str]:
    """Validate a list of scalars and return it as strings."""
    if not isinstance(value, list):
        raise ManifestError(f"{key} must be a list")
    for item in value:
        if isinstance(item, (dict, list)) or item is None:
            raise ManifestError(f"{key} entries must be strings")
    return [str(item) for item in value]


def _parse_platforms(data) -> Dict[Platform, List[str]]:
    """Parse per-platform module prefixes."""
    if not isinstance(data, dict):
        raise ManifestError("modules.platforms must be a mapping")

    valid = {tag.value: tag for tag in Platform}
    prefixes: Dict[Platform, List[str]] = {}
    for key, names in data.items():
        if key not in valid:
            raise ManifestError(
                f"Invalid platform in modules.platforms: {key} "
                f"(expected one of {sorted(valid)})"
            )
        prefixes[valid[key]] = _string_list(names or [], f"modules.platforms.{key}")
    return prefixes


def _parse_special(name, data) -> ModuleSpec:
    """Parse one special-case entry."""
    if not isinstance(data, dict):
        raise ManifestError(f"modules.special.{name} must be a mapping")

    unknown = set(data) - {"configure", "args", "autoconf_dir"}
    if unknown:
        raise ManifestError(
            f"Unknown keys in modules.special.{name}: {', '.join(sorted(unknown))}"
        )

    args = _string_list(data.get("args", []), f"modules.special.{name}.args")
    return ModuleSpec(
        configure_entry_override=_optional_path(data, "configure", name),
        extra_args=tuple(args),
        autoconf_dir=_optional_path(data, "autoconf_dir", name),
    )


def _optional_path(data: dict, key: str, name) -> Optional[str]:
    """Validate an optional relative path entry of a special-case table."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ManifestError(f"modules.special.{name}.{key} must be a non-empty string")
    return value


__all__ = [
    "MANIFEST_FILE_NAME",
    "DEFAULT_EXTRA_BUILD_DIRS",
    "ProjectManifest",
    "load_manifest",
    "parse_manifest",
]
