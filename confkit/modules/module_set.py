"""
Module set computation for confkit.

The project is made of many independently configurable sub-projects
("modules"). Which modules are configured depends on the host platform:
a fixed base list is always present, and Darwin and Linux each prepend
their own platform-specific modules.

Per-module special cases (a configure script in a non-standard
location, extra configure arguments, a generator step) are data in a
table rather than conditionals in the configurator.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from confkit.core.platform import Platform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleSpec:
    """
    Special-case entry for a module.

    Attributes:
        configure_entry_override: Configure script path relative to the
            module's source directory, when it is not ``configure``
        extra_args: Arguments always passed to the module's configure script
        autoconf_dir: Directory (relative to the module's source directory)
            in which configure must be regenerated with autoconf 2.13
    """

    configure_entry_override: Optional[str] = None
    extra_args: Tuple[str, ...] = ()
    autoconf_dir: Optional[str] = None


@dataclass(frozen=True)
class Module:
    """
    A module scheduled for configuration.

    Attributes:
        name: Module name; also its directory name under src/
        configure_entry_override: Non-standard configure script location
        extra_args: Module-specific configure arguments
        autoconf_dir: Directory needing autoconf 2.13 regeneration, if any
    """

    name: str
    configure_entry_override: Optional[str] = None
    extra_args: Tuple[str, ...] = ()
    autoconf_dir: Optional[str] = None

    @classmethod
    def from_spec(cls, name: str, spec: Optional[ModuleSpec] = None) -> "Module":
        spec = spec or ModuleSpec()
        return cls(
            name=name,
            configure_entry_override=spec.configure_entry_override,
            extra_args=tuple(spec.extra_args),
            autoconf_dir=spec.autoconf_dir,
        )


DEFAULT_BASE_MODULES: Tuple[str, ...] = (
    "libwapcaplet",
    "rust-wapcaplet",
    "rust-harfbuzz",
    "rust-opengles",
    "skia",
    "rust-azure",
    "rust-cairo",
    "rust-stb-image",
    "rust-geom",
    "rust-glut",
    "rust-layers",
    "rust-http-client",
    "libparserutils",
    "libhubbub",
    "libcss",
    "rust-netsurfcss",
    "rust-css",
    "rust-hubbub",
    "sharegl",
    "rust-mozjs",
    "mozjs",
)

DEFAULT_PLATFORM_MODULES: Dict[Platform, Tuple[str, ...]] = {
    Platform.DARWIN: (
        "rust-cocoa",
        "rust-io-surface",
        "rust-core-foundation",
        "rust-core-graphics",
        "rust-core-text",
    ),
    Platform.LINUX: (
        "rust-freetype",
        "rust-fontconfig",
        "rust-xlib",
    ),
}

DEFAULT_SPECIAL_MODULES: Dict[str, ModuleSpec] = {
    # SpiderMonkey keeps its configure inside the js/src component
    "mozjs": ModuleSpec(
        configure_entry_override="js/src/configure",
        autoconf_dir="js/src",
    ),
    "rust-azure": ModuleSpec(extra_args=("--enable-cairo", "--enable-skia")),
}


@dataclass
class ModuleLayout:
    """
    Everything needed to compute a module set.

    Attributes:
        base: Modules configured on every platform
        platform_prefixes: Modules prepended on specific platforms
        special: Special-case table keyed by module name
    """

    base: List[str] = field(default_factory=lambda: list(DEFAULT_BASE_MODULES))
    platform_prefixes: Dict[Platform, List[str]] = field(
        default_factory=lambda: {
            tag: list(names) for tag, names in DEFAULT_PLATFORM_MODULES.items()
        }
    )
    special: Dict[str, ModuleSpec] = field(
        default_factory=lambda: dict(DEFAULT_SPECIAL_MODULES)
    )


def _unique(names: Sequence[str]) -> List[str]:
    seen = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


def build_module_set(
    platform: Platform, layout: Optional[ModuleLayout] = None
) -> List[Module]:
    """
    Compute the ordered list of modules to configure.

    The platform prefix (Darwin or Linux only) comes first, followed by
    the base list. No existence checks are made here.

    Args:
        platform: Host platform
        layout: Module layout (built-in defaults if None)

    Returns:
        Ordered list of modules without duplicates

    Example:
        >>> [m.name for m in build_module_set(Platform.LINUX)][:3]
        ['rust-freetype', 'rust-fontconfig', 'rust-xlib']
    """
    layout = layout or ModuleLayout()
    prefix = layout.platform_prefixes.get(platform, [])
    names = _unique(list(prefix) + list(layout.base))

    logger.debug(
        f"Module set for {platform.value}: {len(prefix)} platform modules, "
        f"{len(names)} total"
    )
    return [Module.from_spec(name, layout.special.get(name)) for name in names]


__all__ = [
    "ModuleSpec",
    "Module",
    "ModuleLayout",
    "DEFAULT_BASE_MODULES",
    "DEFAULT_PLATFORM_MODULES",
    "DEFAULT_SPECIAL_MODULES",
    "build_module_set",
]
