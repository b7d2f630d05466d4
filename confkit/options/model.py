"""
Option model for confkit.

Options are declared before argument resolution begins, either as
boolean toggles or as valued settings:

- A boolean whose default is off is switched on with ``--enable-NAME``;
  a boolean whose default is on is switched off with ``--disable-NAME``.
  Only the flag matching the default polarity is recognized.
- A valued setting is given as ``--NAME=VALUE``; the last occurrence wins.

Arguments that match no declaration are ignored so that newer build
scripts can pass options an older configure does not know yet.

Usage:
    from confkit.options.model import OptionModel

    model = OptionModel()
    model.declare_boolean("optimize", True, "build optimized rust code")
    model.declare_valued("local-rust-root", "", "set prefix for local rust binary")

    options = model.resolve(["--disable-optimize"], store)
    options.enabled("optimize")  # False
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Union

from confkit.config.store import ConfigurationStore

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")

# Column width of the flag in help output
HELP_FLAG_WIDTH = 30


class SettingKind(Enum):
    """Kinds of declared options."""

    BOOLEAN = "boolean"
    VALUED = "valued"


@dataclass(frozen=True)
class Setting:
    """
    A declared option and, once resolved, its value.

    Attributes:
        name: Unique lower-case option name (e.g., 'optimize-cxx')
        kind: BOOLEAN or VALUED
        default: Default state (bool) for booleans, default string for valued
        description: One-line help text
        value: Resolved value; for booleans '1' if the override flag was
            given and '' otherwise, for valued settings the string payload.
            None until resolved.
    """

    name: str
    kind: SettingKind
    default: Union[bool, str]
    description: str = ""
    value: Optional[str] = None

    @property
    def flag(self) -> str:
        """Command-line flag without the leading dashes."""
        if self.kind is SettingKind.BOOLEAN:
            prefix = "disable" if self.default else "enable"
            return f"{prefix}-{self.name}"
        return self.name

    @property
    def variable(self) -> str:
        """
        Configuration variable name.

        Example:
            'optimize-cxx' (default on) -> 'CFG_DISABLE_OPTIMIZE_CXX'
            'local-rust-root'           -> 'CFG_LOCAL_RUST_ROOT'
        """
        return "CFG_" + self.flag.upper().replace("-", "_")

    @property
    def resolved(self) -> bool:
        return self.value is not None

    @property
    def overridden(self) -> bool:
        """True if a boolean's override flag was present on the command line."""
        return self.kind is SettingKind.BOOLEAN and self.value == "1"

    @property
    def enabled(self) -> bool:
        """Effective state of a boolean after applying any override."""
        if self.kind is not SettingKind.BOOLEAN:
            raise TypeError(f"Option '{self.name}' is not a boolean")
        return bool(self.default) != self.overridden

    def help_line(self) -> str:
        """Usage line for help output."""
        if self.kind is SettingKind.BOOLEAN:
            flag = self.flag
            doc = f"don't {self.description}" if self.default else self.description
        else:
            shown = self.default or "<none>"
            flag = f"{self.name}=[{shown}]"
            doc = self.description
        return f"    --{flag:<{HELP_FLAG_WIDTH}} {doc}".rstrip()


class ResolvedOptions(Mapping):
    """Read-only view of resolved settings, keyed by option name."""

    def __init__(self, settings: Dict[str, Setting]):
        self._settings = MappingProxyType(dict(settings))

    def __getitem__(self, name: str) -> Setting:
        return self._settings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    def enabled(self, name: str) -> bool:
        """Effective state of a boolean option."""
        return self._settings[name].enabled

    def value(self, name: str) -> str:
        """Resolved string value of an option."""
        return self._settings[name].value or ""


class OptionModel:
    """Registry of declared options; resolves them against raw arguments."""

    def __init__(self):
        self._declared: Dict[str, Setting] = {}

    def _declare(self, setting: Setting) -> Setting:
        if not _NAME_PATTERN.match(setting.name):
            raise ValueError(f"Invalid option name: '{setting.name}'")
        if setting.name in self._declared:
            raise ValueError(f"Option '{setting.name}' is already declared")
        self._declared[setting.name] = setting
        return setting

    def declare_boolean(
        self, name: str, default_enabled: bool, description: str = ""
    ) -> Setting:
        """
        Declare a boolean toggle.

        Args:
            name: Option name (case-normalized to lower case)
            default_enabled: Default state; decides whether the recognized
                flag is --enable-NAME (default off) or --disable-NAME (default on)
            description: Help text, phrased for the enabled state

        Returns:
            The declared (unresolved) Setting

        Raises:
            ValueError: If the name is invalid or already declared
        """
        return self._declare(
            Setting(
                name=name.lower(),
                kind=SettingKind.BOOLEAN,
                default=bool(default_enabled),
                description=description,
            )
        )

    def declare_valued(
        self, name: str, default_value: str = "", description: str = ""
    ) -> Setting:
        """
        Declare a valued setting given as --NAME=VALUE.

        Args:
            name: Option name (case-normalized to lower case)
            default_value: Value used when the option is absent
            description: Help text

        Returns:
            The declared (unresolved) Setting

        Raises:
            ValueError: If the name is invalid or already declared
        """
        return self._declare(
            Setting(
                name=name.lower(),
                kind=SettingKind.VALUED,
                default=default_value or "",
                description=description,
            )
        )

    def settings(self) -> List[Setting]:
        """Declared settings in declaration order."""
        return list(self._declared.values())

    def resolve(
        self,
        raw_args: Sequence[str],
        store: Optional[ConfigurationStore] = None,
    ) -> ResolvedOptions:
        """
        Resolve every declared option against the raw argument list.

        Each resolved setting is appended to the store (if given) under
        its configuration variable name, in declaration order.

        Args:
            raw_args: Command-line arguments
            store: Configuration store receiving the resolved values

        Returns:
            Read-only mapping of option name to resolved Setting
        """
        resolved: Dict[str, Setting] = {}

        for setting in self._declared.values():
            if setting.kind is SettingKind.BOOLEAN:
                flag = f"--{setting.flag}"
                value = "1" if any(arg == flag for arg in raw_args) else ""
            else:
                prefix = f"--{setting.name}="
                value = str(setting.default)
                for arg in raw_args:
                    if arg.startswith(prefix):
                        value = arg[len(prefix):]

            resolved[setting.name] = replace(setting, value=value)
            logger.debug(f"Resolved option {setting.name} = '{value}'")

            if store is not None:
                store.put(setting.variable, value)

        return ResolvedOptions(resolved)

    def render_help(self, program: str = "configure") -> str:
        """
        Render the usage listing instead of resolving.

        Args:
            program: Program name shown in the usage line

        Returns:
            Multi-line help text
        """
        lines = [
            "",
            f"Usage: {program} [options]",
            "",
            "Options:",
            "",
        ]
        lines.extend(setting.help_line() for setting in self._declared.values())
        lines.append("")
        return "\n".join(lines) + "\n"

    def __contains__(self, name: object) -> bool:
        return name in self._declared

    def __len__(self) -> int:
        return len(self._declared)


__all__ = [
    "SettingKind",
    "Setting",
    "ResolvedOptions",
    "OptionModel",
]
