"""
Configuration store for confkit.

Accumulates resolved settings and computed facts as ordered NAME/VALUE
pairs and persists them as a make-includable artifact, one
``NAME ?= VALUE`` line per entry in insertion order.

Persistence is change-detecting: the artifact is only rewritten when
its bytes would differ, and a rewritten artifact is marked read-only to
signal that it is generated.

Usage:
    from confkit.config.store import ConfigurationStore

    store = ConfigurationStore()
    store.put("CFG_OSTYPE", "linux")
    store.persist(Path("config.mk"))
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from confkit.core.filesystem import atomic_write, make_read_only, move_if_changed

logger = logging.getLogger(__name__)

# Values longer than this are elided in status output (stored in full)
DISPLAY_LIMIT = 35

# Width of the name column in status output
NAME_WIDTH = 20


def format_status_line(name: str, value: str, note: str = "") -> str:
    """
    Format the status line echoed when a setting is stored.

    Args:
        name: Setting name
        value: Setting value
        note: Optional trailing note (e.g., a detected version)

    Returns:
        Status line without the 'configure:' tag

    Example:
        >>> format_status_line("CFG_GIT", "/usr/bin/git", "(2.43.0)")
        'CFG_GIT              := /usr/bin/git (2.43.0)'
    """
    if len(value) > DISPLAY_LIMIT:
        return f"{name:<{NAME_WIDTH}} := {value[:DISPLAY_LIMIT]} ..."
    return f"{name:<{NAME_WIDTH}} := {value} {note}".rstrip()


class ConfigurationStore:
    """
    Ordered mapping from setting name to final string value.

    Re-putting an existing name replaces its value but keeps its
    original position, so the artifact order is first-insertion order.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}

    def put(self, name: str, value: object = "", note: str = "") -> None:
        """
        Store a value and echo a status line.

        Args:
            name: Setting name (e.g., 'CFG_RUSTC')
            value: Value; converted to a single-line string
            note: Optional note shown after the value in status output
        """
        text = "" if value is None else " ".join(str(value).splitlines())
        self._entries[name] = text
        logger.info(format_status_line(name, text, note))

    def get(self, name: str, default: str = "") -> str:
        """Get a stored value, or default if absent."""
        return self._entries.get(name, default)

    def items(self) -> List[Tuple[str, str]]:
        """All entries in insertion order."""
        return list(self._entries.items())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def render(self) -> str:
        """
        Render the artifact content.

        Returns:
            One ``NAME ?= VALUE`` line per entry, newline terminated
        """
        return "".join(f"{name} ?= {value}\n" for name, value in self._entries.items())

    def persist(self, path: Union[str, Path]) -> bool:
        """
        Write the artifact only if its content would change.

        Args:
            path: Artifact path

        Returns:
            True if the file was written (and marked read-only)
        """
        path = Path(path)
        content = self.render().encode("utf-8")

        if path.is_file() and path.read_bytes() == content:
            logger.info(f"leaving {path} unchanged")
            return False

        logger.info(f"writing {path}")
        atomic_write(path, content)
        make_read_only(path)
        return True

    def stage(self, tmp_path: Union[str, Path]) -> Path:
        """
        Write the artifact unconditionally to a temporary path.

        Args:
            tmp_path: Staging file path

        Returns:
            The staging path
        """
        tmp_path = Path(tmp_path)
        logger.debug(f"Staging configuration in {tmp_path}")
        atomic_write(tmp_path, self.render().encode("utf-8"))
        return tmp_path

    def commit(self, tmp_path: Union[str, Path], final_path: Union[str, Path]) -> bool:
        """
        Stage into tmp_path, then move it over final_path if content differs.

        When nothing changed the final artifact keeps its modification
        time and the staging file is left for the caller to remove.

        Args:
            tmp_path: Staging file path
            final_path: Artifact path

        Returns:
            True if final_path was replaced (and marked read-only)
        """
        self.stage(tmp_path)
        return move_if_changed(tmp_path, final_path)

    def __repr__(self) -> str:
        return f"ConfigurationStore({len(self._entries)} entries)"


__all__ = [
    "DISPLAY_LIMIT",
    "ConfigurationStore",
    "format_status_line",
]
