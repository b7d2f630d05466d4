"""
Configuration storage and project manifest.
"""

from confkit.config.store import ConfigurationStore, format_status_line

__all__ = [
    "ConfigurationStore",
    "format_status_line",
]
