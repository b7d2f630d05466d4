"""
Option model for confkit.

Declares recognized command-line options and resolves them into typed,
named settings.
"""

from confkit.options.defaults import default_option_model
from confkit.options.model import OptionModel, ResolvedOptions, Setting, SettingKind

__all__ = [
    "OptionModel",
    "ResolvedOptions",
    "Setting",
    "SettingKind",
    "default_option_model",
]
