"""
Module set computation and per-module configuration.
"""

from confkit.modules.configurator import (
    ConfigureStatus,
    ModuleConfigurator,
    ModuleConfigureResult,
)
from confkit.modules.module_set import Module, ModuleLayout, ModuleSpec, build_module_set
from confkit.modules.submodules import SubmoduleManager

__all__ = [
    "ConfigureStatus",
    "ModuleConfigurator",
    "ModuleConfigureResult",
    "Module",
    "ModuleLayout",
    "ModuleSpec",
    "build_module_set",
    "SubmoduleManager",
]
