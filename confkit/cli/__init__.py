"""
confkit CLI module.

This module provides the command-line interface for confkit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
