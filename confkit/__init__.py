"""
confkit - pre-build configuration resolver for multi-module native projects.
"""

__version__ = "0.1.0"
