"""
Entry point for running the confkit CLI as a module.

Usage: python -m confkit.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
