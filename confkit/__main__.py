"""
Entry point for running confkit as a module.

Usage: python -m confkit [options]
"""

from confkit.cli.parser import main

if __name__ == "__main__":
    main()
