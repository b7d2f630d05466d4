"""
confkit CLI argument parser.

This module implements the command-line interface using argparse. The
front-end options (directories, verbosity) are parsed here; everything
else is handed to the option model, which ignores what it does not
recognize.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from confkit.core.exceptions import ConfkitError
from confkit.options.defaults import default_option_model
from confkit.pipeline import ConfigurePipeline

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("confkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

PROG = "confkit"


class CLI:
    """confkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser for the front-end options.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog=PROG,
            description="confkit - pre-build configuration for multi-module projects",
            add_help=False,
            allow_abbrev=False,
        )

        parser.add_argument(
            "--help", action="store_true", help="Show the option listing and exit"
        )
        parser.add_argument(
            "--version", action="version", version=f"confkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--src-dir",
            type=Path,
            metavar="DIR",
            default=Path.cwd(),
            help="Source root directory (default: current directory)",
        )
        parser.add_argument(
            "--build-dir",
            type=Path,
            metavar="DIR",
            default=Path.cwd(),
            help="Build root directory (default: current directory)",
        )
        parser.add_argument(
            "--manifest",
            type=Path,
            metavar="PATH",
            help="Project manifest (default: <src-dir>/confkit.yaml)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Tuple of (parsed namespace, remaining arguments)
        """
        return self.parser.parse_known_args(args)

    def render_help(self) -> str:
        """Help listing: the configure options, then the front-end options."""
        model_help = default_option_model().render_help(PROG)
        lines = [model_help.rstrip("\n"), "", "Front-end options:", ""]
        for action in self.parser._actions:
            flags = ", ".join(action.option_strings)
            if action.metavar:
                flags = f"{flags}={action.metavar}"
            lines.append(f"    {flags:<32} {action.help or ''}".rstrip())
        lines.append("")
        return "\n".join(lines) + "\n"

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        argv = list(sys.argv[1:] if args is None else args)
        parsed_args, remaining = self.parse_args(argv)

        if parsed_args.help:
            sys.stdout.write(self.render_help())
            return 0

        self._configure_logging(parsed_args)

        try:
            pipeline = ConfigurePipeline(
                src_dir=parsed_args.src_dir,
                build_dir=parsed_args.build_dir,
                raw_args=remaining,
                configure_args=argv,
                manifest_path=parsed_args.manifest,
            )
            pipeline.run()
            return 0
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except ConfkitError as e:
            logger.error(f"error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return e.exit_code
        except OSError as e:
            logger.error(f"error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "configure: %(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "configure: %(message)s"
        else:
            level = logging.INFO
            format_str = "configure: %(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
