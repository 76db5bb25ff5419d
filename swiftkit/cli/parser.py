"""
SwiftKit CLI argument parser.

This module implements the command-line interface for SwiftKit using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from swiftkit import __version__

logger = logging.getLogger(__name__)


class CLI:
    """SwiftKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="swiftkit",
            description="SwiftKit - verified Swift toolchain installer",
            epilog='Use "swiftkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"SwiftKit {__version__}"
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
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./swiftkit.yaml)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Toolchain cache directory (default: ~/.swiftkit)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_list_command(subparsers)
        self._add_remove_command(subparsers)
        self._add_url_command(subparsers)

        return parser

    @staticmethod
    def _add_system_arguments(parser, with_version: bool = True):
        parser.add_argument(
            "--system",
            metavar="NAME",
            help="Target system name (default: detected distribution, e.g. ubuntu)",
        )
        if with_version:
            parser.add_argument(
                "--system-version",
                metavar="VERSION",
                help="Target system release (default: detected, e.g. 20.04)",
            )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a Swift toolchain",
            description="Download, verify and cache a Swift toolchain, "
            "then add it to PATH",
        )
        parser.add_argument(
            "swift_version", metavar="VERSION", help="Swift version (e.g., 5.9)"
        )
        self._add_system_arguments(parser)
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reinstall even if the toolchain is already cached",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        parser = subparsers.add_parser(
            "list",
            help="List cached toolchains",
            description="List Swift versions present in the cache",
        )
        self._add_system_arguments(parser, with_version=False)

    def _add_remove_command(self, subparsers):
        """Add 'remove' subcommand."""
        parser = subparsers.add_parser(
            "remove",
            help="Remove a cached toolchain",
            description="Remove a Swift version from the cache",
        )
        parser.add_argument("swift_version", metavar="VERSION", help="Swift version")
        self._add_system_arguments(parser, with_version=False)

    def _add_url_command(self, subparsers):
        """Add 'url' subcommand."""
        parser = subparsers.add_parser(
            "url",
            help="Show download URLs",
            description="Print the archive name and download URLs for a release",
        )
        parser.add_argument("swift_version", metavar="VERSION", help="Swift version")
        parser.add_argument(
            "--system-version",
            required=True,
            metavar="VERSION",
            help="Target system release (e.g., 20.04)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
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
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "swiftkit.cli.commands.install",
            "list": "swiftkit.cli.commands.list_cmd",
            "remove": "swiftkit.cli.commands.remove",
            "url": "swiftkit.cli.commands.url",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
