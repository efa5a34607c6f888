"""
FlutterKit CLI argument parser.

This module implements the command-line interface for FlutterKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from flutterkit.core.platform import SUPPORTED_ARCHITECTURES

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("flutterkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """FlutterKit command-line interface."""

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
            prog="flutterkit",
            description="FlutterKit - Flutter SDK installer for build agents",
            epilog='Use "flutterkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"FlutterKit {__version__}"
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
            help="Path to configuration file (default: ./flutterkit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_releases_command(subparsers)
        self._add_cache_command(subparsers)

        return parser

    @staticmethod
    def _add_arch_argument(parser):
        parser.add_argument(
            "--arch",
            choices=SUPPORTED_ARCHITECTURES,
            metavar="ARCH",
            help=(
                f"Release architecture ({'|'.join(SUPPORTED_ARCHITECTURES)}) "
                "[default: host]"
            ),
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a Flutter SDK release",
            description=(
                "Install a Flutter SDK release into the tool cache and publish "
                "its bin directory as FlutterToolPath. Channel and version "
                "default to the INPUT_CHANNEL and INPUT_VERSION task inputs."
            ),
        )
        parser.add_argument(
            "--channel",
            metavar="NAME",
            help="Release channel (e.g., stable, beta)",
        )
        parser.add_argument(
            "--version",
            "--sdk-version",
            dest="sdk_version",
            metavar="VERSION",
            help="SDK version to install, or 'latest'",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache directory (default: ~/.flutterkit/tools)",
        )
        parser.add_argument(
            "--temp-dir",
            type=Path,
            metavar="PATH",
            help="Directory for downloads and extraction",
        )
        self._add_arch_argument(parser)

    def _add_releases_command(self, subparsers):
        """Add 'releases' subcommand."""
        parser = subparsers.add_parser(
            "releases",
            help="List available Flutter releases",
            description="List releases published in the Flutter release manifest",
        )
        parser.add_argument(
            "--channel",
            metavar="NAME",
            help="Only list releases of this channel",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=10,
            metavar="N",
            help="Maximum number of releases to list (default: 10, 0 for all)",
        )
        self._add_arch_argument(parser)

    def _add_cache_command(self, subparsers):
        """Add 'cache' subcommand."""
        parser = subparsers.add_parser(
            "cache",
            help="List cached Flutter versions",
            description="List Flutter versions present in the tool cache",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache directory (default: ~/.flutterkit/tools)",
        )
        self._add_arch_argument(parser)

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
            "install": "flutterkit.cli.commands.install",
            "releases": "flutterkit.cli.commands.releases",
            "cache": "flutterkit.cli.commands.cache",
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
