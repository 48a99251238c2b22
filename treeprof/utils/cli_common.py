"""
Common CLI utilities shared across command-line interfaces.

This module keeps logging setup, parser creation and argument validation
consistent between treeprof commands.
"""

import argparse
import logging
from typing import Optional

from .. import config


def setup_logging() -> None:
    """
    Configure logging for CLI usage.

    Sets up a standard logging configuration with timestamp, level, and message
    formatting. Logging goes to stderr so it never mixes with a report on stdout.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )


class BaseArgumentParser:
    """
    Base argument parser class that provides common CLI argument patterns.
    """

    @staticmethod
    def create_base_parser(prog: str, description: str, epilog: Optional[str] = None) -> argparse.ArgumentParser:
        """
        Create a base argument parser with standard configuration.

        Args:
            prog: Program name for the parser
            description: Description of the command
            epilog: Optional epilog text with examples

        Returns:
            Configured ArgumentParser instance
        """
        return argparse.ArgumentParser(
            prog=prog,
            description=description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=epilog
        )

    @staticmethod
    def add_report_arguments(parser: argparse.ArgumentParser) -> None:
        """
        Add report threshold and clock arguments.

        Args:
            parser: ArgumentParser to add arguments to
        """
        parser.add_argument(
            "--filter",
            type=float,
            default=config.DEFAULT_FILTER_MS,
            help=f"Hide entries below this many milliseconds (default: {config.DEFAULT_FILTER_MS})"
        )
        parser.add_argument(
            "--clock",
            choices=sorted(config.get_supported_clocks()),
            default=config.DEFAULT_CLOCK,
            help=f"Clock used for measurements (default: {config.DEFAULT_CLOCK})"
        )

    @staticmethod
    def add_verbose_quiet_arguments(parser: argparse.ArgumentParser) -> None:
        """
        Add verbose and quiet logging arguments.

        Args:
            parser: ArgumentParser to add arguments to
        """
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )


def validate_common_arguments(args: argparse.Namespace) -> bool:
    """
    Validate common argument patterns.

    Args:
        args: Parsed arguments namespace

    Returns:
        True if arguments are valid, False otherwise
    """
    if getattr(args, 'verbose', False) and getattr(args, 'quiet', False):
        logging.error("--verbose and --quiet cannot be used together")
        return False

    if getattr(args, 'filter', None) is not None and args.filter < 0:
        logging.error("--filter must not be negative")
        return False

    return True


def configure_logging_level(args: argparse.Namespace) -> None:
    """
    Configure logging level based on verbose/quiet arguments.

    Args:
        args: Parsed arguments with potential verbose/quiet flags
    """
    if getattr(args, 'quiet', False):
        logging.getLogger().setLevel(logging.WARNING)
    elif getattr(args, 'verbose', False):
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)
