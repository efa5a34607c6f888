"""
Shared utilities for CLI commands.
"""

import logging
import sys
from typing import Optional

from flutterkit.core.config import InstallerConfig, load_config

logger = logging.getLogger(__name__)


def config_from_args(args) -> InstallerConfig:
    """
    Resolve the installer configuration for parsed command-line arguments.

    Flags that a command does not define are treated as not given.

    Raises:
        ConfigError: If the configuration is invalid
    """
    return load_config(
        config_file=getattr(args, "config", None),
        cache_root=getattr(args, "cache_dir", None),
        temp_root=getattr(args, "temp_dir", None),
        arch=getattr(args, "arch", None),
    )


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
