"""
Directory resolution for FlutterKit.

Global Cache (~/.flutterkit/ or %USERPROFILE%\\.flutterkit\\):
    - tools/   : Tool cache, laid out as <name>/<version>/<arch>/
    - temp/    : Download and extraction scratch space (when no agent temp
                 directory is available)
"""

import os
from pathlib import Path

from flutterkit.core.exceptions import ConfigError


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global FlutterKit directory.

    Returns:
        Path: The global directory path.
            - Windows: %USERPROFILE%\\.flutterkit
            - Linux/macOS: ~/.flutterkit/

    Raises:
        ConfigError: If USERPROFILE is not set on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".flutterkit"
    return Path.home() / ".flutterkit"


def get_default_cache_root() -> Path:
    """Default root of the tool cache."""
    return get_global_cache_dir() / "tools"


def get_default_temp_root() -> Path:
    """Default root for downloads and extraction folders."""
    return get_global_cache_dir() / "temp"


__all__ = [
    "get_global_cache_dir",
    "get_default_cache_root",
    "get_default_temp_root",
]
