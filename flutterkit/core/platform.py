"""
Platform detection for FlutterKit.

Maps the running operating system onto the architecture key used by the
Flutter release manifests ('macos', 'linux' or 'windows').

Usage:
    from flutterkit.core.platform import resolve_architecture

    arch = resolve_architecture()
    print(f"Release manifest: releases_{arch}.json")
"""

import logging
import platform
from typing import Optional

logger = logging.getLogger(__name__)

SUPPORTED_ARCHITECTURES = ("macos", "linux", "windows")

_SYSTEM_TO_ARCH = {
    "darwin": "macos",
    "linux": "linux",
    "windows": "windows",
}


def _current_system(system: Optional[str]) -> str:
    if system is None:
        system = platform.system()
    return system.lower()


def resolve_architecture(system: Optional[str] = None) -> str:
    """
    Resolve the release manifest architecture key for an operating system.

    Any system other than Darwin or Linux maps to 'windows'. The manifest API
    only publishes these three indexes, so there is no error path.

    Args:
        system: OS identifier as reported by platform.system().
            If None, the running system is used.

    Returns:
        One of 'macos', 'linux', 'windows'

    Example:
        >>> resolve_architecture("Darwin")
        'macos'
        >>> resolve_architecture("FreeBSD")
        'windows'
    """
    name = _current_system(system)
    arch = _SYSTEM_TO_ARCH.get(name, "windows")

    if not is_known_system(name):
        logger.warning(
            f"Unrecognized operating system '{name}', using '{arch}' releases"
        )

    logger.debug(f"Resolved platform '{name}' to architecture '{arch}'")
    return arch


def is_known_system(system: Optional[str] = None) -> bool:
    """
    Check whether the operating system has its own release manifest.

    Args:
        system: OS identifier. If None, the running system is used.

    Returns:
        True for Darwin, Linux and Windows
    """
    return _current_system(system) in _SYSTEM_TO_ARCH


__all__ = [
    "SUPPORTED_ARCHITECTURES",
    "resolve_architecture",
    "is_known_system",
]
