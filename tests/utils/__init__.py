"""
Test utilities for FlutterKit testing.
"""

from .builders import (
    build_zip,
    build_tar_xz,
    has_command,
)

__all__ = ["build_zip", "build_tar_xz", "has_command"]
