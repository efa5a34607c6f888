"""
Flutter SDK installation.
"""

from .installer import (
    FLUTTER_EXE_RELATIVEPATH,
    FLUTTER_TOOL_PATH_ENV_VAR,
    InstallRequest,
    InstallResult,
    FlutterInstaller,
    run_task,
)

__all__ = [
    "FLUTTER_EXE_RELATIVEPATH",
    "FLUTTER_TOOL_PATH_ENV_VAR",
    "InstallRequest",
    "InstallResult",
    "FlutterInstaller",
    "run_task",
]
