"""
Core functionality for FlutterKit.

This package contains the foundational modules that other components depend on.
"""

from .config import (
    InstallerConfig,
    load_config,
)

from .platform import (
    SUPPORTED_ARCHITECTURES,
    resolve_architecture,
)

from .tool_cache import (
    ToolCache,
)

from .task import (
    TaskPublisher,
    RESULT_SUCCEEDED,
    RESULT_FAILED,
)

from .exceptions import (
    FlutterKitError,
    InputError,
    ConfigError,
    NetworkError,
    DownloadError,
    ParseError,
    SelectionError,
    ExtractError,
    CacheError,
    CacheInconsistencyError,
    CacheLockTimeout,
)

__all__ = [
    "InstallerConfig",
    "load_config",
    "SUPPORTED_ARCHITECTURES",
    "resolve_architecture",
    "ToolCache",
    "TaskPublisher",
    "RESULT_SUCCEEDED",
    "RESULT_FAILED",
    "FlutterKitError",
    "InputError",
    "ConfigError",
    "NetworkError",
    "DownloadError",
    "ParseError",
    "SelectionError",
    "ExtractError",
    "CacheError",
    "CacheInconsistencyError",
    "CacheLockTimeout",
]
