"""
Centralized exception hierarchy for FlutterKit.

Every failure raised by the install workflow derives from FlutterKitError so
the task runner can turn it into a single Failed result.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class FlutterKitError(Exception):
    """Base exception for all FlutterKit errors."""

    pass


class InputError(FlutterKitError):
    """Raised when a required task input is missing or blank."""

    def __init__(self, input_name: str):
        self.input_name = input_name
        super().__init__(f"Input required and not supplied: {input_name}")


class ConfigError(FlutterKitError):
    """Raised when the configuration file cannot be read or parsed."""

    pass


# ============================================================================
# Network and Manifest Exceptions
# ============================================================================


class NetworkError(FlutterKitError):
    """Raised when a remote resource cannot be fetched."""

    pass


class DownloadError(NetworkError):
    """Raised when an archive download fails."""

    pass


class ParseError(FlutterKitError):
    """Raised when the release manifest is not valid JSON of the expected shape."""

    pass


class SelectionError(FlutterKitError):
    """Raised when no release matches the requested channel and version."""

    def __init__(self, channel: str, version: str):
        self.channel = channel
        self.version = version
        super().__init__(
            f"No Flutter release found for channel '{channel}' and version '{version}'"
        )


# ============================================================================
# Extraction and Cache Exceptions
# ============================================================================


class ExtractError(FlutterKitError):
    """Raised when an archive is corrupt or the extraction tool fails."""

    pass


class CacheError(FlutterKitError):
    """Base exception for tool cache errors."""

    pass


class CacheInconsistencyError(CacheError):
    """Raised when a stored entry cannot be found immediately afterwards."""

    def __init__(self, name: str, version: str, arch: str):
        self.name = name
        self.version = version
        self.arch = arch
        super().__init__(
            f"Tool ({name}, {version}, {arch}) was stored but is not in the cache"
        )


class CacheLockTimeout(CacheError):
    """Raised when a cache entry lock cannot be acquired within timeout."""

    pass
