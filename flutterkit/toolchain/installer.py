"""
Flutter SDK installation workflow.

This module orchestrates the complete install:
1. Resolve the platform architecture key
2. Fetch the release manifest
3. Select the requested release
4. Look it up in the tool cache
5. On a miss, download, extract and store it
6. Publish <cache>/flutter/bin as FlutterToolPath
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flutterkit.core.config import InstallerConfig
from flutterkit.core.exceptions import (
    CacheInconsistencyError,
    FlutterKitError,
    InputError,
)
from flutterkit.core.filesystem import fetch_and_extract, safe_rmtree
from flutterkit.core.platform import resolve_architecture
from flutterkit.core.task import RESULT_FAILED, RESULT_SUCCEEDED, TaskPublisher
from flutterkit.core.tool_cache import ToolCache
from flutterkit.releases import ReleaseRecord, fetch_manifest, select_release

logger = logging.getLogger(__name__)

FLUTTER_EXE_RELATIVEPATH = Path("flutter") / "bin"
FLUTTER_TOOL_PATH_ENV_VAR = "FlutterToolPath"


@dataclass(frozen=True)
class InstallRequest:
    """Channel and version (or 'latest') requested by the pipeline."""

    channel: str
    version: str

    @classmethod
    def from_inputs(
        cls, channel: Optional[str], version: Optional[str]
    ) -> "InstallRequest":
        """
        Build a request from raw task inputs.

        Raises:
            InputError: If channel or version is missing or blank
        """
        if not channel or not channel.strip():
            raise InputError("channel")
        if not version or not version.strip():
            raise InputError("version")
        return cls(channel=channel.strip(), version=version.strip())


@dataclass
class InstallResult:
    """Result of a Flutter SDK installation."""

    release: ReleaseRecord
    """Release that was installed"""

    arch: str
    """Architecture key the release was resolved for"""

    cache_path: Path
    """Cached tool directory"""

    tool_path: Path
    """Directory holding the flutter executable"""

    was_cached: bool
    """Whether the release was already cached (no download needed)"""


class FlutterInstaller:
    """
    Installs Flutter SDK releases into the tool cache.

    Example:
        >>> installer = FlutterInstaller(load_config())
        >>> result = installer.install(InstallRequest("stable", "latest"))
        >>> print(f"Flutter at: {result.tool_path}")
    """

    def __init__(
        self,
        config: InstallerConfig,
        publisher: Optional[TaskPublisher] = None,
        cache: Optional[ToolCache] = None,
    ):
        """
        Initialize installer.

        Args:
            config: Installer configuration (cache root, temp root, URLs)
            publisher: Agent publisher. If None, writes to stdout.
            cache: Tool cache. If None, one is created at config.cache_root.
        """
        self.config = config
        self.publisher = publisher or TaskPublisher()
        self.cache = cache or ToolCache(config.cache_root)

    def install(self, request: InstallRequest) -> InstallResult:
        """
        Install the requested release and publish its tool path.

        Args:
            request: Channel and version to install

        Returns:
            InstallResult describing the installed release

        Raises:
            FlutterKitError: On any failure; nothing is published then
        """
        tool_name = self.config.tool_name

        arch = self.config.arch or resolve_architecture()
        logger.debug(f"Using architecture '{arch}'")

        manifest = fetch_manifest(
            arch, url_template=self.config.releases_url, timeout=self.config.timeout
        )
        release = select_release(manifest, request.channel, request.version)

        logger.debug(
            f"Trying to get ({tool_name}, {release.version}, {arch}) "
            "tool from local cache"
        )
        cache_path = self.cache.find(tool_name, release.version, arch)
        was_cached = cache_path is not None

        if cache_path is None:
            self._download_and_cache(manifest.archive_url(release), release, arch)

            logger.debug(
                f"Trying again to get ({tool_name}, {release.version}, {arch}) "
                "tool from local cache"
            )
            cache_path = self.cache.find(tool_name, release.version, arch)
            if cache_path is None:
                raise CacheInconsistencyError(tool_name, release.version, arch)
        else:
            logger.info(f"Flutter {release.version} already cached: {cache_path}")

        tool_path = cache_path / FLUTTER_EXE_RELATIVEPATH
        self.publisher.set_variable(FLUTTER_TOOL_PATH_ENV_VAR, str(tool_path))

        return InstallResult(
            release=release,
            arch=arch,
            cache_path=cache_path,
            tool_path=tool_path,
            was_cached=was_cached,
        )

    def _download_and_cache(self, url: str, release: ReleaseRecord, arch: str):
        """Download and extract an archive, then store it in the cache."""
        temp_root = Path(self.config.temp_root)
        temp_root.mkdir(parents=True, exist_ok=True)

        logger.info(
            f"Installing Flutter {release.version} ({release.channel}) from {url}"
        )
        bundle_dir = fetch_and_extract(url, temp_root, timeout=self.config.timeout)

        try:
            logger.debug(
                f"Adding '{bundle_dir}' to cache "
                f"({self.config.tool_name}, {release.version}, {arch})"
            )
            self.cache.store(bundle_dir, self.config.tool_name, release.version, arch)
        finally:
            safe_rmtree(bundle_dir, require_prefix=temp_root)


def run_task(
    request: InstallRequest,
    config: InstallerConfig,
    publisher: Optional[TaskPublisher] = None,
    cache: Optional[ToolCache] = None,
) -> int:
    """
    Run the install and report the task result.

    Args:
        request: Channel and version to install
        config: Installer configuration
        publisher: Agent publisher (default: stdout)
        cache: Tool cache (default: at config.cache_root)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    publisher = publisher or TaskPublisher()
    installer = FlutterInstaller(config, publisher=publisher, cache=cache)

    try:
        result = installer.install(request)
    except FlutterKitError as e:
        logger.error(f"Error: {e}")
        publisher.set_result(RESULT_FAILED, str(e))
        return 1
    except Exception as e:
        logger.exception("Unexpected error during install")
        publisher.set_result(RESULT_FAILED, f"{type(e).__name__}: {e}")
        return 1

    logger.info(f"Flutter {result.release.version} ready at {result.tool_path}")
    publisher.set_result(RESULT_SUCCEEDED, "Installed")
    return 0


__all__ = [
    "FLUTTER_EXE_RELATIVEPATH",
    "FLUTTER_TOOL_PATH_ENV_VAR",
    "InstallRequest",
    "InstallResult",
    "FlutterInstaller",
    "run_task",
]
