"""
Local tool cache.

Tools are stored on disk keyed by (name, version, arch):

    <cache_root>/
        Flutter/
            3.22.2/
                linux/              : Cached tool directory
                linux.complete      : Marker written once the copy finished
        lock/
            Flutter-3.22.2-linux.lock

An entry is only visible once its marker exists, so readers never observe a
partially copied directory. Entries are never modified after creation.
"""

import logging
import shutil
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, Union

from filelock import FileLock, Timeout

from flutterkit.core.exceptions import CacheError, CacheLockTimeout
from flutterkit.core.filesystem import safe_rmtree

logger = logging.getLogger(__name__)

COMPLETE_SUFFIX = ".complete"


class ToolCache:
    """
    Directory registry for installed tools.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.store(Path("/tmp/3f2a..."), "Flutter", "3.22.2", "linux")
        >>> cache.find("Flutter", "3.22.2", "linux")
        PosixPath('/opt/hostedtoolcache/Flutter/3.22.2/linux')
    """

    def __init__(self, cache_root: Union[str, Path], lock_timeout: int = 300):
        """
        Initialize tool cache.

        Args:
            cache_root: Root directory of the cache
            lock_timeout: Timeout in seconds for acquiring an entry lock
        """
        self.cache_root = Path(cache_root)
        self.lock_dir = self.cache_root / "lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.cache_root}")

    def _entry_dir(self, name: str, version: str, arch: str) -> Path:
        if not name:
            raise ValueError("Tool name cannot be empty")
        if not version:
            raise ValueError("Tool version cannot be empty")
        if not arch:
            raise ValueError("Architecture cannot be empty")
        return self.cache_root / name / version / arch

    @staticmethod
    def _marker(entry_dir: Path) -> Path:
        return entry_dir.parent / f"{entry_dir.name}{COMPLETE_SUFFIX}"

    @contextmanager
    def _lock(self, name: str, version: str, arch: str):
        """
        Hold the exclusive lock of a cache entry.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self.lock_dir / f"{name}-{version}-{arch}.lock"
        lock = FileLock(lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                logger.debug(f"Acquired cache lock: {lock_path}")
                yield
            logger.debug(f"Released cache lock: {lock_path}")
        except Timeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock for ({name}, {version}, {arch}) "
                f"within {self.lock_timeout} seconds"
            ) from e

    def find(self, name: str, version: str, arch: str) -> Optional[Path]:
        """
        Look up a cached tool.

        Args:
            name: Tool name (e.g. 'Flutter')
            version: Exact tool version
            arch: Architecture key

        Returns:
            Path to the cached directory, or None if not cached
        """
        entry_dir = self._entry_dir(name, version, arch)

        if entry_dir.is_dir() and self._marker(entry_dir).is_file():
            logger.debug(f"Found tool in cache: {name} {version} {arch}")
            return entry_dir

        logger.debug(f"Tool not found in cache: {name} {version} {arch}")
        return None

    def store(
        self, source_dir: Union[str, Path], name: str, version: str, arch: str
    ) -> Path:
        """
        Copy a directory into the cache under (name, version, arch).

        The copy is made next to its final location and renamed into place
        before the completion marker is written. If a complete entry already
        exists it is kept unchanged.

        Args:
            source_dir: Directory to cache
            name: Tool name
            version: Exact tool version
            arch: Architecture key

        Returns:
            Path to the cached directory

        Raises:
            CacheError: If the source is not a directory or copying fails
            CacheLockTimeout: If the entry lock cannot be acquired
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise CacheError(f"Cannot cache '{source_dir}': not a directory")

        entry_dir = self._entry_dir(name, version, arch)
        marker = self._marker(entry_dir)
        logger.debug(f"Caching tool: {name} {version} {arch} from {source_dir}")

        with self._lock(name, version, arch):
            if entry_dir.is_dir() and marker.is_file():
                logger.info(f"Tool already cached: {entry_dir}")
                return entry_dir

            staging_dir = entry_dir.parent / f".{arch}.{uuid.uuid4().hex}.tmp"
            try:
                entry_dir.parent.mkdir(parents=True, exist_ok=True)
                shutil.copytree(source_dir, staging_dir, symlinks=True)

                if entry_dir.exists():
                    logger.warning(f"Replacing incomplete cache entry: {entry_dir}")
                    safe_rmtree(entry_dir, require_prefix=self.cache_root)

                staging_dir.rename(entry_dir)
                marker.touch()
            except OSError as e:
                raise CacheError(
                    f"Failed to cache ({name}, {version}, {arch}): {e}"
                ) from e
            finally:
                if staging_dir.exists():
                    safe_rmtree(staging_dir, require_prefix=self.cache_root)

        logger.info(f"Cached {name} {version} ({arch}) at {entry_dir}")
        return entry_dir

    def list_versions(self, name: str, arch: str) -> List[str]:
        """
        List the versions of a tool cached for an architecture.

        Args:
            name: Tool name
            arch: Architecture key

        Returns:
            Sorted list of complete cached versions
        """
        tool_dir = self.cache_root / name
        if not tool_dir.is_dir():
            return []

        versions = []
        for version_dir in tool_dir.iterdir():
            if not version_dir.is_dir():
                continue
            entry_dir = version_dir / arch
            if entry_dir.is_dir() and self._marker(entry_dir).is_file():
                versions.append(version_dir.name)

        return sorted(versions)


__all__ = ["ToolCache", "COMPLETE_SUFFIX"]
