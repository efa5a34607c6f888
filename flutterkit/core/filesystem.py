"""
Archive fetching and extraction for FlutterKit.

Flutter SDK releases are published either as .zip (Windows, macOS) or as
.tar.xz (Linux). This module provides:
- Extraction folder creation under the agent temp root
- Archive kind detection (extension, confirmed by magic bytes when available)
- ZIP extraction with path validation, permission and symlink restoring
- tar.xz extraction through the external tar tool
- Safe directory removal
"""

import logging
import os
import shutil
import stat
import subprocess
import sys
import uuid
import zipfile
from pathlib import Path
from typing import Optional, Union

from flutterkit.core.download import DownloadProgress, download_file, format_progress
from flutterkit.core.exceptions import ExtractError

logger = logging.getLogger(__name__)

ARCHIVE_ZIP = "zip"
ARCHIVE_TAR_XZ = "tar.xz"

_ZIP_MAGIC = (b"PK\x03\x04", b"PK\x05\x06")
_XZ_MAGIC = b"\xfd7zXZ\x00"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def create_extract_folder(
    temp_root: Union[str, Path], destination: Optional[Union[str, Path]] = None
) -> Path:
    """
    Create the directory an archive is extracted into.

    Args:
        temp_root: Agent temp directory
        destination: Explicit destination. If None, a fresh
            '<temp_root>/<uuid4>' directory is used.

    Returns:
        Path to the created directory
    """
    if destination is None:
        destination = Path(temp_root) / str(uuid.uuid4())

    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    return destination


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, refusing paths outside require_prefix.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    def handle_remove_readonly(func, failed_path, exc):
        # Flutter ships read-only files inside .git
        os.chmod(failed_path, stat.S_IWRITE)
        func(failed_path)

    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=handle_remove_readonly)
    else:
        shutil.rmtree(path, onerror=handle_remove_readonly)


# ============================================================================
# Archive Detection
# ============================================================================


def detect_archive_kind(url: str, archive_path: Optional[Path] = None) -> str:
    """
    Decide how an archive must be extracted.

    The URL extension decides: '.zip' means zip, anything else tar.xz.
    When the downloaded file is given, its header overrides a misleading
    extension.

    Args:
        url: Download URL of the archive
        archive_path: Downloaded file, if available

    Returns:
        ARCHIVE_ZIP or ARCHIVE_TAR_XZ
    """
    kind = ARCHIVE_ZIP if url.lower().endswith(".zip") else ARCHIVE_TAR_XZ

    if archive_path is not None and Path(archive_path).is_file():
        with open(archive_path, "rb") as f:
            header = f.read(6)
        if header.startswith(_ZIP_MAGIC):
            sniffed = ARCHIVE_ZIP
        elif header.startswith(_XZ_MAGIC):
            sniffed = ARCHIVE_TAR_XZ
        else:
            sniffed = kind
        if sniffed != kind:
            logger.warning(
                f"Archive '{url}' looks like {sniffed} despite its extension"
            )
        kind = sniffed

    return kind


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    """Reject archive members that would land outside destination."""
    member_path = (destination / member).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise ExtractError(
            f"Archive member '{member}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def _is_zip_symlink(member: zipfile.ZipInfo) -> bool:
    return stat.S_ISLNK(member.external_attr >> 16)


def _extract_zip_symlink(
    zf: zipfile.ZipFile, member: zipfile.ZipInfo, destination: Path
) -> None:
    """Recreate a symlink entry; its content is the link target."""
    target = zf.read(member).decode("utf-8")
    link_dir = os.path.dirname(member.filename.rstrip("/"))
    _validate_archive_path(os.path.join(link_dir, target), destination)

    link_path = destination / member.filename.rstrip("/")
    link_path.parent.mkdir(parents=True, exist_ok=True)
    os.symlink(target, link_path)


def _discard_extract_folder(dest: Path, temp_root: Union[str, Path]) -> None:
    logger.debug(f"Removing incomplete extraction '{dest}'")
    safe_rmtree(dest, require_prefix=temp_root)


def extract_zip(
    archive_path: Union[str, Path],
    temp_root: Union[str, Path],
    destination: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Extract a ZIP archive.

    Unix permission bits stored in the archive are restored, since the SDK
    contains executable scripts. Symlink entries (macOS frameworks) are
    recreated as symlinks.

    Args:
        archive_path: Path to the .zip file
        temp_root: Agent temp directory
        destination: Explicit destination (default: fresh folder in temp_root)

    Returns:
        Directory the archive was extracted into

    Raises:
        ExtractError: If the archive is missing, corrupt or unsafe. A fresh
            folder created for the extraction is removed first.
    """
    archive_path = Path(archive_path)
    if not archive_path.exists():
        raise ExtractError(f"Archive not found: {archive_path}")

    dest = create_extract_folder(temp_root, destination)
    logger.debug(f"Extracting zip '{archive_path}' to '{dest}'")

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()

            for member in members:
                _validate_archive_path(member.filename, dest)

            for member in members:
                if _is_zip_symlink(member):
                    _extract_zip_symlink(zf, member, dest)
                    continue
                extracted = zf.extract(member, dest)
                mode = member.external_attr >> 16
                if mode and not member.is_dir():
                    os.chmod(extracted, stat.S_IMODE(mode))
    except (zipfile.BadZipFile, OSError, UnicodeDecodeError) as e:
        if destination is None:
            _discard_extract_folder(dest, temp_root)
        raise ExtractError(f"Failed to extract {archive_path}: {e}") from e
    except ExtractError:
        if destination is None:
            _discard_extract_folder(dest, temp_root)
        raise

    return dest


def extract_tar_xz(
    archive_path: Union[str, Path],
    temp_root: Union[str, Path],
    destination: Optional[Union[str, Path]] = None,
    tar: str = "tar",
) -> Path:
    """
    Extract a .tar.xz archive with the external tar tool.

    Runs 'tar -xJC <dest> -f <archive>'.

    Args:
        archive_path: Path to the .tar.xz file
        temp_root: Agent temp directory
        destination: Explicit destination (default: fresh folder in temp_root)
        tar: tar executable to invoke

    Returns:
        Directory the archive was extracted into

    Raises:
        ExtractError: If tar is unavailable or exits non-zero. A fresh
            folder created for the extraction is removed first.
    """
    archive_path = Path(archive_path)
    if not archive_path.exists():
        raise ExtractError(f"Archive not found: {archive_path}")

    dest = create_extract_folder(temp_root, destination)
    cmd = [tar, "-xJC", str(dest), "-f", str(archive_path)]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        if destination is None:
            _discard_extract_folder(dest, temp_root)
        raise ExtractError(f"Failed to run '{tar}': {e}") from e

    if result.returncode != 0:
        if destination is None:
            _discard_extract_folder(dest, temp_root)
        raise ExtractError(
            f"'{tar}' exited with code {result.returncode} while extracting "
            f"{archive_path}: {result.stderr.strip()}"
        )

    return dest


def fetch_and_extract(
    url: str,
    temp_root: Union[str, Path],
    timeout: int = 30,
) -> Path:
    """
    Download an archive and extract it into a fresh temp directory.

    The downloaded archive file is removed once extracted.

    Args:
        url: Archive URL
        temp_root: Agent temp directory
        timeout: Request timeout in seconds

    Returns:
        Directory holding the extracted archive

    Raises:
        DownloadError: If the download fails
        ExtractError: If the extraction fails
    """
    temp_root = Path(temp_root)
    archive_name = url.rstrip("/").split("/")[-1] or "archive"
    archive_path = temp_root / f"{uuid.uuid4()}-{archive_name}"

    def on_progress(progress: DownloadProgress):
        logger.debug(f"Downloading {archive_name}: {format_progress(progress)}")

    logger.debug(f"Starting download archive from '{url}'")
    download_file(url, archive_path, progress_callback=on_progress, timeout=timeout)
    logger.debug(f"Succeeded to download '{archive_path}' archive from '{url}'")

    try:
        kind = detect_archive_kind(url, archive_path)
        logger.debug(f"Extracting '{url}' archive as {kind}")
        if kind == ARCHIVE_ZIP:
            extract_dir = extract_zip(archive_path, temp_root)
        else:
            extract_dir = extract_tar_xz(archive_path, temp_root)
    finally:
        archive_path.unlink(missing_ok=True)

    logger.debug(f"Extracted '{url}' archive to '{extract_dir}'")
    return extract_dir


__all__ = [
    "ARCHIVE_ZIP",
    "ARCHIVE_TAR_XZ",
    "is_relative_to",
    "create_extract_folder",
    "safe_rmtree",
    "detect_archive_kind",
    "extract_zip",
    "extract_tar_xz",
    "fetch_and_extract",
]
