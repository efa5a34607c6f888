"""
Test data builders for FlutterKit testing.

Archives are built in memory so tests never need network access.
"""

import io
import shutil
import tarfile
import zipfile
from typing import Dict, Optional, Union


def build_zip(
    files: Dict[str, Union[str, bytes]], modes: Optional[Dict[str, int]] = None
) -> bytes:
    """
    Build a zip archive.

    Args:
        files: Mapping of member name to content
        modes: Optional unix permission bits per member

    Returns:
        Archive bytes
    """
    modes = modes or {}
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            if name in modes:
                info.external_attr = modes[name] << 16
            zf.writestr(info, content)
    return buffer.getvalue()


def build_tar_xz(files: Dict[str, Union[str, bytes]]) -> bytes:
    """
    Build a .tar.xz archive with executable members.

    Args:
        files: Mapping of member name to content

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:xz") as tf:
        for name, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def has_command(command: str) -> bool:
    """Check if a command is available on PATH."""
    return shutil.which(command) is not None
