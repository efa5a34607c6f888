"""
Pytest configuration and shared fixtures for FlutterKit tests.
"""

from pathlib import Path

import pytest

from flutterkit.core.config import InstallerConfig
from tests.utils import build_tar_xz, build_zip

BASE_URL = "https://storage.googleapis.com/flutter_infra_release/releases"
MANIFEST_URL_TEMPLATE = "https://example.com/releases/releases_{arch}.json"


@pytest.fixture
def manifest_data() -> dict:
    """Release manifest document with two channels."""
    return {
        "base_url": BASE_URL,
        "current_release": {"stable": "h1", "beta": "h3"},
        "releases": [
            {
                "hash": "h3",
                "channel": "beta",
                "version": "1.3.0-1.0.pre",
                "release_date": "2024-02-01T00:00:00.000Z",
                "archive": "beta/linux/flutter_linux_1.3.0-1.0.pre-beta.tar.xz",
            },
            {
                "hash": "h1",
                "channel": "stable",
                "version": "1.2.3",
                "release_date": "2024-01-15T00:00:00.000Z",
                "archive": "a.zip",
            },
            {
                "hash": "h0",
                "channel": "stable",
                "version": "1.2.2",
                "archive": "stable/linux/flutter_linux_1.2.2-stable.tar.xz",
            },
            {
                "hash": "h0b",
                "channel": "beta",
                "version": "1.2.2",
                "archive": "beta/linux/flutter_linux_1.2.2-beta.tar.xz",
            },
        ],
    }


@pytest.fixture
def installer_config(tmp_path: Path) -> InstallerConfig:
    """Installer configuration rooted in a temporary directory."""
    return InstallerConfig(
        cache_root=tmp_path / "cache",
        temp_root=tmp_path / "temp",
        releases_url=MANIFEST_URL_TEMPLATE,
        arch="linux",
    )


@pytest.fixture
def flutter_zip() -> bytes:
    """Minimal Flutter SDK zip archive."""
    return build_zip(
        {
            "flutter/bin/flutter": "#!/bin/sh\necho flutter\n",
            "flutter/version": "1.2.3\n",
        },
        modes={"flutter/bin/flutter": 0o755},
    )


@pytest.fixture
def flutter_tar_xz() -> bytes:
    """Minimal Flutter SDK tar.xz archive."""
    return build_tar_xz(
        {
            "flutter/bin/flutter": "#!/bin/sh\necho flutter\n",
            "flutter/version": "1.2.2\n",
        }
    )
