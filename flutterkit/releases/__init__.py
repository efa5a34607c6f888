"""
Flutter release discovery.

This package fetches the per-platform release manifest and selects the
release matching a requested channel and version.
"""

from .manifest import (
    ReleaseRecord,
    ReleaseManifest,
    manifest_url,
    parse_manifest,
    fetch_manifest,
)
from .selector import (
    LATEST,
    select_latest,
    select_version,
    select_release,
    list_releases,
)

__all__ = [
    "ReleaseRecord",
    "ReleaseManifest",
    "manifest_url",
    "parse_manifest",
    "fetch_manifest",
    "LATEST",
    "select_latest",
    "select_version",
    "select_release",
    "list_releases",
]
