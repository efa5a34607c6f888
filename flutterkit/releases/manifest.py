"""
Flutter release manifest client.

Each platform has its own manifest, e.g. releases_linux.json:

    {
      "base_url": "https://storage.googleapis.com/flutter_infra_release/releases",
      "current_release": {"stable": "<hash>", "beta": "<hash>", "dev": "<hash>"},
      "releases": [
        {
          "hash": "<hash>",
          "channel": "stable",
          "version": "3.22.2",
          "release_date": "2024-06-06T17:15:12.345Z",
          "archive": "stable/linux/flutter_linux_3.22.2-stable.tar.xz",
          "sha256": "..."
        }
      ]
    }

The manifest is fetched fresh on every run and never cached.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from flutterkit.core.config import RELEASES_URL_TEMPLATE
from flutterkit.core.download import fetch_json
from flutterkit.core.exceptions import ParseError

logger = logging.getLogger(__name__)

_RECORD_FIELDS = ("hash", "version", "channel", "archive")


@dataclass(frozen=True)
class ReleaseRecord:
    """One installable build listed in the manifest."""

    hash: str
    version: str
    channel: str
    archive: str
    """Archive path relative to the manifest base URL"""

    release_date: Optional[str] = None
    sha256: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseRecord":
        """
        Create a record from a manifest entry.

        Raises:
            ParseError: If the entry is not an object or misses a field
        """
        if not isinstance(data, dict):
            raise ParseError(
                f"Release entry must be an object, got {type(data).__name__}"
            )

        missing = [
            name for name in _RECORD_FIELDS if not isinstance(data.get(name), str)
        ]
        if missing:
            raise ParseError(
                f"Release entry {data.get('hash', '<unknown>')} is missing: "
                f"{', '.join(missing)}"
            )

        return cls(
            hash=data["hash"],
            version=data["version"],
            channel=data["channel"],
            archive=data["archive"],
            release_date=data.get("release_date"),
            sha256=data.get("sha256"),
        )


@dataclass(frozen=True)
class ReleaseManifest:
    """Parsed release manifest for one platform."""

    base_url: str
    current_release: Dict[str, str] = field(default_factory=dict)
    releases: List[ReleaseRecord] = field(default_factory=list)

    def archive_url(self, release: ReleaseRecord) -> str:
        """Absolute download URL of a release archive."""
        return f"{self.base_url}/{release.archive}"


def manifest_url(arch: str, template: str = RELEASES_URL_TEMPLATE) -> str:
    """
    Build the manifest URL for an architecture key.

    Example:
        >>> manifest_url("linux")
        'https://storage.googleapis.com/flutter_infra/releases/releases_linux.json'
    """
    return template.format(arch=arch)


def parse_manifest(data: Any) -> ReleaseManifest:
    """
    Validate and convert a decoded manifest document.

    Args:
        data: Decoded JSON document

    Returns:
        ReleaseManifest

    Raises:
        ParseError: If the document does not have the expected shape
    """
    if not isinstance(data, dict):
        raise ParseError("Release manifest must be a JSON object")

    base_url = data.get("base_url")
    if not isinstance(base_url, str) or not base_url:
        raise ParseError("Release manifest has no 'base_url'")

    current_release = data.get("current_release")
    if not isinstance(current_release, dict):
        raise ParseError("Release manifest has no 'current_release' object")

    releases = data.get("releases")
    if not isinstance(releases, list):
        raise ParseError("Release manifest has no 'releases' list")

    return ReleaseManifest(
        base_url=base_url.rstrip("/"),
        current_release={str(k): str(v) for k, v in current_release.items()},
        releases=[ReleaseRecord.from_dict(entry) for entry in releases],
    )


def fetch_manifest(
    arch: str, url_template: str = RELEASES_URL_TEMPLATE, timeout: int = 30
) -> ReleaseManifest:
    """
    Download and parse the release manifest for an architecture.

    Args:
        arch: Architecture key ('macos', 'linux', 'windows')
        url_template: Manifest URL with an '{arch}' placeholder
        timeout: Request timeout in seconds

    Returns:
        ReleaseManifest

    Raises:
        NetworkError: If the manifest cannot be fetched
        ParseError: If the manifest is malformed
    """
    url = manifest_url(arch, url_template)
    logger.debug(f"Finding releases from '{url}'")

    manifest = parse_manifest(fetch_json(url, timeout=timeout))
    logger.debug(
        f"Loaded {len(manifest.releases)} releases, base URL '{manifest.base_url}'"
    )
    return manifest


__all__ = [
    "ReleaseRecord",
    "ReleaseManifest",
    "manifest_url",
    "parse_manifest",
    "fetch_manifest",
]
