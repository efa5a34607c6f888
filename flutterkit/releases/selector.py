"""
Release selection.

A request names a channel and either an exact version or 'latest'. The
lookups return None when nothing matches; select_release() is the single
place where that becomes a SelectionError, before anything builds a path
or URL from the result.
"""

import logging
from typing import List, Optional

from flutterkit.core.exceptions import SelectionError
from flutterkit.releases.manifest import ReleaseManifest, ReleaseRecord

logger = logging.getLogger(__name__)

LATEST = "latest"


def select_latest(manifest: ReleaseManifest, channel: str) -> Optional[ReleaseRecord]:
    """
    Find the current release of a channel.

    Args:
        manifest: Release manifest
        channel: Channel name (e.g. 'stable')

    Returns:
        First record whose hash is the channel's current hash, or None
    """
    current_hash = manifest.current_release.get(channel)
    logger.debug(f"Last version hash for '{channel}': '{current_hash}'")
    if current_hash is None:
        return None

    return next(
        (release for release in manifest.releases if release.hash == current_hash),
        None,
    )


def select_version(
    manifest: ReleaseManifest, channel: str, version: str
) -> Optional[ReleaseRecord]:
    """
    Find a specific version on a channel.

    Args:
        manifest: Release manifest
        channel: Channel name
        version: Exact version string

    Returns:
        First record matching both channel and version, or None
    """
    logger.debug(f"Requested channel and version '{channel} {version}'")
    release = next(
        (
            release
            for release in manifest.releases
            if release.version == version and release.channel == channel
        ),
        None,
    )

    if release is None:
        logger.debug("The requested version of specified channel was not found")

    return release


def select_release(
    manifest: ReleaseManifest, channel: str, version: str
) -> ReleaseRecord:
    """
    Select the release for a (channel, version-or-'latest') request.

    Raises:
        SelectionError: If no release matches
    """
    if version == LATEST:
        release = select_latest(manifest, channel)
    else:
        release = select_version(manifest, channel, version)

    if release is None:
        raise SelectionError(channel, version)

    logger.debug(f"Selected release {release.version} ({release.hash})")
    return release


def list_releases(
    manifest: ReleaseManifest, channel: Optional[str] = None
) -> List[ReleaseRecord]:
    """Releases of a channel (all channels if None), in manifest order."""
    return [
        release
        for release in manifest.releases
        if channel is None or release.channel == channel
    ]


__all__ = [
    "LATEST",
    "select_latest",
    "select_version",
    "select_release",
    "list_releases",
]
