"""
Releases command implementation.

Lists releases from the Flutter release manifest.
"""

import logging

from flutterkit.cli.utils import config_from_args, print_error
from flutterkit.core.exceptions import FlutterKitError
from flutterkit.core.platform import resolve_architecture
from flutterkit.releases import fetch_manifest, list_releases

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the releases command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        config = config_from_args(args)
        arch = config.arch or resolve_architecture()
        manifest = fetch_manifest(
            arch, url_template=config.releases_url, timeout=config.timeout
        )
    except FlutterKitError as e:
        print_error(str(e))
        return 1

    current = {
        release_hash: channel
        for channel, release_hash in manifest.current_release.items()
    }
    releases = list_releases(manifest, args.channel)
    if args.limit > 0:
        releases = releases[: args.limit]

    if not releases:
        print(f"No releases found for {args.channel or 'any channel'} on {arch}")
        return 0

    for release in releases:
        marker = (
            f"  (current {current[release.hash]})" if release.hash in current else ""
        )
        print(f"{release.version:<24} {release.channel:<8} {release.hash[:10]}{marker}")

    return 0
