"""
Cache command implementation.

Lists Flutter versions present in the tool cache.
"""

import logging

from flutterkit.cli.utils import config_from_args, print_error
from flutterkit.core.exceptions import FlutterKitError
from flutterkit.core.platform import resolve_architecture
from flutterkit.core.tool_cache import ToolCache

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cache command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        config = config_from_args(args)
    except FlutterKitError as e:
        print_error(str(e))
        return 1

    arch = config.arch or resolve_architecture()
    cache = ToolCache(config.cache_root)
    versions = cache.list_versions(config.tool_name, arch)

    if not versions:
        print(
            f"No {config.tool_name} versions cached for {arch} "
            f"in {config.cache_root}"
        )
        return 0

    for version in versions:
        print(f"{version}  {cache.find(config.tool_name, version, arch)}")

    return 0
