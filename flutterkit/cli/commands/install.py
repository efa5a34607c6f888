"""
Install command implementation.

Installs the requested Flutter SDK release and reports the task result.
"""

import logging

from flutterkit.cli.utils import config_from_args
from flutterkit.core.exceptions import FlutterKitError
from flutterkit.core.task import RESULT_FAILED, TaskPublisher
from flutterkit.toolchain.installer import InstallRequest, run_task

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Channel and version come from the command line, falling back to the
    'channel' and 'version' task inputs.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    publisher = TaskPublisher()

    try:
        channel = args.channel or publisher.get_input("channel", required=True)
        version = args.sdk_version or publisher.get_input("version", required=True)
        request = InstallRequest.from_inputs(channel, version)
        config = config_from_args(args)
    except FlutterKitError as e:
        logger.error(f"Error: {e}")
        publisher.set_result(RESULT_FAILED, str(e))
        return 1

    logger.debug(f"Install request: {request}")
    return run_task(request, config, publisher=publisher)
