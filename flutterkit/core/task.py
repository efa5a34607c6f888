"""
Build agent integration.

The installer runs as a pipeline task. Inputs arrive as INPUT_<NAME>
environment variables, and results are reported back to the agent with
logging commands written to standard output:

    ##vso[task.setvariable variable=FlutterToolPath;]/opt/.../flutter/bin
    ##vso[task.complete result=Succeeded;]Installed
"""

import logging
import os
import sys
from typing import Dict, MutableMapping, Optional, TextIO

from flutterkit.core.exceptions import InputError

logger = logging.getLogger(__name__)

RESULT_SUCCEEDED = "Succeeded"
RESULT_FAILED = "Failed"


def _escape_data(value: str) -> str:
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace("]", "%5D").replace(";", "%3B")


def _env_name(name: str) -> str:
    return name.replace(".", "_").replace(" ", "_").upper()


class TaskPublisher:
    """
    Reads task inputs and publishes variables and results to the agent.

    Args:
        stream: Where logging commands are written (default: sys.stdout)
        environ: Environment used for inputs and variables (default: os.environ)
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.stream = stream if stream is not None else sys.stdout
        self.environ = environ if environ is not None else os.environ
        self.variables: Dict[str, str] = {}
        self.result: Optional[str] = None
        self.message: Optional[str] = None

    def _command(self, area_and_event: str, properties: Dict[str, str], data: str):
        props = ";".join(f"{k}={_escape_property(v)}" for k, v in properties.items())
        self.stream.write(f"##vso[{area_and_event} {props};]{_escape_data(data)}\n")
        self.stream.flush()

    def get_input(self, name: str, required: bool = False) -> Optional[str]:
        """
        Read a task input.

        Args:
            name: Input name (e.g. 'channel')
            required: Raise InputError when the input is missing or blank

        Returns:
            Trimmed input value, or None when not supplied
        """
        value = self.environ.get(f"INPUT_{_env_name(name)}", "").strip()
        if not value:
            if required:
                raise InputError(name)
            return None
        logger.debug(f"{name}={value}")
        return value

    def set_variable(self, name: str, value: str):
        """
        Publish a variable for the following pipeline steps.

        The variable is also set, under the same name, in this process'
        environment.
        """
        logger.debug(f"Set {name} with '{value}'")
        self.variables[name] = value
        self.environ[name] = value
        self._command("task.setvariable", {"variable": name}, value)

    def set_result(self, result: str, message: str):
        """
        Report the final task result.

        Args:
            result: RESULT_SUCCEEDED or RESULT_FAILED
            message: Message attached to the result
        """
        if result not in (RESULT_SUCCEEDED, RESULT_FAILED):
            raise ValueError(f"Unknown task result: {result}")
        self.result = result
        self.message = message
        self._command("task.complete", {"result": result}, message)


__all__ = [
    "RESULT_SUCCEEDED",
    "RESULT_FAILED",
    "TaskPublisher",
]
