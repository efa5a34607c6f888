"""
Unit tests for build agent publishing.
"""

import io

import pytest

from flutterkit.core.exceptions import InputError
from flutterkit.core.task import RESULT_FAILED, RESULT_SUCCEEDED, TaskPublisher


@pytest.fixture
def stream():
    return io.StringIO()


class TestGetInput:
    """Tests for TaskPublisher.get_input()."""

    def test_reads_input_variable(self, stream):
        publisher = TaskPublisher(stream, environ={"INPUT_CHANNEL": " stable "})

        assert publisher.get_input("channel") == "stable"

    def test_missing_optional(self, stream):
        publisher = TaskPublisher(stream, environ={})

        assert publisher.get_input("version") is None

    def test_missing_required(self, stream):
        publisher = TaskPublisher(stream, environ={"INPUT_VERSION": "  "})

        with pytest.raises(InputError, match="version"):
            publisher.get_input("version", required=True)


class TestSetVariable:
    """Tests for TaskPublisher.set_variable()."""

    def test_writes_logging_command(self, stream):
        environ = {}
        publisher = TaskPublisher(stream, environ=environ)

        publisher.set_variable("FlutterToolPath", "/cache/Flutter/1.2.3/linux/flutter/bin")

        assert stream.getvalue() == (
            "##vso[task.setvariable variable=FlutterToolPath;]"
            "/cache/Flutter/1.2.3/linux/flutter/bin\n"
        )
        assert environ["FlutterToolPath"] == "/cache/Flutter/1.2.3/linux/flutter/bin"
        assert publisher.variables == {
            "FlutterToolPath": "/cache/Flutter/1.2.3/linux/flutter/bin"
        }

    def test_escapes_values(self, stream):
        publisher = TaskPublisher(stream, environ={})

        publisher.set_variable("a;b", "50%\nnext")

        assert stream.getvalue() == "##vso[task.setvariable variable=a%3Bb;]50%AZP25%0Anext\n"


class TestSetResult:
    """Tests for TaskPublisher.set_result()."""

    def test_succeeded(self, stream):
        publisher = TaskPublisher(stream, environ={})

        publisher.set_result(RESULT_SUCCEEDED, "Installed")

        assert stream.getvalue() == "##vso[task.complete result=Succeeded;]Installed\n"
        assert publisher.result == RESULT_SUCCEEDED

    def test_failed(self, stream):
        publisher = TaskPublisher(stream, environ={})

        publisher.set_result(RESULT_FAILED, "boom")

        assert publisher.result == RESULT_FAILED
        assert publisher.message == "boom"

    def test_unknown_result(self, stream):
        with pytest.raises(ValueError):
            TaskPublisher(stream, environ={}).set_result("Skipped", "")
