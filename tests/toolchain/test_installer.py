"""
Tests for the Flutter install workflow.

Network access is mocked with responses; archives are built in memory.
"""

import io
from dataclasses import replace
from unittest.mock import patch

import pytest
import responses

from flutterkit.core.exceptions import (
    CacheInconsistencyError,
    InputError,
    NetworkError,
    SelectionError,
)
from flutterkit.core.task import RESULT_FAILED, RESULT_SUCCEEDED, TaskPublisher
from flutterkit.core.tool_cache import ToolCache
from flutterkit.toolchain.installer import (
    FLUTTER_TOOL_PATH_ENV_VAR,
    FlutterInstaller,
    InstallRequest,
    run_task,
)

MANIFEST_URL = "https://example.com/releases/releases_linux.json"
BASE_URL = "https://storage.googleapis.com/flutter_infra_release/releases"


@pytest.fixture
def environ():
    return {}


@pytest.fixture
def publisher(environ):
    return TaskPublisher(io.StringIO(), environ=environ)


@pytest.fixture
def installer(installer_config, publisher):
    return FlutterInstaller(installer_config, publisher=publisher)


class TestInstallRequest:
    """Tests for InstallRequest.from_inputs()."""

    def test_valid(self):
        assert InstallRequest.from_inputs(" stable", "latest ") == InstallRequest(
            "stable", "latest"
        )

    @pytest.mark.parametrize(
        "channel, version, missing",
        [
            (None, "latest", "channel"),
            ("", "latest", "channel"),
            ("stable", None, "version"),
            ("stable", " ", "version"),
        ],
    )
    def test_missing(self, channel, version, missing):
        with pytest.raises(InputError) as exc_info:
            InstallRequest.from_inputs(channel, version)

        assert exc_info.value.input_name == missing


class TestInstall:
    """End-to-end install scenarios."""

    @responses.activate
    def test_latest_zip_release(
        self, installer, installer_config, manifest_data, flutter_zip, environ
    ):
        """Test 'latest' selects the current release and installs it from zip."""
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/a.zip", body=flutter_zip)

        with patch("flutterkit.core.filesystem.extract_tar_xz") as mock_tar:
            result = installer.install(InstallRequest("stable", "latest"))

        mock_tar.assert_not_called()
        expected_cache = installer_config.cache_root / "Flutter" / "1.2.3" / "linux"
        assert result.release.version == "1.2.3"
        assert result.was_cached is False
        assert result.cache_path == expected_cache
        assert result.tool_path == expected_cache / "flutter" / "bin"
        assert (result.tool_path / "flutter").is_file()
        assert environ[FLUTTER_TOOL_PATH_ENV_VAR] == str(result.tool_path)
        assert [call.request.url for call in responses.calls] == [
            MANIFEST_URL,
            f"{BASE_URL}/a.zip",
        ]

    @responses.activate
    def test_temp_extraction_removed(
        self, installer, installer_config, manifest_data, flutter_zip
    ):
        """Test the extracted bundle does not stay in the temp root."""
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/a.zip", body=flutter_zip)

        installer.install(InstallRequest("stable", "latest"))

        assert list(installer_config.temp_root.iterdir()) == []

    @responses.activate
    def test_tar_release_uses_tar(
        self, installer, installer_config, manifest_data, flutter_tar_xz, tmp_path
    ):
        """Test a .tar.xz archive goes through the external tar path."""
        archive = "stable/linux/flutter_linux_1.2.2-stable.tar.xz"
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/{archive}", body=flutter_tar_xz)

        def fake_tar(archive_path, temp_root):
            dest = temp_root / "fake-extract"
            (dest / "flutter" / "bin").mkdir(parents=True)
            return dest

        with patch(
            "flutterkit.core.filesystem.extract_tar_xz", side_effect=fake_tar
        ) as mock_tar:
            result = installer.install(InstallRequest("stable", "1.2.2"))

        mock_tar.assert_called_once()
        assert result.release.hash == "h0"
        assert result.cache_path == installer_config.cache_root / "Flutter" / "1.2.2" / "linux"

    @responses.activate
    def test_no_matching_release(self, installer, manifest_data, environ):
        """Test an unknown version fails with SelectionError and publishes nothing."""
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)

        with pytest.raises(SelectionError):
            installer.install(InstallRequest("beta", "9.9.9"))

        assert FLUTTER_TOOL_PATH_ENV_VAR not in environ
        assert len(responses.calls) == 1

    @responses.activate
    def test_cache_hit_skips_download(
        self, installer, installer_config, manifest_data, tmp_path, environ
    ):
        """Test a cached release is published without downloading."""
        bundle = tmp_path / "bundle"
        (bundle / "flutter" / "bin").mkdir(parents=True)
        cached = ToolCache(installer_config.cache_root).store(bundle, "Flutter", "1.2.3", "linux")
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)

        result = installer.install(InstallRequest("stable", "latest"))

        assert result.was_cached is True
        assert result.cache_path == cached
        assert environ[FLUTTER_TOOL_PATH_ENV_VAR] == str(cached / "flutter" / "bin")
        assert [call.request.url for call in responses.calls] == [MANIFEST_URL]

    @responses.activate
    def test_second_install_uses_cache(self, installer, manifest_data, flutter_zip):
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/a.zip", body=flutter_zip)

        first = installer.install(InstallRequest("stable", "latest"))
        second = installer.install(InstallRequest("stable", "1.2.3"))

        assert second.was_cached is True
        assert second.tool_path == first.tool_path
        archive_calls = [c for c in responses.calls if c.request.url.endswith("a.zip")]
        assert len(archive_calls) == 1

    @responses.activate
    def test_store_without_entry_is_inconsistent(
        self, installer_config, publisher, manifest_data, flutter_zip, environ
    ):
        """Test a miss right after storing is a fatal error."""
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/a.zip", body=flutter_zip)

        class ForgetfulCache(ToolCache):
            def find(self, name, version, arch):
                return None

        installer = FlutterInstaller(
            installer_config,
            publisher=publisher,
            cache=ForgetfulCache(installer_config.cache_root),
        )

        with pytest.raises(CacheInconsistencyError):
            installer.install(InstallRequest("stable", "latest"))

        assert FLUTTER_TOOL_PATH_ENV_VAR not in environ

    @responses.activate
    def test_manifest_failure(self, installer):
        responses.add(responses.GET, MANIFEST_URL, status=503)

        with pytest.raises(NetworkError):
            installer.install(InstallRequest("stable", "latest"))

    @responses.activate
    def test_host_platform_resolution(self, installer_config, publisher, manifest_data):
        """Test the host architecture is used when none is configured."""
        config = replace(installer_config, arch=None)
        responses.add(
            responses.GET,
            "https://example.com/releases/releases_macos.json",
            json=manifest_data,
        )

        with patch("platform.system", return_value="Darwin"):
            with pytest.raises(SelectionError):
                FlutterInstaller(config, publisher=publisher).install(
                    InstallRequest("beta", "9.9.9")
                )

        assert responses.calls[0].request.url.endswith("releases_macos.json")


class TestRunTask:
    """Tests for run_task()."""

    @responses.activate
    def test_success(
        self, installer_config, publisher, manifest_data, flutter_zip, environ
    ):
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)
        responses.add(responses.GET, f"{BASE_URL}/a.zip", body=flutter_zip)

        code = run_task(InstallRequest("stable", "latest"), installer_config, publisher)

        assert code == 0
        assert publisher.result == RESULT_SUCCEEDED
        assert FLUTTER_TOOL_PATH_ENV_VAR in environ
        output = publisher.stream.getvalue()
        assert "##vso[task.setvariable variable=FlutterToolPath;]" in output
        assert output.endswith("##vso[task.complete result=Succeeded;]Installed\n")

    @responses.activate
    def test_selection_failure(
        self, installer_config, publisher, manifest_data, environ
    ):
        responses.add(responses.GET, MANIFEST_URL, json=manifest_data)

        code = run_task(InstallRequest("beta", "9.9.9"), installer_config, publisher)

        assert code == 1
        assert publisher.result == RESULT_FAILED
        assert "9.9.9" in publisher.message
        assert FLUTTER_TOOL_PATH_ENV_VAR not in environ
        assert "task.setvariable" not in publisher.stream.getvalue()

    def test_unexpected_error(self, installer_config, publisher):
        with patch(
            "flutterkit.toolchain.installer.fetch_manifest",
            side_effect=RuntimeError("boom"),
        ):
            code = run_task(InstallRequest("stable", "latest"), installer_config, publisher)

        assert code == 1
        assert publisher.result == RESULT_FAILED
        assert "boom" in publisher.message
