"""Tests for the EnvironmentDetector facade"""
import os
from contextlib import ExitStack
from unittest.mock import patch
import pytest

from environment_detector import EnvironmentDetector, __version__
from environment_detector.config import DetectorOptions, DetectorSettings
from environment_detector.core.cache import TimedCache
from environment_detector.core.detector import BaseDetector
from environment_detector.errors import PluginNotInstalledError
from environment_detector.models import CIProvider, ContainerType, EnvironmentInfo, EnvironmentMode, OSType
from environment_detector.plugins import BasePlugin

DETECTORS = "environment_detector.detectors"


class IsolatedEnvironment:
    """Patch every probe so the facade sees a controlled machine"""

    def __init__(self, env=None, files=None, platform_id="linux", uid=1000, commands=None):
        self.env = env or {}
        self.files = files or {}
        self.platform_id = platform_id
        self.uid = uid
        self.commands = commands or {}
        self.command_calls = 0
        self._stack = None

    def _run_command(self, command, timeout=None, shell=False):
        self.command_calls += 1
        key = command if isinstance(command, str) else " ".join(command)
        return self.commands.get(key)

    def __enter__(self):
        self._stack = ExitStack()
        patches = [
            patch.dict(os.environ, self.env, clear=True),
            patch(f"{DETECTORS}.operating_system.get_platform", return_value=self.platform_id),
            patch(f"{DETECTORS}.container.get_platform", return_value=self.platform_id),
            patch(f"{DETECTORS}.container.file_exists", side_effect=lambda p: p in self.files),
            patch(f"{DETECTORS}.container.is_directory", return_value=False),
            patch(f"{DETECTORS}.container.read_file", side_effect=self.files.get),
            patch(f"{DETECTORS}.container.get_hostname", return_value="workstation"),
            patch(f"{DETECTORS}.cloud.file_exists", return_value=False),
            patch(f"{DETECTORS}.cloud.get_platform", return_value=self.platform_id),
            patch(f"{DETECTORS}.privileges.get_platform", return_value=self.platform_id),
            patch(f"{DETECTORS}.privileges.get_uid", return_value=self.uid),
            patch(f"{DETECTORS}.privileges.get_gid", return_value=self.uid),
            patch(f"{DETECTORS}.privileges.get_username", return_value="tester"),
            patch(f"{DETECTORS}.privileges.run_command", side_effect=self._run_command),
        ]
        for p in patches:
            self._stack.enter_context(p)
        return self

    def __exit__(self, *exc_info):
        self._stack.close()


class FeatureDetector(BaseDetector[str]):
    name = "feature"

    def _perform_detection(self) -> str:
        return "enabled"


class PlainAsyncDetector:
    """Duck-typed detector whose detect() is a coroutine"""

    name = "async-feature"

    async def detect(self):
        return "ready"

    def reset(self):
        pass


class FeaturePlugin(BasePlugin):
    name = "feature-plugin"
    version = "0.3.0"

    def create_detectors(self):
        return [FeatureDetector(cache=TimedCache())]


class TestSnapshot:
    """Test aggregate snapshots and end-to-end scenarios"""

    def test_bare_linux_host(self):
        """Test a Linux host with no CI, container or cloud signals"""
        with IsolatedEnvironment():
            detector = EnvironmentDetector()
            snapshot = detector.get_snapshot()
            summary = detector.get_summary()

        assert isinstance(snapshot, EnvironmentInfo)
        assert snapshot.os.type == OSType.LINUX
        assert snapshot.mode == EnvironmentMode.DEVELOPMENT
        assert snapshot.ci.is_ci is False
        assert snapshot.cloud.is_cloud is False
        assert snapshot.container.is_container is False
        assert snapshot.privileges.is_elevated is False
        assert summary == "linux"

    def test_docker_marker_only(self):
        """Test that /.dockerenv alone yields the Docker container block"""
        with IsolatedEnvironment(files={"/.dockerenv": ""}):
            snapshot = EnvironmentDetector().get_snapshot()

        assert snapshot.container.to_dict() == {
            "is_container": True,
            "is_docker": True,
            "is_wsl": False,
            "is_kubernetes": False,
            "container_type": "docker",
        }

    def test_github_pull_request(self):
        """Test a GitHub Actions pull request run"""
        env = {"CI": "true", "GITHUB_ACTIONS": "true", "GITHUB_EVENT_NAME": "pull_request"}
        with IsolatedEnvironment(env=env):
            ci = EnvironmentDetector().get_snapshot().ci

        assert ci.is_ci is True
        assert ci.name == "GitHub Actions"
        assert ci.provider == CIProvider.GITHUB_ACTIONS
        assert ci.is_pr is True

    def test_summary_with_suffixes(self):
        """Test every summary suffix in order"""
        env = {"CI": "true", "AWS_LAMBDA_FUNCTION_NAME": "fn"}
        with IsolatedEnvironment(env=env, files={"/.dockerenv": ""}, uid=0):
            summary = EnvironmentDetector().get_summary()

        assert summary == "linux+docker+ci+cloud+elevated"

    def test_snapshot_to_dict(self):
        """Test the serialized snapshot shape"""
        with IsolatedEnvironment(env={"NODE_ENV": "production"}):
            data = EnvironmentDetector().get_snapshot().to_dict()

        assert set(data) == {"os", "container", "ci", "cloud", "runtime", "privileges", "mode"}
        assert data["mode"] == "production"
        assert data["os"]["type"] == "linux"
        assert data["ci"] == {"is_ci": False}

    @pytest.mark.asyncio
    async def test_async_snapshot_matches_sync(self):
        """Test that the async path gives the same outcome"""
        env = {"CI": "true", "TRAVIS": "true", "NODE_ENV": "test"}
        with IsolatedEnvironment(env=env, files={"/.dockerenv": ""}):
            sync_snapshot = EnvironmentDetector().get_snapshot()
            async_snapshot = await EnvironmentDetector().get_snapshot_async()

        assert async_snapshot == sync_snapshot

    def test_windows_host(self):
        """Test a Windows host with admin rights"""
        with IsolatedEnvironment(platform_id="win32", uid=None, commands={"net session": ""}):
            detector = EnvironmentDetector()
            assert detector.is_windows is True
            assert detector.is_linux is False
            assert detector.is_wsl is False
            assert detector.is_admin is True
            assert detector.is_root is False
            assert detector.get_summary() == "windows+elevated"


class TestAccessors:
    """Test the boolean read-through accessors"""

    def test_accessors(self):
        """Test each accessor against its detector"""
        env = {"KUBERNETES_SERVICE_HOST": "10.0.0.1", "GITLAB_CI": "true", "NETLIFY": "true", "NETLIFY_DEV": "1"}
        with IsolatedEnvironment(env=env, platform_id="darwin"):
            detector = EnvironmentDetector()

            assert detector.is_macos is True
            assert detector.is_windows is False
            assert detector.is_linux is False
            assert detector.is_docker is False
            assert detector.is_wsl is False
            assert detector.is_kubernetes is True
            assert detector.is_container is True
            assert detector.is_ci is True
            assert detector.is_cloud is True
            assert detector.is_serverless is True
            assert detector.is_root is False
            assert detector.is_admin is False
            assert detector.is_elevated is False
            assert detector.container.container_type == ContainerType.KUBERNETES

    def test_accessor_runs_single_detector(self):
        """Test that an accessor only fills its own detector's cache entry"""
        with IsolatedEnvironment():
            detector = EnvironmentDetector()
            detector.is_ci

            assert detector.cache.keys() == ["detector:ci"]


class TestCacheManagement:
    """Test cache control on the facade"""

    def test_shared_cache(self):
        """Test that a snapshot fills one shared cache entry per detector"""
        with IsolatedEnvironment():
            detector = EnvironmentDetector()
            detector.get_snapshot()

            assert detector.cache.size() == 7
            assert set(detector.cache.keys()) == {
                f"detector:{name}" for name in detector.builtin_detectors
            }

    def test_cached_results_survive_env_changes(self):
        """Test that a cached result is reused until reset"""
        with IsolatedEnvironment(env={"NODE_ENV": "production"}):
            detector = EnvironmentDetector()
            assert detector.mode == EnvironmentMode.PRODUCTION

        with IsolatedEnvironment(env={"NODE_ENV": "test"}):
            assert detector.mode == EnvironmentMode.PRODUCTION
            detector.reset_all()
            assert detector.mode == EnvironmentMode.TEST

    def test_clear_cache(self):
        """Test clearing the shared cache"""
        with IsolatedEnvironment():
            detector = EnvironmentDetector()
            detector.get_snapshot()
            detector.clear_cache()

            assert detector.cache.size() == 0

    def test_disable_and_enable(self):
        """Test toggling the shared cache"""
        with IsolatedEnvironment(commands={"groups": "tester users"}) as environment:
            detector = EnvironmentDetector()
            detector.disable_cache()
            detector.is_admin
            detector.is_admin

            assert environment.command_calls == 2
            assert detector.cache.size() == 0

            detector.enable_cache()
            detector.is_admin
            detector.is_admin

            assert environment.command_calls == 3

    def test_cache_option_false_disables_cache(self):
        """Test DetectorOptions(cache=False)"""
        with IsolatedEnvironment():
            detector = EnvironmentDetector(DetectorOptions(cache=False))
            detector.get_snapshot()

            assert detector.cache.is_enabled() is False
            assert detector.cache.size() == 0

    def test_facades_are_isolated(self):
        """Test that two facades do not share caches"""
        first = EnvironmentDetector()
        second = EnvironmentDetector()

        assert first.cache is not second.cache
        assert first.plugins is not second.plugins


class TestConfiguration:
    """Test construction from settings"""

    def test_from_settings(self):
        """Test that settings flow into the detectors"""
        settings = DetectorSettings(
            cache_enabled=False,
            cache_timeout=500,
            command_timeout=2.5,
            mode_variable="APP_ENV",
        )

        detector = EnvironmentDetector.from_settings(settings)

        assert detector.options.cache is False
        assert detector.options.cache_timeout == 500
        assert detector.cache.is_enabled() is False
        assert detector.privilege_detector.command_timeout == 2.5
        assert detector.mode_detector.variable == "APP_ENV"

    def test_from_environment(self):
        """Test building from ENV_DETECTOR_* variables"""
        with patch.dict(os.environ, {"ENV_DETECTOR_MODE_VARIABLE": "DEPLOY_ENV", "DEPLOY_ENV": "staging"}, clear=True):
            detector = EnvironmentDetector.from_settings()

            assert detector.mode == EnvironmentMode.STAGING


class TestPluginsAndInfo:
    """Test plugin passthrough and package info"""

    def test_use_and_detect_plugins(self):
        """Test running plugin-registered detectors"""
        detector = EnvironmentDetector()
        detector.use(FeaturePlugin())

        assert detector.detect_plugins() == {"feature": "enabled"}

        detector.remove_plugin("feature-plugin")
        assert detector.detect_plugins() == {}

    def test_remove_unknown_plugin(self):
        """Test that removing an unknown plugin raises"""
        with pytest.raises(PluginNotInstalledError):
            EnvironmentDetector().remove_plugin("missing")

    def test_detect_plugins_rejects_async_detector(self):
        """Test that coroutine detectors need the async path"""
        detector = EnvironmentDetector()
        detector.plugins.context.register_detector(PlainAsyncDetector())

        with pytest.raises(TypeError):
            detector.detect_plugins()

    @pytest.mark.asyncio
    async def test_detect_plugins_async(self):
        """Test running plugin detectors concurrently"""
        detector = EnvironmentDetector()
        detector.use(FeaturePlugin())
        detector.plugins.context.register_detector(PlainAsyncDetector())

        results = await detector.detect_plugins_async()

        assert results == {"feature": "enabled", "async-feature": "ready"}

    def test_version(self):
        """Test version reporting"""
        assert EnvironmentDetector().get_version() == __version__ == "1.0.0"

    def test_package_info(self):
        """Test package info"""
        detector = EnvironmentDetector()
        detector.use(FeaturePlugin())

        info = detector.get_package_info()

        assert info["version"] == "1.0.0"
        assert info["detectors"] == ["os", "container", "ci", "cloud", "runtime", "privileges", "mode"]
        assert info["plugin_detectors"] == ["feature"]
        assert info["plugins"] == ["feature-plugin"]
        assert info["cache_enabled"] is True
