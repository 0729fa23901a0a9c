from unittest.mock import MagicMock

import platformdirs
import pytest
import requests
from helpers import API_ENDPOINT, PACKAGE_NAME, PROJECT_NAME, SOLUTION_NAME

from releasesmith.command_runner import RecordingCommandRunner
from releasesmith.config import DeployConfig
from releasesmith.credentials import StaticCredentialProvider
from releasesmith.release_host import GitHubReleaseHost

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """
    Register the markers used across the suite.
    """
    config.addinivalue_line("markers", "unit: fast tests without filesystem setup")
    config.addinivalue_line(
        "markers", "integration: tests that run a whole pipeline against fakes"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and XDG directories at a temporary tree and disable file logging.
    """
    base = tmp_path_factory.mktemp("releasesmith")
    config_dir = base / "config"
    log_dir = base / "state" / "log"
    for path in (config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("XDG_STATE_HOME", str(base / "state"))
    monkeypatch.setenv("RELEASESMITH_DISABLE_FILE_LOGGING", "1")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )


@pytest.fixture(autouse=True)
def _block_requests(monkeypatch):
    """
    Replace requests entry points and Session.request with a blocking callable.
    """
    for name in ("get", "post", "put", "delete", "head", "patch", "options"):
        monkeypatch.setattr(requests, name, _block_network)
    monkeypatch.setattr(requests.Session, "request", _block_network)


@pytest.fixture
def workspace(tmp_path):
    """
    A deployment working directory with a solution, templates and an icon.
    """
    (tmp_path / f"{SOLUTION_NAME}.sln").write_text("", encoding="utf-8")
    project_dir = tmp_path / PROJECT_NAME
    project_dir.mkdir()
    (project_dir / "lazer.ico").write_bytes(b"ico")
    (tmp_path / "lazer-velopack.jpg").write_bytes(b"jpg")

    app_dir = tmp_path / "templates" / "osu!.AppDir"
    app_dir.mkdir(parents=True)
    (app_dir / "AppRun").write_text("#!/bin/sh\n", encoding="utf-8")
    (app_dir / "osu!.desktop").write_text("[Desktop Entry]\n", encoding="utf-8")
    (app_dir / "nested").mkdir()

    bundle = tmp_path / "templates" / "osu!.app" / "Contents"
    bundle.mkdir(parents=True)
    (bundle / "Info.plist").write_text("<plist/>", encoding="utf-8")

    (tmp_path / "releases").mkdir()
    return tmp_path


@pytest.fixture
def make_config(workspace):
    """
    Factory for DeployConfig rooted at the `workspace` fixture.
    """

    def _make(**overrides):
        values = dict(
            package_name=PACKAGE_NAME,
            project_name=PROJECT_NAME,
            base_dir=workspace,
            solution_path=workspace,
            icon_name="lazer.ico",
        )
        values.update(overrides)
        return DeployConfig(**values)

    return _make


@pytest.fixture
def github_config(make_config):
    return make_config(
        github_username="ppy",
        github_repo_name="osu",
        github_token="ghp_secret",
        github_upload=True,
    )


@pytest.fixture
def runner():
    return RecordingCommandRunner()


@pytest.fixture
def no_credentials():
    return StaticCredentialProvider()


@pytest.fixture
def mock_host():
    """
    A MagicMock standing in for GitHubReleaseHost.
    """
    host = MagicMock(spec=GitHubReleaseHost)
    host.find_latest.return_value = None
    host.find_release.return_value = None
    host.list_assets.return_value = []
    return host


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def host(session):
    return GitHubReleaseHost(API_ENDPOINT, "ghp_secret", session=session)
