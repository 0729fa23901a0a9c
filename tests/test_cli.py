import pytest

from releasesmith import cli
from releasesmith.command_runner import RecordingCommandRunner
from releasesmith.credentials import (
    InteractiveCredentialProvider,
    StaticCredentialProvider,
)
from releasesmith.exceptions import CredentialError
from releasesmith.platforms import Architecture, Platform


def _args(*argv):
    return cli.build_parser().parse_args(list(argv))


def test_platform_help_lists_registered_builders():
    platform = next(a for a in cli.build_parser()._actions if a.dest == "platform")
    assert "windows, macos, linux, android, ios" in platform.help


def test_no_positionals_is_interactive():
    assert cli.is_interactive(_args())
    assert cli.is_interactive(_args("--log-level", "DEBUG"))


def test_any_positional_is_headless():
    assert not cli.is_interactive(_args(""))
    assert not cli.is_interactive(_args("secret", "2024.101.0"))


def test_resolve_options_from_positionals():
    options = cli.resolve_options(_args("", "2024.101.3", "linux", "arm64"), False)
    assert options.platform is Platform.LINUX
    assert options.architecture is Architecture.ARM64
    assert options.version == "2024.101.3"


def test_empty_positionals_fall_back_to_defaults(mocker):
    mocker.patch("releasesmith.cli.host_platform", return_value=Platform.WINDOWS)
    options = cli.resolve_options(_args("", "", "", ""), False)
    assert options.platform is Platform.WINDOWS
    assert options.architecture is None
    assert options.version is None


def test_interactive_macos_picks_architecture(mocker):
    mocker.patch("releasesmith.cli.host_platform", return_value=Platform.MACOS)
    pick = mocker.patch("releasesmith.cli.pick", return_value=("arm64", 1))

    options = cli.resolve_options(_args(), True)

    assert options.architecture is Architecture.ARM64
    assert pick.call_args.args[0] == ["x64", "arm64"]


def test_headless_macos_does_not_prompt(mocker):
    pick = mocker.patch("releasesmith.cli.pick")
    options = cli.resolve_options(_args("", "", "macos"), False)
    assert options.architecture is None
    pick.assert_not_called()


def test_create_credentials_headless():
    provider = cli.create_credentials("hunter2", False)
    assert isinstance(provider, StaticCredentialProvider)
    assert provider.get_secret("code-signing") == "hunter2"

    with pytest.raises(CredentialError):
        cli.create_credentials("", False).get_secret("code-signing")


def test_create_credentials_interactive_uses_supplied_passphrase(mocker):
    getpass = mocker.patch("releasesmith.credentials.getpass.getpass")
    provider = cli.create_credentials("hunter2", True)
    assert isinstance(provider, InteractiveCredentialProvider)
    assert provider.get_secret("code-signing") == "hunter2"
    getpass.assert_not_called()


def test_run_success(mocker):
    mocker.patch("releasesmith.cli.load_config")
    orchestrator = mocker.patch("releasesmith.cli.DeployOrchestrator")
    pause = mocker.patch("builtins.input")

    assert cli.run(["", "2024.101.0", "linux"]) == 0

    orchestrator.return_value.run.assert_called_once_with()
    assert orchestrator.call_args.kwargs["pause"] is None
    pause.assert_not_called()


def test_headless_fatal_error_exits_without_pause(tmp_path, monkeypatch, mocker):
    monkeypatch.chdir(tmp_path)
    error = mocker.patch.object(cli.log_utils.logger, "error")
    pause = mocker.patch("builtins.input")

    assert cli.run(["", "", "linux"]) == 1

    message = error.call_args.args[0]
    assert message.startswith("FATAL ERROR: No configuration file found")
    pause.assert_not_called()


def test_interactive_fatal_error_pauses(tmp_path, monkeypatch, mocker):
    monkeypatch.chdir(tmp_path)
    mocker.patch.object(cli.log_utils.logger, "error")
    pause = mocker.patch("builtins.input", return_value="")

    assert cli.run([]) == 1

    pause.assert_called_once()


def test_missing_build_artifact_is_fatal(make_config, mocker):
    mocker.patch("releasesmith.cli.load_config", return_value=make_config())
    runner = RecordingCommandRunner()
    mocker.patch("releasesmith.cli.SubprocessCommandRunner", return_value=runner)
    error = mocker.patch.object(cli.log_utils.logger, "error")
    pause = mocker.patch("builtins.input")

    assert cli.run(["", "2024.101.0", "ios"]) == 1

    assert runner.commands[-1].args[0] == "publish"
    message = error.call_args.args[0]
    assert message.startswith("FATAL ERROR: Expected artifact osu.iOS.ipa was not produced")
    pause.assert_not_called()


def test_filesystem_error_is_fatal(mocker):
    mocker.patch("releasesmith.cli.load_config")
    orchestrator = mocker.patch("releasesmith.cli.DeployOrchestrator")
    orchestrator.return_value.run.side_effect = PermissionError("releases is read-only")
    error = mocker.patch.object(cli.log_utils.logger, "error")

    assert cli.run(["", "2024.101.0", "linux"]) == 1

    assert error.call_args.args[0] == "FATAL ERROR: releases is read-only"


def test_invalid_platform_is_fatal(mocker):
    mocker.patch("releasesmith.cli.load_config")
    orchestrator = mocker.patch("releasesmith.cli.DeployOrchestrator")
    error = mocker.patch.object(cli.log_utils.logger, "error")

    assert cli.run(["", "", "amiga"]) == 1

    orchestrator.assert_not_called()
    assert "Unknown target platform: amiga" in error.call_args.args[0]


def test_file_logging_respects_disable_flag(mocker, monkeypatch):
    add = mocker.patch("releasesmith.cli.log_utils.add_file_logging")

    cli._enable_file_logging()
    add.assert_not_called()

    monkeypatch.delenv("RELEASESMITH_DISABLE_FILE_LOGGING")
    cli._enable_file_logging()
    add.assert_called_once()


def test_main_exits_with_status(mocker):
    mocker.patch("releasesmith.cli.run", return_value=1)
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
