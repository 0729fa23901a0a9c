# src/releasesmith/cli.py

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

import platformdirs
from pick import pick

from releasesmith import log_utils
from releasesmith.build import list_platforms
from releasesmith.command_runner import SubprocessCommandRunner
from releasesmith.config import load_config
from releasesmith.constants import (
    APP_DIRS_NAME,
    CODE_SIGNING_PURPOSE,
    DISABLE_FILE_LOGGING_ENV_VAR,
    MSG_FATAL_PREFIX,
    MSG_TRADEMARK_NOTICE,
)
from releasesmith.credentials import (
    CredentialProvider,
    InteractiveCredentialProvider,
    StaticCredentialProvider,
)
from releasesmith.exceptions import ReleasesmithError
from releasesmith.orchestrator import DeployOptions, DeployOrchestrator
from releasesmith.platforms import (
    Architecture,
    Platform,
    host_platform,
    parse_architecture,
    parse_platform,
)

POSITIONAL_ARGS = ("passphrase", "version", "platform", "arch")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="releasesmith",
        description="Build, package and publish a release for one platform",
    )
    parser.add_argument(
        "passphrase", nargs="?", help="Code-signing passphrase (empty to skip)"
    )
    parser.add_argument(
        "version", nargs="?", help="Version override (default: next date-based version)"
    )
    parser.add_argument(
        "platform",
        nargs="?",
        help=f"Target platform: {', '.join(list_platforms())} (default: host)",
    )
    parser.add_argument("arch", nargs="?", help="Target architecture: x64 or arm64")
    parser.add_argument(
        "--config", type=Path, help="Path to the deploy.yaml configuration file"
    )
    parser.add_argument(
        "--log-level", help="Console log level (DEBUG, INFO, WARNING, ERROR)"
    )
    return parser


def is_interactive(args: argparse.Namespace) -> bool:
    """Interactive mode means no positional argument was given at all."""
    return all(getattr(args, name) is None for name in POSITIONAL_ARGS)


def choose_architecture() -> Architecture:
    """
    Let the operator pick a macOS target architecture.
    """
    options = [arch.value for arch in Architecture]
    selected, _ = pick(options, "Select target architecture:", indicator="*")
    return parse_architecture(selected)


def resolve_options(args: argparse.Namespace, interactive: bool) -> DeployOptions:
    """
    Turn positional arguments into DeployOptions.

    Empty strings count as absent, so callers can skip a position with "".

    Raises:
        InvalidTargetError: If the platform or architecture is not recognised.
    """
    platform = parse_platform(args.platform) if args.platform else host_platform()

    architecture: Optional[Architecture] = None
    if args.arch:
        architecture = parse_architecture(args.arch)
    elif platform is Platform.MACOS and interactive:
        architecture = choose_architecture()

    return DeployOptions(
        platform=platform,
        architecture=architecture,
        version=args.version or None,
    )


def create_credentials(
    passphrase: Optional[str], interactive: bool
) -> CredentialProvider:
    supplied = StaticCredentialProvider(
        {CODE_SIGNING_PURPOSE: passphrase} if passphrase else None
    )
    if interactive:
        return InteractiveCredentialProvider(fallback=supplied)
    return supplied


def _pause() -> None:
    try:
        input("Press enter to continue...")
    except EOFError:
        pass


def _enable_file_logging() -> None:
    if os.environ.get(DISABLE_FILE_LOGGING_ENV_VAR):
        return
    log_dir = platformdirs.user_log_dir(APP_DIRS_NAME)
    try:
        log_utils.add_file_logging(Path(log_dir))
    except OSError as exc:
        log_utils.logger.warning(f"Could not enable file logging in {log_dir}: {exc}")


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run one deployment and return the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    interactive = is_interactive(args)

    if args.log_level:
        log_utils.set_log_level(args.log_level)
    _enable_file_logging()

    log_utils.logger.warning(MSG_TRADEMARK_NOTICE)

    try:
        config = load_config(args.config)
        options = resolve_options(args, interactive)
        orchestrator = DeployOrchestrator(
            config,
            options,
            runner=SubprocessCommandRunner(),
            credentials=create_credentials(args.passphrase, interactive),
            pause=_pause if interactive else None,
        )
        orchestrator.run()
    except (ReleasesmithError, OSError) as exc:
        log_utils.logger.error(f"{MSG_FATAL_PREFIX}{exc}")
        if interactive:
            _pause()
        return 1

    if interactive:
        _pause()
    return 0


def main():
    """
    Entry point for the releasesmith command-line interface.

    With no positional arguments the run is interactive: the operator confirms
    before building, may be prompted for a signing passphrase, and acknowledges
    the outcome. Any positional argument makes the run headless.
    """
    sys.exit(run())


if __name__ == "__main__":
    main()
