"""
Top-level deployment flow for one platform and one version.
"""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Optional

from releasesmith.build import create_builder
from releasesmith.command_runner import CommandRunner, CommandSpec
from releasesmith.config import DeployConfig
from releasesmith.constants import APPVEYOR_COMMAND
from releasesmith.credentials import CredentialProvider
from releasesmith.exceptions import ExternalToolError
from releasesmith.log_utils import logger
from releasesmith.platforms import Architecture, Platform, PlatformTarget
from releasesmith.release_host import GitHubReleaseHost
from releasesmith.versioning import next_version, validate_version


@dataclass(frozen=True)
class DeployOptions:
    """What to deploy. Everything left as None is resolved at run time."""

    platform: Platform
    architecture: Optional[Architecture] = None
    version: Optional[str] = None
    today: Optional[date] = None


class DeployOrchestrator:
    """
    Runs: resolve version -> create builder -> create uploader -> restore
    previous build -> build -> publish.

    The first failing step raises; nothing here catches pipeline errors.
    """

    def __init__(
        self,
        config: DeployConfig,
        options: DeployOptions,
        *,
        runner: CommandRunner,
        credentials: CredentialProvider,
        host: Optional[GitHubReleaseHost] = None,
        pause: Optional[Callable[[], None]] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.config = config
        self.options = options
        self.runner = runner
        self.credentials = credentials
        self.host = host
        self.pause = pause
        self.which = which
        self.target = PlatformTarget.create(options.platform, options.architecture)

    def _active_host(self) -> Optional[GitHubReleaseHost]:
        if self.host is None and self.config.can_github:
            self.host = GitHubReleaseHost.from_config(self.config)
        return self.host

    def resolve_version(self) -> str:
        """Return the override when given, otherwise the next date-based version."""
        if self.options.version:
            return validate_version(self.options.version)

        last_tag = None
        host = self._active_host()
        if host is not None:
            logger.info("Checking GitHub releases...")
            last_release = host.find_latest()
            if last_release is None:
                logger.info("This is the first GitHub release")
            else:
                logger.info(f"Last GitHub release was {last_release.name}.")
                last_tag = last_release.tag_name

        today = self.options.today or date.today()
        return next_version(last_tag, today, self.config.increment_version)

    def stamp_ci_version(self, version: str) -> bool:
        """Report the version to AppVeyor when running there. Never fatal."""
        executable = self.which(APPVEYOR_COMMAND)
        if not executable:
            return False
        command = CommandSpec(executable, ("UpdateBuild", "-Version", version))
        try:
            self.runner.run(command)
        except ExternalToolError as exc:
            logger.warning(f"Could not update AppVeyor build version: {exc}")
            return False
        return True

    def _ensure_releases_dir(self) -> None:
        releases = self.config.releases_path
        if not releases.is_dir():
            logger.warning("No release directory found. Make sure you want this!")
            releases.mkdir(parents=True, exist_ok=True)

    def run(self) -> str:
        """
        Deploy and return the version that was built.

        Raises:
            ReleasesmithError: From whichever step failed first.
        """
        # Solution discovery fails fast, before anything touches the disk
        self.config = replace(
            self.config, solution_path=self.config.resolved_solution_path()
        )
        self._ensure_releases_dir()

        version = self.resolve_version()

        logger.info(f"Increment Version:     {self.config.increment_version}")
        logger.info(
            f"Signing Certificate:   {self.config.windows_code_signing_cert_path or 'none'}"
        )
        logger.info(f"Upload to GitHub:      {self.config.github_upload}")
        logger.info(f"Ready to deploy version {version} on platform {self.target}!")
        if self.pause is not None:
            self.pause()

        started = time.monotonic()
        self.stamp_ci_version(version)

        logger.info("Running build process...")
        builder = create_builder(
            self.target,
            version,
            self.config,
            runner=self.runner,
            credentials=self.credentials,
            host=self._active_host(),
        )
        uploader = builder.create_uploader()

        logger.info("Restoring previous build...")
        uploader.restore_build()

        builder.build()

        logger.info("Publishing build...")
        uploader.publish_build(version)

        logger.info(f"Done! ({time.monotonic() - started:.1f}s)")
        return version
