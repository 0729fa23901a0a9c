"""
Channel-packaging uploaders backed by Velopack (`vpk`).

The packaging tool produces the installer, portable archive and update
metadata for one channel and can upload them to GitHub itself. Platform
subclasses only add the post-publish rename that keeps legacy download
names stable.
"""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Dict, Optional, Sequence, Tuple

from releasesmith.command_runner import CommandRunner, CommandSpec
from releasesmith.config import DeployConfig
from releasesmith.constants import PACKAGER_SUBCOMMAND
from releasesmith.exceptions import ReleaseStateError, UnrecognizedChannelError
from releasesmith.log_utils import logger
from releasesmith.release_host import GitHubReleaseHost

from .base import Uploader


class VelopackUploader(Uploader):
    # Channel -> suffix used when renaming the published asset. Empty means
    # any channel is accepted and nothing is renamed.
    channel_suffixes: ClassVar[Dict[str, str]] = {}

    def __init__(
        self,
        config: DeployConfig,
        runner: CommandRunner,
        *,
        application_name: str,
        operating_system_name: str,
        runtime_identifier: str,
        channel: str,
        extra_args: Sequence[str] = (),
        staging_path: Optional[Path] = None,
        host: Optional[GitHubReleaseHost] = None,
        secrets: Sequence[str] = (),
    ) -> None:
        self.config = config
        self.runner = runner
        self.application_name = application_name
        self.operating_system_name = operating_system_name
        self.runtime_identifier = runtime_identifier
        self.channel = channel
        self.extra_args = tuple(extra_args)
        self.staging_path = staging_path or config.staging_path
        self.host = host
        self.secrets = tuple(s for s in secrets if s)

    @property
    def pack_title(self) -> Optional[str]:
        return None

    @property
    def can_upload(self) -> bool:
        return self.config.can_github and self.config.github_upload

    def _packager(self, *args: str) -> CommandSpec:
        secrets = self.secrets
        if self.config.github_token:
            secrets = (*secrets, self.config.github_token)
        return CommandSpec(
            program=self.config.compiler,
            args=(PACKAGER_SUBCOMMAND, *args),
            cwd=str(self.config.base_dir),
            secrets=secrets,
        )

    def _github_args(self) -> Tuple[str, ...]:
        return (
            "--repoUrl",
            self.config.github_repo_url,
            "--token",
            self.config.github_token or "",
        )

    def restore_build(self) -> None:
        if not self.config.can_github:
            return
        result = self.runner.run(
            self._packager(
                "download",
                "github",
                *self._github_args(),
                "--channel",
                self.channel,
                "-o",
                str(self.config.releases_path),
            ),
            check=False,
        )
        if not result.success:
            logger.warning(
                f"Could not restore previous build for channel {self.channel}; continuing without a delta basis."
            )

    def pack_command(self, version: str) -> CommandSpec:
        args = [
            f"[{self.operating_system_name}]",
            "pack",
            "-u",
            self.config.package_name,
            "-v",
            version,
            "-r",
            self.runtime_identifier,
            "-o",
            str(self.config.releases_path),
            "-e",
            self.application_name,
            "-p",
            str(self.staging_path),
            f"--channel={self.channel}",
        ]
        if self.pack_title:
            args += ["--packTitle", self.pack_title]
        args += self.extra_args
        return self._packager(*args)

    def upload_command(self, version: str) -> CommandSpec:
        return self._packager(
            "upload",
            "github",
            *self._github_args(),
            "-o",
            str(self.config.releases_path),
            "--tag",
            version,
            "--releaseName",
            version,
            "--merge",
            f"--channel={self.channel}",
        )

    def channel_suffix(self) -> Optional[str]:
        """
        Return the rename suffix for this channel, or None when nothing is renamed.

        Raises:
            UnrecognizedChannelError: If the subclass restricts channels and this one is unknown.
        """
        if not self.channel_suffixes:
            return None
        try:
            return self.channel_suffixes[self.channel]
        except KeyError:
            raise UnrecognizedChannelError(
                self.channel, sorted(self.channel_suffixes)
            ) from None

    def renamed_asset(self, suffix: str) -> Optional[Tuple[str, str]]:
        """
        Return (name produced by the packaging tool, legacy name) for this channel.

        None keeps the published asset names as the packaging tool chose them.
        """
        return None

    def publish_build(self, version: str) -> None:
        # Validate before packaging so a bad channel leaves nothing behind
        suffix = self.channel_suffix()

        self.runner.run(self.pack_command(version))

        if not self.can_upload:
            logger.info("GitHub upload disabled; leaving packages in releases directory.")
            return

        self.runner.run(self.upload_command(version))

        renamed = self.renamed_asset(suffix) if suffix is not None else None
        if renamed is not None:
            self.rename_asset(version, *renamed)

    def rename_asset(self, version: str, old_name: str, new_name: str) -> None:
        """
        Rename an asset of the release for `version`.

        Raises:
            ReleaseStateError: If the release or the asset cannot be found.
        """
        if self.host is None:
            self.host = GitHubReleaseHost.from_config(self.config)

        release = self.host.find_release(version)
        if release is None:
            raise ReleaseStateError(f"Release {version} not found after upload")

        asset = next((a for a in self.host.list_assets(release) if a.name == old_name), None)
        if asset is None:
            raise ReleaseStateError(
                f"Asset {old_name} missing from release {version}",
                details="the packaging step produced an unexpected filename",
            )

        logger.info(f"- Renaming asset {old_name} to {new_name}...")
        self.host.rename_asset(asset, new_name)


class WindowsVelopackUploader(VelopackUploader):
    channel_suffixes = {"win": "", "win-arm64": "-arm64"}

    @property
    def pack_title(self) -> Optional[str]:
        return self.config.pack_title

    def renamed_asset(self, suffix: str) -> Tuple[str, str]:
        return f"{self.config.package_name}-{self.channel}-Setup.exe", f"install{suffix}.exe"


class MacOSVelopackUploader(VelopackUploader):
    channel_suffixes = {"osx-arm64": "Apple.Silicon", "osx-x64": "Intel"}

    def renamed_asset(self, suffix: str) -> Tuple[str, str]:
        return (
            f"{self.config.package_name}-{self.channel}-Portable.zip",
            f"{self.config.legacy_asset_prefix}.app.{suffix}.zip",
        )


class LinuxVelopackUploader(VelopackUploader):
    # x64 keeps the original asset name without an architecture suffix
    channel_suffixes = {"linux-x64": "", "linux-arm64": "-arm64"}

    def renamed_asset(self, suffix: str) -> Tuple[str, str]:
        return (
            f"{self.config.package_name}-{self.channel}.AppImage",
            f"{self.config.legacy_asset_prefix}{suffix}.AppImage",
        )
