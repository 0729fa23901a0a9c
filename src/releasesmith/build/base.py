"""
Base helpers for platform builders.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import zipfile
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import ClassVar, Optional, Sequence

import requests

from releasesmith.command_runner import CommandResult, CommandRunner, CommandSpec
from releasesmith.config import DeployConfig
from releasesmith.constants import (
    ASSET_DOWNLOAD_TIMEOUT,
    COMPILE_CONFIGURATION,
    DEFAULT_CHUNK_SIZE,
    DESKTOP_TARGET_FRAMEWORK,
    SATORI_GC_URL_TEMPLATE,
)
from releasesmith.credentials import CredentialProvider
from releasesmith.exceptions import BuildError, ReleaseHostError
from releasesmith.log_utils import logger
from releasesmith.platforms import Architecture, Platform, PlatformTarget
from releasesmith.release_host import GitHubReleaseHost
from releasesmith.staging import StagingArea
from releasesmith.upload.base import Uploader


class Builder(ABC):
    """
    Compiles and post-processes one platform build.

    Constructing a builder wipes the staging area. `create_uploader` only picks
    the matching uploader; `build` does the work and raises on the first
    failing step.
    """

    platform: ClassVar[Platform]
    target_framework: ClassVar[str] = DESKTOP_TARGET_FRAMEWORK

    def __init__(
        self,
        version: str,
        config: DeployConfig,
        *,
        runner: CommandRunner,
        credentials: CredentialProvider,
        architecture: Optional[Architecture] = None,
        host: Optional[GitHubReleaseHost] = None,
    ) -> None:
        self.version = version
        self.config = config
        self.runner = runner
        self.credentials = credentials
        self.host = host
        self.target = PlatformTarget.create(self.platform, architecture)
        self.staging = StagingArea(config.staging_path)
        self.staging.refresh()

    @property
    def runtime_identifier(self) -> str:
        return self.target.runtime_identifier

    @property
    def channel(self) -> str:
        return self.runtime_identifier

    @abstractmethod
    def create_uploader(self) -> Uploader:
        """Return the uploader for this build. Has no side effects."""

    @abstractmethod
    def build(self) -> None:
        """Compile and post-process the build."""

    def compile_command(
        self, extra_args: Sequence[str] = (), output_dir: Optional[Path] = None
    ) -> CommandSpec:
        output = output_dir or self.staging.root
        return CommandSpec(
            program=self.config.compiler,
            args=(
                "publish",
                "-f",
                self.target_framework,
                "-r",
                self.runtime_identifier,
                "-c",
                COMPILE_CONFIGURATION,
                "-o",
                str(output),
                f"-p:Version={self.version}",
                "--self-contained",
                *extra_args,
                self.config.project_name,
            ),
            cwd=str(self.config.resolved_solution_path()),
        )

    def run_compile(
        self,
        extra_args: Sequence[str] = (),
        output_dir: Optional[Path] = None,
        secrets: Sequence[str] = (),
    ) -> CommandResult:
        command = self.compile_command(extra_args, output_dir)
        if secrets:
            command = replace(command, secrets=tuple(s for s in secrets if s))
        return self.runner.run(command)

    def move_to_releases(self, staged_name: str, release_name: str) -> Path:
        """
        Move a file produced in staging into the releases directory.

        Raises:
            BuildError: If the compiler did not produce the file or it cannot be moved.
        """
        source = self.staging.path(staged_name)
        if not source.is_file():
            raise BuildError(
                f"Expected artifact {staged_name} was not produced", path=str(source)
            )
        destination = self.config.releases_path / release_name
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise BuildError(
                f"Cannot move {staged_name} to {destination}",
                path=str(source),
                details=str(exc),
            ) from exc
        return destination

    def attach_satori_gc(self, output_dir: Optional[Path] = None) -> None:
        """
        Extract the Satori GC runtime into the build output when enabled.

        Every archive entry is written flat into `output_dir`, overwriting
        the stock runtime files.
        """
        if not self.config.use_satori_gc:
            return

        output = output_dir or self.staging.root
        url = SATORI_GC_URL_TEMPLATE.format(runtime_identifier=self.runtime_identifier)
        logger.info("Downloading Satori GC release...")

        fd, archive_path = tempfile.mkstemp(suffix=".zip")
        os.close(fd)
        try:
            try:
                with requests.get(url, stream=True, timeout=ASSET_DOWNLOAD_TIMEOUT) as response:
                    response.raise_for_status()
                    with open(archive_path, "wb") as f:
                        for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                            if chunk:
                                f.write(chunk)
            except requests.RequestException as exc:
                raise ReleaseHostError(
                    "Failed to download Satori GC", url=url, details=str(exc)
                ) from exc

            logger.info("Extracting Satori GC into staging folder...")
            try:
                with zipfile.ZipFile(archive_path) as archive:
                    for member in archive.infolist():
                        if member.is_dir():
                            continue
                        target = Path(output) / Path(member.filename).name
                        with archive.open(member) as src, open(target, "wb") as dst:
                            shutil.copyfileobj(src, dst)
            except (OSError, zipfile.BadZipFile) as exc:
                raise BuildError(
                    "Failed to extract Satori GC", path=str(output), details=str(exc)
                ) from exc
        finally:
            os.remove(archive_path)
