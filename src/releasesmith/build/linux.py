"""
Linux builder: compile into an AppDir that Velopack turns into an AppImage.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from releasesmith.constants import APP_NAME, LINUX_APP_DIR, LINUX_ENTRY_POINT
from releasesmith.exceptions import BuildError
from releasesmith.platforms import Platform
from releasesmith.upload.velopack import LinuxVelopackUploader

from .base import Builder


def mark_executable(path: Path) -> None:
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class LinuxBuilder(Builder):
    platform = Platform.LINUX

    @property
    def staging_target(self) -> Path:
        return self.staging.path(LINUX_APP_DIR)

    @property
    def publish_target(self) -> Path:
        return self.staging_target / "usr" / "bin"

    def create_uploader(self) -> LinuxVelopackUploader:
        return LinuxVelopackUploader(
            self.config,
            self.runner,
            application_name=APP_NAME,
            operating_system_name=self.platform.os_name,
            runtime_identifier=self.runtime_identifier,
            channel=self.channel,
            # zstd (the packager default) is not supported on some systems
            extra_args=["--compression", "gzip"],
            staging_path=self.staging_target,
            host=self.host,
        )

    def build(self) -> None:
        self.staging.copy_template_files(
            self.config.templates_path / LINUX_APP_DIR, LINUX_APP_DIR
        )
        entry_point = self.staging_target / LINUX_ENTRY_POINT
        try:
            # Template archives do not keep the executable bit
            mark_executable(entry_point)
            self.publish_target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildError(
                f"Cannot prepare {LINUX_APP_DIR}", path=str(entry_point), details=str(exc)
            ) from exc
        self.run_compile(output_dir=self.publish_target)
        self.attach_satori_gc(self.publish_target)
