"""
Windows builder: compile, embed the application icon, package with Velopack.
"""

from __future__ import annotations

import os
from typing import List, Optional

from releasesmith.command_runner import CommandSpec, run_first_success
from releasesmith.constants import (
    CODE_SIGNING_PURPOSE,
    RCEDIT_PATH,
    WINDOWS_EXECUTABLE,
    WINDOWS_TIMESTAMP_URL,
    WINE_COMMAND,
)
from releasesmith.platforms import Architecture, Platform
from releasesmith.upload.velopack import WindowsVelopackUploader

from .base import Builder


class WindowsBuilder(Builder):
    platform = Platform.WINDOWS

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.code_signing_password: Optional[str] = None
        if self.config.windows_code_signing_cert_path:
            self.code_signing_password = self.credentials.get_secret(CODE_SIGNING_PURPOSE)

    @property
    def channel(self) -> str:
        # The original x64 channel predates multi-arch builds and has no suffix
        if self.target.architecture is Architecture.X64:
            return self.platform.os_name
        return self.runtime_identifier

    def sign_params(self) -> Optional[str]:
        cert_path = self.config.windows_code_signing_cert_path
        if not cert_path:
            return None
        return (
            f"/td sha256 /fd sha256 /f {cert_path} /p {self.code_signing_password or ''}"
            f" /tr {WINDOWS_TIMESTAMP_URL}"
        )

    def create_uploader(self) -> WindowsVelopackUploader:
        extra_args: List[str] = [
            f"--splashImage={self.config.splash_image_path}",
            f"--icon={self.config.icon_path}",
            "--noPortable",
        ]
        sign_params = self.sign_params()
        if sign_params:
            extra_args.append(f"--signParams={sign_params}")

        return WindowsVelopackUploader(
            self.config,
            self.runner,
            application_name=WINDOWS_EXECUTABLE,
            operating_system_name=self.platform.os_name,
            runtime_identifier=self.runtime_identifier,
            channel=self.channel,
            extra_args=extra_args,
            host=self.host,
            secrets=[self.code_signing_password or ""],
        )

    def icon_commands(self) -> List[CommandSpec]:
        """rcedit directly, then the same tool under wine for non-Windows hosts."""
        executable = str(self.staging.path(WINDOWS_EXECUTABLE))
        icon = str(self.config.icon_path)
        cwd = str(self.config.base_dir)
        rcedit = os.path.abspath(self.config.base_dir / RCEDIT_PATH)
        return [
            CommandSpec(RCEDIT_PATH, (executable, "--set-icon", icon), cwd=cwd),
            CommandSpec(WINE_COMMAND, (rcedit, executable, "--set-icon", icon), cwd=cwd),
        ]

    def build(self) -> None:
        self.run_compile()
        run_first_success(
            self.runner, self.icon_commands(), f"set icon on {WINDOWS_EXECUTABLE}"
        )
