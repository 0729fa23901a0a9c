"""
macOS builder: fill an app bundle template with the compiled application.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from releasesmith.command_runner import CommandSpec
from releasesmith.constants import APP_NAME, MACOS_APP_BUNDLE, MACOS_ENTITLEMENTS_FILE
from releasesmith.platforms import Platform
from releasesmith.upload.velopack import MacOSVelopackUploader

from .base import Builder


class MacOSBuilder(Builder):
    platform = Platform.MACOS

    @property
    def staging_target(self) -> Path:
        return self.staging.path(MACOS_APP_BUNDLE)

    @property
    def publish_target(self) -> Path:
        return self.staging_target / "Contents" / "MacOS"

    def packaging_args(self) -> List[str]:
        """Signing and notarization arguments; each is skipped when not configured."""
        config = self.config
        args = [
            f"--signEntitlements={config.base_dir / MACOS_ENTITLEMENTS_FILE}",
            "--noInst",
        ]
        if config.apple_code_sign_cert_name:
            args.append(f"--signAppIdentity={config.apple_code_sign_cert_name}")
        if config.apple_install_sign_cert_name:
            args.append(f"--signInstallIdentity={config.apple_install_sign_cert_name}")
        if config.apple_notary_profile_name:
            args.append(f"--notaryProfile={config.apple_notary_profile_name}")
        if config.apple_keychain_path:
            args.append(f"--keychain={config.apple_keychain_path}")
        return args

    def create_uploader(self) -> MacOSVelopackUploader:
        return MacOSVelopackUploader(
            self.config,
            self.runner,
            application_name=APP_NAME,
            operating_system_name=self.platform.os_name,
            runtime_identifier=self.runtime_identifier,
            channel=self.channel,
            extra_args=self.packaging_args(),
            staging_path=self.staging_target,
            host=self.host,
        )

    def build(self) -> None:
        self.staging.copy_template_tree(
            self.config.templates_path / MACOS_APP_BUNDLE, MACOS_APP_BUNDLE
        )

        self.run_compile(output_dir=self.publish_target)

        # Bump modification times so Finder re-reads the bundle
        self.runner.run(
            CommandSpec(
                "touch",
                (str(self.staging_target), str(self.staging.root)),
                cwd=str(self.config.base_dir),
            )
        )
