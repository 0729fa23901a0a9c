"""
Android builder: a signed APK uploaded directly to the release.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from releasesmith.constants import ANDROID_TARGET_FRAMEWORK, CODE_SIGNING_PURPOSE
from releasesmith.platforms import Platform
from releasesmith.upload.github import GitHubUploader
from releasesmith.versioning import android_version_code

from .base import Builder


class AndroidBuilder(Builder):
    platform = Platform.ANDROID
    target_framework = ANDROID_TARGET_FRAMEWORK

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.code_signing_password: Optional[str] = None
        if self.config.android_code_signing_cert_path:
            self.code_signing_password = self.credentials.get_secret(CODE_SIGNING_PURPOSE)

    def create_uploader(self) -> GitHubUploader:
        return GitHubUploader(self.config, host=self.host)

    def signing_args(self) -> List[str]:
        keystore = self.config.android_code_signing_cert_path
        if not keystore:
            return []
        password = self.code_signing_password or ""
        return [
            "-p:AndroidKeyStore=true",
            f"-p:AndroidSigningKeyStore={keystore}",
            f"-p:AndroidSigningKeyAlias={Path(keystore).stem}",
            f"-p:AndroidSigningKeyPass={password}",
            f"-p:AndroidSigningKeyStorePass={password}",
        ]

    def build(self) -> None:
        args = [f"-p:ApplicationVersion={android_version_code(self.version)}"]
        args += self.signing_args()
        self.run_compile(args, secrets=[self.code_signing_password or ""])

        package_id = self.config.android_package_id
        self.move_to_releases(f"{package_id}-Signed.apk", f"{package_id}.apk")
