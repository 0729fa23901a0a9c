"""
iOS builder: an IPA uploaded directly to the release.
"""

from __future__ import annotations

from releasesmith.constants import IOS_DISPLAY_VERSION, IOS_TARGET_FRAMEWORK
from releasesmith.platforms import Platform
from releasesmith.upload.github import GitHubUploader

from .base import Builder


class IOSBuilder(Builder):
    platform = Platform.IOS
    target_framework = IOS_TARGET_FRAMEWORK

    def create_uploader(self) -> GitHubUploader:
        return GitHubUploader(self.config, host=self.host)

    def build(self) -> None:
        self.run_compile([f"-p:ApplicationDisplayVersion={IOS_DISPLAY_VERSION}"])
        artifact = self.config.ios_artifact_name
        self.move_to_releases(artifact, artifact)
