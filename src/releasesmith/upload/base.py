"""
Uploader contract.
"""

from abc import ABC, abstractmethod


class Uploader(ABC):
    """
    Publishes a finished build.

    `restore_build` runs before the build and fetches the previous release's
    artifacts as a delta basis; it never fails the run. `publish_build` packages
    and uploads the build for one version.
    """

    @abstractmethod
    def restore_build(self) -> None:
        """Fetch the previous build for this channel, best effort."""

    @abstractmethod
    def publish_build(self, version: str) -> None:
        """Package and publish the build as `version`."""
