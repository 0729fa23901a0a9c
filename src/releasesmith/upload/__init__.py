"""
Uploaders that package and publish builds.
"""

from .base import Uploader
from .github import GitHubUploader
from .velopack import (
    LinuxVelopackUploader,
    MacOSVelopackUploader,
    VelopackUploader,
    WindowsVelopackUploader,
)

__all__ = [
    "GitHubUploader",
    "LinuxVelopackUploader",
    "MacOSVelopackUploader",
    "Uploader",
    "VelopackUploader",
    "WindowsVelopackUploader",
]
