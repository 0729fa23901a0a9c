"""
Builder registry.
"""

from typing import Dict, List, Optional, Type

from releasesmith.command_runner import CommandRunner
from releasesmith.config import DeployConfig
from releasesmith.credentials import CredentialProvider
from releasesmith.platforms import Platform, PlatformTarget
from releasesmith.release_host import GitHubReleaseHost

from .android import AndroidBuilder
from .base import Builder
from .ios import IOSBuilder
from .linux import LinuxBuilder
from .macos import MacOSBuilder
from .windows import WindowsBuilder

_BUILDERS: Dict[Platform, Type[Builder]] = {
    Platform.WINDOWS: WindowsBuilder,
    Platform.MACOS: MacOSBuilder,
    Platform.LINUX: LinuxBuilder,
    Platform.ANDROID: AndroidBuilder,
    Platform.IOS: IOSBuilder,
}


def get_builder_class(platform: Platform) -> Type[Builder]:
    return _BUILDERS[platform]


def list_platforms() -> List[str]:
    """
    Return available target platform names.
    """
    return [p.value for p in _BUILDERS]


def create_builder(
    target: PlatformTarget,
    version: str,
    config: DeployConfig,
    *,
    runner: CommandRunner,
    credentials: CredentialProvider,
    host: Optional[GitHubReleaseHost] = None,
) -> Builder:
    """
    Instantiate the builder for `target`. This wipes the staging area.
    """
    builder_class = get_builder_class(target.platform)
    return builder_class(
        version,
        config,
        runner=runner,
        credentials=credentials,
        architecture=target.architecture,
        host=host,
    )
