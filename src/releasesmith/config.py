"""
Deployment configuration.

The configuration is read once at startup into an immutable DeployConfig and
passed explicitly to everything that needs it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import platformdirs
import yaml

from releasesmith.constants import (
    APP_DIRS_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_ANDROID_PACKAGE_ID,
    DEFAULT_COMPILER,
    DEFAULT_IOS_ARTIFACT_NAME,
    DEFAULT_LEGACY_ASSET_PREFIX,
    DEFAULT_SPLASH_IMAGE,
    GITHUB_API_BASE,
    GITHUB_TOKEN_ENV_VAR,
    GITHUB_WEB_BASE,
    RELEASES_DIR_NAME,
    STAGING_DIR_NAME,
    TEMPLATES_DIR_NAME,
)
from releasesmith.exceptions import (
    ConfigFileError,
    ConfigurationError,
    ConfigValidationError,
)
from releasesmith.log_utils import logger

REQUIRED_KEYS = ("PACKAGE_NAME", "PROJECT_NAME")

_TRUE_STRINGS = {"true", "yes", "1", "on"}
_FALSE_STRINGS = {"false", "no", "0", "off", ""}


def _as_bool(key: str, value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigValidationError(f"Invalid boolean for {key}: {value!r}")


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class DeployConfig:
    """Immutable settings for one deployment run."""

    package_name: str
    project_name: str
    base_dir: Path = field(default_factory=Path.cwd)
    solution_name: Optional[str] = None
    solution_path: Optional[Path] = None
    icon_name: Optional[str] = None
    splash_image: str = DEFAULT_SPLASH_IMAGE
    pack_title: Optional[str] = None
    compiler: str = DEFAULT_COMPILER

    github_username: Optional[str] = None
    github_repo_name: Optional[str] = None
    github_token: Optional[str] = None
    github_upload: bool = False
    increment_version: bool = True

    windows_code_signing_cert_path: Optional[str] = None
    android_code_signing_cert_path: Optional[str] = None
    android_package_id: str = DEFAULT_ANDROID_PACKAGE_ID
    ios_artifact_name: str = DEFAULT_IOS_ARTIFACT_NAME
    apple_code_sign_cert_name: Optional[str] = None
    apple_install_sign_cert_name: Optional[str] = None
    apple_notary_profile_name: Optional[str] = None
    apple_keychain_path: Optional[str] = None
    use_satori_gc: bool = False
    legacy_asset_prefix: str = DEFAULT_LEGACY_ASSET_PREFIX

    @property
    def can_github(self) -> bool:
        """Whether release host credentials and coordinates are all present."""
        return bool(self.github_token and self.github_username and self.github_repo_name)

    @property
    def github_api_endpoint(self) -> str:
        return f"{GITHUB_API_BASE}/{self.github_username}/{self.github_repo_name}/releases"

    @property
    def github_repo_url(self) -> str:
        return f"{GITHUB_WEB_BASE}/{self.github_username}/{self.github_repo_name}"

    @property
    def staging_path(self) -> Path:
        return self.base_dir / STAGING_DIR_NAME

    @property
    def templates_path(self) -> Path:
        return self.base_dir / TEMPLATES_DIR_NAME

    @property
    def releases_path(self) -> Path:
        return self.base_dir / RELEASES_DIR_NAME

    @property
    def splash_image_path(self) -> Path:
        return self.base_dir / self.splash_image

    @property
    def icon_path(self) -> Path:
        if not self.icon_name:
            raise ConfigurationError("ICON_NAME is required to locate the application icon")
        return self.resolved_solution_path() / self.project_name / self.icon_name

    def resolved_solution_path(self) -> Path:
        """Return the configured solution path, discovering it when absent."""
        if self.solution_path is not None:
            return self.solution_path
        if not self.solution_name:
            raise ConfigurationError("Either SOLUTION_PATH or SOLUTION_NAME must be set")
        return find_solution(self.solution_name, self.base_dir)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        base_dir: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "DeployConfig":
        """
        Build a DeployConfig from a flat mapping of upper-case keys.

        Raises:
            ConfigValidationError: If a required key is missing or a value is malformed.
        """
        env_map = os.environ if env is None else env
        missing = [key for key in REQUIRED_KEYS if not _as_str(data.get(key))]
        if missing:
            raise ConfigValidationError(
                "Missing required configuration", details=", ".join(missing)
            )

        token = _as_str(data.get("GITHUB_TOKEN")) or _as_str(
            env_map.get(GITHUB_TOKEN_ENV_VAR)
        )
        configured_base = _as_str(data.get("BASE_DIR"))
        solution_path = _as_str(data.get("SOLUTION_PATH"))

        return cls(
            package_name=str(data["PACKAGE_NAME"]).strip(),
            project_name=str(data["PROJECT_NAME"]).strip(),
            base_dir=Path(configured_base).expanduser()
            if configured_base
            else (base_dir or Path.cwd()),
            solution_name=_as_str(data.get("SOLUTION_NAME")),
            solution_path=Path(solution_path).expanduser() if solution_path else None,
            icon_name=_as_str(data.get("ICON_NAME")),
            splash_image=_as_str(data.get("SPLASH_IMAGE")) or DEFAULT_SPLASH_IMAGE,
            pack_title=_as_str(data.get("PACK_TITLE")),
            compiler=_as_str(data.get("COMPILER")) or DEFAULT_COMPILER,
            github_username=_as_str(data.get("GITHUB_USERNAME")),
            github_repo_name=_as_str(data.get("GITHUB_REPO_NAME")),
            github_token=token,
            github_upload=_as_bool("GITHUB_UPLOAD", data.get("GITHUB_UPLOAD"), False),
            increment_version=_as_bool(
                "INCREMENT_VERSION", data.get("INCREMENT_VERSION"), True
            ),
            windows_code_signing_cert_path=_as_str(
                data.get("WINDOWS_CODE_SIGNING_CERT_PATH")
            ),
            android_code_signing_cert_path=_as_str(
                data.get("ANDROID_CODE_SIGNING_CERT_PATH")
            ),
            android_package_id=_as_str(data.get("ANDROID_PACKAGE_ID"))
            or DEFAULT_ANDROID_PACKAGE_ID,
            ios_artifact_name=_as_str(data.get("IOS_ARTIFACT_NAME"))
            or DEFAULT_IOS_ARTIFACT_NAME,
            apple_code_sign_cert_name=_as_str(data.get("APPLE_CODE_SIGN_CERT_NAME")),
            apple_install_sign_cert_name=_as_str(
                data.get("APPLE_INSTALL_SIGN_CERT_NAME")
            ),
            apple_notary_profile_name=_as_str(data.get("APPLE_NOTARY_PROFILE_NAME")),
            apple_keychain_path=_as_str(data.get("APPLE_KEYCHAIN_PATH")),
            use_satori_gc=_as_bool("USE_SATORI_GC", data.get("USE_SATORI_GC"), False),
            legacy_asset_prefix=_as_str(data.get("LEGACY_ASSET_PREFIX"))
            or DEFAULT_LEGACY_ASSET_PREFIX,
        )


def default_config_paths(cwd: Optional[Path] = None) -> List[Path]:
    """Candidate configuration files, most specific first."""
    working_dir = cwd or Path.cwd()
    return [
        working_dir / CONFIG_FILE_NAME,
        Path(platformdirs.user_config_dir(APP_DIRS_NAME)) / CONFIG_FILE_NAME,
    ]


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Parse a YAML configuration file into a mapping.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigFileError(f"Cannot read configuration file {path}", details=str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"Invalid YAML in {path}", details=str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Configuration file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[Path] = None,
    *,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DeployConfig:
    """
    Load the deployment configuration.

    An explicit `path` must exist. Otherwise the first existing file from
    default_config_paths() is used.

    Raises:
        ConfigurationError: If no configuration file is found or it is invalid.
    """
    if path is not None:
        if not path.exists():
            raise ConfigFileError(f"Configuration file not found: {path}")
        candidates = [path]
    else:
        candidates = [p for p in default_config_paths(cwd) if p.exists()]
        if not candidates:
            searched = ", ".join(str(p) for p in default_config_paths(cwd))
            raise ConfigFileError("No configuration file found", details=searched)

    config_path = candidates[0]
    logger.debug(f"Loading configuration from {config_path}")
    data = read_config_file(config_path)
    return DeployConfig.from_mapping(data, base_dir=cwd, env=env)


def find_solution(name: str, start: Optional[Path] = None) -> Path:
    """
    Find the directory holding `<name>.sln`, walking up from `start`.

    A checkout nested one level down in an `osu` directory is also recognised.

    Raises:
        ConfigurationError: If the filesystem root is reached without a match.
    """
    path = (start or Path.cwd()).resolve()
    solution_file = f"{name}.sln"

    while True:
        if (path / solution_file).is_file():
            return path
        nested = path / "osu"
        if (nested / solution_file).is_file():
            return nested
        if path.parent == path:
            raise ConfigurationError(f"Could not find solution {solution_file}")
        path = path.parent
