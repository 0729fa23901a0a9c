"""
Direct uploader: creates the release and uploads local files itself.

Used for targets whose artifact is a single standalone file (mobile app
packages) and for releases directories managed by a RELEASES ledger.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from releasesmith.config import DeployConfig
from releasesmith.constants import (
    FULL_PACKAGE_MARKER,
    LEDGER_FILE_NAME,
    NUPKG_EXTENSION,
)
from releasesmith.exceptions import BuildError, LedgerError, ReleaseHostError
from releasesmith.ledger import ReleaseLedger
from releasesmith.log_utils import logger
from releasesmith.release_host import GitHubReleaseHost, ReleaseAsset, ReleaseRecord
from releasesmith.staging import refresh_directory

from .base import Uploader


class GitHubUploader(Uploader):
    def __init__(
        self, config: DeployConfig, host: Optional[GitHubReleaseHost] = None
    ) -> None:
        self.config = config
        self.host = host

    @property
    def releases_path(self) -> Path:
        return self.config.releases_path

    def _active_host(self) -> Optional[GitHubReleaseHost]:
        if self.host is None and self.config.can_github:
            self.host = GitHubReleaseHost.from_config(self.config)
        return self.host

    # ------------------------------------------------------------------
    # restore
    # ------------------------------------------------------------------

    def restore_build(self) -> None:
        host = self._active_host()
        if host is None:
            return
        try:
            self._restore_from_ledger(host)
        except (ReleaseHostError, LedgerError, BuildError, OSError) as exc:
            logger.warning(f"Could not restore previous build: {exc}")

    def _restore_from_ledger(self, host: GitHubReleaseHost) -> None:
        last_release = host.find_latest()
        if last_release is None:
            logger.info("No previous release to restore from.")
            return

        assets = host.list_assets(last_release)
        ledger_asset = next((a for a in assets if a.name == LEDGER_FILE_NAME), None)
        # Without a ledger the previous release was not a delta-update release
        if ledger_asset is None:
            return

        if not self._needs_refresh(host, last_release, ledger_asset):
            return

        logger.info("Refreshing local releases directory...")
        refresh_directory(self.releases_path)
        for asset in assets:
            if asset.name != LEDGER_FILE_NAME and not asset.name.endswith(NUPKG_EXTENSION):
                continue
            logger.info(f"- Downloading {asset.name}...")
            host.download_asset(asset, self.releases_path / asset.name)

    def _needs_refresh(
        self,
        host: GitHubReleaseHost,
        release: ReleaseRecord,
        ledger_asset: ReleaseAsset,
    ) -> bool:
        full_package = (
            f"{self.config.package_name}-{release.name}{FULL_PACKAGE_MARKER}{NUPKG_EXTENSION}"
        )
        if not (self.releases_path / full_package).is_file():
            logger.warning("Last version's package not found locally.")
            return True

        local_ledger = self.releases_path / LEDGER_FILE_NAME
        local_text = local_ledger.read_text(encoding="utf-8") if local_ledger.is_file() else ""
        if local_text != host.read_asset_text(ledger_asset):
            logger.warning(f"Server's {LEDGER_FILE_NAME} differed from ours.")
            return True
        return False

    # ------------------------------------------------------------------
    # publish
    # ------------------------------------------------------------------

    def local_release_files(self) -> List[Path]:
        if not self.releases_path.is_dir():
            return []
        return sorted(
            p
            for p in self.releases_path.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def publish_build(self, version: str) -> None:
        host = self._active_host()
        if host is None or not self.config.github_upload:
            logger.info("GitHub upload disabled; leaving build in releases directory.")
            return

        if ReleaseLedger.exists_in(self.releases_path):
            ledger = ReleaseLedger.load(self.releases_path)
            ledger.prune()
            ledger.verify()

        files = self.local_release_files()
        if not files:
            logger.warning(f"No files to publish in {self.releases_path}")
            return

        logger.info("Publishing to GitHub...")
        release = host.ensure_draft(version)
        host.upload_files(release, files, first=LEDGER_FILE_NAME)
        logger.info(f"Release page: {self.config.github_repo_url}/releases")
