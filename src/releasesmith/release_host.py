"""
GitHub Releases client.

This module wraps the handful of GitHub REST calls a deployment needs: listing
releases, creating draft releases and managing release assets. Every request
is synchronous and authenticated; failures are raised as ReleaseHostError
without retrying.
"""

from __future__ import annotations

import importlib.metadata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from releasesmith.constants import (
    ASSET_DOWNLOAD_TIMEOUT,
    ASSET_UPLOAD_TIMEOUT,
    DEFAULT_CHUNK_SIZE,
    GITHUB_API_TIMEOUT,
    GITHUB_API_VERSION,
)
from releasesmith.exceptions import ReleaseHostError, ReleaseStateError
from releasesmith.log_utils import logger

UPLOAD_URL_TEMPLATE_SUFFIX = "{?name,label}"


def get_user_agent() -> str:
    """Return `releasesmith/{version}`, or `releasesmith/unknown` when not installed."""
    try:
        app_version = importlib.metadata.version("releasesmith")
    except importlib.metadata.PackageNotFoundError:
        app_version = "unknown"
    return f"releasesmith/{app_version}"


@dataclass
class ReleaseAsset:
    """A file attached to a release."""

    id: int
    name: str
    url: str
    """API URL of the asset (used for download, delete and rename)"""

    browser_download_url: Optional[str] = None
    size: int = 0


@dataclass
class ReleaseRecord:
    """A release on the host, identified by its tag."""

    id: int
    name: str
    tag_name: str
    draft: bool = False
    prerelease: bool = False
    upload_url: str = ""
    assets: List[ReleaseAsset] = field(default_factory=list)

    @property
    def asset_upload_url(self) -> str:
        """Upload endpoint with the URI-template query suffix removed."""
        return self.upload_url.replace(UPLOAD_URL_TEMPLATE_SUFFIX, "")


def parse_asset(data: Dict[str, Any]) -> ReleaseAsset:
    """
    Create a ReleaseAsset from GitHub API asset data.

    Raises:
        KeyError, TypeError, ValueError: If required fields are missing or malformed.
    """
    return ReleaseAsset(
        id=int(data["id"]),
        name=str(data["name"]),
        url=str(data.get("url") or ""),
        browser_download_url=data.get("browser_download_url"),
        size=int(data.get("size") or 0),
    )


def parse_release(data: Dict[str, Any]) -> ReleaseRecord:
    """
    Create a ReleaseRecord from GitHub API release data.

    The display name doubles as the version tag, so a release without a
    `tag_name` falls back to its name.

    Raises:
        KeyError, TypeError, ValueError: If required fields are missing or malformed.
    """
    name = str(data.get("name") or data.get("tag_name") or "")
    tag_name = str(data.get("tag_name") or name)
    assets_data = data.get("assets") or []
    return ReleaseRecord(
        id=int(data["id"]),
        name=name,
        tag_name=tag_name,
        draft=bool(data.get("draft", False)),
        prerelease=bool(data.get("prerelease", False)),
        upload_url=str(data.get("upload_url") or ""),
        assets=[parse_asset(a) for a in assets_data if isinstance(a, dict)],
    )


class GitHubReleaseHost:
    """
    Client for one repository's releases.

    Usage:
        host = GitHubReleaseHost(
            api_endpoint="https://api.github.com/repos/owner/repo/releases",
            token="ghp_...",
        )
        release = host.ensure_draft("2024.101.0")
        host.upload_or_replace(release, Path("releases/RELEASES"))
    """

    def __init__(
        self,
        api_endpoint: str,
        token: str,
        session: Optional[requests.Session] = None,
        timeout: int = GITHUB_API_TIMEOUT,
    ) -> None:
        self.api_endpoint = api_endpoint.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(
        cls, config: Any, session: Optional[requests.Session] = None
    ) -> "GitHubReleaseHost":
        """Create a client from a DeployConfig with GitHub credentials."""
        return cls(config.github_api_endpoint, config.github_token, session=session)

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    def _headers(self, accept: str = "application/vnd.github+json") -> Dict[str, str]:
        return {
            "Accept": accept,
            "Authorization": f"token {self.token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": get_user_agent(),
        }

    def _request(
        self,
        method: str,
        url: str,
        *,
        accept: str = "application/vnd.github+json",
        extra_headers: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
        **kwargs: Any,
    ) -> requests.Response:
        headers = self._headers(accept)
        if extra_headers:
            headers.update(extra_headers)

        logger.debug(f"GitHub API request: {method} {url}")
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=timeout or self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise ReleaseHostError(
                f"GitHub API {method} {url} failed",
                status_code=status,
                url=url,
                details=str(exc),
            ) from exc
        except requests.RequestException as exc:
            raise ReleaseHostError(
                f"GitHub API {method} {url} failed", url=url, details=str(exc)
            ) from exc
        return response

    def _json(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ReleaseHostError(
                "Invalid JSON received from GitHub API", url=url, details=str(exc)
            ) from exc

    # ------------------------------------------------------------------
    # releases
    # ------------------------------------------------------------------

    def list_releases(self) -> List[ReleaseRecord]:
        """List releases, most recent first."""
        response = self._request("GET", self.api_endpoint)
        data = self._json(response, self.api_endpoint)
        if not isinstance(data, list):
            raise ReleaseHostError(
                "Invalid releases data received from GitHub API", url=self.api_endpoint
            )

        releases: List[ReleaseRecord] = []
        for entry in data:
            if not isinstance(entry, dict):
                logger.warning(
                    f"Skipping malformed release entry: expected dict, got {type(entry).__name__}"
                )
                continue
            try:
                releases.append(parse_release(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed release entry: {exc}")
        return releases

    def find_latest(self, include_drafts: bool = False) -> Optional[ReleaseRecord]:
        """
        Return the most recent release, or None if the repository has none.

        Drafts are skipped unless `include_drafts` is set.
        """
        for release in self.list_releases():
            if include_drafts or not release.draft:
                return release
        return None

    def find_release(self, tag: str) -> Optional[ReleaseRecord]:
        """Return the release (draft or not) whose tag is `tag`."""
        return next((r for r in self.list_releases() if r.tag_name == tag), None)

    def create_draft(self, name: str) -> ReleaseRecord:
        """
        Create a draft release named and tagged `name`.

        This does not check for an existing release; see ensure_draft().
        """
        response = self._request(
            "POST",
            self.api_endpoint,
            json={"name": name, "tag_name": name, "draft": True},
        )
        return parse_release(self._json(response, self.api_endpoint))

    def ensure_draft(self, version: str) -> ReleaseRecord:
        """
        Find or create the draft release for `version`.

        The latest release (drafts included) is reused when its tag matches;
        otherwise a new draft is created.

        Raises:
            ReleaseStateError: If the matching release has already been published.
        """
        target = self.find_latest(include_drafts=True)
        if target is None or target.tag_name != version:
            logger.info(f"- Creating release {version}...")
            return self.create_draft(version)

        if not target.draft:
            raise ReleaseStateError(
                f"Release {version} is already published",
                details="refusing to attach assets to a non-draft release",
            )
        logger.info(f"- Adding to existing release {version}...")
        return target

    # ------------------------------------------------------------------
    # assets
    # ------------------------------------------------------------------

    def list_assets(self, release: ReleaseRecord) -> List[ReleaseAsset]:
        url = f"{self.api_endpoint}/{release.id}/assets"
        data = self._json(self._request("GET", url), url)
        if not isinstance(data, list):
            raise ReleaseHostError("Invalid assets data received from GitHub API", url=url)

        assets: List[ReleaseAsset] = []
        for entry in data:
            if not isinstance(entry, dict):
                logger.warning(
                    f"Skipping malformed asset entry: expected dict, got {type(entry).__name__}"
                )
                continue
            try:
                assets.append(parse_asset(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed asset entry: {exc}")
        return assets

    def upload_asset(
        self,
        release: ReleaseRecord,
        name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> ReleaseAsset:
        """
        Attach `data` to the release as asset `name`.

        The host does not deduplicate; uploading an existing name fails or
        creates a renamed copy. Use upload_or_replace() for deterministic names.
        """
        url = release.asset_upload_url
        if not url:
            raise ReleaseStateError(f"Release {release.tag_name} has no upload URL")
        response = self._request(
            "POST",
            url,
            params={"name": name},
            data=data,
            extra_headers={"Content-Type": content_type},
            timeout=ASSET_UPLOAD_TIMEOUT,
        )
        asset = parse_asset(self._json(response, url))
        release.assets.append(asset)
        return asset

    def delete_asset(self, asset: Union[ReleaseAsset, str]) -> None:
        url = asset.url if isinstance(asset, ReleaseAsset) else asset
        self._request("DELETE", url)

    def rename_asset(self, asset: Union[ReleaseAsset, str], new_name: str) -> ReleaseAsset:
        url = asset.url if isinstance(asset, ReleaseAsset) else asset
        response = self._request("PATCH", url, json={"name": new_name})
        return parse_asset(self._json(response, url))

    def upload_or_replace(self, release: ReleaseRecord, path: Path) -> ReleaseAsset:
        """
        Upload a local file, deleting any same-named asset first.

        Raises:
            ReleaseStateError: If the release is not a draft.
        """
        if not release.draft:
            raise ReleaseStateError(
                f"Release {release.tag_name} is already published",
                details=f"refusing to upload {path.name}",
            )

        for existing in self.list_assets(release):
            if existing.name == path.name:
                logger.info(f"- Replacing existing asset {existing.name}...")
                self.delete_asset(existing)
        release.assets = [a for a in release.assets if a.name != path.name]

        logger.info(f"- Adding asset {path.name}...")
        return self.upload_asset(release, path.name, path.read_bytes())

    def upload_files(
        self, release: ReleaseRecord, paths: Sequence[Path], first: Optional[str] = None
    ) -> List[ReleaseAsset]:
        """
        Upload several files; the file named `first`, when present, goes up before the rest.
        """
        ordered = sorted(paths, key=lambda p: (p.name != first, p.name))
        return [self.upload_or_replace(release, p) for p in ordered]

    def download_asset(self, asset: ReleaseAsset, destination: Path) -> Path:
        """Stream an asset's content into `destination`."""
        response = self._request(
            "GET",
            asset.url,
            accept="application/octet-stream",
            timeout=ASSET_DOWNLOAD_TIMEOUT,
            stream=True,
        )
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as exc:
            raise ReleaseHostError(
                f"Download of {asset.name} failed", url=asset.url, details=str(exc)
            ) from exc
        finally:
            response.close()
        return destination

    def read_asset_text(self, asset: ReleaseAsset) -> str:
        response = self._request("GET", asset.url, accept="application/octet-stream")
        return response.text
