"""Shared builders for fake GitHub payloads and responses."""

from pathlib import Path
from unittest.mock import MagicMock

import requests

SOLUTION_NAME = "osu.Desktop"
PROJECT_NAME = "osu.Desktop"
PACKAGE_NAME = "osulazer"
API_ENDPOINT = "https://api.github.com/repos/ppy/osu/releases"


def make_response(json_data=None, status_code=200, text="", content_chunks=None):
    """
    Build a MagicMock requests.Response.
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    response.iter_content.return_value = list(content_chunks or [])
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} Error", response=response)
        response.raise_for_status.side_effect = error
    else:
        response.raise_for_status.return_value = None
    return response


def release_json(release_id=1, name="2024.101.0", draft=True, assets=None, tag_name=None):
    return {
        "id": release_id,
        "name": name,
        "tag_name": tag_name or name,
        "draft": draft,
        "prerelease": False,
        "upload_url": f"https://uploads.github.com/repos/ppy/osu/releases/{release_id}/assets{{?name,label}}",
        "assets": assets or [],
    }


def asset_json(asset_id, name):
    return {
        "id": asset_id,
        "name": name,
        "url": f"{API_ENDPOINT}/assets/{asset_id}",
        "browser_download_url": f"https://github.com/ppy/osu/releases/download/x/{name}",
        "size": 10,
    }


def write_files(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b"data")
