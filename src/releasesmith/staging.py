"""
Ephemeral build workspace.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Union

from releasesmith.exceptions import BuildError
from releasesmith.log_utils import logger

Pathish = Union[str, Path]


def refresh_directory(directory: Pathish) -> Path:
    """
    Delete `directory` with everything in it and create it again empty.

    Raises:
        BuildError: If the directory cannot be removed or recreated.
    """
    path = Path(directory)
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as exc:
        raise BuildError(
            f"Cannot refresh directory {path}", path=str(path), details=str(exc)
        ) from exc
    return path


class StagingArea:
    """
    The staging directory that receives compiler output for one run.

    It is owned exclusively by the current run: `refresh()` wipes whatever a
    previous run left behind.
    """

    def __init__(self, root: Pathish) -> None:
        self.root = Path(root)

    def refresh(self) -> Path:
        logger.debug(f"Refreshing staging directory {self.root}")
        return refresh_directory(self.root)

    def path(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def reset_subdirectory(self, name: str) -> Path:
        """Recreate an empty subdirectory inside the staging area."""
        return refresh_directory(self.path(name))

    def copy_template_files(self, template_dir: Pathish, name: str) -> Path:
        """
        Copy the top-level files of `template_dir` into a fresh `name` subdirectory.

        Only regular files are copied, matching template archives that carry a
        flat directory shell.

        Raises:
            BuildError: If the template directory is missing or a file cannot be copied.
        """
        target = self.reset_subdirectory(name)
        try:
            for entry in sorted(Path(template_dir).iterdir()):
                if entry.is_file():
                    shutil.copy2(entry, target / entry.name)
        except OSError as exc:
            raise BuildError(
                f"Cannot copy template {template_dir}",
                path=str(template_dir),
                details=str(exc),
            ) from exc
        return target

    def copy_template_tree(self, template_dir: Pathish, name: str) -> Path:
        """Copy a whole template directory tree (e.g. an app bundle) into staging."""
        target = self.path(name)
        try:
            if target.exists():
                shutil.rmtree(target)
            shutil.copytree(template_dir, target)
        except OSError as exc:
            raise BuildError(
                f"Cannot copy template {template_dir}",
                path=str(template_dir),
                details=str(exc),
            ) from exc
        return target
