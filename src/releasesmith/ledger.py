"""
The RELEASES ledger used by the legacy delta-update mechanism.

Each line reads `<sha1> <filename> <size>`. Lines are kept in the order they
were appended, so later lines describe newer packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from releasesmith.constants import (
    DELTA_PACKAGE_MARKER,
    FULL_PACKAGE_MARKER,
    KEEP_DELTA_COUNT,
    LEDGER_FILE_NAME,
)
from releasesmith.exceptions import LedgerError
from releasesmith.log_utils import logger


@dataclass(frozen=True)
class ReleaseLine:
    content_hash: str
    filename: str
    filesize: int

    @classmethod
    def parse(cls, line: str) -> "ReleaseLine":
        parts = line.split()
        if len(parts) != 3:
            raise LedgerError(f"Malformed ledger line: {line!r}")
        try:
            size = int(parts[2])
        except ValueError:
            raise LedgerError(
                f"Malformed ledger line: {line!r}", filename=parts[1]
            ) from None
        return cls(parts[0], parts[1], size)

    @property
    def is_full(self) -> bool:
        return FULL_PACKAGE_MARKER in self.filename

    @property
    def is_delta(self) -> bool:
        return DELTA_PACKAGE_MARKER in self.filename

    def __str__(self) -> str:
        return f"{self.content_hash} {self.filename} {self.filesize}"


class ReleaseLedger:
    """A RELEASES file inside a releases directory."""

    def __init__(self, releases_dir: Path, lines: List[ReleaseLine]) -> None:
        self.releases_dir = Path(releases_dir)
        self.lines = lines

    @property
    def path(self) -> Path:
        return self.releases_dir / LEDGER_FILE_NAME

    @classmethod
    def exists_in(cls, releases_dir: Path) -> bool:
        return (Path(releases_dir) / LEDGER_FILE_NAME).is_file()

    @classmethod
    def load(cls, releases_dir: Path) -> "ReleaseLedger":
        path = Path(releases_dir) / LEDGER_FILE_NAME
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise LedgerError(f"Cannot read ledger {path}", details=str(exc)) from exc
        lines = [ReleaseLine.parse(raw) for raw in text.splitlines() if raw.strip()]
        return cls(releases_dir, lines)

    def save(self) -> None:
        content = "".join(f"{line}\n" for line in self.lines)
        self.path.write_text(content, encoding="utf-8")

    def _remove(self, line: ReleaseLine, kind: str) -> None:
        logger.warning(f"- Removing old {kind} {line.filename}")
        (self.releases_dir / line.filename).unlink(missing_ok=True)
        self.lines.remove(line)

    def prune(self, keep_delta_count: int = KEEP_DELTA_COUNT) -> List[ReleaseLine]:
        """
        Drop superseded packages from the ledger and the releases directory.

        Only the most recent full package survives, and at most
        `keep_delta_count` of the newest delta packages. The ledger file is
        rewritten with the survivors in their original order.

        Returns:
            The removed lines, in removal order.
        """
        logger.info(f"Pruning {LEDGER_FILE_NAME}...")
        removed: List[ReleaseLine] = []

        fulls = [entry for entry in self.lines if entry.is_full]
        for line in fulls[:-1]:
            self._remove(line, "release")
            removed.append(line)

        deltas = [entry for entry in self.lines if entry.is_delta]
        excess = len(deltas) - keep_delta_count
        if excess > 0:
            for line in deltas[:excess]:
                self._remove(line, "delta")
                removed.append(line)

        self.save()
        return removed

    def verify(self) -> None:
        """
        Check that every file the ledger references exists locally.

        Raises:
            LedgerError: For the first missing file.
        """
        for line in self.lines:
            if not (self.releases_dir / line.filename).is_file():
                raise LedgerError(
                    f"Local file missing {line.filename}", filename=line.filename
                )
