"""
Date-based version numbers of the form YYYY.MDD.N.

The middle component is the month without padding followed by the two-digit
day (1 January is "101", 24 December is "1224"); N counts releases made on the
same day.
"""

from datetime import date
from typing import Optional

from packaging.version import InvalidVersion, Version

from releasesmith.exceptions import ConfigValidationError


def version_prefix(today: date) -> str:
    """Return the "YYYY.MDD." prefix shared by every version released on `today`."""
    return f"{today.year}.{today.month}{today.day:02d}."


def next_version(
    last_tag: Optional[str], today: date, increment: bool = True
) -> str:
    """
    Compute the version for a new build.

    When the latest release was made today its sequence number is reused, or
    bumped by one when `increment` is enabled. Otherwise the sequence restarts at 0.

    Parameters:
        last_tag: Tag of the latest known release, or None for a first-ever release.
        today: The build date.
        increment: Whether a same-day release bumps the sequence number.
    """
    prefix = version_prefix(today)
    sequence = 0

    if last_tag and last_tag.startswith(prefix):
        try:
            sequence = int(last_tag.split(".")[2]) + (1 if increment else 0)
        except (IndexError, ValueError):
            raise ConfigValidationError(
                f"Cannot parse sequence number from release tag {last_tag}"
            ) from None

    return f"{prefix}{sequence}"


def validate_version(version: str) -> str:
    """
    Check a user-supplied version override.

    Raises:
        ConfigValidationError: If the string is not a valid version.
    """
    candidate = (version or "").strip()
    try:
        Version(candidate)
    except InvalidVersion:
        raise ConfigValidationError(f"Invalid version: {version}") from None
    return candidate


def android_version_code(version: str) -> str:
    """
    Derive the numeric Android application version code from a version string.

    Year and month-day are left-padded to four digits each and the sequence to one,
    so "2024.101.0" becomes "202401010".
    """
    parts = version.split(".")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ConfigValidationError(
            f"Cannot derive an Android version code from {version}",
            details="expected YYYY.MDD.N",
        )
    year, month_day, sequence = parts
    return year.rjust(4, "0") + month_day.rjust(4, "0") + sequence.rjust(1, "0")
