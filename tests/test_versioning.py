from datetime import date

import pytest

from releasesmith.exceptions import ConfigValidationError
from releasesmith.versioning import (
    android_version_code,
    next_version,
    validate_version,
    version_prefix,
)

pytestmark = pytest.mark.unit

NEW_YEAR = date(2024, 1, 1)


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2024, 1, 1), "2024.101."),
        (date(2024, 1, 23), "2024.123."),
        (date(2024, 12, 24), "2024.1224."),
        (date(2025, 10, 5), "2025.1005."),
    ],
)
def test_version_prefix_month_unpadded_day_padded(today, expected):
    assert version_prefix(today) == expected


def test_first_release_starts_at_zero():
    assert next_version(None, NEW_YEAR) == "2024.101.0"


def test_same_day_release_increments():
    assert next_version("2024.101.0", NEW_YEAR) == "2024.101.1"
    assert next_version("2024.101.7", NEW_YEAR, increment=True) == "2024.101.8"


def test_same_day_release_without_increment_reuses_sequence():
    assert next_version("2024.101.3", NEW_YEAR, increment=False) == "2024.101.3"


def test_earlier_release_restarts_sequence():
    assert next_version("2023.1231.4", NEW_YEAR) == "2024.101.0"


def test_prefix_must_match_whole_component():
    # 2024.1011.x was made on 11 October, not on 1 January
    assert next_version("2024.1011.2", NEW_YEAR) == "2024.101.0"


def test_unparseable_sequence_raises():
    with pytest.raises(ConfigValidationError):
        next_version("2024.101.beta", NEW_YEAR)


def test_validate_version_accepts_pep440():
    assert validate_version(" 2024.101.5 ") == "2024.101.5"


@pytest.mark.parametrize("bad", ["", "not a version", "1.0.0-!"])
def test_validate_version_rejects_garbage(bad):
    with pytest.raises(ConfigValidationError):
        validate_version(bad)


@pytest.mark.parametrize(
    "version, code",
    [
        ("2024.101.0", "202401010"),
        ("2024.1224.3", "202412243"),
        ("2024.123.12", "2024012312"),
    ],
)
def test_android_version_code(version, code):
    assert android_version_code(version) == code


def test_android_version_code_requires_three_numeric_parts():
    with pytest.raises(ConfigValidationError):
        android_version_code("2024.101")
