import pytest

from ytdlrc.utils.version import (
    extract_rclone_version,
    meets_minimum_version,
    normalize_version,
    parse_version,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("v1.42.0-beta", "1.42.0"),
        ("v1.53.0-DEV", "1.53.0"),
        ("v1.65.2", "1.65.2"),
        ("1.50", "1.50"),
    ],
)
def test_normalize_version_strips_decorations(raw, expected):
    assert normalize_version(raw) == expected


def test_beta_below_minimum_fails():
    assert not meets_minimum_version("v1.42.0-beta", "1.43")


def test_newer_release_passes():
    assert meets_minimum_version("1.50", "1.43")
    assert meets_minimum_version("v1.43", "1.43")
    assert meets_minimum_version("v1.43.0", "1.43")


def test_minor_versions_compare_numerically():
    assert meets_minimum_version("v1.100.0", "1.43")
    assert not meets_minimum_version("v1.9.0", "1.43")


def test_parse_version_rejects_garbage():
    with pytest.raises(ValueError):
        parse_version("unknown")


def test_extract_rclone_version_reads_first_rclone_line():
    output = "rclone v1.65.0\n- os/version: ubuntu 22.04\n- go/version: go1.21.4\n"
    assert extract_rclone_version(output) == "v1.65.0"
    assert extract_rclone_version("something else\n") is None
