"""
Normalizes rclone version strings and compares them against a required minimum.
"""

import re

_NUMERIC_PART = re.compile(r"^\d+")


def extract_rclone_version(version_output: str) -> str | None:
    """
    Returns the version token from `rclone --version` output, i.e. the second
    word of the first line mentioning rclone ('rclone v1.65.0' -> 'v1.65.0').
    """
    for line in version_output.splitlines():
        if "rclone" in line:
            parts = line.split()
            if len(parts) >= 2:
                return parts[1]
            return None
    return None


def normalize_version(raw: str) -> str:
    """
    Strips the decorations rclone adds to its version number.

    'v1.42.0-beta' -> '1.42.0', 'v1.53.0-DEV' -> '1.53.0', 'v1.50' -> '1.50'
    """
    version = raw.strip()
    if "-beta" in version or "-DEV" in version:
        version = version.split("-", 1)[0]
    return version.removeprefix("v")


def parse_version(version: str) -> tuple[int, ...]:
    """
    Parses a dotted version into a tuple of integers for comparison.

    Raises:
        ValueError: If the string does not start with a numeric component.
    """
    parts: list[int] = []
    for segment in version.split("."):
        match = _NUMERIC_PART.match(segment)
        if not match:
            break
        parts.append(int(match.group()))
        if match.end() != len(segment):
            break
    if not parts:
        raise ValueError(f"Not a version number: {version!r}")
    return tuple(parts)


def meets_minimum_version(current: str, minimum: str) -> bool:
    """True if the normalized `current` version is at least `minimum`."""
    current_parts = parse_version(normalize_version(current))
    minimum_parts = parse_version(normalize_version(minimum))
    width = max(len(current_parts), len(minimum_parts))
    current_parts += (0,) * (width - len(current_parts))
    minimum_parts += (0,) * (width - len(minimum_parts))
    return current_parts >= minimum_parts
