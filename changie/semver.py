"""Semantic version parsing, bumping and comparison (MAJOR.MINOR.PATCH)."""

from __future__ import annotations

import re

Version = tuple[int, int, int]

_NUMBER = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1


class InvalidVersionError(ValueError):
    """Raised when a version string is not of the form X.Y.Z."""


def parse_version(version: str) -> Version:
    """Parse ``X.Y.Z`` or ``vX.Y.Z`` into a tuple; an empty string is 0.0.0."""
    if version == "":
        return (0, 0, 0)

    parts = version.removeprefix("v").split(".")
    if len(parts) != 3:
        raise InvalidVersionError(
            f"invalid version format: {version} (expected format: X.Y.Z)"
        )

    numbers = []
    for part in parts:
        if not _NUMBER.fullmatch(part) or abs(int(part)) > _INT64_MAX:
            raise InvalidVersionError(
                f"invalid version number: {part} (must be a valid integer)"
            )
        number = int(part)
        if number < 0:
            raise InvalidVersionError(
                f"invalid version number: {part} (must be non-negative)"
            )
        numbers.append(number)
    major, minor, patch = numbers
    return (major, minor, patch)


def format_version(parts: Version) -> str:
    """Format version components as ``X.Y.Z`` without a ``v`` prefix."""
    major, minor, patch = parts
    return f"{major}.{minor}.{patch}"


def bump_major(version: str) -> str:
    """Increment the major number and reset minor and patch."""
    major, _, _ = parse_version(version)
    return format_version((major + 1, 0, 0))


def bump_minor(version: str) -> str:
    """Increment the minor number and reset patch."""
    major, minor, _ = parse_version(version)
    return format_version((major, minor + 1, 0))


def bump_patch(version: str) -> str:
    """Increment the patch number."""
    major, minor, patch = parse_version(version)
    return format_version((major, minor, patch + 1))


def compare(v1: str, v2: str) -> int:
    """Return -1, 0 or 1 as ``v1`` is lower than, equal to or higher than ``v2``."""
    first = parse_version(v1)
    second = parse_version(v2)
    return (first > second) - (first < second)