"""Keep a Changelog file management: create, add entries and cut releases."""

from __future__ import annotations

import os
import re
from datetime import date
from pathlib import Path

CHANGELOG_TEMPLATE = """# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).

## [Unreleased]

"""

VALID_SECTIONS: tuple[str, ...] = (
    "Added",
    "Changed",
    "Deprecated",
    "Removed",
    "Fixed",
    "Security",
)

UNRELEASED_HEADER = "## [Unreleased]"

_VERSION_HEADER = re.compile(r"## \[([0-9]+\.[0-9]+\.[0-9]+)\]")
_UNRELEASED_LINK = re.compile(r"\[Unreleased\]: .*")

_LINK_PREFIXES = {
    "github": "https://github.com/user/repo/compare/",
    "bitbucket": "https://bitbucket.org/user/repo/compare/",
}


class ChangelogError(Exception):
    """Raised when a changelog cannot be created, read, parsed or written."""


def _read(path: Path) -> str:
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except OSError as exc:
        raise ChangelogError(
            f"failed to read changelog file: {exc} "
            f"(check if '{path}' exists and you have read permissions)"
        ) from exc


def _write(path: Path, text: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    except OSError as exc:
        raise ChangelogError(
            f"failed to write updated changelog: {exc} "
            "(verify you have write permissions for the file)"
        ) from exc


def init_project(file_path: str | os.PathLike[str]) -> None:
    """Create a new changelog from the template; fail if the file exists."""
    path = Path(file_path)
    try:
        os.stat(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise ChangelogError(
            f"failed to check if changelog file exists: {exc} "
            "(verify you have read permissions for the directory)"
        ) from exc
    else:
        raise ChangelogError(
            f"changelog file already exists: {path} (use an alternative filename "
            "or delete the existing file if you want to recreate it)"
        )

    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(CHANGELOG_TEMPLATE)
    except OSError as exc:
        raise ChangelogError(
            f"failed to create changelog file: {exc} (verify you have write "
            "permissions for the directory and sufficient disk space)"
        ) from exc


def _is_subsection(line: str) -> bool:
    return line.strip().startswith("### ")


def add_changelog_section(
    file_path: str | os.PathLike[str], section: str, content: str
) -> bool:
    """Add ``- content`` under ``### section`` in the Unreleased part.

    Returns True if the entry was already present (nothing is written),
    False if it was added.
    """
    if section not in VALID_SECTIONS:
        raise ChangelogError(
            f"invalid section: {section}, must be one of: "
            f"{', '.join(VALID_SECTIONS)} (section names are case-sensitive)"
        )

    path = Path(file_path)
    lines = _read(path).split("\n")

    unreleased_index = next(
        (i for i, line in enumerate(lines) if line.strip() == UNRELEASED_HEADER),
        None,
    )
    if unreleased_index is None:
        raise ChangelogError(
            "unreleased section not found in changelog (ensure the file follows "
            "the Keep a Changelog format with an '## [Unreleased]' section)"
        )

    section_header = f"### {section}"
    section_index: int | None = None
    next_major = len(lines)
    for i in range(unreleased_index + 1, len(lines)):
        stripped = lines[i].strip()
        if stripped.startswith("## "):
            next_major = i
            break
        if stripped == section_header:
            section_index = i

    new_entry = f"- {content}"

    if section_index is None:
        last_section = max(
            (i for i in range(unreleased_index + 1, next_major) if _is_subsection(lines[i])),
            default=unreleased_index,
        )
        result = lines[: last_section + 1]
        if last_section > unreleased_index:
            result.extend(lines[last_section + 1 : next_major])
        result.extend(["", section_header, "", new_entry])
        if next_major < len(lines):
            result.append("")
            result.extend(lines[next_major:])
        _write(path, "\n".join(result))
        return False

    next_section = next(
        (i for i in range(section_index + 1, next_major) if _is_subsection(lines[i])),
        next_major,
    )
    body = lines[section_index + 1 : next_section]

    if any(line.strip() == new_entry for line in body):
        return True

    result = lines[: section_index + 1]
    content_indices = [
        i
        for i in range(section_index + 1, next_section)
        if lines[i].strip() and not lines[i].strip().startswith("###")
    ]
    if content_indices:
        last_content = max(
            (i for i in content_indices if not lines[i].strip().startswith("##")),
            default=section_index,
        )
        result.extend(lines[section_index + 1 : last_content + 1])
        result.append(new_entry)
    else:
        result.extend(["", new_entry])

    if next_section < len(lines):
        result.append("")
        result.extend(lines[next_section:])

    _write(path, "\n".join(result))
    return False


def get_latest_changelog_version(content: str) -> str:
    """Return the first ``## [X.Y.Z]`` version in ``content``, or ``""``."""
    match = _VERSION_HEADER.search(content)
    return match.group(1) if match else ""


def update_changelog(
    file_path: str | os.PathLike[str],
    version: str,
    repository_provider: str,
    today: date | None = None,
) -> None:
    """Turn the Unreleased section into a release of ``version`` and update links."""
    path = Path(file_path)
    content = _read(path)

    if UNRELEASED_HEADER not in content:
        raise ChangelogError(
            "unreleased section not found in changelog (ensure your changelog "
            "follows the Keep a Changelog format with an '## [Unreleased]' section)"
        )

    released_on = (today or date.today()).isoformat()
    version_header = f"## [{version}] - {released_on}"
    content = content.replace(
        UNRELEASED_HEADER, f"{UNRELEASED_HEADER}\n\n{version_header}"
    )

    prefix = _LINK_PREFIXES.get(repository_provider, _LINK_PREFIXES["github"])
    links = (
        f"[Unreleased]: {prefix}v{version}...HEAD\n"
        f"[{version}]: {prefix}...v{version}"
    )

    if _UNRELEASED_LINK.search(content):
        content = _UNRELEASED_LINK.sub(lambda _: links, content)
    else:
        content += f"\n\n{links}"

    _write(path, content)