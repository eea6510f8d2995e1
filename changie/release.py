"""Release workflow: bump the version, update the changelog, commit and tag."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TextIO

from changie import git, semver
from changie.changelog import ChangelogError, update_changelog
from changie.git import GitError
from changie.semver import InvalidVersionError

log = logging.getLogger(__name__)


class BumpType(str, Enum):
    """The part of the version a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class ReleaseError(Exception):
    """Raised when a release step fails."""


_BUMPERS = {
    BumpType.MAJOR: semver.bump_major,
    BumpType.MINOR: semver.bump_minor,
    BumpType.PATCH: semver.bump_patch,
}


def _bump_type(bump_type: BumpType | str) -> BumpType:
    try:
        return BumpType(bump_type)
    except ValueError:
        raise ReleaseError(
            f"invalid bump type: {bump_type} - must be one of: major, minor, patch"
        ) from None


def bump_version(version: str, bump_type: BumpType | str) -> str:
    """Return ``version`` bumped by ``bump_type``."""
    return _BUMPERS[_bump_type(bump_type)](version)


def run_version_bump(
    bump_type: BumpType | str,
    file: str = "CHANGELOG.md",
    repository_provider: str = "github",
    auto_push: bool = False,
    out: TextIO | None = None,
) -> str:
    """Release a new version and return it.

    Checks git and the working tree, bumps the latest tag, updates the
    changelog, commits it, tags the release and optionally pushes.
    """
    stream = sys.stdout if out is None else out
    log.debug("Starting version bump type=%s", bump_type)

    if not git.is_installed():
        log.error("Failed to run git")
        raise ReleaseError(
            "git is not installed or not available in PATH - please install Git "
            "(https://git-scm.com/downloads) and ensure it's in your system PATH"
        )

    try:
        dirty = git.has_uncommitted_changes()
    except GitError as exc:
        log.error("Failed to check for uncommitted changes: %s", exc)
        raise ReleaseError(f"failed to check for uncommitted changes: {exc}") from exc
    if dirty:
        log.error("Failed to bump version: uncommitted changes found")
        raise ReleaseError(
            "uncommitted changes found - run 'git status' to see changed files, "
            "then either commit changes with 'git commit' or stash them with "
            "'git stash' before bumping version"
        )

    try:
        current = git.get_version()
    except GitError as exc:
        log.error("Failed to get current version from git: %s", exc)
        raise ReleaseError(
            f"failed to get current version: {exc} - ensure you're in a git "
            "repository with at least one tag, or initialize with 'git tag v0.0.0'"
        ) from exc

    if current == "":
        current = "0.0.0"
        stream.write(f"No version tag found, starting from {current}\n")
    else:
        stream.write(f"Current version: {current}\n")

    try:
        new_version = bump_version(current, bump_type)
    except (InvalidVersionError, ReleaseError) as exc:
        log.error("Failed to bump version type=%s current_version=%s", bump_type, current)
        raise ReleaseError(
            f"failed to bump version: {exc} - check if the current version "
            f"({current}) is a valid semantic version in the format X.Y.Z"
        ) from exc
    kind = _bump_type(bump_type)

    stream.write(f"New version: {new_version}\n")

    stream.write(f"Updating changelog file: {file}\n")
    try:
        update_changelog(file, new_version, repository_provider)
    except ChangelogError as exc:
        log.error("Failed to update changelog file=%s version=%s", file, new_version)
        raise ReleaseError(
            f"failed to update changelog: {exc} - verify that '{file}' exists "
            "and follows the Keep a Changelog format"
        ) from exc

    try:
        git.commit_changelog(file, new_version)
    except GitError as exc:
        log.error("Failed to commit changelog file=%s version=%s", file, new_version)
        raise ReleaseError(
            f"failed to commit changelog: {exc} - ensure git is properly configured "
            "and you have permissions to commit changes"
        ) from exc

    stream.write(f"Tagging version: {new_version}\n")
    try:
        git.tag_version(new_version)
    except GitError as exc:
        log.error("Failed to tag version %s", new_version)
        raise ReleaseError(
            f"failed to tag version: {exc} - check if the tag already exists "
            "(use 'git tag' to list existing tags)"
        ) from exc

    stream.write(f"{kind.value} release {new_version} done.\n")

    if auto_push:
        stream.write("Pushing changes and tags...\n")
        try:
            git.push_changes()
        except GitError as exc:
            log.error("Failed to push changes: %s", exc)
            raise ReleaseError(
                f"failed to push changes: {exc} - check network connection and "
                "remote repository permissions"
            ) from exc
        stream.write("Automatically pushed changes and tags to remote repository.\n")
    else:
        stream.write("Don't forget to git push and git push --tags.\n")

    log.debug("Version bump completed successfully type=%s version=%s", kind.value, new_version)
    return new_version