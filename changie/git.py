"""Git operations used for releases, performed through the git command line."""

from __future__ import annotations

import subprocess


class GitError(RuntimeError):
    """Raised when a git command cannot be run or fails."""


def _git(*args: str) -> tuple[int, str]:
    """Run git with ``args``; return its exit code and combined output."""
    try:
        result = subprocess.run(
            ["git", *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitError(f"failed to run git: {exc}") from exc
    return result.returncode, result.stdout or ""


def is_installed() -> bool:
    """Return True if ``git --version`` runs successfully."""
    try:
        code, _ = _git("--version")
    except GitError:
        return False
    return code == 0


def get_version() -> str:
    """Return the most recent tag, or an empty string if there are no tags."""
    code, output = _git("describe", "--tags", "--abbrev=0")
    if code != 0:
        if "No names found" in output:
            return ""
        raise GitError(
            f"failed to get latest tag: exit status {code} "
            "(verify that you are in a git repository and have sufficient permissions)"
        )
    return output.strip()


def has_uncommitted_changes() -> bool:
    """Return True if the working tree has staged or unstaged changes."""
    code, output = _git("status", "--porcelain")
    if code != 0:
        raise GitError(
            f"failed to check for uncommitted changes: exit status {code} "
            "(verify you're in a git repository with proper permissions)"
        )
    return bool(output.strip())


def commit_changelog(file: str, version: str) -> None:
    """Stage the changelog file and commit it with a release message."""
    code, _ = _git("add", file)
    if code != 0:
        raise GitError(
            f"failed to add changelog to staging area: exit status {code} "
            f"(check if the file '{file}' exists and you have write permissions)"
        )
    code, _ = _git("commit", "-m", f"Update changelog for version {version}")
    if code != 0:
        raise GitError(
            f"failed to commit changelog: exit status {code} "
            "(ensure git user.name and user.email are configured correctly "
            "with 'git config')"
        )


def tag_version(version: str) -> None:
    """Create an annotated tag for ``version``, adding a ``v`` prefix if absent."""
    tag_name = version if version.startswith("v") else f"v{version}"
    code, _ = _git("tag", "-a", tag_name, "-m", f"Version {version}")
    if code != 0:
        raise GitError(
            f"failed to create tag: exit status {code} "
            f"(check if tag '{tag_name}' already exists, you can delete it "
            f"with 'git tag -d {tag_name}')"
        )


def push_changes() -> None:
    """Push commits and then tags to the remote repository."""
    code, _ = _git("push")
    if code != 0:
        raise GitError(
            f"failed to push commits: exit status {code} "
            "(check network connection and remote repository access permissions)"
        )
    code, _ = _git("push", "--tags")
    if code != 0:
        raise GitError(
            f"failed to push tags: exit status {code} "
            "(check if you have permission to create tags on the remote repository)"
        )