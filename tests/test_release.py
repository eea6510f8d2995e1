import io
import subprocess

import pytest

from changie.changelog import CHANGELOG_TEMPLATE, init_project
from changie.release import BumpType, ReleaseError, bump_version, run_version_bump


class FakeGit:
    """Stands in for the git executable, answering by argument prefix."""

    def __init__(self, responses=None, missing=False):
        self.responses = {
            ("--version",): (0, "git version 2.40.0\n"),
            ("status", "--porcelain"): (0, ""),
            ("describe", "--tags", "--abbrev=0"): (
                128,
                "fatal: No names found, cannot describe anything.\n",
            ),
        }
        self.responses.update(responses or {})
        self.missing = missing
        self.calls = []

    def __call__(self, cmd, **kwargs):
        if self.missing:
            raise FileNotFoundError(2, "No such file or directory", "git")
        args = tuple(cmd[1:])
        self.calls.append(args)
        for prefix, (code, output) in self.responses.items():
            if args[: len(prefix)] == prefix:
                return subprocess.CompletedProcess(cmd, code, output)
        return subprocess.CompletedProcess(cmd, 0, "")


@pytest.fixture
def changelog(tmp_path):
    path = tmp_path / "CHANGELOG.md"
    init_project(path)
    return path


def install(monkeypatch, fake):
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.mark.parametrize(
    "version, bump, expected",
    [
        ("1.2.3", BumpType.MAJOR, "2.0.0"),
        ("v1.2.3", BumpType.MINOR, "1.3.0"),
        ("1.2.3", BumpType.PATCH, "1.2.4"),
        ("", "major", "1.0.0"),
        ("", "minor", "0.1.0"),
        ("", "patch", "0.0.1"),
    ],
)
def test_bump_version(version, bump, expected):
    assert bump_version(version, bump) == expected


def test_bump_version_invalid_type():
    with pytest.raises(ReleaseError, match="invalid bump type: huge"):
        bump_version("1.2.3", "huge")


def test_release_without_tags(monkeypatch, changelog):
    fake = install(monkeypatch, FakeGit())
    out = io.StringIO()
    new_version = run_version_bump("patch", file=str(changelog), out=out)

    assert new_version == "0.0.1"
    text = out.getvalue()
    assert "No version tag found, starting from 0.0.0\n" in text
    assert "New version: 0.0.1\n" in text
    assert "patch release 0.0.1 done.\n" in text
    assert text.endswith("Don't forget to git push and git push --tags.\n")
    assert "## [0.0.1] - " in changelog.read_text()
    assert ("add", str(changelog)) in fake.calls
    assert ("commit", "-m", "Update changelog for version 0.0.1") in fake.calls
    assert ("tag", "-a", "v0.0.1", "-m", "Version 0.0.1") in fake.calls
    assert ("push",) not in fake.calls


def test_release_from_tag_with_auto_push(monkeypatch, changelog):
    fake = install(
        monkeypatch,
        FakeGit({("describe", "--tags", "--abbrev=0"): (0, "v1.2.3\n")}),
    )
    out = io.StringIO()
    new_version = run_version_bump(
        BumpType.MAJOR,
        file=str(changelog),
        repository_provider="bitbucket",
        auto_push=True,
        out=out,
    )

    assert new_version == "2.0.0"
    assert "Current version: v1.2.3\n" in out.getvalue()
    assert "Automatically pushed changes and tags to remote repository." in out.getvalue()
    assert (
        "[Unreleased]: https://bitbucket.org/user/repo/compare/v2.0.0...HEAD"
        in changelog.read_text()
    )
    assert fake.calls[-2:] == [("push",), ("push", "--tags")]


def test_release_git_missing(monkeypatch, changelog):
    install(monkeypatch, FakeGit(missing=True))
    with pytest.raises(ReleaseError, match="git is not installed"):
        run_version_bump("minor", file=str(changelog), out=io.StringIO())


def test_release_refuses_dirty_tree(monkeypatch, changelog):
    fake = install(monkeypatch, FakeGit({("status", "--porcelain"): (0, " M x.py\n")}))
    with pytest.raises(ReleaseError, match="uncommitted changes found"):
        run_version_bump("minor", file=str(changelog), out=io.StringIO())
    assert changelog.read_text() == CHANGELOG_TEMPLATE
    assert not any(call[0] == "tag" for call in fake.calls)


def test_release_status_failure(monkeypatch, changelog):
    install(monkeypatch, FakeGit({("status", "--porcelain"): (128, "fatal\n")}))
    with pytest.raises(ReleaseError, match="failed to check for uncommitted changes"):
        run_version_bump("minor", file=str(changelog), out=io.StringIO())


def test_release_invalid_current_tag(monkeypatch, changelog):
    install(
        monkeypatch,
        FakeGit({("describe", "--tags", "--abbrev=0"): (0, "release-x\n")}),
    )
    with pytest.raises(ReleaseError, match="failed to bump version"):
        run_version_bump("patch", file=str(changelog), out=io.StringIO())
    assert changelog.read_text() == CHANGELOG_TEMPLATE


def test_release_missing_changelog(monkeypatch, tmp_path):
    fake = install(monkeypatch, FakeGit())
    missing = tmp_path / "NOPE.md"
    with pytest.raises(ReleaseError, match="failed to update changelog"):
        run_version_bump("patch", file=str(missing), out=io.StringIO())
    assert not any(call[0] == "commit" for call in fake.calls)


def test_release_commit_failure(monkeypatch, changelog):
    install(monkeypatch, FakeGit({("commit",): (1, "")}))
    with pytest.raises(ReleaseError, match="failed to commit changelog"):
        run_version_bump("patch", file=str(changelog), out=io.StringIO())


def test_release_tag_failure(monkeypatch, changelog):
    install(monkeypatch, FakeGit({("tag",): (128, "fatal: tag exists\n")}))
    with pytest.raises(ReleaseError, match="failed to tag version"):
        run_version_bump("patch", file=str(changelog), out=io.StringIO())


def test_release_push_failure(monkeypatch, changelog):
    install(monkeypatch, FakeGit({("push",): (1, "")}))
    with pytest.raises(ReleaseError, match="failed to push changes"):
        run_version_bump("patch", file=str(changelog), auto_push=True, out=io.StringIO())


def test_release_invalid_bump_type(monkeypatch, changelog):
    install(monkeypatch, FakeGit())
    with pytest.raises(ReleaseError, match="invalid bump type"):
        run_version_bump("huge", file=str(changelog), out=io.StringIO())
    assert changelog.read_text() == CHANGELOG_TEMPLATE