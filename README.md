# changie

A command-line tool for keeping a `CHANGELOG.md` in the Keep a Changelog
format and releasing Semantic Versioning versions as git tags.

## Installation

```
pip install .
```

Releases run `git`, so it must be installed and on your `PATH`.

## Usage

Create a new changelog in the current directory (fails if the file
already exists):

```
changie init
changie init --file HISTORY.md
```

Add entries to the `[Unreleased]` section:

```
changie changelog added "Support for custom changelog file names"
changie changelog fixed "Crash when the changelog is empty"
changie changelog --file HISTORY.md security "Upgrade vulnerable dependency"
```

The sections are `added`, `changed`, `deprecated`, `removed`, `fixed` and
`security`. A missing `### Section` heading is created under
`## [Unreleased]`. An entry that is already in its section is not added a
second time; the command says so instead.

Release a new version:

```
changie patch      # 1.2.3 -> 1.2.4
changie minor      # 1.2.3 -> 1.3.0
changie major      # 1.2.3 -> 2.0.0
```

A release:

1. checks that `git` is available and the working tree is clean;
2. reads the latest tag (`git describe --tags --abbrev=0`), starting from
   `0.0.0` when there is none;
3. inserts a `## [X.Y.Z] - YYYY-MM-DD` heading under `## [Unreleased]`;
4. replaces the `[Unreleased]: ...` link line with new comparison links,
   or appends them to the end of the file;
5. commits the changelog with the message `Update changelog for version X.Y.Z`;
6. creates the annotated tag `vX.Y.Z`;
7. with `--auto-push`, runs `git push` and `git push --tags`.

Release options:

- `--file FILE` – changelog file (default `CHANGELOG.md`)
- `--rrp github|bitbucket` – host used for the comparison links; any other
  value uses github
- `--auto-push` – push commits and tags once the release is tagged

Every command also accepts `--config FILE` and `--log-level LEVEL`
(`trace`, `debug`, `info`, `warn`, `error`, `fatal`, `panic`). Logs go to
standard error. `changie --version` prints the version.

Shell completion for bash:

```
source <(changie completion bash)
```

The command exits with status 0 on success and 1 on any error, printing
`Error: <message>` to standard error.

## Configuration

Settings are taken, highest priority first, from command-line flags,
environment variables, a configuration file and built-in defaults.

The configuration file is the one named by `--config`; otherwise the first
of `~/.changie.json`, `~/.changie.toml`, `~/.changie.yaml` and
`~/.changie.yml` that exists. YAML, JSON and TOML are all accepted:

```yaml
app:
  log_level: info
  changelog:
    file: CHANGELOG.md
    repository_provider: github
    auto_push: false
```

Environment variables use the same keys in upper case with dots replaced
by underscores, for example `APP_LOG_LEVEL=debug`,
`APP_CHANGELOG_FILE=HISTORY.md` or `APP_CHANGELOG_AUTO_PUSH=true`.

## Using it as a library

- `changie.changelog` – `init_project`, `add_changelog_section` (returns
  `True` for a duplicate), `get_latest_changelog_version`,
  `update_changelog` (takes an optional `today` date); raises
  `ChangelogError`.
- `changie.semver` – `parse_version`, `format_version`, `bump_major`,
  `bump_minor`, `bump_patch`, `compare`; accepts an optional `v` prefix,
  treats `""` as `0.0.0` and raises `InvalidVersionError`.
- `changie.git` – `is_installed`, `get_version`, `has_uncommitted_changes`,
  `commit_changelog`, `tag_version`, `push_changes`; raises `GitError`.
- `changie.release` – `BumpType`, `bump_version` and `run_version_bump`,
  the full release workflow; raises `ReleaseError`.
- `changie.config` – `Config` and `load_config`.
- `changie.logger` – `parse_level` and `init_logger`.
- `changie.ui` – `print_colored_message` (bold colour codes only when
  writing to a terminal), `get_color`, and `DefaultUIRunner`, which shows
  a message and waits for `q`, Esc or Ctrl-C.

## Limitations

- Comparison links are written with a fixed `user/repo` path on github.com
  or bitbucket.org; edit them to point at your repository.
- Completion scripts are generated for bash only.
- Pre-release and build metadata (`1.2.3-rc.1`) are not supported;
  versions must be plain `X.Y.Z`.