"""Command line interface: init, changelog entries, releases and completion."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from changie.changelog import VALID_SECTIONS, ChangelogError, add_changelog_section, init_project
from changie.config import Config, ConfigError, load_config
from changie.logger import init_logger
from changie.release import BumpType, ReleaseError, run_version_bump

log = logging.getLogger(__name__)

BINARY_NAME = "changie"
VERSION = "dev"
COMMIT = ""
DATE = ""

DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_PROVIDER = "github"

Handler = Callable[[argparse.Namespace, Config, TextIO], None]


class _CommandError(Exception):
    """A command failed; the message is shown to the user."""


def _changelog_file(args: argparse.Namespace, config: Config) -> str:
    config.set_default("app.changelog.file", DEFAULT_CHANGELOG)
    if "file" in args:
        config.set("app.changelog.file", args.file)
    return config.get_str("app.changelog.file")


def _run_init(args: argparse.Namespace, config: Config, out: TextIO) -> None:
    log.debug("Starting init")
    file = _changelog_file(args, config)
    log.info("Initializing project with changelog file: %s", file)
    try:
        init_project(file)
    except ChangelogError as exc:
        log.error("Failed to initialize project file=%s: %s", file, exc)
        raise _CommandError(f"failed to initialize project: {exc}") from exc
    out.write(f"Project initialized with changelog file: {file}\n")
    log.debug("init completed successfully")


def _run_add(args: argparse.Namespace, config: Config, out: TextIO) -> None:
    section = args.section
    content = args.content
    file = _changelog_file(args, config)
    log.info("Adding changelog entry file=%s section=%s content=%s", file, section, content)
    try:
        duplicate = add_changelog_section(file, section, content)
    except ChangelogError as exc:
        log.error("Failed to add changelog entry file=%s section=%s: %s", file, section, exc)
        raise _CommandError(f"failed to add changelog entry: {exc}") from exc
    if duplicate:
        out.write(f"Entry already exists in the {section} section, not added again.\n")
    else:
        out.write(f"Added to {section} section: {content}\n")
    log.debug("Changelog entry added successfully")


def _run_completion(args: argparse.Namespace, config: Config, out: TextIO) -> None:
    out.write(bash_completion(BINARY_NAME))


def _run_bump(args: argparse.Namespace, config: Config, out: TextIO) -> None:
    file = _changelog_file(args, config)
    config.set_default("app.changelog.repository_provider", DEFAULT_PROVIDER)
    config.set_default("app.changelog.auto_push", False)
    if "rrp" in args:
        config.set("app.changelog.repository_provider", args.rrp)
    if "auto_push" in args:
        config.set("app.changelog.auto_push", args.auto_push)
    run_version_bump(
        args.bump_type,
        file=file,
        repository_provider=config.get_str("app.changelog.repository_provider"),
        auto_push=config.get_bool("app.changelog.auto_push"),
        out=out,
    )


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=argparse.SUPPRESS,
        help=f"Config file (default is $HOME/.{BINARY_NAME}.yaml)",
    )
    common.add_argument(
        "--log-level",
        dest="log_level",
        default=argparse.SUPPRESS,
        help="Set the log level (trace, debug, info, warn, error, fatal, panic)",
    )
    return common


def _file_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--file", default=argparse.SUPPRESS, help="Changelog file name (default CHANGELOG.md)"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    common = _common_options()
    formatter = argparse.RawDescriptionHelpFormatter

    parser = argparse.ArgumentParser(
        prog=BINARY_NAME,
        parents=[common],
        formatter_class=formatter,
        description=(
            f"{BINARY_NAME} is a command-line tool for managing changelogs following "
            "the Keep a Changelog format and Semantic Versioning.\n\n"
            "It helps you automate changelog entries, version bumping, and Git tag "
            "management while maintaining a clean, consistent format."
        ),
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s version {VERSION}, commit {COMMIT}, built at {DATE}",
    )
    parser.set_defaults(handler=None, help_parser=parser)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    init_parser = commands.add_parser(
        "init",
        parents=[common],
        formatter_class=formatter,
        help="Initialize a project with SemVer and Keep a Changelog",
        description=(
            "Sets up the project directory for Semantic Versioning and Keep a "
            "Changelog format.\n\nThis command creates a new CHANGELOG.md file in the "
            "current directory following the Keep a Changelog format."
        ),
    )
    _file_option(init_parser)
    init_parser.set_defaults(handler=_run_init)

    changelog_parser = commands.add_parser(
        "changelog",
        parents=[common],
        formatter_class=formatter,
        help="Manage changelog entries",
        description=(
            "Manage changelog entries in Keep a Changelog format.\n\n"
            "This command group allows you to add entries to different sections of "
            "your CHANGELOG.md file, following the Keep a Changelog format."
        ),
    )
    _file_option(changelog_parser)
    changelog_parser.set_defaults(handler=None, help_parser=changelog_parser)
    sections = changelog_parser.add_subparsers(dest="section_command", metavar="SECTION")
    for section in VALID_SECTIONS:
        name = section.lower()
        section_parser = sections.add_parser(
            name,
            parents=[common],
            formatter_class=formatter,
            help=f"Add a {name} entry to the changelog",
            description=(
                f"Add an entry to the {name} section in your changelog.\n\n"
                f"This adds a bullet point to the {section} section in the "
                "[Unreleased] area of your changelog file.\nThe entry will be "
                "formatted as a bullet point according to Keep a Changelog format."
            ),
        )
        _file_option(section_parser)
        section_parser.add_argument("content", metavar="CONTENT")
        section_parser.set_defaults(handler=_run_add, section=section)

    completion_parser = commands.add_parser(
        "completion",
        parents=[common],
        formatter_class=formatter,
        help="Generate the autocompletion script for the specified shell",
        description=(
            "To load completions:\n\n"
            f"Bash:\n  source <({BINARY_NAME} completion bash)\n"
        ),
    )
    completion_parser.add_argument("shell", nargs="*", help=argparse.SUPPRESS)
    completion_parser.set_defaults(handler=_run_completion)

    examples = {
        BumpType.MAJOR: ("first", "1.2.3 -> 2.0.0"),
        BumpType.MINOR: ("second", "1.2.3 -> 1.3.0"),
        BumpType.PATCH: ("third", "1.2.3 -> 1.2.4"),
    }
    for bump_type, (position, example) in examples.items():
        bump_parser = commands.add_parser(
            bump_type.value,
            parents=[common],
            formatter_class=formatter,
            help=f"Bump the {bump_type.value} version number",
            description=(
                f"Release a {bump_type.value} version by bumping the {position} "
                f"version number.\n\nFor example, {example}\n\n"
                "This command will:\n"
                "1. Check for uncommitted changes\n"
                "2. Update the changelog\n"
                "3. Commit the changes\n"
                "4. Create a new git tag\n"
                "5. Optionally push changes and tags to remote repository"
            ),
        )
        _file_option(bump_parser)
        bump_parser.add_argument(
            "--rrp",
            default=argparse.SUPPRESS,
            help="Remote repository provider (github, bitbucket)",
        )
        bump_parser.add_argument(
            "--auto-push",
            dest="auto_push",
            action="store_true",
            default=argparse.SUPPRESS,
            help="Automatically push changes and tags",
        )
        bump_parser.set_defaults(handler=_run_bump, bump_type=bump_type)

    return parser


_COMPLETION_TEMPLATE = """# bash completion for @PROG@
@FUNC@()
{
    local cur words
    cur="${COMP_WORDS[COMP_CWORD]}"
    if [[ ${COMP_CWORD} -eq 1 ]]; then
        COMPREPLY=( $(compgen -W "@ROOT@" -- "$cur") )
        return
    fi
    case "${COMP_WORDS[1]}" in
        changelog)
            words="@CHANGELOG@"
            ;;
        init)
            words="@INIT@"
            ;;
        major|minor|patch)
            words="@BUMP@"
            ;;
        completion)
            words="bash --help"
            ;;
        *)
            words="--help"
            ;;
    esac
    COMPREPLY=( $(compgen -W "$words" -- "$cur") )
}

complete -o default -F @FUNC@ @PROG@
"""


def bash_completion(prog: str) -> str:
    """Return a bash completion script for the command named ``prog``."""
    function = "__" + re.sub(r"\W", "_", prog) + "_complete"
    common = "--config --log-level --help"
    replacements = {
        "@PROG@": prog,
        "@FUNC@": function,
        "@ROOT@": f"init changelog completion major minor patch --version {common}",
        "@CHANGELOG@": " ".join(s.lower() for s in VALID_SECTIONS) + f" --file {common}",
        "@INIT@": f"--file {common}",
        "@BUMP@": f"--file --rrp --auto-push {common}",
    }
    script = _COMPLETION_TEMPLATE
    for marker, value in replacements.items():
        script = script.replace(marker, value)
    return script


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    handler: Handler | None = args.handler
    if handler is None:
        args.help_parser.print_help(sys.stdout)
        return 0

    try:
        config = load_config(getattr(args, "config", None) or None, BINARY_NAME)
    except ConfigError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    config.set_default("app.log_level", "info")
    if "log_level" in args:
        config.set("app.log_level", args.log_level)
    init_logger(config.get_str("app.log_level"))

    try:
        handler(args, config, sys.stdout)
    except (_CommandError, ReleaseError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())