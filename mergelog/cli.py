"""Command line interface for mergelog."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console

from . import __version__
from .config import ConfigError, MergelogConfig, get_config
from .errors import MergelogError
from .git.gitlab_api import fetch_merge_requests
from .git.hosts import (
    HOST_ALIASES,
    RepositoryRef,
    infer_host,
    parse_host,
    parse_owner_and_name,
    parse_repository_url,
)
from .git.repo import get_origin_url
from .ingest.collect import collect_changelog
from .outputs.md_out import RenderConfig, build_markdown
from .outputs.terminal import make_console, print_error, print_success
from .resolve.links import LinkResolver
from .resolve.prompt import Prompter

SECTIONS_HELP = (
    "Provide a changelog section by passing the option -s/--section multiple times, "
    "e.g. `-s Added`. Sections correspond to markdown headings in the changelog files, "
    "and the order in which you pass them is the order in which they are generated."
)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="mergelog",
        description="Merge changelog files into a single changelog.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mergelog {__version__}",
        help="Show the version and exit.",
    )
    parser.add_argument(
        "--repo",
        dest="repo_url",
        help="Link to the repository to resolve merge/pull requests at; omit to infer from the current repo.",
    )
    parser.add_argument(
        "--host",
        choices=list(HOST_ALIASES),
        default=None,
        help="The repository host; omit to infer from the repo URL.",
    )
    parser.add_argument(
        "-s",
        "--section",
        dest="sections",
        action="append",
        default=None,
        help="Changelog section, in order. May be repeated.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help="Path to a mergelog.toml file.",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Set the logging level for diagnostics.",
    )
    parser.add_argument(
        "changelog_directory",
        type=Path,
        help="Directory containing the changelog fragments.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the mergelog CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level)

    console = make_console()
    try:
        config = get_config(
            changelog_directory=args.changelog_directory,
            cli_overrides={"sections": args.sections} if args.sections else None,
            config_path=args.config_path,
        )
    except ConfigError as exc:
        parser.error(exc.render())
    if config.config_path:
        print_success(console, f"Loaded config from {config.config_path}")

    if not args.changelog_directory.is_dir():
        parser.error(
            f"changelog directory {args.changelog_directory} either does not exist or is not a directory"
        )

    render_config = RenderConfig.from_config(config)
    if not render_config.ordered_section_names:
        parser.error(f"no changelog sections provided. {SECTIONS_HELP}")

    try:
        document = _merge_changelog(args, config, render_config, console)
    except MergelogError as exc:
        print_error(console, exc)
        return 1

    if document:
        print(document)
    return 0


def _resolve_repository(args: argparse.Namespace) -> RepositoryRef:
    url = parse_repository_url(args.repo_url or get_origin_url())
    host = parse_host(args.host) if args.host else infer_host(url)
    return parse_owner_and_name(url, host)


def _merge_changelog(
    args: argparse.Namespace,
    config: MergelogConfig,
    render_config: RenderConfig,
    console: Console,
) -> str:
    repository = _resolve_repository(args)
    with console.status("Fetching information from remote repository"):
        catalog = fetch_merge_requests(repository, token=config.gitlab_token)
    print_success(console, "Fetched information from remote repository")

    resolver = LinkResolver(repository, catalog, Prompter(console))
    aggregator = collect_changelog(args.changelog_directory, resolver)
    return build_markdown(aggregator, render_config)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
