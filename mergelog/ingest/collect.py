"""Entry point for reading changelog fragments into section buckets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..changelog.aggregate import SectionAggregator
from ..changelog.parse import ChangelogParseError, parse_fragment
from ..config import ConfigError
from ..resolve.links import LinkResolver

logger = logging.getLogger(__name__)

FRAGMENT_SUFFIX = ".md"


def discover_fragments(directory: Path) -> List[Path]:
    """Return the markdown files directly inside *directory*.

    Order is whatever the filesystem yields; it is not sorted.
    """

    if not directory.is_dir():
        raise ConfigError(
            "Changelog directory specified either does not exist or is not a directory",
            code="main::missing_changelogs",
            location=str(directory),
        )
    return [
        path
        for path in directory.iterdir()
        if path.suffix == FRAGMENT_SUFFIX and path.is_file()
    ]


def read_fragment(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ChangelogParseError(
            f"Changelog is not valid UTF-8: {exc.reason} at byte {exc.start}",
            code="main::utf8_error",
            location=str(path),
        ) from exc
    except OSError as exc:
        raise ChangelogParseError(
            f"Failed to read changelog: {exc}",
            code="main::io_error",
            location=str(path),
        ) from exc


def collect_changelog(
    directory: Path,
    resolver: LinkResolver,
    aggregator: SectionAggregator | None = None,
) -> SectionAggregator:
    """Resolve and parse every fragment in *directory* into *aggregator*."""

    aggregator = aggregator if aggregator is not None else SectionAggregator()
    fragments = discover_fragments(directory)
    logger.info("Found %d changelog fragment(s) in %s", len(fragments), directory)

    for path in fragments:
        contents = read_fragment(path)
        link = resolver.resolve(path.stem, contents)
        parse_fragment(contents, link, aggregator, source=str(path))
    return aggregator
