"""Section buckets accumulated across all changelog fragments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from ..resolve.links import Link


@dataclass(frozen=True, slots=True)
class ParsedItem:
    """Markdown source of a single list entry."""

    raw_markdown: str

    def text(self) -> str:
        """Return the entry with one leading bullet marker removed."""

        item = self.raw_markdown.strip()
        if item.startswith("-"):
            item = item[1:]
        return item.strip()


@dataclass(slots=True)
class SectionBucket:
    heading_level: int
    entries: List[Tuple[ParsedItem, Link]] = field(default_factory=list)

    def sorted_entries(self) -> List[Tuple[ParsedItem, Link]]:
        return sorted(self.entries, key=lambda entry: entry[1].shorthand)


class SectionAggregator:
    """Mapping from section heading text to its bucket."""

    def __init__(self) -> None:
        self._buckets: Dict[str, SectionBucket] = {}

    def add(self, heading: str, level: int, item: ParsedItem, link: Link) -> SectionBucket:
        """Append *item* under *heading*, creating the bucket on first use."""

        bucket = self._buckets.get(heading)
        if bucket is None:
            bucket = SectionBucket(heading_level=level)
            self._buckets[heading] = bucket
        bucket.entries.append((item, link))
        return bucket

    def get(self, heading: str) -> SectionBucket | None:
        return self._buckets.get(heading)

    def names(self) -> List[str]:
        return list(self._buckets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)
