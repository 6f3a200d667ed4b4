"""Extract heading-delimited list items from changelog fragments."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..errors import MergelogError
from ..resolve.links import Link
from .aggregate import ParsedItem, SectionAggregator

logger = logging.getLogger(__name__)

_LINE_PREFIX_RE = re.compile(r"^[ \t>]*")
_LINE_END_RE = re.compile(r"\r\n?")
_BULLET_MARKERS = ("*", "+")


class ChangelogParseError(MergelogError):
    """Raised when a changelog fragment cannot be read or interpreted."""

    code = "changelog::parse"


class UnsupportedHeadingError(ChangelogParseError):
    """Raised for headings containing anything other than plain text."""

    code = "changelog::unsupported_heading"


@dataclass(frozen=True, slots=True)
class SectionCursor:
    """The heading that list items are currently filed under."""

    heading: str
    level: int


@dataclass(slots=True)
class FragmentSection:
    """A heading and the list items that follow it.

    The first section of every fragment has ``heading=None`` and holds the
    items that appear before any heading.
    """

    heading: str | None
    level: int
    items: List[ParsedItem] = field(default_factory=list)


def parse_sections(contents: str, *, source: str = "<fragment>") -> List[FragmentSection]:
    """Split *contents* into sections in document order."""

    # token.map counts lines the way markdown-it does: only on \n after
    # folding \r\n and \r.
    text = _LINE_END_RE.sub("\n", contents)
    tokens = MarkdownIt("commonmark").parse(text)
    lines = text.split("\n")
    bullet_lines = {
        token.map[0]: token.markup
        for token in tokens
        if token.type == "list_item_open" and token.map and token.markup in _BULLET_MARKERS
    }

    sections = [FragmentSection(heading=None, level=0)]
    for index, token in enumerate(tokens):
        if token.type == "heading_open":
            inline = tokens[index + 1] if index + 1 < len(tokens) else None
            heading = _heading_text(token, inline, source)
            sections.append(FragmentSection(heading=heading, level=int(token.tag[1:])))
        elif token.type == "list_item_open":
            raw = _item_source(token, lines, bullet_lines)
            sections[-1].items.append(ParsedItem(raw_markdown=raw))
    return sections


def parse_fragment(
    contents: str,
    link: Link,
    aggregator: SectionAggregator,
    *,
    source: str = "<fragment>",
    cursor: SectionCursor | None = None,
) -> SectionCursor | None:
    """File every list item of a fragment under its heading in *aggregator*.

    Items are paired with *link*. Items appearing before the first heading go
    to *cursor*, or are dropped when it is ``None``. Returns the cursor left
    after the last heading.
    """

    for section in parse_sections(contents, source=source):
        if section.heading is not None:
            cursor = SectionCursor(heading=section.heading, level=section.level)
        if cursor is None:
            if section.items:
                logger.debug("Dropping %d item(s) before the first heading in %s", len(section.items), source)
            continue
        for item in section.items:
            aggregator.add(cursor.heading, cursor.level, item, link)
    return cursor


def _heading_text(token: Token, inline: Token | None, source: str) -> str:
    children: Sequence[Token] = []
    if inline is not None and inline.type == "inline":
        children = inline.children or []

    parts: List[str] = []
    for child in children:
        if child.type != "text":
            line = token.map[0] + 1 if token.map else 0
            raise UnsupportedHeadingError(
                f"Unsupported heading content '{child.type}'",
                location=f"{source}:{line}",
                help="Section headings may only contain plain text.",
            )
        parts.append(child.content)
    return "".join(parts).strip()


def _item_source(token: Token, lines: Sequence[str], bullet_lines: Mapping[int, str]) -> str:
    """Return the item's source lines with every ``*``/``+`` bullet written as ``-``."""

    if not token.map:
        return ""
    start, end = token.map
    item_lines: List[str] = []
    for number in range(start, min(end, len(lines))):
        line = lines[number]
        marker = bullet_lines.get(number)
        if marker is not None:
            prefix = _LINE_PREFIX_RE.match(line).end()
            if line[prefix:].startswith(marker):
                line = f"{line[:prefix]}-{line[prefix + 1:]}"
        item_lines.append(line)
    if not item_lines:
        return ""

    first = item_lines[0]
    item_lines[0] = first[_LINE_PREFIX_RE.match(first).end():]
    return "\n".join(item_lines).rstrip()
