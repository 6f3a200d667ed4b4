"""Markdown writer for the merged changelog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set, Tuple

from ..changelog.aggregate import ParsedItem, SectionAggregator
from ..config import MergelogConfig
from ..resolve.links import Link


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Settings that control how sections are emitted."""

    ordered_section_names: Tuple[str, ...]
    format_template: str
    emit_short_links: bool = False

    @classmethod
    def from_config(cls, config: MergelogConfig) -> "RenderConfig":
        return cls(
            ordered_section_names=tuple(config.sections),
            format_template=config.format,
            emit_short_links=config.short_links,
        )


def format_entry(template: str, item: ParsedItem, link: Link) -> str:
    return (
        template.replace("{link_short}", link.shorthand)
        .replace("{link_name}", link.shorthand)
        .replace("{link}", link.full)
        .replace("{item}", item.text())
    )


def build_markdown(aggregator: SectionAggregator, render_config: RenderConfig) -> str:
    """Render the requested sections that received items, in requested order.

    A blank line separates rendered sections. Requested sections without
    items produce no heading and no separator, so the document never starts
    with a blank line or carries two in a row.
    """

    lines: List[str] = []
    short_links: Set[Tuple[str, str]] = set()

    for name in render_config.ordered_section_names:
        bucket = aggregator.get(name)
        if bucket is None:
            continue
        if lines:
            lines.append("")
        lines.append(f"{'#' * bucket.heading_level} {name}")
        for item, link in bucket.sorted_entries():
            lines.append(f"- {format_entry(render_config.format_template, item, link)}")
            if render_config.emit_short_links:
                short_links.add((link.shorthand, link.full))

    if short_links:
        lines.append("")
        for shorthand, full in sorted(short_links):
            lines.append(f"[{shorthand}]: {full}")

    return "\n".join(lines)
