"""changelogparser.engine - extract an ordered changelog from page content.

The caller fetches the page and decides which segmentation strategy suits
the source; the engine only ever computes over strings.

Basic usage::

    from changelogparser import extract_changelog

    entries = extract_changelog(markdown_text)
    for entry in entries:
        print(entry.label, entry.detail_link)

With scraper output and a site profile::

    from changelogparser import extract_changelog, load_profile, page_content_from_formats

    profile = load_profile("https://cursor.com/changelog")
    page = page_content_from_formats(markdown=result.get("markdown"), raw_html=result.get("rawHtml"))
    entries = extract_changelog(page, profile=profile)

An empty list means nothing could be extracted; callers typically keep
their previously stored entries in that case.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from changelogparser.consolidate import consolidate
from changelogparser.extractors.headings import is_valid_label
from changelogparser.extractors.markdown import html_to_markdown
from changelogparser.extractors.segmenter import segment
from changelogparser.extractors.strategies import (
    extract_anchor_headings,
    extract_version_headings,
    extract_wildcard_anchor,
    extract_whats_new,
)
from changelogparser.items import (
    ChangelogEntry,
    EntryMap,
    ExtractionFailed,
    PageContent,
    RawMarkup,
    Strategy,
    StructuredText,
    merge_entry,
)
from changelogparser.profiles import SiteProfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class ContentUnavailableError(RuntimeError):
    """Raised when the engine is handed a page the fetcher failed to produce.

    Attributes:
        reason -- the failure reason reported by the fetch collaborator
    """

    def __init__(self, message: str, reason: str = "") -> None:
        super().__init__(message)
        self.reason = reason


# ---------------------------------------------------------------------------
# Content resolution
# ---------------------------------------------------------------------------

def resolve_text(page: PageContent | str, profile: SiteProfile | None = None) -> str:
    """Return line-oriented Markdown for *page*.

    Raw markup is converted with the profile's content selector and
    excluded tags.  A plain string is taken as Markdown.

    Raises:
        ContentUnavailableError: if *page* is :class:`ExtractionFailed`.
    """
    if isinstance(page, str):
        return page
    if isinstance(page, StructuredText):
        return page.text
    if isinstance(page, RawMarkup):
        logger.debug("Converting raw HTML (%d chars) to Markdown", len(page.html))
        if profile is None:
            return html_to_markdown(page.html)
        return html_to_markdown(
            page.html,
            content_selector=profile.content_selector,
            exclude_tags=profile.exclude_tags,
        )
    if isinstance(page, ExtractionFailed):
        raise ContentUnavailableError(
            f"Page content unavailable: {page.reason}",
            reason=page.reason,
        )
    raise TypeError(f"Unsupported page content: {type(page).__name__}")


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

_SPECIALIZED: tuple[Callable[[str], EntryMap], ...] = (
    extract_wildcard_anchor,
    extract_anchor_headings,
    extract_version_headings,
    extract_whats_new,
)


def _auto(markdown: str) -> EntryMap:
    """Generic scan, supplemented by every specialized segmenter."""
    entries = segment(markdown)
    for extractor in _SPECIALIZED:
        for label, data in extractor(markdown).items():
            if is_valid_label(label, data.heading):
                merge_entry(entries, label, data)
            else:
                logger.debug("%s produced invalid label %r", extractor.__name__, label)
    return entries


def extract_entries(
    markdown: str,
    strategy: Strategy | str = Strategy.GENERIC,
    *,
    product: str = "",
) -> EntryMap:
    """Segment *markdown* with *strategy* and return the label → block map.

    Args:
        markdown: Page content in line-oriented Markdown.
        strategy: A :class:`Strategy` or its string value.
        product:  Product name used in synthesized descriptions.

    Raises:
        ValueError: for an unknown strategy name.
    """
    strategy = Strategy(strategy)
    logger.info("Using %s extraction strategy", strategy)

    if strategy is Strategy.WILDCARD_ANCHOR:
        return extract_wildcard_anchor(markdown, product)
    if strategy is Strategy.ANCHOR_HEADINGS:
        return extract_anchor_headings(markdown)
    if strategy is Strategy.VERSION_HEADINGS:
        return extract_version_headings(markdown)
    if strategy is Strategy.WHATS_NEW:
        return extract_whats_new(markdown)
    if strategy is Strategy.AUTO:
        return _auto(markdown)
    return segment(markdown)


def extract_changelog(
    page: PageContent | str,
    strategy: Strategy | str | None = None,
    profile: SiteProfile | None = None,
) -> list[ChangelogEntry]:
    """Extract the ordered, deduplicated changelog from *page*.

    *strategy* overrides the profile's strategy; without either the
    generic segmenter is used.  Returns ``[]`` when nothing was found.
    """
    if strategy is None:
        strategy = profile.strategy if profile else Strategy.GENERIC
    text = resolve_text(page, profile)

    entries = extract_entries(text, strategy, product=profile.name if profile else "")
    if not entries:
        logger.warning(
            "No changelog entries extracted%s; the page structure may be unsupported",
            f" for {profile.name}" if profile else "",
        )
        return []

    changelog = consolidate(entries)
    logger.info("Extracted %d changelog entries (%d raw blocks)", len(changelog), len(entries))
    return changelog


# ---------------------------------------------------------------------------
# Interchange helpers
# ---------------------------------------------------------------------------

def entries_to_records(entries: Iterable[ChangelogEntry]) -> list[dict[str, Any]]:
    """Return interchange records (``label``, ``description``, ``detailLink``)."""
    return [entry.to_record() for entry in entries]


def to_json(entries: Iterable[ChangelogEntry], indent: int | None = 2) -> str:
    return json.dumps(entries_to_records(entries), indent=indent, ensure_ascii=False)


def load_entries(records: Iterable[Mapping[str, Any]]) -> list[ChangelogEntry]:
    """Rebuild and re-sort entries from stored records.

    Accepts the legacy ``version`` key in place of ``label``.
    """
    return consolidate(ChangelogEntry.model_validate(dict(record)) for record in records)
