"""Specialized segmenters for changelog page families the generic scan handles poorly.

Each function takes Markdown and returns an :data:`~changelogparser.items.EntryMap`:

  extract_wildcard_anchor   — single ``N.N.x`` family label plus ``## [Title](URL)`` posts
  extract_anchor_headings   — blog-style ``## [Title](URL)`` posts with dates and tags
  extract_version_headings  — release pages with ``# v1.2.3`` headings
  extract_whats_new         — IDE / tooling "What's New" pages

None of them raise on unexpected input; a page of the wrong shape simply
yields an empty map.
"""

from __future__ import annotations

import logging
import re

from changelogparser.items import BlockData, EntryMap, RawBlock, merge_entry

from .headings import parse_heading
from .markdown import clean_description, strip_leading_boilerplate
from .segmenter import MIN_BLOCK_CHARS, Segmenter

logger = logging.getLogger(__name__)

_SEE_MORE_RE = re.compile(r"\[See more\]\(([^)]+)\)")


def _last_see_more(content: str) -> str | None:
    links = _SEE_MORE_RE.findall(content)
    return links[-1] if links else None


# ---------------------------------------------------------------------------
# Wildcard version + anchor-link headings
# ---------------------------------------------------------------------------

_WILDCARD_LINE_RE = re.compile(r"^(\d+\.\d+\.x)$", re.MULTILINE)
_ANCHOR_HTTP_HEADING_RE = re.compile(r"^#{2}\s+\[(.*?)\]\((https?://[^)]+)\)", re.MULTILINE)
_NEXT_H2_RE = re.compile(r"^#{2}\s+", re.MULTILINE)

_MIN_ANCHOR_CONTENT_CHARS = 10


def extract_wildcard_anchor(markdown: str, product: str = "") -> EntryMap:
    """Extract a ``0.48.x``-style family label and every linked ``##`` post.

    The wildcard label gets a synthesized description (``"<product> 0.48.x
    updates"``) and no link.
    """
    entries: EntryMap = {}
    if not markdown:
        return entries

    m = _WILDCARD_LINE_RE.search(markdown)
    if m:
        label = m.group(1)
        logger.debug("Found wildcard version %s", label)
        entries[label] = BlockData(f"{product} {label} updates".strip(), None, label)

    for heading in _ANCHOR_HTTP_HEADING_RE.finditer(markdown):
        title, url = heading.group(1).strip(), heading.group(2)
        start = heading.end()
        nxt = _NEXT_H2_RE.search(markdown, start)
        end = nxt.start() if nxt else len(markdown)
        content = markdown[start:end].strip()
        if len(content) > _MIN_ANCHOR_CONTENT_CHARS:
            merge_entry(entries, title, BlockData(clean_description(content), url, heading.group(0)))

    logger.debug("Wildcard/anchor segmenter found %d entries", len(entries))
    return entries


# ---------------------------------------------------------------------------
# Anchor-link headings (blog style)
# ---------------------------------------------------------------------------

_ANCHOR_HEADING_RE = re.compile(r"^##[ \t]+\[([^\]]+)\]\(([^)]+)\)", re.MULTILINE)
_ANCHOR_LINE_RE = re.compile(r"^##\s+\[([^\]]+)\]\(([^)]+)\)$")
_LOOSE_ANCHOR_RE = re.compile(
    r"##\s+\[([^\]]+)\]\(([^)]+)\)[ \t]*(?:\n+|$)"                 # title and link
    r"(?:([A-Za-z]+\s+\d{1,2},\s*\d{4})[ \t]*(?:\n+|$))?"          # optional date
    r"(?:-\s*\[[^\]]+\](?:\([^)]+\))?[ \t]*(?:\n+|$))*"            # optional categories
    r"([\s\S]*?)(?=\n+##\s+|\n*\Z)",                               # body
)


def extract_anchor_headings(markdown: str) -> EntryMap:
    """Extract blog-style posts headed by ``## [Title](URL)``.

    Each post's link is the last "See more" link in its section, falling
    back to the heading link.  Pages with fewer than two such headings go
    through a looser pattern and then a line-by-line scan.
    """
    entries: EntryMap = {}
    if not markdown:
        return entries

    headings = list(_ANCHOR_HEADING_RE.finditer(markdown))
    logger.debug("Found %d anchor-link headings", len(headings))

    if len(headings) >= 2:
        for i, heading in enumerate(headings):
            title, link = heading.group(1).strip(), heading.group(2)
            start = markdown.find("\n", heading.start())
            end = headings[i + 1].start() if i + 1 < len(headings) else len(markdown)
            if start < 0 or end <= start:
                continue
            content = strip_leading_boilerplate(markdown[start:end].strip())
            cleaned = clean_description(content)
            if len(cleaned) > MIN_BLOCK_CHARS:
                detail = _last_see_more(content) or link
                merge_entry(entries, title, BlockData(cleaned, detail, heading.group(0)))
        return entries

    logger.debug("Few anchor headings found, trying loose pattern")
    for m in _LOOSE_ANCHOR_RE.finditer(markdown):
        title, link, _date, content = m.groups()
        title = title.strip()
        cleaned = clean_description(content)
        if len(cleaned) > MIN_BLOCK_CHARS:
            detail = _last_see_more(content) or link
            merge_entry(entries, title, BlockData(cleaned, detail, f"## [{title}]({link})"))

    if len(entries) < 2:
        logger.debug("Loose pattern found %d entries, scanning line by line", len(entries))
        for title, data in _scan_anchor_lines(markdown).items():
            entries.setdefault(title, data)

    return entries


def _anchor_line(line: str) -> tuple[str, int] | None:
    m = _ANCHOR_LINE_RE.match(line.strip())
    return (m.group(1).strip(), 2) if m else None


def _close_anchor_block(block: RawBlock, entries: EntryMap) -> None:
    if not block.body_lines or block.label in entries:
        return
    body = block.body
    cleaned = clean_description(body)
    if len(cleaned) <= MIN_BLOCK_CHARS:
        return
    heading = _ANCHOR_LINE_RE.match(block.heading_line.strip())
    link = _last_see_more(body) or (heading.group(2) if heading else None)
    entries[block.label] = BlockData(cleaned, link, block.heading_line.strip())


def _scan_anchor_lines(markdown: str) -> EntryMap:
    return Segmenter(is_heading=_anchor_line, on_close=_close_anchor_block).run(markdown)


# ---------------------------------------------------------------------------
# Plain version headings (release pages)
# ---------------------------------------------------------------------------

_VERSION_HEADING_RE = re.compile(
    r"^#{1,6}\s+v?(\d+\.\d+(?:\.\d+)?(?:-[a-zA-Z0-9_.-]+)?)",
    re.MULTILINE | re.IGNORECASE,
)
RELEASE_URL_RE = re.compile(r"https://github\.com/[^/\s]+/[^/\s]+/(?:releases|tags|compare)/[^)\s]+")


def extract_version_headings(markdown: str) -> EntryMap:
    """Extract entries headed by ``# v1.2.3`` / ``## 1.2.3-rc.1`` lines."""
    entries: EntryMap = {}
    if not markdown:
        return entries

    headings = list(_VERSION_HEADING_RE.finditer(markdown))
    for i, heading in enumerate(headings):
        version = heading.group(1)
        end = headings[i + 1].start() if i + 1 < len(headings) else len(markdown)
        content = markdown[heading.end():end].strip()
        if len(content) < MIN_BLOCK_CHARS:
            continue
        cleaned = clean_description(content)
        if len(cleaned) <= MIN_BLOCK_CHARS:
            continue
        url = RELEASE_URL_RE.search(content)
        merge_entry(
            entries,
            version,
            BlockData(cleaned, url.group(0) if url else None, heading.group(0).strip()),
        )

    logger.debug("Version-heading segmenter found %d entries", len(entries))
    return entries


# ---------------------------------------------------------------------------
# Dated "What's New" pages (IDEs, editors)
# ---------------------------------------------------------------------------

WHATS_NEW_PATTERNS: tuple[re.Pattern[str], ...] = (
    # What's New in IntelliJ IDEA 2024.1
    re.compile(
        r"^#+\s+(?:What'?s New|New Features|Updates?)(?:\s+in)?\s+(?:[a-z0-9\s]+\s+)?"
        r"(?:v\.?)?(\d{4}\.\d{1,2}(?:\.\d{1,2})?)",
        re.IGNORECASE,
    ),
    # March 2024 (version 1.88)
    re.compile(r"^#+\s+[a-zA-Z]+\s+\d{4}\s+\(version\s+(\d+\.\d+(?:\.\d+)?)\)", re.IGNORECASE),
    # v1.88
    re.compile(r"^#+\s+v(\d+\.\d+(?:\.\d+)?)", re.IGNORECASE),
    # Version 2024.1 / Release 1.2.3
    re.compile(r"^#+\s+(?:Version|Release)\s+(\d{4}\.\d(?:\.\d)?|\d+\.\d+\.\d+)", re.IGNORECASE),
)
DOCS_URL_RE = re.compile(r"https?://[^\s)]+(?:docs|updates|whatsnew|releases)[^\s)]*")


def _whats_new_heading(line: str) -> tuple[str, int] | None:
    stripped = line.strip()
    for pattern in WHATS_NEW_PATTERNS:
        m = pattern.match(stripped)
        if m:
            level = len(stripped) - len(stripped.lstrip("#"))
            return m.group(1), level
    return None


def _ends_section(line: str, block: RawBlock) -> bool:
    parsed = parse_heading(line)
    return parsed is not None and parsed[0] <= block.heading_level


def _close_whats_new_block(block: RawBlock, entries: EntryMap) -> None:
    if not block.body_lines:
        return
    body = block.body
    cleaned = clean_description(body)
    if len(cleaned) <= MIN_BLOCK_CHARS:
        return
    url = DOCS_URL_RE.search(body)
    merge_entry(
        entries,
        block.label,
        BlockData(cleaned, url.group(0) if url else None, block.heading_line.strip()),
    )


def extract_whats_new(markdown: str) -> EntryMap:
    """Extract IDE-style "What's New" sections.

    A section ends at the next recognised version heading or at any heading
    of the same or a shallower level.
    """
    entries = Segmenter(
        is_heading=_whats_new_heading,
        on_close=_close_whats_new_block,
        ends_block=_ends_section,
    ).run(markdown or "")
    logger.debug("What's-new segmenter found %d entries", len(entries))
    return entries
