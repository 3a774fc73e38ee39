"""Pick the single most relevant detail link for a changelog block.

Tiers are tried in order and the first hit wins:

  1. heading   — ``[text](url)`` inside the heading line itself
  2. explicit  — "Release notes", "Full Changelog", GitHub release/compare URLs
  3. more      — "See more" / "Read more" / "Learn more"
  4. markdown  — first non-image Markdown link in the body
  5. raw       — first bare URL, official hosts before everything else
"""

from __future__ import annotations

import logging
import re

from .urlnorm import is_image_host, is_image_url, is_official_url

logger = logging.getLogger(__name__)

_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_MARKDOWN_LINK_OR_IMAGE_RE = re.compile(r"(!?)\[([^\]]+)\]\(([^)]+)\)")

EXPLICIT_LINK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:release notes?|full changelog|details|compare view|view release|release page)\b"
        r".*?\((https?://[^)]+)\)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\((https?://github\.com/[^/]+/[^/]+/(?:releases|compare|commit|tree|tag)[^)]+)\)",
        re.IGNORECASE,
    ),
)

MORE_LINK_RE = re.compile(r"\[(?:See|Read|Learn) more\]\(([^)]+)\)", re.IGNORECASE)

_RAW_URL_RE = re.compile(r"(https?://[^\s<>)]+)")


def heading_link(heading_line: str) -> str | None:
    """Return the URL of the first ``[text](url)`` in *heading_line*."""
    m = _MARKDOWN_LINK_RE.search(heading_line or "")
    return m.group(2) if m else None


def extract_detail_link(heading_line: str, content: str) -> str | None:
    """Return the most relevant URL for a block, or None if there is none."""
    heading_line = heading_line or ""
    content = content or ""

    # ── Tier 1: link embedded in the heading ─────────────────────────────────
    url = heading_link(heading_line)
    if url and not is_image_url(url):
        logger.debug("Detail link from heading: %s", url)
        return url

    # ── Tier 2: explicit call-out links ──────────────────────────────────────
    for pattern in EXPLICIT_LINK_PATTERNS:
        m = pattern.search(content)
        if m:
            logger.debug("Detail link from explicit call-out: %s", m.group(1))
            return m.group(1)

    # ── Tier 3: "See more" style links ───────────────────────────────────────
    m = MORE_LINK_RE.search(content)
    if m:
        logger.debug("Detail link from 'more' link: %s", m.group(1))
        return m.group(1)

    # ── Tier 4: first non-image Markdown link ────────────────────────────────
    for m in _MARKDOWN_LINK_OR_IMAGE_RE.finditer(content):
        bang, text, href = m.groups()
        if bang or text.startswith("!") or is_image_url(href):
            continue
        logger.debug("Detail link from Markdown link: %s", href)
        return href

    # ── Tier 5: raw URLs, official domains first ─────────────────────────────
    official: list[str] = []
    other: list[str] = []
    for m in _RAW_URL_RE.finditer(content):
        raw = m.group(1)
        if is_image_url(raw) or is_image_host(raw):
            continue
        (official if is_official_url(raw) else other).append(raw)
    if official or other:
        url = (official or other)[0]
        logger.debug("Detail link from raw URL: %s", url)
        return url

    return None
