"""Data model: scan-time blocks, page-content variants and the output schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scan-time structures
# ---------------------------------------------------------------------------

@dataclass
class RawBlock:
    """Content between one accepted heading and the next, while scanning."""

    label: str
    heading_line: str
    body_lines: list[str] = field(default_factory=list)
    heading_level: int = 0

    @property
    def body(self) -> str:
        return "\n".join(self.body_lines)


@dataclass(frozen=True)
class BlockData:
    """Cleaned description and link stored per label before consolidation."""

    description: str
    detail_link: str | None = None
    heading: str = ""  # source heading line, when known


EntryMap = dict[str, BlockData]


def merge_entry(entries: EntryMap, label: str, data: BlockData) -> bool:
    """Store *data* under *label* unless a longer description is already there.

    The surviving block keeps the earlier detail link when it has none of
    its own.  Returns True if *data* replaced (or created) the entry.
    """
    existing = entries.get(label)
    if existing is not None and len(data.description) <= len(existing.description):
        if not existing.detail_link and data.detail_link:
            entries[label] = BlockData(existing.description, data.detail_link, existing.heading)
        logger.debug("Keeping longer block already stored for %r", label)
        return False

    link = data.detail_link or (existing.detail_link if existing else None)
    entries[label] = BlockData(data.description, link, data.heading)
    logger.debug("Saved block %r (%d chars)", label, len(data.description))
    return True


# ---------------------------------------------------------------------------
# Page content handed over by the fetch collaborator
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StructuredText:
    """Page already converted to line-oriented Markdown."""

    text: str


@dataclass(frozen=True)
class RawMarkup:
    """Only raw HTML is available; needs fallback conversion."""

    html: str


@dataclass(frozen=True)
class ExtractionFailed:
    """The collaborator could not produce usable content."""

    reason: str = "no usable content"


PageContent = StructuredText | RawMarkup | ExtractionFailed

_MIN_MARKDOWN_CHARS = 50
_MIN_HTML_CHARS = 100


def page_content_from_formats(
    markdown: str | None = None,
    raw_html: str | None = None,
) -> PageContent:
    """Choose the richest usable format returned by a scraper.

    Markdown wins when it has some substance; otherwise raw HTML is used;
    otherwise the page is reported as failed.
    """
    if isinstance(markdown, str) and len(markdown.strip()) > _MIN_MARKDOWN_CHARS:
        return StructuredText(markdown)
    if isinstance(raw_html, str) and len(raw_html.strip()) > _MIN_HTML_CHARS:
        logger.debug("Markdown empty or short, falling back to raw HTML")
        return RawMarkup(raw_html)
    return ExtractionFailed("neither markdown nor raw HTML had usable content")


# ---------------------------------------------------------------------------
# Output schema
# ---------------------------------------------------------------------------

class ChangelogEntry(BaseModel):
    """One release entry in the final, ordered changelog."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(validation_alias=AliasChoices("label", "version"))
    description: str
    detail_link: str | None = Field(
        default=None,
        validation_alias=AliasChoices("detail_link", "detailLink"),
        serialization_alias="detailLink",
    )

    @field_validator("label", mode="before")
    @classmethod
    def strip_label(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("label must not be empty")
        return v

    @field_validator("detail_link", mode="before")
    @classmethod
    def empty_link_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_record(self) -> dict[str, Any]:
        """Return the interchange record; ``detailLink`` is None, never absent."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

class Strategy(StrEnum):
    """Segmentation strategy chosen by the caller for a page."""

    GENERIC          = "generic"
    WILDCARD_ANCHOR  = "wildcard_anchor"
    ANCHOR_HEADINGS  = "anchor_headings"
    VERSION_HEADINGS = "version_headings"
    WHATS_NEW        = "whats_new"
    AUTO             = "auto"
