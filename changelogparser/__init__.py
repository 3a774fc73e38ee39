"""changelogparser - turn release-notes pages into ordered changelog entries.

Quick usage::

    from changelogparser import extract_changelog

    entries = extract_changelog(markdown_text)
    latest = entries[0] if entries else None

Choosing a strategy for a known site::

    from changelogparser import Strategy, extract_changelog, load_profile

    profile = load_profile("https://github.blog/changelog")
    entries = extract_changelog(markdown_text, profile=profile)          # anchor_headings
    entries = extract_changelog(markdown_text, Strategy.VERSION_HEADINGS)

Serialization::

    from changelogparser import to_json

    print(to_json(entries))   # [{"label": ..., "description": ..., "detailLink": null}, ...]
"""

from changelogparser.consolidate import consolidate, latest_entry
from changelogparser.engine import (
    ContentUnavailableError,
    entries_to_records,
    extract_changelog,
    extract_entries,
    load_entries,
    to_json,
)
from changelogparser.items import (
    ChangelogEntry,
    ExtractionFailed,
    RawMarkup,
    Strategy,
    StructuredText,
    page_content_from_formats,
)
from changelogparser.profiles import ProfileError, SiteProfile, load_profile
from changelogparser.versions import compare_labels, sort_labels

__version__ = "0.1.0"
__all__ = [
    "ChangelogEntry",
    "ContentUnavailableError",
    "ExtractionFailed",
    "ProfileError",
    "RawMarkup",
    "SiteProfile",
    "Strategy",
    "StructuredText",
    "compare_labels",
    "consolidate",
    "entries_to_records",
    "extract_changelog",
    "extract_entries",
    "latest_entry",
    "load_entries",
    "load_profile",
    "page_content_from_formats",
    "sort_labels",
    "to_json",
]
