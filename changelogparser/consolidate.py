"""Turn segmenter output into the final, ordered changelog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from changelogparser.items import BlockData, ChangelogEntry, EntryMap, merge_entry
from changelogparser.versions import is_wildcard_version, label_sort_key

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_CHARS = 10


def consolidate(entries: Mapping[str, BlockData] | Iterable[ChangelogEntry]) -> list[ChangelogEntry]:
    """Drop degenerate entries and sort the rest newest first.

    Accepts either a label → :class:`BlockData` map as produced by the
    segmenters, or already-built :class:`ChangelogEntry` objects.  Labels
    that are equal once whitespace is stripped are merged, longer
    description wins.  Running it on its own output returns the same list.
    """
    merged: EntryMap = {}
    if isinstance(entries, Mapping):
        for label, data in entries.items():
            if data is not None and label and label.strip():
                merge_entry(merged, label.strip(), data)
    else:
        for entry in entries:
            merge_entry(merged, entry.label, BlockData(entry.description, entry.detail_link))

    logger.debug("Consolidating %d raw blocks", len(merged))
    consolidated: list[ChangelogEntry] = []
    for label, data in merged.items():
        if not data.description or len(data.description) < MIN_DESCRIPTION_CHARS:
            logger.debug("Skipping short/empty description for %r", label)
            continue
        consolidated.append(
            ChangelogEntry(label=label, description=data.description, detail_link=data.detail_link),
        )

    consolidated.sort(key=lambda e: label_sort_key(e.label))
    logger.debug("Final consolidated count: %d", len(consolidated))
    return consolidated


def latest_entry(
    entries: Sequence[ChangelogEntry],
    *,
    prefer_wildcard: bool = False,
) -> ChangelogEntry | None:
    """Return the newest entry of an ordered changelog.

    With *prefer_wildcard* the first ``N.N.x`` family entry wins over
    individual posts.  A leading ``Unreleased`` section is skipped when a
    released entry follows it.
    """
    if not entries:
        return None

    if prefer_wildcard:
        for entry in entries:
            if is_wildcard_version(entry.label):
                return entry

    if entries[0].label == "Unreleased" and len(entries) > 1:
        logger.debug("Skipping 'Unreleased', returning %r", entries[1].label)
        return entries[1]
    return entries[0]
