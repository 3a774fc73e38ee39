"""changelogparser.extractors.segmenter — Line-scanning block segmenter.

A single pass over the document driven by three states:

  SEARCHING      — no block is open; lines are discarded
  IN_BLOCK       — a block is open; lines are appended to its body
  IN_CODE_FENCE  — inside a fenced code region (nested in either state
                   above); no heading checks, lines copied verbatim

The heading predicate, the optional block terminator and the close hook
are parameters, so the specialized segmenters run the same automaton with
their own rules plugged in.

Usage::

    from changelogparser.extractors.segmenter import segment

    entries = segment(markdown)
    for label, data in entries.items():
        print(label, data.detail_link)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from changelogparser.items import BlockData, EntryMap, RawBlock, merge_entry

from .headings import classify_heading, parse_heading
from .links import extract_detail_link, heading_link
from .markdown import FENCE, clean_description

logger = logging.getLogger(__name__)

# Cleaned bodies this short are never stored
MIN_BLOCK_CHARS = 5

# Entries shorter than this are removed by the final cleanup pass
MIN_DESCRIPTION_CHARS = 15

# (line) -> (label, heading level) when the line opens a new block
HeadingPredicate = Callable[[str], tuple[str, int] | None]
# (line, open block) -> True when the line ends the block without opening one
BlockTerminator = Callable[[str, RawBlock], bool]
# (closed block, entries) -> None
CloseHook = Callable[[RawBlock, EntryMap], None]


class ScanState(StrEnum):
    SEARCHING     = "searching"
    IN_BLOCK      = "in_block"
    IN_CODE_FENCE = "in_code_fence"


# ---------------------------------------------------------------------------
# Default hooks
# ---------------------------------------------------------------------------

def markdown_heading(line: str) -> tuple[str, int] | None:
    """Classify a ``#`` heading line with the generic heading rules."""
    parsed = parse_heading(line)
    if parsed is None:
        return None
    level, text = parsed
    label = classify_heading(text, level)
    return (label, level) if label else None


def close_block(block: RawBlock, entries: EntryMap) -> None:
    """Clean *block*, pick its link and merge it into *entries*."""
    if not block.body_lines:
        return
    description = clean_description(block.body)
    if len(description) <= MIN_BLOCK_CHARS:
        logger.debug("Skipping empty block for %r", block.label)
        return
    link = extract_detail_link(block.heading_line, description) or heading_link(block.heading_line)
    merge_entry(entries, block.label, BlockData(description, link, block.heading_line.strip()))


# ---------------------------------------------------------------------------
# Automaton
# ---------------------------------------------------------------------------

class Segmenter:
    """Split Markdown into per-label blocks.

    Args:
        is_heading: Predicate deciding whether a line opens a block.
        on_close:   Hook converting a finished block into an entry.
        ends_block: Optional predicate closing the open block on a line
                    that does not itself open a new one.
    """

    def __init__(
        self,
        is_heading: HeadingPredicate = markdown_heading,
        on_close: CloseHook = close_block,
        ends_block: BlockTerminator | None = None,
    ) -> None:
        self.is_heading = is_heading
        self.on_close = on_close
        self.ends_block = ends_block

    def run(self, markdown: str) -> EntryMap:
        entries: EntryMap = {}
        if not markdown:
            return entries

        state = ScanState.SEARCHING
        block: RawBlock | None = None
        lines = markdown.split("\n")
        logger.debug("Segmenting document with %d lines", len(lines))

        for line in lines:
            if line.strip().startswith(FENCE):
                if state is ScanState.IN_CODE_FENCE:
                    state = ScanState.IN_BLOCK if block else ScanState.SEARCHING
                else:
                    state = ScanState.IN_CODE_FENCE
                if block:
                    block.body_lines.append(line)
                continue

            if state is ScanState.IN_CODE_FENCE:
                if block:
                    block.body_lines.append(line)
                continue

            heading = self.is_heading(line)
            if heading:
                if block:
                    self.on_close(block, entries)
                label, level = heading
                block = RawBlock(label=label, heading_line=line, heading_level=level)
                state = ScanState.IN_BLOCK
                continue

            if block and self.ends_block and self.ends_block(line, block):
                self.on_close(block, entries)
                block = None
                state = ScanState.SEARCHING
                continue

            if state is ScanState.IN_BLOCK and block:
                block.body_lines.append(line)

        if block:
            self.on_close(block, entries)
        return entries


# ---------------------------------------------------------------------------
# Generic strategy
# ---------------------------------------------------------------------------

def is_redundant(label: str, description: str) -> bool:
    """Return True if *description* is too short or merely restates *label*."""
    desc = description.strip()
    ident = label.strip()
    if ident[:1] in ("v", "V"):
        ident = ident[1:]
    return (
        len(desc) < MIN_DESCRIPTION_CHARS
        or desc == ident
        or desc.lower() == f"version {ident}".lower()
    )


def remove_redundant(entries: EntryMap) -> EntryMap:
    """Return *entries* without minimal or label-restating descriptions."""
    kept = {label: data for label, data in entries.items() if not is_redundant(label, data.description)}
    removed = len(entries) - len(kept)
    if removed:
        logger.debug("Removed %d blocks during final cleanup", removed)
    return kept


def segment(markdown: str, *, is_heading: HeadingPredicate = markdown_heading) -> EntryMap:
    """Run the generic segmenter over *markdown* and drop degenerate blocks."""
    entries = Segmenter(is_heading=is_heading).run(markdown)
    entries = remove_redundant(entries)
    logger.debug("Generic segmenter found %d blocks", len(entries))
    return entries
