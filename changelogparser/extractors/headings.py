"""changelogparser.extractors.headings — Release-boundary heading classifier.

Pure functions, no I/O.  Decides whether a Markdown heading opens a new
changelog entry and, if so, which label identifies it.

Rules are kept in :data:`HEADING_RULES`, an ordered table evaluated
first-match-wins:

  1. linked_title   — ``[Title](URL)`` headings (blog-style changelogs)
  2. semver … wildcard — direct version / date / build tokens
  3. descriptive    — free-text titles with a release hint
  4. unreleased     — Keep-a-Changelog ``Unreleased`` section

Usage::

    from changelogparser.extractors.headings import classify_heading

    classify_heading("Version 1.4.2 (2024-02-01)")   # -> "1.4.2"
    classify_heading("Bug fixes")                     # -> None
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import NamedTuple

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared vocabulary
# ---------------------------------------------------------------------------

# Generic sub-section headers that never name a release on their own
GENERIC_SECTION_RE = re.compile(
    r"^(?:features?|bug ?fixes?|fixe?d|enhancements?|improvements?|changes?|added|"
    r"removed|deprecated|security|what'?s new|highlights?|details?|summary|overview|"
    r"unreleased|upcoming|current|next|pending|contributors|other)$",
    re.IGNORECASE,
)

RELEASE_HINT_RE = re.compile(
    r"\d|release|update|version|build|patch|edition|changelog|announcement|month|year|week|day",
    re.IGNORECASE,
)

HEADING_RE = re.compile(r"^(#+)\s+(.*)")
LINKED_TITLE_RE = re.compile(r"^\[(.*?)\]\((.*?)\)$")
WILDCARD_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.x$", re.IGNORECASE)

# Token boundaries: start/whitespace/bracket before, end/space/punctuation after
_PRE = r"(?:^|(?<=[\s(\[]))"
_POST = r"(?=$|[\s,:;)\]])"

_YEAR_RE = re.compile(r"^\d{4}$")


class HeadingRule(NamedTuple):
    """One classifier rule: *pattern* selects, *extract* builds the label."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str], str], str | None]


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def _linked_title(match: re.Match[str], text: str) -> str | None:
    title = match.group(1).strip()
    return title if len(title) > 5 else None


def _token(match: re.Match[str], text: str) -> str | None:
    """Return the captured token unless it is a year buried in a longer title."""
    groups = match.groupdict()
    number = groups.get("num") or match.group("label")
    if _YEAR_RE.match(number) and len(text.split()) > 2:
        logger.debug("Ignoring bare year %r inside heading %r", number, text)
        return None
    return match.group("label")


def _descriptive_title(match: re.Match[str], text: str) -> str | None:
    candidate = text
    bracketed = text.startswith("[") and text.endswith("]")
    if bracketed:
        candidate = text[1:-1].strip()
    if not 5 <= len(candidate) <= 150 or GENERIC_SECTION_RE.match(candidate):
        return None
    if bracketed or RELEASE_HINT_RE.search(candidate):
        return candidate
    return None


def _unreleased(match: re.Match[str], text: str) -> str | None:
    return "Unreleased"


# ---------------------------------------------------------------------------
# Rule table (order is precedence)
# ---------------------------------------------------------------------------

HEADING_RULES: tuple[HeadingRule, ...] = (
    HeadingRule("linked_title", LINKED_TITLE_RE, _linked_title),
    HeadingRule(
        "semver",
        re.compile(
            _PRE + r"(?P<label>v?\d+\.\d+(?:\.\d+){0,2}(?:[-_][a-zA-Z0-9.-]*[a-zA-Z0-9])?)" + _POST,
            re.IGNORECASE,
        ),
        _token,
    ),
    HeadingRule(
        "iso_date",
        re.compile(_PRE + r"(?P<label>\d{4}[-./]\d{1,2}[-./]\d{1,2})" + _POST),
        _token,
    ),
    HeadingRule(
        "short_date",
        re.compile(_PRE + r"(?P<label>\d{4}\.\d{1,2}(?:\.\d{1,2})?)" + _POST),
        _token,
    ),
    HeadingRule(
        "build",
        re.compile(_PRE + r"(?P<label>(?:Build|Patch)\s+(?P<num>\d+(?:\.\d+)*))" + _POST, re.IGNORECASE),
        _token,
    ),
    HeadingRule(
        "service_pack",
        re.compile(_PRE + r"(?P<label>SP(?P<num>\d+))" + _POST, re.IGNORECASE),
        _token,
    ),
    HeadingRule(
        "matlab_release",
        re.compile(_PRE + r"(?P<label>R(?P<num>\d{4})[a-z])" + _POST, re.IGNORECASE),
        lambda match, text: match.group("label"),
    ),
    HeadingRule(
        "wildcard",
        re.compile(_PRE + r"(?P<label>\d+\.\d+\.x)" + _POST, re.IGNORECASE),
        _token,
    ),
    HeadingRule("descriptive", re.compile(r"^.+$"), _descriptive_title),
    HeadingRule("unreleased", re.compile(r"^\[?unreleased\]?$", re.IGNORECASE), _unreleased),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_heading(line: str) -> tuple[int, str] | None:
    """Split a ``#``-prefixed Markdown line into ``(level, text)``."""
    m = HEADING_RE.match(line.strip())
    if not m:
        return None
    return len(m.group(1)), m.group(2).strip()


def classify_heading(
    text: str,
    level: int = 2,
    rules: tuple[HeadingRule, ...] = HEADING_RULES,
) -> str | None:
    """Return the release label named by heading *text*, or None.

    Args:
        text:  Heading text with the ``#`` markers already stripped.
        level: Heading level.  Accepted for callers that pass it through;
               the built-in rules do not depend on it.
        rules: Rule table to evaluate, first match wins.
    """
    if not text or not text.strip():
        return None
    text = text.strip()

    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        label = rule.extract(match, text)
        if label:
            logger.debug("Heading %r (h%d) accepted by %s as %r", text, level, rule.name, label)
            return label

    logger.debug("Rejected heading %r", text)
    return None


# ---------------------------------------------------------------------------
# Companion predicate for labels produced elsewhere
# ---------------------------------------------------------------------------

_LABEL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d+\.\d+(\.\d+)*(-\w+(\.\d+)?)?$"),
    re.compile(r"^v\d+\.\d+(\.\d+)*(-\w+(\.\d+)?)?$", re.IGNORECASE),
    re.compile(r"^\d{4}[-./]\d{1,2}[-./]\d{1,2}$"),
    re.compile(r"^\d{8}$"),
    re.compile(r"^\d+\.\d+(-|to|\s*[-–—]\s*)\d+\.\d+$"),
    re.compile(r"^\d{4}$"),
    re.compile(r"^\d{4}\.\d+(\.\d+)?$"),
    re.compile(r"^Build\s+\d+(\.\d+)*$", re.IGNORECASE),
    re.compile(r"^SP\d+$", re.IGNORECASE),
    re.compile(r"^R\d{4}[a-z]$", re.IGNORECASE),
    re.compile(r"^\d+\.\d+\.x$", re.IGNORECASE),
)
_PRERELEASE_LABEL_RE = re.compile(r"^\d+\.\d+.*(?:alpha|beta|rc|preview)", re.IGNORECASE)
_VERSION_INDICATOR_RE = re.compile(
    r"version|release|update|v\.?\s*\d|build\s+\d|sp\d|\d{4}\.\d+",
    re.IGNORECASE,
)
_LINKED_HEADING_RE = re.compile(r"^#{1,3}\s+\[[^\]]+\]\([^)]+\)$")


def is_valid_label(label: str, heading: str = "") -> bool:
    """Stricter check for a label already extracted by another segmenter.

    *heading* is the full source heading line (with ``#`` markers) when
    known; it lets blog-style linked titles pass.
    """
    if not label or not label.strip():
        return False
    label = label.strip()
    heading = heading.strip()

    if re.match(r"^unreleased$", label, re.IGNORECASE):
        return True
    if any(p.match(label) for p in _LABEL_PATTERNS) or _PRERELEASE_LABEL_RE.match(label):
        return True
    if heading and _VERSION_INDICATOR_RE.search(heading) and len(label) < 60:
        return True
    if (
        heading
        and _LINKED_HEADING_RE.match(heading)
        and len(label) < 100
        and not GENERIC_SECTION_RE.match(label)
    ):
        return True
    return bool(re.search(r"\d", label)) and len(label) < 15
