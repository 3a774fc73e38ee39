"""Newest-first ordering over mixed changelog label shapes.

Labels on release-notes pages are semantic versions, dates, build numbers,
version families (``0.48.x``) or free-text titles.  :func:`compare_labels`
puts them in a single order:

  1. version families (``N.N.x``), newest family first
  2. dates (``YYYY-MM-DD``), newest first
  3. numeric versions, highest first
  4. everything else, reverse alphabetical

Within numeric versions a pre-release (``1.2.0-rc.1``) sorts *before* the
stable release with the same number.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable

_WILDCARD_RE = re.compile(r"^(\d+)\.(\d+)\.x$")
_DATE_RE = re.compile(r"^_?\d{4}[-./]\d{1,2}[-./]\d{1,2}_?$")
_PLAIN_DATE_RE = re.compile(r"^\d{4}[-./]\d{1,2}[-./]\d{1,2}$")
_NUMERIC_VERSION_RE = re.compile(r"^v?\d+(\.\d+)+")
_DATE_SPLIT_RE = re.compile(r"[-./]")
_SUFFIX_SPLIT_RE = re.compile(r"[-_]")

PRERELEASE_ORDER: tuple[str, ...] = ("alpha", "beta", "rc", "preview", "pre")


def _cmp(a: object, b: object) -> int:
    """Ascending three-way comparison."""
    return (a > b) - (a < b)  # type: ignore[operator]


def _desc(a: object, b: object) -> int:
    """Descending three-way comparison: the larger value sorts first."""
    return _cmp(b, a)


def is_wildcard_version(label: str) -> bool:
    return bool(_WILDCARD_RE.match(label))


def is_date_label(label: str) -> bool:
    return bool(_DATE_RE.match(label))


def is_numeric_version(label: str) -> bool:
    return bool(_NUMERIC_VERSION_RE.match(label)) or bool(_PLAIN_DATE_RE.match(label))


def _prerelease_rank(suffix: str) -> int | None:
    for rank, marker in enumerate(PRERELEASE_ORDER):
        if marker in suffix:
            return rank
    return None


def _split_version(label: str) -> tuple[list[int | str], str]:
    """Split ``v1.2.3-beta.1 (stable)`` into ``([1, 2, 3], "beta.1")``."""
    clean = label.strip()
    if clean[:1] in ("v", "V"):
        clean = clean[1:]
    tokens = clean.split()
    pieces = _SUFFIX_SPLIT_RE.split(tokens[0] if tokens else "", maxsplit=1)
    main = pieces[0]
    suffix = pieces[1].lower() if len(pieces) > 1 else ""
    parts: list[int | str] = [int(p) if p.isdecimal() else p.lower() for p in main.split(".")]
    return parts, suffix


def _compare_dates(a: str, b: str) -> int:
    parts_a = [int(p) for p in _DATE_SPLIT_RE.split(a.strip("_")) if p.isdecimal()]
    parts_b = [int(p) for p in _DATE_SPLIT_RE.split(b.strip("_")) if p.isdecimal()]
    for x, y in zip(parts_a, parts_b):
        if x != y:
            return _desc(x, y)
    return _desc(len(parts_a), len(parts_b))


def _compare_suffixes(a: str, b: str) -> int:
    rank_a = _prerelease_rank(a) if a else None
    rank_b = _prerelease_rank(b) if b else None

    if rank_a is not None and rank_b is not None:
        if rank_a != rank_b:
            return _cmp(rank_a, rank_b)
    elif rank_a is not None:
        return -1
    elif rank_b is not None:
        return 1

    if a and b:
        return _desc(a, b)
    if not a and b:
        return -1
    if a and not b:
        return 1
    return 0


def _compare_components(a: str, b: str) -> int:
    if _DATE_RE.match(a) and _DATE_RE.match(b):
        return _compare_dates(a, b)

    parts_a, suffix_a = _split_version(a)
    parts_b, suffix_b = _split_version(b)

    for x, y in zip(parts_a, parts_b):
        if isinstance(x, int) and isinstance(y, int):
            if x != y:
                return _desc(x, y)
        elif isinstance(x, int):
            return -1
        elif isinstance(y, int):
            return 1
        elif x != y:
            return _desc(x, y)

    # 1.2.3 before 1.2
    if len(parts_a) != len(parts_b):
        return _desc(len(parts_a), len(parts_b))

    return _compare_suffixes(suffix_a, suffix_b)


def compare_labels(a: str, b: str) -> int:
    """Three-way comparison putting the newer label first.

    Returns a negative number when *a* sorts before *b*, positive when
    after, and 0 only for identical labels.
    """
    if a == b:
        return 0

    wild_a = _WILDCARD_RE.match(a)
    wild_b = _WILDCARD_RE.match(b)
    if wild_a and not wild_b:
        return -1
    if wild_b and not wild_a:
        return 1
    if wild_a and wild_b:
        major = _desc(int(wild_a.group(1)), int(wild_b.group(1)))
        return major or _desc(int(wild_a.group(2)), int(wild_b.group(2))) or _desc(a, b)

    date_a, date_b = is_date_label(a), is_date_label(b)
    if date_a != date_b:
        return -1 if date_a else 1

    version_a, version_b = is_numeric_version(a), is_numeric_version(b)
    if version_a != version_b:
        return -1 if version_a else 1
    if not version_a:
        return _desc(a, b)

    # Distinct spellings of the same version ("v1.2" / "1.2") fall back to text
    return _compare_components(a, b) or _desc(a, b)


label_sort_key = functools.cmp_to_key(compare_labels)


def sort_labels(labels: Iterable[str]) -> list[str]:
    """Return *labels* ordered newest first."""
    return sorted(labels, key=label_sort_key)
