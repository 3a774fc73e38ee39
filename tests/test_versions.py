"""Tests for newest-first label ordering."""

from __future__ import annotations

import itertools

import pytest

from changelogparser.versions import (
    compare_labels,
    is_date_label,
    is_numeric_version,
    is_wildcard_version,
    sort_labels,
)

MIXED_LABELS = [
    "1.2.0",
    "1.10.0",
    "v1.9.3",
    "1.2.0-rc.1",
    "1.2.0-beta.2",
    "1.2.0-alpha",
    "2.0",
    "0.48.x",
    "0.47.x",
    "2024-03-10",
    "2023-12-01",
    "Unreleased",
    "Chat tabs and custom modes",
    "Build 12345",
]


class TestLabelShapes:
    def test_wildcard(self):
        assert is_wildcard_version("0.48.x") is True
        assert is_wildcard_version("0.48.1") is False

    def test_date(self):
        assert is_date_label("2024-03-10") is True
        assert is_date_label("_2024-03-10_") is True
        assert is_date_label("1.2.0") is False

    def test_numeric(self):
        assert is_numeric_version("v1.2.3") is True
        assert is_numeric_version("1.2.0-rc.1") is True
        assert is_numeric_version("Build 12345") is False


class TestCompareLabels:
    def test_identical_labels_equal(self):
        for label in MIXED_LABELS:
            assert compare_labels(label, label) == 0

    def test_distinct_labels_never_equal(self):
        for a, b in itertools.permutations(MIXED_LABELS, 2):
            assert compare_labels(a, b) != 0

    def test_antisymmetric(self):
        for a, b in itertools.permutations(MIXED_LABELS, 2):
            assert (compare_labels(a, b) < 0) == (compare_labels(b, a) > 0)

    def test_higher_version_first(self):
        assert compare_labels("1.2.0", "1.1.0") < 0
        assert compare_labels("1.10.0", "1.9.3") < 0

    def test_leading_v_ignored(self):
        assert compare_labels("v2.0.0", "1.9.0") < 0

    def test_longer_version_first_on_tie(self):
        assert compare_labels("1.2.1", "1.2") < 0

    def test_wildcard_first(self):
        assert compare_labels("0.48.x", "9.9.9") < 0
        assert compare_labels("0.48.x", "Some post title") < 0

    def test_newer_wildcard_family_first(self):
        assert compare_labels("0.48.x", "0.47.x") < 0
        assert compare_labels("1.0.x", "0.99.x") < 0

    def test_date_before_title(self):
        assert compare_labels("2024-01-01", "My Feature") < 0

    def test_date_before_version(self):
        assert compare_labels("2023-01-01", "9.0.0") < 0

    def test_newer_date_first(self):
        assert compare_labels("2024-03-10", "2023-12-01") < 0
        assert compare_labels("2024-03-10", "2024-02-28") < 0

    def test_version_before_title(self):
        assert compare_labels("0.1.0", "Zebra release") < 0

    def test_titles_reverse_alphabetical(self):
        assert compare_labels("Zebra", "Apple") < 0


class TestPrereleaseOrdering:
    """Pre-releases sort ahead of the stable release with the same number."""

    def test_rc_before_stable(self):
        assert compare_labels("1.2.0-rc.1", "1.2.0") < 0

    def test_prerelease_rank(self):
        assert compare_labels("1.2.0-alpha", "1.2.0-beta.2") < 0
        assert compare_labels("1.2.0-beta.2", "1.2.0-rc.1") < 0

    def test_non_prerelease_suffix_after_stable(self):
        assert compare_labels("1.2.0", "1.2.0-hotfix") < 0

    def test_higher_number_still_wins(self):
        assert compare_labels("1.3.0", "1.2.0-rc.1") < 0


class TestSortLabels:
    def test_mixed_order(self):
        assert sort_labels(MIXED_LABELS) == [
            "0.48.x",
            "0.47.x",
            "2024-03-10",
            "2023-12-01",
            "2.0",
            "1.10.0",
            "v1.9.3",
            "1.2.0-alpha",
            "1.2.0-beta.2",
            "1.2.0-rc.1",
            "1.2.0",
            "Unreleased",
            "Chat tabs and custom modes",
            "Build 12345",
        ]

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_input_order_irrelevant(self, seed):
        shuffled = MIXED_LABELS[seed:] + MIXED_LABELS[:seed]
        assert sort_labels(shuffled) == sort_labels(reversed(MIXED_LABELS))

    def test_wildcard_then_version_any_input_order(self):
        assert sort_labels(["1.0.0", "0.48.x"]) == ["0.48.x", "1.0.0"]
        assert sort_labels(["0.48.x", "1.0.0"]) == ["0.48.x", "1.0.0"]

    def test_date_then_announcement(self):
        assert sort_labels(["New Feature Announcement", "2024-01-01"]) == [
            "2024-01-01",
            "New Feature Announcement",
        ]


class TestNonAsciiDigits:
    def test_superscript_component_does_not_raise(self):
        assert sort_labels(["1.1.0", "1.2.²"]) == ["1.2.²", "1.1.0"]

    def test_circled_digit_compares(self):
        assert compare_labels("1.①", "1.0") != 0
        assert (compare_labels("1.①", "1.0") < 0) == (compare_labels("1.0", "1.①") > 0)
