"""End-to-end tests for the extraction engine."""

from __future__ import annotations

import json
import logging

import pytest

from changelogparser.engine import (
    ContentUnavailableError,
    entries_to_records,
    extract_changelog,
    extract_entries,
    load_entries,
    resolve_text,
    to_json,
)
from changelogparser.items import ExtractionFailed, RawMarkup, Strategy, StructuredText
from changelogparser.profiles import SiteProfile, load_profile


def _labels(entries):
    return [e.label for e in entries]


# ---------------------------------------------------------------------------
# Content resolution
# ---------------------------------------------------------------------------

class TestResolveText:
    def test_plain_string(self):
        assert resolve_text("## 1.0.0") == "## 1.0.0"

    def test_structured_text(self):
        assert resolve_text(StructuredText("## 1.0.0")) == "## 1.0.0"

    def test_raw_markup_converted(self, releases_html):
        text = resolve_text(RawMarkup(releases_html))
        assert "## Version 3.2.0" in text
        assert "<p>" not in text

    def test_extraction_failed_raises(self):
        with pytest.raises(ContentUnavailableError) as exc_info:
            resolve_text(ExtractionFailed("timeout"))
        assert exc_info.value.reason == "timeout"

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            resolve_text(42)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Strategy dispatch
# ---------------------------------------------------------------------------

class TestExtractEntries:
    def test_string_strategy_accepted(self, github_releases_md):
        assert "2.1.0-rc.1" in extract_entries(github_releases_md, "version_headings")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            extract_entries("## 1.0.0\nSome body text here.", "telepathy")

    def test_auto_combines_segmenters(self, cursor_md):
        entries = extract_entries(cursor_md, Strategy.AUTO)
        assert "0.48.x" in entries
        assert "Chat tabs, custom modes and sound notifications" in entries


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

class TestExtractChangelog:
    def test_generic_keep_a_changelog(self, keep_a_changelog_md):
        entries = extract_changelog(keep_a_changelog_md)
        assert _labels(entries) == ["1.2.0", "1.1.0", "1.0.0", "Unreleased"]

    def test_version_headings_prerelease_order(self, github_releases_md):
        entries = extract_changelog(github_releases_md, Strategy.VERSION_HEADINGS)
        assert _labels(entries) == ["2.1.0-rc.1", "2.1.0", "2.0.0"]

    def test_profile_strategy_used(self, cursor_md):
        profile = load_profile("https://cursor.com/changelog")
        entries = extract_changelog(StructuredText(cursor_md), profile=profile)
        assert _labels(entries) == [
            "0.48.x",
            "Faster agent and improved Tab completions",
            "Chat tabs, custom modes and sound notifications",
        ]
        assert entries[0].description == "Cursor 0.48.x updates"

    def test_explicit_strategy_overrides_profile(self, github_releases_md):
        profile = SiteProfile(strategy=Strategy.WHATS_NEW)
        entries = extract_changelog(github_releases_md, Strategy.VERSION_HEADINGS, profile)
        assert "2.0.0" in _labels(entries)

    def test_anchor_headings_page(self, github_blog_md):
        entries = extract_changelog(github_blog_md, Strategy.ANCHOR_HEADINGS)
        assert _labels(entries) == [
            "Dependabot grouped security updates are generally available",
            "Copilot code review now supports custom instructions",
            "Actions: larger runners billing update",
        ]

    def test_whats_new_page(self, vscode_updates_md):
        entries = extract_changelog(vscode_updates_md, Strategy.WHATS_NEW)
        assert _labels(entries) == ["1.88", "1.87"]

    def test_raw_html_with_profile(self, releases_html):
        profile = load_profile("https://example.com/releases")
        entries = extract_changelog(RawMarkup(releases_html), profile=profile)
        assert _labels(entries) == ["3.2.0", "3.1.0"]
        assert entries[0].detail_link == "https://example.com/docs/export"
        assert "Faster dashboard loading" in entries[0].description
        assert entries[1].description == "Fixes a crash when opening very large projects."
        assert "tracking" not in entries[0].description

    def test_nothing_found_returns_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="changelogparser.engine"):
            assert extract_changelog("Just a paragraph with no headings at all.") == []
        assert "No changelog entries" in caplog.text

    def test_failed_page_raises(self):
        with pytest.raises(ContentUnavailableError):
            extract_changelog(ExtractionFailed("blocked"))

    def test_deterministic(self, keep_a_changelog_md):
        assert extract_changelog(keep_a_changelog_md) == extract_changelog(keep_a_changelog_md)


# ---------------------------------------------------------------------------
# Interchange
# ---------------------------------------------------------------------------

class TestInterchange:
    def test_records(self, keep_a_changelog_md):
        records = entries_to_records(extract_changelog(keep_a_changelog_md))
        assert records[0]["label"] == "1.2.0"
        assert set(records[0]) == {"label", "description", "detailLink"}
        assert records[1]["detailLink"] is None

    def test_json(self, keep_a_changelog_md):
        data = json.loads(to_json(extract_changelog(keep_a_changelog_md)))
        assert data[0]["detailLink"] == "https://github.com/acme/tool/releases/tag/v1.2.0"

    def test_load_entries_resorts(self):
        entries = load_entries(
            [
                {"version": "1.0.0", "description": "First stable release.", "detailLink": None},
                {"label": "1.1.0", "description": "Second release with fixes.", "detailLink": ""},
            ],
        )
        assert _labels(entries) == ["1.1.0", "1.0.0"]
        assert entries[0].detail_link is None

    def test_roundtrip_stable(self, github_blog_md):
        entries = extract_changelog(github_blog_md, Strategy.ANCHOR_HEADINGS)
        assert load_entries(entries_to_records(entries)) == entries


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------

class TestMalformedInput:
    def test_non_ascii_digit_label(self):
        md = "## 1.2.²\nSome release notes body text.\n## 1.1.0\nOther release notes body text.\n"
        assert _labels(extract_changelog(md)) == ["1.2.²", "1.1.0"]

    def test_padded_linked_titles_are_one_entry(self):
        md = (
            "## [ New release 1 ](https://x.test/a)\nShort body text here.\n"
            "## [New release 1](https://x.test/b)\nA much longer body text for the same release.\n"
        )
        labels = _labels(extract_changelog(md))
        assert labels == ["New release 1"]
