"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def keep_a_changelog_md() -> str:
    return _read_fixture("keep_a_changelog.md")


@pytest.fixture
def github_blog_md() -> str:
    return _read_fixture("github_blog.md")


@pytest.fixture
def cursor_md() -> str:
    return _read_fixture("cursor.md")


@pytest.fixture
def github_releases_md() -> str:
    return _read_fixture("github_releases.md")


@pytest.fixture
def vscode_updates_md() -> str:
    return _read_fixture("vscode_updates.md")


@pytest.fixture
def releases_html() -> str:
    return _read_fixture("releases.html")
