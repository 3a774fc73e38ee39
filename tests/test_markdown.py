"""Tests for HTML → Markdown conversion and block-body cleaning."""

from __future__ import annotations

from changelogparser.extractors.markdown import (
    clean_description,
    html_to_markdown,
    strip_leading_boilerplate,
)

# ---------------------------------------------------------------------------
# HTML fallback conversion
# ---------------------------------------------------------------------------

class TestHtmlToMarkdown:
    def test_atx_headings_and_links(self):
        md = html_to_markdown(
            "<h2>Version 1.0</h2><p>Hello <a href='https://x.test/docs'>world</a></p>",
        )
        assert md.startswith("## Version 1.0")
        assert "Hello [world](https://x.test/docs)" in md

    def test_dash_bullets(self):
        md = html_to_markdown("<ul><li>One</li><li>Two</li></ul>")
        assert "- One" in md
        assert "- Two" in md

    def test_script_and_style_dropped(self):
        md = html_to_markdown(
            "<style>p { color: red; }</style><p>Visible text</p><script>var x = 1;</script>",
        )
        assert "Visible text" in md
        assert "var x" not in md
        assert "color" not in md

    def test_underscores_not_escaped(self):
        assert "snake_case_name" in html_to_markdown("<p>snake_case_name</p>")

    def test_content_selector(self):
        html = "<nav><a href='/'>Home</a></nav><main><h2>1.0.0</h2><p>Body text</p></main>"
        md = html_to_markdown(html, content_selector="main")
        assert "Home" not in md
        assert "## 1.0.0" in md

    def test_selector_without_match_keeps_page(self):
        md = html_to_markdown("<div><p>Only content</p></div>", content_selector=".missing")
        assert "Only content" in md

    def test_exclude_tags(self):
        html = "<div><p>Release text</p><footer>Copyright</footer></div>"
        md = html_to_markdown(html, exclude_tags=["footer"])
        assert "Release text" in md
        assert "Copyright" not in md

    def test_no_runs_of_blank_lines(self):
        md = html_to_markdown("<p>A</p><br><br><br><br><p>B</p>")
        assert "\n\n\n" not in md

    def test_empty_input(self):
        assert html_to_markdown("") == ""
        assert html_to_markdown("   ") == ""

    def test_noise_dropped_when_selection_fails(self, monkeypatch):
        def _broken(*args, **kwargs):
            raise ValueError("parser unavailable")

        monkeypatch.setattr("changelogparser.extractors.markdown._select_content", _broken)
        md = html_to_markdown(
            "<p>Visible text</p><script>var leaked = 1;</script><style>p { color: red; }</style>",
        )
        assert "Visible text" in md
        assert "leaked" not in md
        assert "color" not in md


# ---------------------------------------------------------------------------
# Leading boilerplate
# ---------------------------------------------------------------------------

class TestStripLeadingBoilerplate:
    def test_date_and_categories(self):
        text = (
            "March 5, 2024\n\n"
            "- [Copilot](https://github.blog/changelog/label/copilot)\n"
            "- [Improvement](https://github.blog/changelog/label/improvement)\n\n"
            "Body text here."
        )
        assert strip_leading_boilerplate(text) == "Body text here."

    def test_only_first_date(self):
        text = "Body first.\nMarch 5, 2024"
        assert strip_leading_boilerplate(text) == text


# ---------------------------------------------------------------------------
# Block-body cleaning
# ---------------------------------------------------------------------------

class TestCleanDescription:
    def test_empty(self):
        assert clean_description("") == ""

    def test_crlf_normalized(self):
        assert clean_description("Line one\r\nLine two") == "Line one\nLine two"

    def test_see_more_link_removed(self):
        text = "- Added export\n[See more](https://x.test/a)"
        assert clean_description(text) == "- Added export"

    def test_thanks_line_removed(self):
        text = "Fixed the importer.\nThanks to all contributors!"
        assert clean_description(text) == "Fixed the importer."

    def test_leading_generic_header_removed(self):
        assert clean_description("## What's Changed\n- Fix A") == "- Fix A"

    def test_structural_lines_preserved(self):
        text = "### Added\n- New flag\n> Note: experimental\n1. First step"
        assert clean_description(text) == text

    def test_plain_lines_trimmed(self):
        assert clean_description("   padded text   ") == "padded text"

    def test_horizontal_rule_kept(self):
        assert clean_description("First part\n---\nSecond part") == "First part\n---\nSecond part"

    def test_blank_lines_collapsed(self):
        assert clean_description("A line\n\n\n\nB line") == "A line\n\nB line"

    def test_empty_bullet_dropped(self):
        assert clean_description("- real item\n- \nmore text") == "- real item\n\nmore text"

    def test_code_fence_untouched(self):
        text = "Intro text\n```\n[See more](https://x.test)\n   indented\n```"
        assert clean_description(text) == text
