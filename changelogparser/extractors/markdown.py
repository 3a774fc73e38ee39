"""Convert release-notes HTML to Markdown and clean extracted block bodies."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag
from markdownify import MarkdownConverter

logger = logging.getLogger(__name__)

FENCE = "```"

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_TAG_RE = re.compile(r"<[^>]+>")

# Never rendered, whatever the profile says
_NOISE_TAGS = ("script", "style", "noscript", "template")

# ---------------------------------------------------------------------------
# Leading boilerplate (blog-style entries)
# ---------------------------------------------------------------------------

# "March 5, 2024" on the first line of an entry
LEADING_DATE_RE = re.compile(r"^[A-Za-z]+ \d{1,2},\s*\d{4}[ \t]*(?:\n+|$)")

# "- [Copilot](https://…/label/copilot)" category lines directly below the date
LEADING_CATEGORIES_RE = re.compile(r"^(?:-\s*\[[^\]]+\](?:\([^)]+\))?[ \t]*(?:\n+|$))+")

_LEADING_GENERIC_HEADER_RE = re.compile(
    r"^#{1,4}\s+(?:Changes|What's Changed|Changelog|Summary|Highlights|Overview)[ \t]*(?:\n+|$)",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Per-line rules
# ---------------------------------------------------------------------------

_STRUCTURAL_LINE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^#+\s+"),          # headers
    re.compile(r"^[-*•>]\s+"),      # bullets, block quotes
    re.compile(r"^\d+\.\s+"),       # ordered lists
)
_RULE_LINE_RE = re.compile(r"^[-*_]{3,}$")
_EMPTY_BULLET_RE = re.compile(r"^[-*•]\s*$")
_HEADER_ONLY_RE = re.compile(r"^\s*#*\s*$")

BOILERPLATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\[See more\]\([^)]+\)", re.IGNORECASE),
    re.compile(r"\[Read more\]\([^)]+\)", re.IGNORECASE),
    re.compile(r"\[Learn more\]\([^)]+\)", re.IGNORECASE),
    re.compile(r"\[(?:Full Changelog|compare view)\]\([^)]+\)", re.IGNORECASE),
    re.compile(r"Thanks to all contributors!", re.IGNORECASE),
    re.compile(r"What's Changed", re.IGNORECASE),
    re.compile(r"## Contributors", re.IGNORECASE),
    re.compile(r"\[iframe\]"),
)


# ---------------------------------------------------------------------------
# HTML → Markdown
# ---------------------------------------------------------------------------

def html_to_markdown(
    html: str,
    *,
    content_selector: str | None = None,
    exclude_tags: Iterable[str] = (),
) -> str:
    """Convert *html* to line-oriented Markdown.

    Headings become ATX ``#`` lines, list items ``- `` bullets, links
    ``[text](url)`` and horizontal rules ``---``.  Everything else is
    reduced to its text.  Post-processes to:
    - Strip trailing whitespace from lines
    - Collapse runs of 3+ newlines to a single blank line

    When *content_selector* matches, only the matching elements are
    converted.  Tags named in *exclude_tags* are removed beforehand.

    Never raises: a failing converter degrades to plain text, and that to
    regex tag stripping.
    """
    if not html or not html.strip():
        return ""

    tags = _NOISE_TAGS + tuple(exclude_tags)
    try:
        html = _select_content(html, content_selector, tags)
    except Exception as exc:
        logger.debug("Content selection failed (%s): %s", content_selector, exc)

    try:
        md = _NoiseFreeConverter(
            heading_style="ATX",
            bullets="-",
            escape_underscores=False,
            escape_asterisks=False,
            code_language_callback=_detect_lang,
        ).convert(html)
    except Exception as exc:
        logger.debug("markdownify failed, falling back to plain text: %s", exc)
        md = _plain_text(html)

    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip()


class _NoiseFreeConverter(MarkdownConverter):
    """markdownify converter that drops the contents of :data:`_NOISE_TAGS`."""

    def _drop(self, el, text, *args, **kwargs):
        return ""

    convert_script = convert_style = convert_noscript = convert_template = _drop


def _plain_text(html: str) -> str:
    try:
        soup = BeautifulSoup(html, "lxml")
        for el in soup.find_all(list(_NOISE_TAGS)):
            el.decompose()
        return soup.get_text("\n")
    except Exception as exc:
        logger.debug("Plain-text extraction failed, stripping tags: %s", exc)
        return _TAG_RE.sub("", html)


def _select_content(html: str, selector: str | None, exclude_tags: tuple[str, ...]) -> str:
    """Return the outer HTML of the top-level elements matching *selector*."""
    soup = BeautifulSoup(html, "lxml")
    for tag_name in exclude_tags:
        for el in soup.find_all(tag_name):
            el.decompose()

    if not selector:
        return str(soup)

    matches = soup.select(selector)
    # Keep outermost matches only so nested selectors do not duplicate text
    matched = {id(el) for el in matches}
    roots = [el for el in matches if not any(id(parent) in matched for parent in el.parents)]
    if not roots:
        logger.debug("Selector %r matched nothing; converting whole page", selector)
        return str(soup)
    return "\n".join(str(el) for el in roots)


def _detect_lang(el: object) -> str:
    """Return the ``language-*`` class of a code element, if any."""
    if not isinstance(el, Tag):
        return ""
    for cls in el.get("class") or []:
        if isinstance(cls, str) and cls.startswith("language-"):
            return cls[len("language-"):]
    return ""


# ---------------------------------------------------------------------------
# Block cleaning
# ---------------------------------------------------------------------------

def strip_leading_boilerplate(text: str) -> str:
    """Drop a single leading date line and any category-tag lines after it."""
    text = LEADING_DATE_RE.sub("", text, count=1)
    return LEADING_CATEGORIES_RE.sub("", text, count=1)


def clean_description(text: str) -> str:
    """Clean the raw body of a changelog block for display.

    Headers, list items, block quotes and horizontal rules are kept as-is;
    other lines are trimmed.  Fenced code is passed through untouched.
    """
    if not text:
        return ""

    cleaned = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    cleaned = strip_leading_boilerplate(cleaned)
    cleaned = _LEADING_GENERIC_HEADER_RE.sub("", cleaned, count=1)

    lines: list[str] = []
    in_fence = False
    for raw_line in cleaned.split("\n"):
        if raw_line.strip().startswith(FENCE):
            in_fence = not in_fence
            lines.append(raw_line)
            continue
        if in_fence:
            lines.append(raw_line)
            continue

        line = _clean_line(raw_line)
        if not line and lines and not lines[-1]:
            continue
        lines.append(line)

    return _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def _clean_line(line: str) -> str:
    for pattern in BOILERPLATE_PATTERNS:
        line = pattern.sub("", line)

    if _HEADER_ONLY_RE.match(line) or _EMPTY_BULLET_RE.match(line.strip()):
        return ""
    if _RULE_LINE_RE.match(line.strip()):
        return line.strip()
    if any(p.match(line) for p in _STRUCTURAL_LINE_RES):
        return line
    return line.strip()
