"""Extraction sub-package: deterministic, site-agnostic changelog segmentation."""

from .headings import classify_heading, is_valid_label
from .links import extract_detail_link
from .markdown import clean_description, html_to_markdown
from .segmenter import ScanState, Segmenter, segment
from .strategies import (
    extract_anchor_headings,
    extract_version_headings,
    extract_whats_new,
    extract_wildcard_anchor,
)

__all__ = [
    "ScanState",
    "Segmenter",
    "classify_heading",
    "clean_description",
    "extract_anchor_headings",
    "extract_detail_link",
    "extract_version_headings",
    "extract_whats_new",
    "extract_wildcard_anchor",
    "html_to_markdown",
    "is_valid_label",
    "segment",
]
