"""URL classification helpers used when choosing detail links."""

from __future__ import annotations

import re
from urllib.parse import urlparse

# Extensions that mark a URL as an image rather than a page
IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".svg",
        ".webp",
    },
)

# Hosts that only ever serve images
IMAGE_HOSTS: tuple[str, ...] = ("imgur.com", "imageshack.us")

# Source hosts and vendor documentation sites, preferred over other raw URLs
OFFICIAL_DOMAINS: tuple[str, ...] = (
    "github.com",
    "gitlab.com",
    "bitbucket.org",
    "jetbrains.com",
    "visualstudio.com",
    "microsoft.com",
    "eclipse.dev",
    "neovim.io",
    "sublimetext.com",
    "vim.org",
    "git-scm.com",
)

_IMAGE_SUFFIX_RE = re.compile(
    r"\.(?:" + "|".join(ext.lstrip(".") for ext in sorted(IMAGE_EXTENSIONS)) + r")$",
    re.IGNORECASE,
)


def is_image_url(url: str) -> bool:
    """Return True if *url* ends in a known image extension."""
    return bool(_IMAGE_SUFFIX_RE.search(url.strip()))


def is_image_host(url: str) -> bool:
    """Return True if *url* points at a known image-hosting service."""
    return any(host in url for host in IMAGE_HOSTS)


def is_official_url(url: str) -> bool:
    """Return True if *url* mentions one of :data:`OFFICIAL_DOMAINS`."""
    return any(domain in url for domain in OFFICIAL_DOMAINS)


def extract_domain(url: str) -> str:
    """Return the netloc (host) component of a URL, lowercased."""
    try:
        return urlparse(url).netloc.lower()
    except ValueError:
        return ""
