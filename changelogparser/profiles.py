"""YAML-based site profiles: per-site scraping hints and segmentation strategy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from changelogparser.extractors.urlnorm import extract_domain
from changelogparser.items import Strategy

logger = logging.getLogger(__name__)

DEFAULT_PROFILES_PATH = Path(__file__).parent / "data" / "sites.yaml"


class ProfileError(ValueError):
    """Raised when a profile file holds values that cannot be used."""


class SiteProfile(BaseModel):
    """Configuration for one changelog source, passed explicitly per call."""

    name: str = "Custom Tool"
    url: str = ""
    content_selector: str | None = "main, article, .content, .container"
    exclude_tags: list[str] = Field(
        default_factory=lambda: ["header", "footer", "nav", "script", "style"],
    )
    wait_for_ms: int = 2000  # render wait for the fetch collaborator
    strategy: Strategy = Strategy.GENERIC


def _read_profiles(path: str | Path) -> dict[str, Any]:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    return data if isinstance(data, dict) else {}


def load_profile(url: str, path: str | Path | None = None) -> SiteProfile:
    """Load the YAML profile file and return the merged profile for *url*.

    The ``default`` section applies to every URL; the longest ``domains``
    key that equals or is a parent domain of the URL's host overrides it.
    """
    data = _read_profiles(path or DEFAULT_PROFILES_PATH)
    default = data.get("default", {})
    domains = data.get("domains", {})

    netloc = extract_domain(url)
    best_key = ""
    best_cfg: dict[str, Any] = {}
    if isinstance(domains, dict):
        for key, cfg in domains.items():
            if not isinstance(key, str) or not isinstance(cfg, dict):
                continue
            key_lower = key.lower()
            if (netloc == key_lower or netloc.endswith("." + key_lower)) and (
                len(key_lower) > len(best_key)
            ):
                best_key = key_lower
                best_cfg = cfg

    merged: dict[str, Any] = {}
    if isinstance(default, dict):
        merged.update(default)
    merged.update(best_cfg)
    merged["url"] = url
    logger.debug("Profile for %r: %s", url, best_key or "default")

    try:
        return SiteProfile.model_validate(merged)
    except ValidationError as exc:
        raise ProfileError(f"Invalid profile for {url!r}: {exc}") from exc


def known_sites(path: str | Path | None = None) -> list[SiteProfile]:
    """Return every domain profile in the file, merged over the defaults."""
    data = _read_profiles(path or DEFAULT_PROFILES_PATH)
    default = data.get("default", {}) if isinstance(data.get("default"), dict) else {}
    domains = data.get("domains", {})
    sites: list[SiteProfile] = []
    if not isinstance(domains, dict):
        return sites
    for key, cfg in domains.items():
        if not isinstance(cfg, dict):
            continue
        merged = {**default, "url": f"https://{key}", **cfg}
        try:
            sites.append(SiteProfile.model_validate(merged))
        except ValidationError as exc:
            raise ProfileError(f"Invalid profile for {key!r}: {exc}") from exc
    return sites
