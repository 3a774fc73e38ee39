"""CLI entry point: python -m changelogparser PATH [options] | --list-sites"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from changelogparser.consolidate import latest_entry
from changelogparser.engine import ContentUnavailableError, extract_changelog, to_json
from changelogparser.items import ChangelogEntry, RawMarkup, Strategy, StructuredText
from changelogparser.profiles import ProfileError, SiteProfile, known_sites, load_profile

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changelogparser",
        description=(
            "Extract an ordered changelog from a saved release-notes page.\n"
            "Reads Markdown (or HTML with --html); no network access."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", metavar="PATH", nargs="?", default=None,
                        help="File with the page content, or '-' for stdin")
    parser.add_argument("--list-sites", action="store_true", default=False,
                        help="List the known site profiles and exit")
    parser.add_argument("--html", action="store_true", default=False,
                        help="Treat input as raw HTML and convert it first")
    parser.add_argument("--strategy", default=None,
                        choices=[s.value for s in Strategy], metavar="STRATEGY",
                        help=(
                            "Segmentation strategy: "
                            + ", ".join(s.value for s in Strategy)
                            + " (default: from profile, else generic)"
                        ))
    parser.add_argument("--url", default=None, metavar="URL",
                        help="Source URL; selects the matching site profile")
    parser.add_argument("--profile", default=None, metavar="FILE",
                        help="YAML profile file (default: bundled sites.yaml)")
    parser.add_argument("--format", choices=["table", "json"], default="table",
                        help="Output format (default: table)")
    parser.add_argument("--latest", action="store_true", default=False,
                        help="Print only the newest entry")
    parser.add_argument("--limit", type=int, default=None, metavar="N",
                        help="Print at most N entries")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _print_table(entries: list[ChangelogEntry], title: str) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    console = Console()
    tbl = Table(
        title=f"[bold green]{title} ({len(entries)})[/bold green]",
        box=box.SIMPLE_HEAVY,
        show_lines=True,
    )
    tbl.add_column("#",           style="dim",   justify="right", width=4, no_wrap=True)
    tbl.add_column("Label",       style="cyan",  max_width=32)
    tbl.add_column("Description", max_width=80)
    tbl.add_column("Link",        style="blue",  max_width=48, no_wrap=True)

    for i, entry in enumerate(entries, 1):
        description = entry.description
        if len(description) > 300:
            description = description[:297] + "..."
        tbl.add_row(str(i), entry.label, description, entry.detail_link or "-")
    console.print(tbl)


def _print_sites(sites: list[SiteProfile]) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    tbl = Table(
        title=f"[bold green]Known sites ({len(sites)})[/bold green]",
        box=box.SIMPLE_HEAVY,
    )
    tbl.add_column("Name",     style="cyan")
    tbl.add_column("URL",      style="blue", no_wrap=True)
    tbl.add_column("Strategy", style="magenta")
    for site in sites:
        tbl.add_row(site.name, site.url, str(site.strategy))
    Console().print(tbl)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    if args.limit is not None and args.limit < 1:
        print("ERROR: --limit must be a positive integer", file=sys.stderr)
        return 1

    if args.list_sites:
        try:
            sites = known_sites(args.profile)
        except (OSError, ProfileError) as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        if args.format == "json":
            print(json.dumps([s.model_dump(mode="json") for s in sites], indent=2, ensure_ascii=False))
        else:
            _print_sites(sites)
        return 0

    if args.path is None:
        print("ERROR: PATH is required unless --list-sites is given", file=sys.stderr)
        return 1

    try:
        raw = _read_input(args.path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"ERROR: Could not read {args.path}: {exc}", file=sys.stderr)
        return 1

    profile: SiteProfile | None = None
    if args.url or args.profile:
        try:
            profile = load_profile(args.url or "", args.profile)
        except (OSError, ProfileError) as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        logger.debug("Using profile %s (strategy %s)", profile.name, profile.strategy)

    page = RawMarkup(raw) if args.html else StructuredText(raw)
    try:
        entries = extract_changelog(page, strategy=args.strategy, profile=profile)
    except ContentUnavailableError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    if not entries:
        print("No changelog entries found.", file=sys.stderr)

    prefer_wildcard = bool(profile and profile.strategy is Strategy.WILDCARD_ANCHOR)
    if args.latest:
        newest = latest_entry(entries, prefer_wildcard=prefer_wildcard)
        entries = [newest] if newest else []
    if args.limit is not None:
        entries = entries[: args.limit]

    if args.format == "json":
        print(to_json(entries))
    else:
        title = f"{profile.name} changelog" if profile else "Changelog"
        _print_table(entries, title)
    return 0


if __name__ == "__main__":
    sys.exit(main())
