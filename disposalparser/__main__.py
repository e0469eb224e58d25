"""CLI entry point: python -m disposalparser --zip ZIP [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from disposalparser.settings import DEFAULT_RADIUS, DEFAULT_ZIP_CODE, VALID_RADII

if TYPE_CHECKING:
    from disposalparser.items import SiteRecord

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disposalparser",
        description=(
            "Find DEA controlled-substance disposal sites near a ZIP code.\n"
            "Drives the DEA locator with headless Chromium, or parses a saved "
            "results page with --html."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--zip", dest="zip_code", default=DEFAULT_ZIP_CODE, metavar="ZIP",
                        help=f"ZIP code to search around (default: {DEFAULT_ZIP_CODE})")
    parser.add_argument("--radius", choices=VALID_RADII, default=DEFAULT_RADIUS,
                        metavar="{" + ",".join(VALID_RADII) + "}",
                        help=f"Search radius in miles (default: {DEFAULT_RADIUS})")
    parser.add_argument("--html", default=None, metavar="FILE",
                        help="Parse a saved results page instead of searching live")
    parser.add_argument("--base-url", default="", metavar="URL",
                        help="URL the saved page came from, for resolving map links")
    parser.add_argument("--json", action="store_true", default=False,
                        help="Print results as JSON instead of a table")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="Also write results as JSON to FILE")
    parser.add_argument("--config", default=None, metavar="FILE",
                        help="YAML settings profile")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: INFO)")
    parser.add_argument("--serve", action="store_true", default=False,
                        help="Run the HTTP API instead of a one-off search")
    parser.add_argument("--host", default="127.0.0.1",
                        help="API bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=3000, metavar="N",
                        help="API port (default: 3000)")
    return parser


def _configure_logging(level: str) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level,
        format="%(name)s - %(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _print_sites(sites: list[SiteRecord], title: str) -> None:
    from rich import box
    from rich.console import Console
    from rich.rule import Rule
    from rich.table import Table

    console = Console()
    console.print()
    console.print(Rule(f"[bold cyan]{title}[/bold cyan]"))
    console.print(f"  [bold]Disposal sites found :[/bold] [green]{len(sites)}[/green]")
    console.print()
    if not sites:
        return

    tbl = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    tbl.add_column("#",               style="dim",    justify="right", width=4, no_wrap=True)
    tbl.add_column("Name",            style="cyan",   max_width=40)
    tbl.add_column("Address",         style="green",  max_width=40)
    tbl.add_column("City, State Zip", style="yellow", max_width=30)
    tbl.add_column("Distance",        justify="right", width=10, no_wrap=True)
    tbl.add_column("Map",             style="blue",   max_width=40, no_wrap=True)
    for i, site in enumerate(sites, 1):
        tbl.add_row(
            str(i),
            site.name,
            site.street_address or "-",
            site.city_state_zip or "-",
            site.distance or "-",
            site.map_url or "-",
        )
    console.print(tbl)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.serve:
        from disposalparser.api import serve

        serve(host=args.host, port=args.port)
        return 0

    from disposalparser.query import ScrapeError, get_disposal_sites, parse
    from disposalparser.settings import load_settings

    try:
        if args.html:
            html = Path(args.html).read_text(encoding="utf-8")
            sites = parse(html, url=args.base_url)
            title = f"Sites in {args.html}"
        else:
            settings = load_settings(args.config)
            sites = get_disposal_sites(args.zip_code, args.radius, settings=settings)
            title = f"Sites within {args.radius} miles of {args.zip_code}"
    except OSError as exc:
        print(f"ERROR: Could not read input: {exc}", file=sys.stderr)
        return 1
    except (ScrapeError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    payload = [site.to_dict() for site in sites]
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        logger.info("Wrote %d sites to %s", len(sites), out_path)

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        _print_sites(sites, title)
    return 0


if __name__ == "__main__":
    sys.exit(main())
