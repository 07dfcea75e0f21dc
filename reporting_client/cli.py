"""
Command line interface for running reports.

Usage:
    reporting-run 25c278bd96aa49949f8a89564c6347ce --token <token> --param Title='"Parcels"'
    reporting-run "https://www.arcgis.com/home/item.html?id=25c278bd96aa49949f8a89564c6347ce" --metadata
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from .client import ReportingClient
from .config import settings
from .logging import setup_logging
from .runtime.errors import InvalidInputError, ReportingError
from .services.item_resolver import parse_item_url


def parse_param(raw: str) -> tuple[str, Any]:
    """Parse NAME=VALUE, reading VALUE as JSON and falling back to a string."""
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise InvalidInputError(f"Invalid parameter '{raw}'. Expected NAME=VALUE.")
    try:
        return name, json.loads(value)
    except json.JSONDecodeError:
        return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reporting-run",
        description="Run a VertiGIS Studio report or print and print the download URL.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reporting-run <item id> --token <token> --format pdf
  reporting-run <item url> --param Region='"North"' --param Ids='[1, 2, 3]'
  reporting-run <item id> --metadata
        """,
    )
    parser.add_argument("item", help="Portal item ID or portal item URL of the template")
    parser.add_argument("--portal-url", help=f"Portal URL (default: {settings.DEFAULT_PORTAL_URL})")
    parser.add_argument("--token", help="Portal access token for secured templates")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Report parameter; VALUE is parsed as JSON when possible. Repeatable.",
    )
    parser.add_argument("--format", help="Output format, e.g. pdf")
    parser.add_argument("--dpi", type=int, help="DPI for map prints")
    parser.add_argument("--culture", help="Culture for localization, e.g. en-US")
    parser.add_argument("--title", dest="result_file_name", help="Name of the output file")
    parser.add_argument("--polling", action="store_true", help="Poll for the result instead of using a socket")
    parser.add_argument("--metadata", action="store_true", help="Print the template metadata instead of running it")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level (default: %(default)s)")
    return parser


async def _main(args: argparse.Namespace) -> str:
    item_id, portal_url = args.item, args.portal_url
    if "/home/item.html" in args.item:
        ref = parse_item_url(args.item)
        item_id, portal_url = ref.item_id, portal_url or ref.portal_url

    client = ReportingClient()

    if args.metadata:
        metadata = await client.get_item_metadata(item_id, portal_url, args.token)
        return json.dumps(metadata.model_dump(by_alias=True), indent=2)

    parameters = dict(parse_param(raw) for raw in args.param)
    return await client.run(
        item_id,
        portal_url=portal_url,
        token=args.token,
        parameters=parameters,
        format=args.format,
        dpi=args.dpi,
        culture=args.culture,
        result_file_name=args.result_file_name,
        use_polling=True if args.polling else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        output = asyncio.run(_main(args))
    except ReportingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
