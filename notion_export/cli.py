"""
Notion Export - Command Line Entry Point

Fetches one page and writes it to stdout as JSON or Markdown.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from notion_export.config import get_settings
from notion_export.logging_config import configure_logging
from notion_export.pipeline.markdown import convert_page_to_markdown
from notion_export.pipeline.url_parser import extract_page_id
from notion_export.schemas.errors import ApiKeyMissing, Err, ExportError
from notion_export.services.fetch_service import FetchService


EXIT_OK = 0
EXIT_ERROR = 1


def _write_error(error: Dict[str, Any]) -> None:
    print(json.dumps({"error": error}, indent=2, ensure_ascii=False), file=sys.stderr)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as structured data, exit 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        _write_error({"kind": "invalid_arguments", "message": message})
        self.exit(EXIT_ERROR)


def build_parser(settings=None) -> argparse.ArgumentParser:
    settings = settings or get_settings()
    parser = _ArgumentParser(
        prog="notion-export",
        description="Fetch all blocks from a Notion page recursively",
        epilog="Environment: NOTION_API_KEY is used when --api-key is not given.",
    )
    parser.add_argument(
        "page",
        nargs="?",
        help="Notion page ID or notion.so URL",
    )
    parser.add_argument(
        "--api-key", "-k",
        default=None,
        help="Notion API key (overrides NOTION_API_KEY)",
    )
    parser.add_argument(
        "--max-depth", "-d",
        type=int,
        default=settings.export.max_depth,
        help=f"Maximum block depth to fetch (default: {settings.export.max_depth})",
    )
    parser.add_argument(
        "--max-retries", "-r",
        type=int,
        default=settings.export.max_retries,
        help=f"Retries per request when rate limited (default: {settings.export.max_retries})",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "markdown"],
        default=settings.export.format,
        help=f"Output format (default: {settings.export.format})",
    )
    return parser


async def run(args: argparse.Namespace, settings) -> int:
    """
    Execute one export.

    Returns:
        Process exit code
    """
    if not args.page:
        _write_error({"kind": "invalid_arguments", "message": "Page ID is required"})
        return EXIT_ERROR

    page_id = extract_page_id(args.page)
    if page_id is None:
        _write_error({
            "kind": "invalid_arguments",
            "message": f"Could not find a Notion page ID in {args.page!r}",
        })
        return EXIT_ERROR

    api_key = args.api_key or settings.notion.api_key
    if not api_key:
        error: ExportError = ApiKeyMissing(
            message="NOTION_API_KEY environment variable is required"
        )
        _write_error(error.to_dict())
        return EXIT_ERROR

    service = FetchService(settings)
    result = await service.fetch_page(
        page_id,
        api_key=api_key,
        max_depth=args.max_depth,
        max_retries=args.max_retries,
    )

    if isinstance(result, Err):
        _write_error(result.error.to_dict())
        return EXIT_ERROR

    page = result.value
    if args.format == "markdown":
        print(convert_page_to_markdown(page))
    else:
        print(json.dumps(page.to_dict(), indent=2, ensure_ascii=False))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log)

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
