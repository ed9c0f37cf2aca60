# main.py
import argparse
import asyncio
import sys
from typing import Optional, Sequence
from config.cache import close_redis
from config.settings import settings
from controller.controller_dependencies import get_quota_service, get_summary_service
from controller.summarize_controller import show_usage, summarize_file
from util.enums import UsageBackend
from util.logger import init_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-summarize",
        description="Submit a PDF to the summarization service and wait for the summary.",
    )
    parser.add_argument("file", nargs="?", help="PDF file to summarize")
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"service base URL (default: {settings.API_BASE_URL})",
    )
    parser.add_argument(
        "--usage", action="store_true", help="show used and remaining free summaries"
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser


async def _main(args: argparse.Namespace) -> int:
    try:
        if args.usage:
            return await show_usage(get_quota_service())
        service = get_summary_service(api_url=args.api_url)
        try:
            return await summarize_file(service, args.file)
        except asyncio.CancelledError:
            await service.cancel()
            raise
    finally:
        if settings.USAGE_BACKEND == UsageBackend.REDIS:
            await close_redis()


def run(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.usage and not args.file:
        parser.error("a PDF file is required unless --usage is given")

    init_logger(args.log_level)
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(run())
