"""CLI for uploading files to DoDo and printing their direct links.

Two modes:
- interactive (no FILE arguments): prompt for token/uid once, then loop on file paths
- one-shot: ``dodo-upload FILE [FILE ...] --token T --uid U``
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Callable, List, Optional, Sequence

from dodo_upload.application.use_cases.upload_file import UploadFileUseCase
from dodo_upload.core.config import settings
from dodo_upload.core.exceptions import UploadToolError
from dodo_upload.infrastructure.adapters.bundles.upload import get_upload_adapter_bundle
from dodo_upload.utils.path_utils import clean_user_path

logger = logging.getLogger(__name__)

RULE = "-" * 48

BANNER = f""">>> DoDo file upload: get a direct link <<<
{RULE}
1. Log in to the DoDo web client https://www.imdodo.com/
2. Get the token via localStorage.getItem('token')
3. Get the uid via localStorage.getItem('uid')
4. Enter them at the prompts below
{RULE}
"""


def configure_logging(level: Optional[str] = None) -> None:
    """Console logging (stderr) plus an optional rotating file from settings."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=2, encoding="utf-8"
            )
        )
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=settings.log_format,
        datefmt=settings.log_date_format,
        handlers=handlers,
        force=True,
    )
    # aiohttp is noisy at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def describe_error(exc: Exception) -> str:
    """One-line, user-facing description of a failed run."""
    if isinstance(exc, UploadToolError):
        where = f" [{exc.step}]" if exc.step else ""
        return f"{type(exc).__name__}{where}: {exc.message}"
    return f"{type(exc).__name__}: {exc}"


def format_result(filename: str, url: str) -> str:
    return f"\nUpload succeeded\n  File name:   {filename}\n  Direct link: {url}\n"


def run_interactive(
    use_case: UploadFileUseCase,
    *,
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> int:
    print_fn(BANNER)
    try:
        token = input_fn("Enter token: ").strip()
        if not token:
            print_fn("token must not be empty")
            return 2
        uid = input_fn("Enter uid: ").strip()
        if not uid:
            print_fn("uid must not be empty")
            return 2

        while True:
            print_fn("\n" + RULE)
            file_path = clean_user_path(input_fn("Enter file path: "))
            if not file_path:
                continue
            try:
                result = asyncio.run(use_case.run(file_path, token, uid))
            except UploadToolError as e:
                logger.debug("Upload of %s failed", file_path, exc_info=True)
                print_fn(f"\nUpload failed: {describe_error(e)}\n")
                continue
            print_fn(format_result(result.filename, result.url))
            input_fn("Press Enter to continue...\n")
    except (EOFError, KeyboardInterrupt):
        print_fn("")
        return 0


async def upload_files(
    use_case: UploadFileUseCase,
    paths: Sequence[str],
    token: str,
    uid: str,
    *,
    print_fn: Callable[[str], None] = print,
) -> int:
    """Upload paths one after another; returns the number of failures."""
    failures = 0
    for raw in paths:
        path = clean_user_path(raw)
        try:
            result = await use_case.run(path, token, uid)
        except UploadToolError as e:
            failures += 1
            logger.error("%s: %s", path, describe_error(e))
            continue
        print_fn(f"{result.filename}\t{result.url}")
    return failures


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dodo-upload",
        description="Upload files to DoDo and print their direct links. "
        "Without FILE arguments an interactive prompt is started.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to upload")
    parser.add_argument(
        "--token",
        default=os.getenv("DODO_TOKEN"),
        help="User token (default: $DODO_TOKEN)",
    )
    parser.add_argument(
        "--uid",
        default=os.getenv("DODO_UID"),
        help="User id (default: $DODO_UID)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    use_case = UploadFileUseCase(get_upload_adapter_bundle())

    if not args.files:
        return run_interactive(use_case)

    if not args.token or not args.uid:
        print("--token and --uid (or DODO_TOKEN / DODO_UID) are required", file=sys.stderr)
        return 2

    failures = asyncio.run(upload_files(use_case, args.files, args.token, args.uid))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
