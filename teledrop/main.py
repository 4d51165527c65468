"""Command line entry point: upload a file and print its download link."""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from .config import Config
from .errors import ConfigError, ConfigMissing, TeledropError
from .file_source import open_uploadable
from .progress import ConsoleProgress, format_size
from .telegram_api import TelegramClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teledrop",
        description="Upload a file via a Telegram bot and get a temporary download link.",
    )
    # optional so a missing path gets our own message instead of a usage error
    parser.add_argument("file", nargs="?", help="file to upload (max 20 MB)")
    parser.add_argument("-c", "--config", help="path to the config file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log the API calls"
    )
    return parser


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def _report_config_missing(console: Console, error: ConfigMissing) -> None:
    for name in error.missing:
        console.print(f"Config param {name} is missing", style="red", markup=False)
    console.print("Please set up your configuration file at \n")
    console.print(f'"{error.path}"', style="green", markup=False, soft_wrap=True)


async def run(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    """Run the upload sequence and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    console = console or Console()

    try:
        config = Config.load(args.config)
    except ConfigMissing as e:
        _report_config_missing(console, e)
        return e.exit_code
    except ConfigError as e:
        console.print(str(e), style="red", markup=False)
        return e.exit_code

    if not args.file:
        console.print("No filename provided", style="red")
        return 0

    client = TelegramClient(config)
    try:
        uploadable = open_uploadable(args.file)
        logger.info("Sending %s (%s)", uploadable.filename, format_size(uploadable.byte_length))

        with ConsoleProgress(console) as progress:
            uploaded = await client.upload_document(uploadable, progress)
        console.print(f"✔ File ID: {uploaded.document_id}", markup=False)

        with console.status("Loading file URL...", spinner="dots12"):
            resolved = await client.get_file_path(uploaded.document_id)
    except TeledropError as e:
        logger.info("Aborting: %s", e)
        console.print(str(e), style="red", markup=False)
        return e.exit_code

    url = client.file_url(resolved.relative_path)
    console.print("✔ Download URL (valid for 1 hour):")
    console.print(url, style="green", markup=False, soft_wrap=True)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return asyncio.run(run(argv))


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
