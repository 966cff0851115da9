# Path: runtime_downloader/cli/download_cli.py
"""
Download CLI Interface

Command-line interface for acquiring one runtime version.

Usage:
    runtime-download 18.0.0 --output /opt/runtimes/18.0.0
    runtime-download 20.11.1 --output ./node --arch arm64 --platform darwin --format tar.xz

Exit codes:
    0   success (installed now or already present)
    1   acquisition failed
    2   invalid arguments
    130 interrupted
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.core.logger import get_logger, configure_logging
from runtime_downloader.download import download_runtime
from runtime_downloader.engine.errors import AcquisitionError
from runtime_downloader.engine.path_resolver import ARCHIVE_FORMATS
from runtime_downloader.constants import LOG_INPUT, LOG_OUTPUT

logger = get_logger(__name__, 'cli')

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='runtime-download',
        description='Download, verify and atomically install a runtime version.',
    )
    parser.add_argument('version', help="Version to install, e.g. 18.0.0")
    parser.add_argument(
        '-o', '--output',
        required=True,
        type=Path,
        help="Final install path (left untouched if it already exists)",
    )
    parser.add_argument('--arch', help="Architecture (default: this machine)")
    parser.add_argument('--platform', help="Platform (default: this machine)")
    parser.add_argument('--mirror', help="Mirror base URL (default: configuration)")
    parser.add_argument(
        '--format',
        dest='archive_format',
        choices=ARCHIVE_FORMATS,
        help="Archive format for non-Windows platforms",
    )
    parser.add_argument(
        '--no-verify',
        dest='verify_checksums',
        action='store_false',
        default=None,
        help="Skip checksum verification",
    )
    parser.add_argument('-v', '--verbose', action='store_true', help="Log to the console")
    return parser


async def run(args: argparse.Namespace, config: ConfigLoader) -> Path:
    """Run one acquisition from parsed arguments."""
    logger.info(f"{LOG_INPUT} CLI request: {args.version} -> {args.output}")

    fetch_settings = {}
    if args.archive_format:
        fetch_settings['archive_format'] = args.archive_format
    if args.verify_checksums is not None:
        fetch_settings['verify_checksums'] = args.verify_checksums

    path = await download_runtime(
        args.version,
        args.output,
        arch=args.arch,
        platform=args.platform,
        mirror=args.mirror,
        config=config,
        **fetch_settings,
    )

    logger.info(f"{LOG_OUTPUT} CLI result: {path}")
    return path


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Console entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    config = ConfigLoader()
    if args.verbose:
        config.set('log_console', True)
        config.set('log_level', 'DEBUG')
    configure_logging(config)

    try:
        path = asyncio.run(run(args, config))
    except KeyboardInterrupt:
        print("\nDownload cancelled by user.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except AcquisitionError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"{LOG_OUTPUT} CLI failed: {e}")
        return EXIT_FAILURE

    print(path)
    return EXIT_SUCCESS


__all__ = ['main', 'build_parser', 'run']
