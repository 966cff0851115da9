# Path: runtime_downloader/__main__.py
"""
Runtime Downloader - Script Entry

Usage:
    python -m runtime_downloader 18.0.0 --output /opt/runtimes/18.0.0
"""

import sys

from runtime_downloader.cli.download_cli import main


if __name__ == '__main__':
    sys.exit(main())
