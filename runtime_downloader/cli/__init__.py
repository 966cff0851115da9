# Path: runtime_downloader/cli/__init__.py
"""
Runtime Downloader CLI Module

Command-line entry point (runtime-download).
"""

from .download_cli import main

__all__ = ['main']
