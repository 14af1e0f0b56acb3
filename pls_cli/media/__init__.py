"""
Media Processing Layer.

This package is responsible for fetching files over HTTP and for running
the external media tool.
"""

from .downloader import Downloader
from .media_tool import run_media

__all__ = ["Downloader", "run_media"]
