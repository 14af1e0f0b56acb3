"""
Storage Layer.

This package handles persisted state: the configuration file and the
installed yt-dlp/ffmpeg tooling.
"""

from .config_manager import ConfigManager
from .installer import InstalledTooling, ToolingInstaller

__all__ = ["ConfigManager", "InstalledTooling", "ToolingInstaller"]
