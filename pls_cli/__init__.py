"""pls: a command-line file and media downloader."""

__version__ = "0.1.8"
