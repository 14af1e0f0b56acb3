"""
Utilities for handling output paths, separators, and URL file names.
"""

import os
import posixpath
from urllib.parse import unquote, urlsplit

from pathvalidate import sanitize_filename

HOME_MARKER = "~"
CURRENT_DIR = "."


def remove_slash(path: str) -> str:
    """Removes trailing forward slashes."""
    return path.rstrip("/")


def append_slash(path: str) -> str:
    return path + "/"


def remove_slash_start(path: str) -> str:
    """Removes leading forward slashes."""
    return path.lstrip("/")


def remove_backslash(path: str) -> str:
    """Removes trailing backslashes."""
    return path.rstrip("\\")


def append_backslash(path: str) -> str:
    return path + "\\"


def remove_backslash_start(path: str) -> str:
    """Removes leading backslashes."""
    return path.lstrip("\\")


def remove_tilde(path: str) -> str:
    """Removes the leading home marker."""
    return path.lstrip(HOME_MARKER)


def prepend_tilde(path: str) -> str:
    return HOME_MARKER + path


def get_dir_from_path(path: str) -> str:
    """
    Returns the directory part of a path, or the current-directory sentinel
    ``"."`` when the path has no directory component.
    """
    return os.path.dirname(path) or CURRENT_DIR


def get_file_name_from_url(url: str) -> str | None:
    """
    Extracts a safe file name from the last path segment of a URL.

    Returns ``None`` when the URL has no scheme, no hierarchical path, or an
    empty last segment (e.g. ``https://example.com/``).
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.path.startswith("/"):
        return None

    segment = unquote(posixpath.basename(parts.path))
    name = sanitize_filename(segment, platform="auto")
    return name or None


def create_dir(directory_path: str) -> None:
    """Creates a directory if it does not already exist."""
    os.makedirs(directory_path, exist_ok=True)
