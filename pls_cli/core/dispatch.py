"""
Routes a resolved destination to the downloader or to the media tool.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console

from pls_cli.cli.formatters import print_error
from pls_cli.exceptions import ExistingFileNoForce, OverwriteRemovalError, PlsCliError
from pls_cli.models.intent import (
    ClassifiedIntent,
    Conflict,
    FileDestination,
    MediaDirectory,
    Resolution,
)
from pls_cli.storage.installer import InstalledTooling

log = logging.getLogger(__name__)


@dataclass
class Collaborators:
    """The side-effecting services dispatch hands work to."""

    fetch: Callable[[str, str], None]
    ensure_installed: Callable[[bool], InstalledTooling]
    run_media: Callable[[str, str, str, str, bool], int]


def force_gate(path: str, force: bool, console: Console) -> bool:
    """
    Decides whether a download may write to ``path``.

    Anything already at ``path`` other than a directory, dangling symlinks
    included, is removed when ``force`` is set and left alone otherwise.

    Returns:
        True if the download should proceed.

    Raises:
        OverwriteRemovalError: If the existing file could not be removed.
    """
    if not os.path.lexists(path) or os.path.isdir(path):
        return True
    if not force:
        print_error(console, ExistingFileNoForce())
        return False
    try:
        os.remove(path)
    except OSError as e:
        raise OverwriteRemovalError(f"Failed to remove file! ({e})") from e
    log.debug(f"Removed existing file '{path}' before overwriting")
    return True


def dispatch(
    intent: ClassifiedIntent,
    resolution: Resolution,
    collaborators: Collaborators,
    console: Console,
) -> None:
    """
    Performs the single action a resolution calls for. Collaborator errors
    are printed, never raised; only OverwriteRemovalError escapes.
    """
    for notice in resolution.notices:
        print_error(console, notice)

    destination = resolution.destination
    if isinstance(destination, Conflict):
        print_error(console, destination.error)
        return

    try:
        if isinstance(destination, MediaDirectory):
            tooling = collaborators.ensure_installed(False)
            collaborators.run_media(
                str(tooling.ytdlp_path),
                str(tooling.ffmpeg_dir),
                intent.url,
                destination.directory,
                intent.force,
            )
        elif isinstance(destination, FileDestination):
            if force_gate(destination.path, intent.force, console):
                collaborators.fetch(intent.url, destination.path)
        else:
            raise TypeError(f"Unknown destination: {destination!r}")
    except OverwriteRemovalError:
        raise
    except PlsCliError as e:
        print_error(console, e)
