"""
Resolves a classified intent into a concrete destination on disk.

Resolution reads the filesystem (existence and directory checks) but never
changes it. It stops at the first terminal error, which is returned as a
``Conflict`` rather than raised.
"""

import logging
import os

from pls_cli.exceptions import (
    HomeDirectoryUndetermined,
    MalformedHomePath,
    MediaModeConflict,
    MissingFilenameInUrl,
    OutputDirectoryNotFound,
    PlsCliError,
    UnsupportedOutputType,
)
from pls_cli.models.intent import (
    ClassifiedIntent,
    Conflict,
    DeriveFromBareName,
    DirectFile,
    IntoDirectory,
    MediaDirectory,
    Platform,
    Resolution,
    ResolvedDestination,
)
from pls_cli.utils.path import (
    CURRENT_DIR,
    HOME_MARKER,
    get_dir_from_path,
    get_file_name_from_url,
    remove_backslash,
    remove_backslash_start,
    remove_slash,
    remove_slash_start,
    remove_tilde,
)

log = logging.getLogger(__name__)


class _Terminal(Exception):
    def __init__(self, error: PlsCliError) -> None:
        self.error = error


def expand_home(output: str, home: str | None) -> str:
    """
    Expands a leading ``~`` followed by ``\\`` or ``/`` under ``home``.

    Raises:
        HomeDirectoryUndetermined: If ``home`` is unknown.
        MalformedHomePath: If no separator follows the marker.
    """
    if home is None:
        raise HomeDirectoryUndetermined()
    rest = remove_tilde(output)
    if rest.startswith("\\"):
        rest = remove_backslash_start(rest)
    elif rest.startswith("/"):
        rest = remove_slash_start(rest)
    else:
        raise MalformedHomePath()
    return os.path.join(home, rest)


def strip_trailing_separators(directory: str, platform: Platform) -> str:
    stripped = remove_slash(directory)
    if platform is Platform.WINDOWS:
        stripped = remove_backslash(stripped)
    # A root directory keeps its separator.
    return stripped or directory


def _require(name: str | None) -> str:
    if name is None:
        raise _Terminal(MissingFilenameInUrl())
    return name


def _resolve_existing(
    output: str, default_name: str | None, media: bool, platform: Platform
) -> ResolvedDestination:
    if not os.path.isdir(output):
        if media:
            return Conflict(MediaModeConflict())
        if not os.path.isfile(output):
            # FIFOs, sockets and device nodes are never written to.
            return Conflict(UnsupportedOutputType())
        return DirectFile(output)

    directory = strip_trailing_separators(output, platform)
    if media:
        return MediaDirectory(directory)
    return IntoDirectory(directory, _require(default_name))


def _resolve_missing(
    output: str | None, default_name: str | None, media: bool
) -> ResolvedDestination:
    if media:
        if output is None:
            return MediaDirectory(CURRENT_DIR)
        return Conflict(OutputDirectoryNotFound())

    if output is None:
        return DeriveFromBareName(_require(default_name))
    if not output:
        return Conflict(OutputDirectoryNotFound())

    parent = get_dir_from_path(output)
    if os.path.isdir(parent):
        if parent == CURRENT_DIR:
            return DeriveFromBareName(output)
        return DirectFile(output)
    return Conflict(OutputDirectoryNotFound())


def resolve(
    intent: ClassifiedIntent, home: str | None, platform: Platform
) -> Resolution:
    """
    Computes where a download should be written.

    Args:
        intent: A classified, non-rejected intent.
        home: The user's home directory, if it could be determined.
        platform: The path conventions to apply.

    Returns:
        A Resolution holding the destination and any non-terminal notices.
    """
    if intent.rejected or intent.url is None:
        raise ValueError("Cannot resolve a rejected intent.")

    notices: list[PlsCliError] = []
    default_name = None
    if not intent.media:
        default_name = get_file_name_from_url(intent.url)
        if default_name is None:
            notices.append(MissingFilenameInUrl())

    output = intent.output
    try:
        if (
            output is not None
            and output.startswith(HOME_MARKER)
            and platform is Platform.WINDOWS
        ):
            output = expand_home(output, home)

        if output is not None and os.path.exists(output):
            destination = _resolve_existing(
                output, default_name, intent.media, platform
            )
        else:
            destination = _resolve_missing(output, default_name, intent.media)
    except (HomeDirectoryUndetermined, MalformedHomePath) as e:
        destination = Conflict(e)
    except _Terminal as e:
        destination = Conflict(e.error)

    if isinstance(destination, Conflict):
        # The terminal error supersedes notices about the same problem.
        notices = [n for n in notices if type(n) is not type(destination.error)]

    log.debug(f"Resolved output {intent.output!r} to {destination!r}")
    return Resolution(destination, tuple(notices))
