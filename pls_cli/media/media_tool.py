"""
Runs yt-dlp as an interactive child process that owns the terminal.
"""

import logging
import subprocess

from pls_cli.exceptions import ProcessSpawnError

log = logging.getLogger(__name__)


def build_media_command(
    tool_path: str, ffmpeg_dir: str, url: str, output_dir: str, force: bool
) -> list[str]:
    """Builds the yt-dlp argument list; ``force`` maps to its overwrite flags."""
    overwrite_flag = "--force-overwrites" if force else "--no-overwrites"
    return [
        tool_path,
        url,
        overwrite_flag,
        "--ffmpeg-location",
        ffmpeg_dir,
        "-P",
        output_dir,
    ]


def run_media(
    tool_path: str, ffmpeg_dir: str, url: str, output_dir: str, force: bool
) -> int:
    """
    Runs yt-dlp with stdin, stdout and stderr inherited so the user can
    interact with it. Blocks until the process exits.

    Returns:
        The exit status of the child process.

    Raises:
        ProcessSpawnError: If the process cannot be started.
    """
    command = build_media_command(tool_path, ffmpeg_dir, url, output_dir, force)
    log.debug(f"Running {command!r}")
    try:
        completed = subprocess.run(command, check=False)
    except OSError as e:
        raise ProcessSpawnError(f"Failed to start {tool_path}: {e}") from e

    if completed.returncode != 0:
        log.warning(f"yt-dlp exited with status {completed.returncode}")
    return completed.returncode
