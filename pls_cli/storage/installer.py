"""
Installs and updates the yt-dlp and ffmpeg binaries used in media mode.

Binaries live in a per-user "libs" directory. They are fetched the first time
media mode needs them, or on an explicit update, never on every run.
"""

import logging
import os
import platform
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from pls_cli.exceptions import DownloadTransportError, InstallError
from pls_cli.models.config import PlsConfig
from pls_cli.utils.path import create_dir, get_file_name_from_url

log = logging.getLogger(__name__)

YTDLP = "yt-dlp"
FFMPEG_BINARIES = ("ffmpeg", "ffprobe", "ffplay")
# Files the Termux yt-dlp bundle unpacks next to its launcher.
TERMUX_BUNDLE_ENTRIES = ("python3.12", "yt_dlp")

_MIRROR = "https://storage.googleapis.com/mochov-public/pls"
_YTDLP_RELEASES = "https://github.com/yt-dlp/yt-dlp/releases/latest/download"
_FFMPEG_BUILDS = "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest"


@dataclass(frozen=True)
class ToolingSource:
    """Where to fetch the tooling for one system/architecture pair."""

    ytdlp_url: str
    ffmpeg_url: str
    ytdlp_bundled: bool = False


SOURCES: dict[tuple[str, str], ToolingSource] = {
    ("linux", "x86_64"): ToolingSource(
        f"{_YTDLP_RELEASES}/yt-dlp_linux",
        f"{_FFMPEG_BUILDS}/ffmpeg-master-latest-linux64-gpl.tar.xz",
    ),
    ("linux", "aarch64"): ToolingSource(
        f"{_YTDLP_RELEASES}/yt-dlp_linux_aarch64",
        f"{_FFMPEG_BUILDS}/ffmpeg-master-latest-linuxarm64-gpl.tar.xz",
    ),
    ("termux", "x86_64"): ToolingSource(
        f"{_MIRROR}/amd64/yt-dlp-amd64.tar.xz",
        f"{_MIRROR}/amd64/ffmpeg-master-latest-linux64-gpl.tar.xz",
        ytdlp_bundled=True,
    ),
    ("termux", "aarch64"): ToolingSource(
        f"{_MIRROR}/aarch64/yt-dlp-aarch64.tar.xz",
        f"{_MIRROR}/aarch64/ffmpeg-master-latest-linuxarm64-gpl.tar.xz",
        ytdlp_bundled=True,
    ),
    ("windows", "x86_64"): ToolingSource(
        f"{_YTDLP_RELEASES}/yt-dlp.exe",
        "https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip",
    ),
}


def detect_system(home: Path) -> tuple[str, str]:
    """
    Returns the (system, architecture) key used to pick download sources.

    Raises:
        InstallError: If no prebuilt tooling exists for this platform.
    """
    machine = platform.machine().lower()
    arch = "aarch64" if machine in ("aarch64", "arm64") else "x86_64"
    if os.name == "nt":
        return "windows", "x86_64"
    if (home / ".termux").is_dir():
        return "termux", arch
    if sys.platform.startswith("linux"):
        return "linux", arch
    raise InstallError(f"No prebuilt yt-dlp/ffmpeg available for {sys.platform}.")


def get_libs_dir(home: Path) -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", str(home / "AppData" / "Roaming")))
    else:
        base_dir = Path(os.getenv("XDG_DATA_HOME", str(home / ".local" / "share")))
    return base_dir / "pls" / "libs"


def unpack_archive(archive_path: Path, output_dir: Path) -> None:
    """Unpacks a ``.tar.xz`` or ``.zip`` archive into ``output_dir``."""
    name = archive_path.name.lower()
    try:
        if name.endswith(".zip"):
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(output_dir)
        elif name.endswith((".tar.xz", ".txz")):
            with tarfile.open(archive_path, "r:xz") as archive:
                archive.extractall(output_dir, filter="data")
        else:
            raise InstallError(f"Unsupported archive format: {archive_path.name}")
    except (tarfile.TarError, zipfile.BadZipFile) as e:
        raise InstallError(f"Corrupt archive '{archive_path.name}': {e}") from e


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@dataclass(frozen=True)
class InstalledTooling:
    """Paths of the installed binaries."""

    libs_dir: Path
    exe_suffix: str = ""

    @property
    def ytdlp_path(self) -> Path:
        return self.libs_dir / f"{YTDLP}{self.exe_suffix}"

    @property
    def ffmpeg_dir(self) -> Path:
        return self.libs_dir

    @property
    def ffmpeg_paths(self) -> list[Path]:
        return [self.libs_dir / f"{name}{self.exe_suffix}" for name in FFMPEG_BINARIES]


class ToolingInstaller:
    """Fetches yt-dlp and ffmpeg into the libs directory when missing."""

    def __init__(
        self,
        libs_dir: Path,
        source: ToolingSource,
        fetch: Callable[[str, str], None],
        console: Console | None = None,
        exe_suffix: str = "",
    ):
        self.tooling = InstalledTooling(libs_dir, exe_suffix)
        self.source = source
        self.fetch = fetch
        self.console = console or Console()

    @classmethod
    def for_current_platform(
        cls,
        config: PlsConfig,
        home: Path,
        fetch: Callable[[str, str], None],
        console: Console | None = None,
    ) -> "ToolingInstaller":
        """Builds an installer for this machine, applying config overrides."""
        system, arch = detect_system(home)
        source = SOURCES[(system, arch)]
        if config.ytdlp_url or config.ffmpeg_url:
            source = ToolingSource(
                config.ytdlp_url or source.ytdlp_url,
                config.ffmpeg_url or source.ffmpeg_url,
                ytdlp_bundled=source.ytdlp_bundled,
            )
        libs_dir = Path(config.libs_dir).expanduser() if config.libs_dir else None
        log.debug(f"Tooling for {system}/{arch}: {source}")
        return cls(
            libs_dir or get_libs_dir(home),
            source,
            fetch,
            console=console,
            exe_suffix=".exe" if system == "windows" else "",
        )

    def ytdlp_missing(self) -> bool:
        libs_dir = self.tooling.libs_dir
        if not self.tooling.ytdlp_path.exists():
            return True
        return self.source.ytdlp_bundled and not all(
            (libs_dir / entry).exists() for entry in TERMUX_BUNDLE_ENTRIES
        )

    def ffmpeg_missing(self) -> bool:
        return not all(path.exists() for path in self.tooling.ffmpeg_paths)

    def ensure_installed(self, update: bool = False) -> InstalledTooling:
        """
        Installs whatever is missing, or everything when ``update`` is set.

        Raises:
            InstallError: If a binary could not be fetched or is still missing.
        """
        try:
            create_dir(str(self.tooling.libs_dir))
            if update or self.ytdlp_missing():
                self._install_ytdlp(update)
            if update or self.ffmpeg_missing():
                self._install_ffmpeg(update)
        except OSError as e:
            raise InstallError(f"Filesystem error while installing tooling: {e}") from e
        return self.tooling

    def _announce(self, name: str, update: bool) -> None:
        verb = "Updating" if update else "Installing"
        self.console.print(f"{verb} [bold blue]{name}[/bold blue]")

    def _done(self, name: str, update: bool) -> None:
        verb = "updated." if update else "installed."
        self.console.print(
            f"[bold blue]{name}[/bold blue] has been successfully [bold]{verb}[/bold]"
        )

    def _fetch(self, name: str, url: str, destination: Path, update: bool) -> None:
        try:
            self.fetch(url, str(destination))
        except DownloadTransportError as e:
            verb = "update" if update else "install"
            raise InstallError(f"Failed to {verb} {name}: {e}") from e

    def _install_ytdlp(self, update: bool) -> None:
        libs_dir = self.tooling.libs_dir
        ytdlp_path = self.tooling.ytdlp_path
        ytdlp_path.unlink(missing_ok=True)
        self._announce(YTDLP, update)

        if self.source.ytdlp_bundled:
            for entry in TERMUX_BUNDLE_ENTRIES:
                stale = libs_dir / entry
                if stale.is_dir():
                    shutil.rmtree(stale)
                else:
                    stale.unlink(missing_ok=True)
            with tempfile.TemporaryDirectory(prefix="pls-") as tmp:
                archive = Path(tmp) / (
                    get_file_name_from_url(self.source.ytdlp_url) or "yt-dlp.tar.xz"
                )
                self._fetch(YTDLP, self.source.ytdlp_url, archive, update)
                unpack_archive(archive, libs_dir)
        else:
            self._fetch(YTDLP, self.source.ytdlp_url, ytdlp_path, update)

        if not ytdlp_path.exists():
            verb = "update" if update else "install"
            raise InstallError(f"Failed to {verb} {YTDLP}")
        make_executable(ytdlp_path)
        self._done(YTDLP, update)

    def _install_ffmpeg(self, update: bool) -> None:
        for path in self.tooling.ffmpeg_paths:
            path.unlink(missing_ok=True)
        self._announce("ffmpeg", update)

        with tempfile.TemporaryDirectory(prefix="pls-") as tmp:
            tmp_dir = Path(tmp)
            archive = tmp_dir / (
                get_file_name_from_url(self.source.ffmpeg_url) or "ffmpeg.tar.xz"
            )
            self._fetch("ffmpeg", self.source.ffmpeg_url, archive, update)
            unpack_dir = tmp_dir / "unpacked"
            unpack_archive(archive, unpack_dir)
            bin_dir = self._find_bin_dir(unpack_dir)
            for target in self.tooling.ffmpeg_paths:
                shutil.copyfile(bin_dir / target.name, target)
                make_executable(target)

        if self.ffmpeg_missing():
            verb = "update" if update else "install"
            raise InstallError(f"Failed to {verb} ffmpeg")
        self._done("ffmpeg", update)

    def _find_bin_dir(self, root: Path) -> Path:
        """Locates the directory inside an unpacked build holding all binaries."""
        ffmpeg_name = f"ffmpeg{self.tooling.exe_suffix}"
        for candidate in sorted(root.rglob(ffmpeg_name)):
            bin_dir = candidate.parent
            if all((bin_dir / p.name).is_file() for p in self.tooling.ffmpeg_paths):
                return bin_dir
        raise InstallError("ffmpeg archive does not contain ffmpeg, ffprobe and ffplay")
