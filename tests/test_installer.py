"""
Tests for pls_cli/storage/installer.py

Archives are built on the fly; the fake fetch copies them into place instead
of hitting the network.
"""

import io
import os
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path

import pytest
from rich.console import Console

from pls_cli.exceptions import DownloadTransportError, InstallError
from pls_cli.models.config import PlsConfig
from pls_cli.storage import installer as installer_module
from pls_cli.storage.installer import (
    ToolingInstaller,
    ToolingSource,
    detect_system,
    unpack_archive,
)

YTDLP_URL = "https://example.com/yt-dlp_linux"
FFMPEG_URL = "https://example.com/ffmpeg-master-latest-linux64-gpl.tar.xz"


def _add_file(archive: tarfile.TarFile, name: str, data: bytes = b"bin") -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mode = 0o644
    archive.addfile(info, io.BytesIO(data))


def build_ffmpeg_tar(path: Path, binaries=("ffmpeg", "ffprobe", "ffplay")) -> Path:
    with tarfile.open(path, "w:xz") as archive:
        for name in binaries:
            _add_file(archive, f"ffmpeg-master-latest-linux64-gpl/bin/{name}")
        _add_file(archive, "ffmpeg-master-latest-linux64-gpl/LICENSE.txt")
    return path


class FakeFetch:
    def __init__(self, archives: dict[str, Path]):
        self.archives = archives
        self.urls: list[str] = []
        self.error: Exception | None = None

    def __call__(self, url: str, destination: str) -> None:
        self.urls.append(url)
        if self.error:
            raise self.error
        if url in self.archives:
            shutil.copyfile(self.archives[url], destination)
        else:
            Path(destination).write_bytes(b"#!/bin/sh\n")


@pytest.fixture()
def quiet_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture()
def fetch(tmp_path):
    archive = build_ffmpeg_tar(tmp_path / "ffmpeg.tar.xz")
    return FakeFetch({FFMPEG_URL: archive})


@pytest.fixture()
def installer(tmp_path, fetch, quiet_console):
    return ToolingInstaller(
        tmp_path / "libs",
        ToolingSource(YTDLP_URL, FFMPEG_URL),
        fetch,
        console=quiet_console,
    )


class TestEnsureInstalled:
    def test_installs_missing_tooling(self, installer, fetch):
        tooling = installer.ensure_installed()
        assert fetch.urls == [YTDLP_URL, FFMPEG_URL]
        assert tooling.ytdlp_path.is_file()
        assert all(path.is_file() for path in tooling.ffmpeg_paths)
        assert not installer.ytdlp_missing()
        assert not installer.ffmpeg_missing()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_binaries_are_executable(self, installer):
        tooling = installer.ensure_installed()
        for path in [tooling.ytdlp_path, *tooling.ffmpeg_paths]:
            assert os.access(path, os.X_OK)

    def test_is_idempotent(self, installer, fetch):
        installer.ensure_installed()
        installer.ensure_installed()
        assert fetch.urls == [YTDLP_URL, FFMPEG_URL]

    def test_update_refetches_everything(self, installer, fetch):
        installer.ensure_installed()
        installer.ensure_installed(update=True)
        assert fetch.urls == [YTDLP_URL, FFMPEG_URL] * 2

    def test_only_missing_part_is_fetched(self, installer, fetch):
        tooling = installer.ensure_installed()
        tooling.ffmpeg_paths[1].unlink()
        installer.ensure_installed()
        assert fetch.urls == [YTDLP_URL, FFMPEG_URL, FFMPEG_URL]

    def test_messages(self, installer, quiet_console):
        installer.ensure_installed()
        installer.ensure_installed(update=True)
        output = quiet_console.file.getvalue()
        assert "Installing yt-dlp" in output
        assert "ffmpeg has been successfully installed." in output
        assert "Updating ffmpeg" in output
        assert "yt-dlp has been successfully updated." in output

    def test_download_failure_becomes_install_error(self, installer, fetch):
        fetch.error = DownloadTransportError("HTTP 503: Service Unavailable")
        with pytest.raises(InstallError, match="Failed to install yt-dlp"):
            installer.ensure_installed()

    def test_archive_without_all_binaries(self, tmp_path, quiet_console):
        archive = build_ffmpeg_tar(tmp_path / "partial.tar.xz", ("ffmpeg",))
        installer = ToolingInstaller(
            tmp_path / "libs",
            ToolingSource(YTDLP_URL, FFMPEG_URL),
            FakeFetch({FFMPEG_URL: archive}),
            console=quiet_console,
        )
        with pytest.raises(InstallError, match="ffprobe"):
            installer.ensure_installed()


class TestArchiveFormats:
    def test_windows_zip_build(self, tmp_path, quiet_console):
        zip_url = "https://example.com/ffmpeg-release-essentials.zip"
        archive = tmp_path / "ffmpeg.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            for name in ("ffmpeg", "ffprobe", "ffplay"):
                zf.writestr(f"ffmpeg-7.1-essentials_build/bin/{name}.exe", b"MZ")
        installer = ToolingInstaller(
            tmp_path / "libs",
            ToolingSource("https://example.com/yt-dlp.exe", zip_url),
            FakeFetch({zip_url: archive}),
            console=quiet_console,
            exe_suffix=".exe",
        )
        tooling = installer.ensure_installed()
        assert tooling.ytdlp_path.name == "yt-dlp.exe"
        assert [p.name for p in tooling.ffmpeg_paths] == [
            "ffmpeg.exe",
            "ffprobe.exe",
            "ffplay.exe",
        ]
        assert all(p.is_file() for p in tooling.ffmpeg_paths)

    def test_bundled_ytdlp(self, tmp_path, fetch, quiet_console):
        bundle_url = "https://example.com/yt-dlp-aarch64.tar.xz"
        bundle = tmp_path / "bundle.tar.xz"
        with tarfile.open(bundle, "w:xz") as archive:
            _add_file(archive, "yt-dlp", b"#!/bin/sh\n")
            _add_file(archive, "python3.12")
            _add_file(archive, "yt_dlp/__init__.py")
        fetch.archives[bundle_url] = bundle
        installer = ToolingInstaller(
            tmp_path / "libs",
            ToolingSource(bundle_url, FFMPEG_URL, ytdlp_bundled=True),
            fetch,
            console=quiet_console,
        )
        tooling = installer.ensure_installed()
        assert tooling.ytdlp_path.is_file()
        assert (tooling.libs_dir / "yt_dlp" / "__init__.py").is_file()

        (tooling.libs_dir / "python3.12").unlink()
        assert installer.ytdlp_missing()

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "ffmpeg.7z"
        archive.write_bytes(b"")
        with pytest.raises(InstallError, match="Unsupported"):
            unpack_archive(archive, tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "ffmpeg.zip"
        archive.write_bytes(b"not a zip")
        with pytest.raises(InstallError, match="Corrupt"):
            unpack_archive(archive, tmp_path / "out")

    def test_member_outside_target_is_refused(self, tmp_path):
        archive_path = tmp_path / "ffmpeg.tar.xz"
        with tarfile.open(archive_path, "w:xz") as archive:
            _add_file(archive, "../escaped")
        with pytest.raises(InstallError, match="Corrupt"):
            unpack_archive(archive_path, tmp_path / "out")
        assert not (tmp_path / "escaped").exists()


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux sources")
class TestPlatformSelection:
    def test_linux_architectures(self, tmp_path, monkeypatch):
        monkeypatch.setattr(installer_module.platform, "machine", lambda: "x86_64")
        assert detect_system(tmp_path) == ("linux", "x86_64")
        monkeypatch.setattr(installer_module.platform, "machine", lambda: "arm64")
        assert detect_system(tmp_path) == ("linux", "aarch64")

    def test_termux(self, tmp_path, monkeypatch):
        monkeypatch.setattr(installer_module.platform, "machine", lambda: "aarch64")
        (tmp_path / ".termux").mkdir()
        assert detect_system(tmp_path) == ("termux", "aarch64")

    def test_default_libs_dir(self, tmp_path, monkeypatch, quiet_console):
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        installer = ToolingInstaller.for_current_platform(
            PlsConfig(), tmp_path, FakeFetch({}), quiet_console
        )
        assert installer.tooling.libs_dir == tmp_path / ".local/share/pls/libs"
        assert installer.source.ffmpeg_url.endswith(".tar.xz")

    def test_config_overrides(self, tmp_path, quiet_console):
        config = PlsConfig(
            libs_dir=str(tmp_path / "custom"),
            ytdlp_url="https://mirror.example.com/yt-dlp",
        )
        installer = ToolingInstaller.for_current_platform(
            config, tmp_path, FakeFetch({}), quiet_console
        )
        assert installer.tooling.libs_dir == tmp_path / "custom"
        assert installer.source.ytdlp_url == "https://mirror.example.com/yt-dlp"
        assert "github.com" in installer.source.ffmpeg_url
