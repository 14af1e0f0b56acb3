"""
Shared fixtures: an in-memory console and recording fake collaborators.
"""

import io
from pathlib import Path

import pytest
from rich.console import Console

from pls_cli.core.dispatch import Collaborators
from pls_cli.storage.installer import InstalledTooling


class FakeCollaborators:
    """Records every collaborator call instead of touching the network."""

    def __init__(self, libs_dir: Path):
        self.calls: list[tuple] = []
        self.tooling = InstalledTooling(libs_dir)
        self.fetch_error: Exception | None = None
        self.install_error: Exception | None = None

    def fetch(self, url: str, destination_path: str) -> None:
        self.calls.append(("fetch", url, destination_path))
        if self.fetch_error:
            raise self.fetch_error
        Path(destination_path).write_bytes(b"downloaded")

    def ensure_installed(self, update: bool) -> InstalledTooling:
        self.calls.append(("ensure_installed", update))
        if self.install_error:
            raise self.install_error
        return self.tooling

    def run_media(self, tool_path, ffmpeg_dir, url, output_dir, force) -> int:
        self.calls.append(("run_media", tool_path, ffmpeg_dir, url, output_dir, force))
        return 0

    def as_collaborators(self) -> Collaborators:
        return Collaborators(
            fetch=self.fetch,
            ensure_installed=self.ensure_installed,
            run_media=self.run_media,
        )

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture()
def console_output():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None)
    return console, buffer


@pytest.fixture()
def fakes(tmp_path):
    return FakeCollaborators(tmp_path / "libs")


@pytest.fixture()
def workdir(tmp_path, monkeypatch):
    """A clean working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
