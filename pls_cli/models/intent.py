"""
Immutable values passed between classification, resolution and dispatch.
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from pls_cli.exceptions import ClassificationError, PlsCliError


class Platform(Enum):
    """Path conventions that change how an output token is interpreted."""

    POSIX = "posix"
    WINDOWS = "windows"

    @classmethod
    def detect(cls) -> "Platform":
        return cls.WINDOWS if sys.platform == "win32" else cls.POSIX


@dataclass(frozen=True)
class ClassifiedIntent:
    """The result of scanning the command-line tokens."""

    url: str | None = None
    output: str | None = None
    force: bool = False
    media: bool = False
    errors: tuple[ClassificationError, ...] = ()

    @property
    def rejected(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class DirectFile:
    """Write exactly to ``path``."""

    path: str


@dataclass(frozen=True)
class IntoDirectory:
    """Write ``filename`` inside the existing ``directory``."""

    directory: str
    filename: str

    @property
    def path(self) -> str:
        return os.path.join(self.directory, self.filename)


@dataclass(frozen=True)
class DeriveFromBareName:
    """Write ``name`` relative to the working directory."""

    name: str

    @property
    def path(self) -> str:
        if os.path.dirname(self.name):
            return self.name
        return os.path.join(os.curdir, self.name)


@dataclass(frozen=True)
class MediaDirectory:
    """Let the media tool write into ``directory``."""

    directory: str


@dataclass(frozen=True)
class Conflict:
    """A terminal resolution error."""

    error: PlsCliError


ResolvedDestination = Union[
    DirectFile, IntoDirectory, DeriveFromBareName, MediaDirectory, Conflict
]
FileDestination = (DirectFile, IntoDirectory, DeriveFromBareName)


@dataclass(frozen=True)
class Resolution:
    """A resolved destination plus any non-terminal notices raised on the way."""

    destination: ResolvedDestination
    notices: tuple[PlsCliError, ...] = field(default_factory=tuple)
