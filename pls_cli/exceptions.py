"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class PlsCliError(Exception):
    """Base exception for all application-specific errors."""

    message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# --- Argument classification ---


class ClassificationError(PlsCliError):
    """Base class for errors found while classifying command-line tokens."""


class FlagReused(ClassificationError):
    """Raised when -f/--force or -m/--media appears more than once."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"{flag} used twice!")


class TooManyArguments(ClassificationError):
    message = "More than four arguments are not allowed!"


class BadArguments(ClassificationError):
    """Raised for a free token when both the URL and output slots are taken."""

    message = "bad arguments!"


class MissingUrl(ClassificationError):
    message = "No URL specified"


# --- Destination resolution ---


class ResolutionError(PlsCliError):
    """Base class for errors found while resolving the output destination."""


class MissingFilenameInUrl(ResolutionError):
    message = "No file name found in the URL!"


class MalformedHomePath(ResolutionError):
    message = "Home directory written incorrectly!"


class OutputDirectoryNotFound(ResolutionError):
    message = "Output directory couldn't be found!"


class MediaModeConflict(ResolutionError):
    message = "You can't use filename, when downloading media."


class HomeDirectoryUndetermined(ResolutionError):
    message = "Unable to determine home directory!"


class ExistingFileNoForce(ResolutionError):
    message = "File already exists!"


class UnsupportedOutputType(ResolutionError):
    message = "Output is neither a file nor a directory!"


# --- Collaborators ---


class DownloadTransportError(PlsCliError):
    """Raised when an HTTP download fails for any network or filesystem reason."""


class InstallError(PlsCliError):
    """Raised when yt-dlp or ffmpeg cannot be installed or updated."""


class ProcessSpawnError(PlsCliError):
    """Raised when the external media tool cannot be started."""


class OverwriteRemovalError(PlsCliError):
    """
    Raised when an existing file cannot be removed before a forced overwrite.
    This is the only error that aborts the run with a failing exit status.
    """

    message = "Failed to remove file!"


class ConfigurationError(PlsCliError):
    """Raised for issues related to configuration loading or validation."""
