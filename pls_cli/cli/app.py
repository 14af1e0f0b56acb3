"""
Defines the command-line interface for the application using Typer.

Typer only collects the raw tokens: flags may appear anywhere and their
meaning depends on position, so classification is done by
:mod:`pls_cli.core.classifier` rather than by Click's option parser.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from pls_cli.core.classifier import Action, classify, select_action
from pls_cli.core.dispatch import Collaborators, dispatch
from pls_cli.core.resolver import resolve
from pls_cli.exceptions import (
    ConfigurationError,
    HomeDirectoryUndetermined,
    OverwriteRemovalError,
    PlsCliError,
)
from pls_cli.media.downloader import Downloader
from pls_cli.media.media_tool import run_media
from pls_cli.models.config import PlsConfig
from pls_cli.models.intent import Platform
from pls_cli.storage.config_manager import ConfigManager, get_config_file
from pls_cli.storage.installer import InstalledTooling, ToolingInstaller

from .formatters import (
    format_error_with_suggestions,
    print_error,
    print_help,
    print_version,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("pls_cli")

app = typer.Typer(
    name="pls",
    help="Command-line file and media downloader.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_home() -> str | None:
    """The user's home directory, or None if it cannot be determined."""
    try:
        return str(Path.home())
    except (RuntimeError, KeyError):
        return None


def load_config(console: Console) -> PlsConfig:
    """Loads the config file; a broken file is reported and defaults are used."""
    try:
        return ConfigManager(get_config_file()).load_config()
    except ConfigurationError as e:
        print_error(console, e)
        return PlsConfig()


def build_collaborators(
    config: PlsConfig, console: Console, home: str | None
) -> Collaborators:
    """Wires the real downloader, installer and media tool together."""
    downloader = Downloader(console)

    def ensure_installed(update: bool) -> InstalledTooling:
        if home is None:
            raise HomeDirectoryUndetermined()
        installer = ToolingInstaller.for_current_platform(
            config, Path(home), downloader.fetch, console
        )
        return installer.ensure_installed(update)

    return Collaborators(
        fetch=downloader.fetch,
        ensure_installed=ensure_installed,
        run_media=run_media,
    )


def run(
    tokens: list[str],
    console: Console,
    collaborators: Collaborators,
    home: str | None,
    platform: Platform,
) -> None:
    """
    Runs one invocation. User-facing errors are printed, not raised; only
    OverwriteRemovalError propagates.
    """
    action = select_action(tokens)
    log.debug(f"Action for {tokens!r}: {action.value}")

    if action is Action.HELP:
        print_help(console)
        return
    if action is Action.VERSION:
        print_version(console)
        return
    if action is Action.UPDATE:
        try:
            collaborators.ensure_installed(True)
        except PlsCliError as e:
            print_error(console, e)
        return

    intent = classify(tokens[0], tokens[1:])
    if intent.rejected:
        for error in intent.errors:
            print_error(console, error)
        return

    resolution = resolve(intent, home, platform)
    dispatch(intent, resolution, collaborators, console)


@app.command(
    context_settings={"ignore_unknown_options": True, "help_option_names": []}
)
def main(
    tokens: list[str] | None = typer.Argument(  # noqa: B008
        None,
        help="URL, optional OUTPUT, and -f/--force or -m/--media in any order.",
        metavar="[URL] [OUTPUT] [OPTIONS]",
    ),
):
    """Download a file over HTTP, or media through yt-dlp."""
    config = load_config(console)
    logging.getLogger("pls_cli").setLevel(config.log_level)

    home = get_home()
    collaborators = build_collaborators(config, console, home)
    try:
        run(list(tokens or []), console, collaborators, home, Platform.detect())
    except OverwriteRemovalError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
