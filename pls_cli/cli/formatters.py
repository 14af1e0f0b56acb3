"""
Functions for formatting and displaying messages in the console using Rich.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pls_cli import __version__


def print_error(console: Console, error: Exception) -> None:
    """Prints a one-line diagnostic for a user-facing error."""
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "OverwriteRemovalError": [
            "• Check that you have write permission on the file and its directory.",
            "• Make sure no other program holds the file open.",
        ],
        "ConfigurationError": [
            "• Check the configuration file, or point PLS_CONFIG at another one.",
            "• Delete the file to fall back to the defaults.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Set PLS_LOG_LEVEL=DEBUG for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_version(console: Console) -> None:
    console.print(
        f"[bold]pls, version -[/bold] [bold blue]{__version__}[/bold blue]"
    )


def _option(console: Console, short: str, long: str, description: str) -> None:
    console.print(f"\n       [bold]{short}[/bold] or [bold]{long}[/bold]")
    console.print(f"       {description}")


def print_help(console: Console) -> None:
    """Displays the manual-style help page."""
    console.print("[bold]NAME[/bold]")
    console.print("       pls - command-line file and media downloader")
    console.print("\n[bold]SYNOPSIS[/bold]")
    console.print("       [bold]pls[/bold] (options) \\[URL] \\[OUTPUT]")
    console.print("       [bold]pls[/bold] \\[URL] (options) \\[OUTPUT]")
    console.print("       [bold]pls[/bold] \\[URL] \\[OUTPUT] (options)")
    console.print("\n[bold]OPTIONS[/bold]")
    console.print("       The following options are available:")
    _option(
        console,
        "-f",
        "--force",
        "This option allows overwriting files. URL and OUTPUT must be present, "
        "while choosing this option.",
    )
    _option(
        console,
        "-m",
        "--media",
        "This option lets you download videos from YouTube or any other site. "
        "OUTPUT, if given, must be an existing directory. "
        "Can be combined with -f/--force.",
    )
    _option(
        console,
        "-v",
        "--version",
        "This option prints version of the program. Must be passed alone.",
    )
    _option(
        console,
        "-h",
        "--help",
        "This option prints help page of the program. Must be passed alone.",
    )
    _option(
        console,
        "-u",
        "--update",
        "This option force updates yt-dlp and ffmpeg binaries. Must be passed alone.",
    )
