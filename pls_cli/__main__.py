"""
Console-script entry point for ``pls``.

User-facing failures are reported by the command itself and exit 0. Only an
exception that escapes the Typer app reaches this module; it is shown in an
error panel and the process exits 1.
"""

import logging
import os
import sys

from rich.console import Console

from pls_cli.cli.app import app
from pls_cli.cli.formatters import format_error_with_suggestions

log = logging.getLogger("pls_cli")


def _use_utf8_streams() -> None:
    # The help page and progress bar print non-ASCII glyphs.
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8")


def main() -> None:
    if os.name == "nt":
        _use_utf8_streams()

    try:
        app()
    except Exception as e:
        Console(stderr=True).print(
            format_error_with_suggestions(e, {"type": "Unexpected"})
        )
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
