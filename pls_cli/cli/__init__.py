"""
Command-Line Interface Layer.

This package contains the Typer application, console formatters and the
download progress display.
"""
