"""Path and formatting helpers."""
