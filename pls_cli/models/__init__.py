"""
Data Models Layer.

This package contains the Pydantic configuration model and the immutable
values passed between classification, resolution and dispatch.
"""

from .config import PlsConfig
from .intent import ClassifiedIntent, Platform, Resolution

__all__ = ["ClassifiedIntent", "Platform", "PlsConfig", "Resolution"]
