"""
Pydantic model for application configuration.
Provides validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class PlsConfig(BaseModel):
    """A validated configuration model for the application."""

    # Tooling
    libs_dir: str = ""
    ytdlp_url: str = ""
    ffmpeg_url: str = ""

    # Logging
    log_level: str = "INFO"

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalizes the level name and ensures it is one logging understands."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}.")
        return level

    @field_validator("ytdlp_url", "ffmpeg_url")
    @classmethod
    def validate_source_url(cls, v: str) -> str:
        """Source overrides must be plain HTTP(S) URLs."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"Download source must be an http(s) URL, got: {v}")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
