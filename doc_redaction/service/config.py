# doc_redaction/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from doc_redaction.core.definitions import Alignment, HEADER_MARKER
from doc_redaction.engine.document import ParagraphStyle

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'DOC_REDACTION_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOC_REDACTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Confidentiality header
    header_marker: str = Field(
        default=HEADER_MARKER,
        description="Text of the confidentiality marking added to the document.",
    )
    header_font_size: float = Field(default=16, gt=0, le=400)
    header_font_color: str = Field(default="#DC2626")
    header_bold: bool = Field(default=True)
    header_alignment: Alignment = Field(default=Alignment.CENTERED)

    # Host capability required for tracked changes
    tracking_api_name: str = Field(
        default="DocumentApi",
        description="Host API set that exposes change tracking.",
    )
    tracking_min_version: str = Field(default="1.5")

    host_ready_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the document host before giving up.",
    )

    log_level: str = Field(default="INFO")

    @field_validator("header_marker")
    @classmethod
    def validate_header_marker(cls, v: str) -> str:
        """Ensure the header marker is not blank."""
        if not v.strip():
            raise ValueError("Header marker cannot be empty")
        return v

    @field_validator("header_font_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"Header colour must look like #RRGGBB, got '{v}'")
        return v.upper()

    @field_validator("tracking_min_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if not all(part.isdigit() for part in v.split(".")):
            raise ValueError(f"Invalid version '{v}'")
        return v

    def header_style(self) -> ParagraphStyle:
        """Formatting applied to the confidentiality header paragraph."""
        return ParagraphStyle(
            bold=self.header_bold,
            size=self.header_font_size,
            color=self.header_font_color,
            alignment=self.header_alignment,
        )


# Singleton settings instance
settings = Settings()
