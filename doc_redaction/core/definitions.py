# doc_redaction/core/definitions.py

"""Redaction categories, markers and host enumerations."""

from enum import Enum


class RedactionCategory(str, Enum):
    """Categories of sensitive data, in catalog order."""

    EMAIL = "EMAIL"
    PHONE = "PHONE"
    NATIONAL_ID = "NATIONAL_ID"

    @property
    def marker(self) -> str:
        """Literal text substituted for a detected value."""
        return MARKERS[self]


MARKERS = {
    RedactionCategory.EMAIL: "[EMAIL REDACTED]",
    RedactionCategory.PHONE: "[PHONE REDACTED]",
    RedactionCategory.NATIONAL_ID: "[SSN REDACTED]",
}

HEADER_MARKER = "CONFIDENTIAL DOCUMENT"


class ChangeTrackingMode(str, Enum):
    """Document-wide tracked-changes setting."""

    OFF = "off"
    TRACK_ALL = "trackAll"


class InsertLocation(str, Enum):
    """Where a paragraph is placed relative to its container."""

    START = "start"
    END = "end"


class Alignment(str, Enum):
    LEFT = "left"
    CENTERED = "centered"
