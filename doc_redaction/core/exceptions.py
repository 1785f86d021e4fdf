# doc_redaction/core/exceptions.py

"""Custom exception hierarchy for the document redaction system.

Only AlreadyRedactedError and NothingFoundError ever escape a redaction
run. Host errors are absorbed by the engine and reflected as a lower count
or a false flag in the result.
"""

ALREADY_REDACTED_MESSAGE = "Document has already been redacted."
NOTHING_FOUND_MESSAGE = "No sensitive information found to redact."


class RedactionError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(RedactionError):
    """Raised when configuration loading or validation fails."""

    pass


class InitializationError(RedactionError):
    """Raised when the document host never becomes ready."""

    pass


class AlreadyRedactedError(RedactionError):
    """Raised before any mutation when the document carries every marker."""

    def __init__(self, message: str = ALREADY_REDACTED_MESSAGE) -> None:
        super().__init__(message)


class NothingFoundError(RedactionError):
    """Raised after a run that replaced nothing.

    Tracking and header changes made earlier in the run are left in place.
    """

    def __init__(self, message: str = NOTHING_FOUND_MESSAGE) -> None:
        super().__init__(message)


class HostError(RedactionError):
    """Raised by a document host when a request fails."""

    pass


class HostCapabilityError(HostError):
    """Raised when the host does not offer the requested facility."""

    pass
