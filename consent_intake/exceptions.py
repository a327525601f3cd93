"""
Custom exception hierarchy for consent submissions.

Each exception type maps to a specific failure category and carries the
HTTP status the API answers with, so the handler never has to guess.
Messages are user-facing (Spanish, as shown on the form).
"""

from __future__ import annotations


class ConsentError(Exception):
    """Base exception for all consent submission failures."""

    http_status: int = 500

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SubmissionValidationError(ConsentError):
    """The submission was rejected; nothing was written."""

    http_status = 400


class MissingFieldError(SubmissionValidationError):
    """A required field is empty, or the terms were not accepted."""

    def __init__(self, message: str, details: dict | None = None, code: str = "MISSING_FIELD"):
        super().__init__(code, message, details)


class InvalidEmailError(SubmissionValidationError):
    """The email does not look like ``local@domain.tld``."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_EMAIL", message, details)


class InvalidRutError(SubmissionValidationError):
    """The company RUT is malformed or its check character does not match."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_RUT", message, details)


class StorageError(ConsentError):
    """Writing the record to blob storage failed."""

    http_status = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("STORAGE_FAILURE", message, details)
