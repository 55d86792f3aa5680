"""
Custom exceptions for the license system.
"""

from __future__ import annotations


class LicenseError(Exception):
    """Base exception carrying an HTTP-style status code."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ArgumentError(LicenseError, ValueError):
    """A required input is missing, empty or whitespace-only."""


class RecordValidationError(ArgumentError):
    """Exception for invalid license record fields."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class FormatError(LicenseError, ValueError):
    """Encoded input is malformed (bad base64, truncated ciphertext)."""


class CryptographicError(LicenseError):
    """A primitive failed for a reason other than authentication."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class DecryptionFailed(LicenseError):
    """The license could not be authenticated for the given tenant."""

    def __init__(
        self, message: str = "License invalid or tenant mismatch"
    ) -> None:
        super().__init__(message, 403)


class NotFoundError(LicenseError):
    """Exception for missing license records."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)
