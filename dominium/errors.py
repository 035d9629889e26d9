from __future__ import annotations


class DominiumError(Exception):
    """Base error for the service.

    Carries the HTTP status the request handler answers with; the message is
    sent to the client as ``{"ok": false, "error": message}``.
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DominiumError):
    """Missing required field or unreadable request body."""

    status_code = 400


class NotFoundError(DominiumError):
    status_code = 404


class ConfigurationError(DominiumError):
    """Credentials or spreadsheet settings are absent or unusable."""


class RemoteServiceError(DominiumError):
    """The spreadsheet backend rejected the call (network, auth, quota...)."""
