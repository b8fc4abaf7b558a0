"""
Custom exception hierarchy for the consultation core.

Each exception type maps to one failure category at the request boundary,
so the HTTP layer can translate it into a status code without inspecting
messages.
"""

from __future__ import annotations


class ClearCueError(Exception):
    """Base exception for all consultation failures."""

    status_code = 500

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UpstreamUnavailable(ClearCueError):
    """The external model call failed or timed out."""

    status_code = 502

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UPSTREAM_UNAVAILABLE", message, details)


class UnrecoverablePayload(ClearCueError):
    """No usable record could be recovered from the model reply.

    Only raised inside the extraction engine; `extract()` always absorbs it.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UNRECOVERABLE_PAYLOAD", message, details)


class ModeMismatch(ClearCueError):
    """The caller supplied a mode tag we do not recognise."""

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("MODE_MISMATCH", message, details)


class InvalidFormData(ClearCueError):
    """The form blob or image uploads are malformed."""

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_FORM_DATA", message, details)


class ServiceUnavailable(ClearCueError):
    """The service is not ready to take requests yet."""

    status_code = 503

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("SERVICE_UNAVAILABLE", message, details)


class RenderError(ClearCueError):
    """The record handed to the layout engine does not fit the mode."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("RENDER_ERROR", message, details)
