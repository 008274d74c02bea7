"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations


from typing import Optional

from snapview.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiNoContentError,
    ApiServerError,
    ApiTimeoutError,
    extract_error_hint,
)
from snapview.domain.errors import SnapshotFilenameError
from snapview.domain.ports import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter and domain exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by a port call or a domain check.
        default_code: Code used when the exception is not a known API error.
        default_message: Message used when ``exc`` carries no text.

    Returns:
        UseCaseError: User-presentable error with a stable ``code``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, SnapshotFilenameError):
        return UseCaseError("INVALID_FILENAME", exc.reason, meta={"filename": exc.filename})
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiNoContentError):
        return UseCaseError("NOT_FOUND", "Snapshot not found on the server.")
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        hint = exc.hint or extract_error_hint(getattr(exc, "payload", None))
        if status in (401, 403):
            return UseCaseError("AUTH_FAILED", "Auth failed / API key invalid.")
        if status == 404:
            return UseCaseError("NOT_FOUND", _compose_error_message("Not found", hint))
        if status == 409:
            return UseCaseError("CONFLICT", _compose_error_message("Conflict", hint))
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return UseCaseError("REQUEST_FAILED", _compose_error_message(label, hint))
    if isinstance(exc, ApiServerError):
        hint = exc.hint or extract_error_hint(getattr(exc, "payload", None))
        return UseCaseError("SERVER_ERROR", _compose_error_message("Server error, try again", hint))
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    """Compose a user-facing error message with optional hint text."""
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]
