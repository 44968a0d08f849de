"""Unified exception hierarchy for pyaction.

All library exceptions inherit from PyActionException. The hierarchy keeps
request-dependent failures apart from programmer faults so the dispatcher can
recover from the former and let the latter propagate.

Categories:
- ClientError: the request lacks something the action needs (recovered as 4xx)
- UsageError: the library is used incorrectly (never caught by dispatch)
- OutputError: data cannot be written in the requested format
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyActionException(Exception):
    """Base exception for all pyaction errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MISSING_PARAMETER").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(PyActionException):
    """The request cannot be handled as sent."""


class ParameterException(ClientError):
    """A required request value for an action parameter is missing."""

    def __init__(self, source: str, key: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Missing required {source} '{key}'",
            code="MISSING_PARAMETER",
            context={"source": source, "key": key},
        )
        self.source = source
        self.key = key


# =============================================================================
# Usage Errors
# =============================================================================


class UsageError(PyActionException):
    """Programmer error: the library was used in an unsupported way."""


class NotInvokedError(UsageError):
    """Request or response accessed before the context was invoked."""


class BindingError(UsageError):
    """Invalid parameter binding or guard declaration."""


class InvalidStatusError(UsageError):
    """A status code outside the range allowed for a response helper."""


class SessionNotAvailableError(UsageError):
    """Flash or session used without a session attached to the request."""


# =============================================================================
# Output Errors
# =============================================================================


class OutputError(PyActionException, ValueError):
    """Content could not be written to the response."""


class UnknownFormatError(OutputError):
    """An output format has no corresponding MIME type."""


class UnserializableOutputError(OutputError):
    """Data cannot be encoded in the requested format."""
