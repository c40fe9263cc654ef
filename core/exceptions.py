# PATH: core/exceptions.py
"""
Typed exceptions for chainview.

Every failure that reaches a resolver is one of these; raw httpx
exceptions are converted at the provider boundary.
"""

from typing import Optional

from core.constants import ErrorCode


class ExplorerError(Exception):
    """Base exception for chainview."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TRANSPORT_ERROR,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class TransportError(ExplorerError):
    """Network or provider failure (HTTP, timeout, JSON-RPC error object)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR, details)


class NotFoundError(ExplorerError):
    """Requested height or hash does not (yet) exist."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details)


class InvalidAddressError(ExplorerError):
    """Malformed account address."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details)


class ConsistencyError(ExplorerError):
    """Internal invariant violated while assembling a view model."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONSISTENCY_ERROR, details)


class ResolutionError(ExplorerError):
    """
    A resolver could not produce its view model.

    Keeps the code of the underlying failure so presentation can tell
    "not found" apart from "data unavailable".
    """

    def __init__(self, message: str, cause: ExplorerError):
        details = {"cause": str(cause), **cause.details}
        super().__init__(message, cause.code, details)
        self.cause = cause

    @classmethod
    def from_error(cls, what: str, error: ExplorerError) -> "ResolutionError":
        """Wrap error raised while resolving `what`."""
        return cls(f"Could not resolve {what}: {error.message}", error)
