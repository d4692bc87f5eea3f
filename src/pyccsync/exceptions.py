"""Custom exception hierarchy for pyccsync."""

from __future__ import annotations


class CcError(Exception):
    """Base exception for all pyccsync errors."""


class CcConfigError(CcError):
    """Invalid or missing configuration."""


class CcTransportError(CcError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CcApiError(CcError):
    """Payload was delivered but is not a successful history response."""

    def __init__(
        self,
        message: str,
        *,
        response: str = "",
        endpoint: str = "",
    ) -> None:
        self.response = response
        self.endpoint = endpoint
        super().__init__(message)


class CcPersistenceError(CcError):
    """Persisted dataset could not be written."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class SyncAbortedError(CcError):
    """A batch failed and the synchronization run was aborted.

    Carries the plan of the failed batch so the operator can tell which
    window was being processed.  The underlying error is chained as
    ``__cause__``.
    """

    def __init__(self, message: str, *, to_date: int, unit_count: int) -> None:
        self.to_date = to_date
        self.unit_count = unit_count
        super().__init__(message)


class BatchFetchError(SyncAbortedError):
    """The remote source did not deliver the requested batch."""


class BatchPersistError(SyncAbortedError):
    """The merged dataset could not be persisted after a batch."""
