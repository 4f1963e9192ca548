from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class BusyError(DomainError):
    """Raised when a control is submitted again while its write is in flight."""


class SyncError(DomainError):
    """Store-reported failure (network, constraint, timeout).

    The in-memory snapshot is left untouched, so re-issuing is safe.
    """


class SettlementIntegrityError(DomainError):
    """Cash-out was written but some attendance rows were not marked as paid.

    Never retried automatically: a naive retry posts a second cash-out.
    """

    def __init__(self, message: str, *, cash_out_id: str | None, failed_record_ids: list[str]):
        super().__init__(message)
        self.cash_out_id = cash_out_id
        self.failed_record_ids = list(failed_record_ids)
