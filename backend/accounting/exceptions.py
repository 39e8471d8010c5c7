# accounting/exceptions.py
"""
Typed errors for accounting validation and persistence.

Every error carries a machine-readable ``code``. Batch validation also
sets ``index`` (zero-based position of the failing entry) so the message
tells the caller which draft to fix.

    AccountingError
    +-- MissingFieldError
    +-- OutOfRangeError
    +-- MutuallyExclusiveError
    +-- UnbalancedEntryError
    +-- InsufficientLinesError
    +-- InvalidReferenceError
    +-- DuplicateKeyError
    +-- NotFoundError
    +-- AccountInUseError
    +-- PersistenceError
"""
from typing import Optional


class AccountingError(Exception):
    code = "ACCOUNTING_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.index = index

    def at(self, index: int) -> "AccountingError":
        """Tag the error with the batch position it came from."""
        self.index = index
        return self

    def __str__(self):
        if self.index is not None:
            return f"Entry {self.index}: {self.message}"
        return self.message


class MissingFieldError(AccountingError):
    code = "MISSING_FIELD"


class OutOfRangeError(AccountingError):
    code = "OUT_OF_RANGE"


class MutuallyExclusiveError(AccountingError):
    code = "MUTUALLY_EXCLUSIVE_VIOLATION"


class UnbalancedEntryError(AccountingError):
    code = "UNBALANCED_ENTRY"


class InsufficientLinesError(AccountingError):
    code = "INSUFFICIENT_LINES"


class InvalidReferenceError(AccountingError):
    code = "INVALID_REFERENCE"


class DuplicateKeyError(AccountingError):
    code = "DUPLICATE_KEY"


class NotFoundError(AccountingError):
    code = "NOT_FOUND"


class PersistenceError(AccountingError):
    code = "WRITE_FAILED"


class AccountInUseError(AccountingError):
    code = "ACCOUNT_IN_USE"
