# accounting/validators.py
"""
Validation rules for accounts, journal entries and transactions.

Everything here is fail-fast: the first broken rule raises a typed
AccountingError. Only resolve_account_ids touches the database.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence

from django.conf import settings

from accounting.exceptions import (
    InsufficientLinesError,
    InvalidReferenceError,
    MissingFieldError,
    MutuallyExclusiveError,
    OutOfRangeError,
    UnbalancedEntryError,
)

MONEY_Q = Decimal("0.01")
ZERO = Decimal("0.00")

ACCOUNT_CODE_MAX = 20
ACCOUNT_NAME_MAX = 100
DESCRIPTION_MAX = 200
REFERENCE_MAX = 50
MEMO_MAX = 200
CATEGORY_MAX = 100

MIN_LINES = 2
BATCH_MIN = 1
BATCH_MAX = 500


@dataclass(frozen=True)
class JournalLineValue:
    """A validated journal line. Knows nothing about its entry."""
    account_id: int
    debit: Decimal
    credit: Decimal
    memo: Optional[str] = None
    seq: int = 0


@dataclass(frozen=True)
class EntryHeader:
    occurred_on: object
    description: str
    reference_no: Optional[str] = None


def to_money(value) -> Decimal:
    """
    Convert to a 2-place Decimal. Floats go through str().

    Values that need more than 2 fraction digits are rejected, never rounded.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            raise InvalidOperation
        money = amount.quantize(MONEY_Q)
    except (InvalidOperation, TypeError, ValueError):
        raise OutOfRangeError(f"Invalid amount: {value!r}.")

    if money != amount:
        raise OutOfRangeError(f"Amount must have at most 2 decimal places: {value!r}.")
    return money


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional(value, max_len: int, label: str, field: str) -> Optional[str]:
    value = _clean(value)
    if not value:
        return None
    if len(value) > max_len:
        raise OutOfRangeError(f"{label} must be at most {max_len} characters.", field=field)
    return value


# =============================================================================
# Journal lines and balance
# =============================================================================

def validate_line(account_id, debit, credit, memo=None, *, seq: int = 0) -> JournalLineValue:
    """
    Check one line in isolation.

    Exactly one side must be positive, neither side may be negative.
    """
    if not isinstance(account_id, int) or isinstance(account_id, bool) or account_id <= 0:
        raise MissingFieldError("AccountId is required for each line.", field="account_id")

    debit = to_money(debit)
    credit = to_money(credit)

    if debit < ZERO:
        raise OutOfRangeError("Debit cannot be negative.", field="debit")
    if credit < ZERO:
        raise OutOfRangeError("Credit cannot be negative.", field="credit")

    if (debit > ZERO) == (credit > ZERO):
        raise MutuallyExclusiveError(
            "Each line must have either Debit or Credit (not both).",
        )

    return JournalLineValue(
        account_id=account_id,
        debit=debit,
        credit=credit,
        memo=_optional(memo, MEMO_MAX, "Memo", "memo"),
        seq=seq,
    )


def check_balance(lines: Sequence) -> tuple[Decimal, Decimal]:
    """
    Total both sides and require them to be exactly equal.

    Returns (total_debit, total_credit).
    """
    if len(lines) < MIN_LINES:
        raise InsufficientLinesError("Journal entry must have at least 2 lines.")

    total_debit = sum((to_money(line.debit) for line in lines), ZERO)
    total_credit = sum((to_money(line.credit) for line in lines), ZERO)

    if total_debit != total_credit:
        raise UnbalancedEntryError("Journal entry is not balanced.")
    return total_debit, total_credit


def resolve_account_ids(account_ids: Iterable[int]) -> set[int]:
    """
    Confirm every id names an existing account with a single IN query.

    The error never says which id is missing.
    """
    from accounting.models import Account

    wanted = set(account_ids)
    if not wanted:
        return wanted

    found = set(Account.objects.filter(pk__in=wanted).values_list("pk", flat=True))
    if found != wanted:
        raise InvalidReferenceError("One or more AccountId values are invalid.", field="account_id")
    return found


# =============================================================================
# Entry header and batch
# =============================================================================

def validate_header(occurred_on, description, reference_no=None) -> EntryHeader:
    if not occurred_on:
        raise MissingFieldError("OccurredOn is required.", field="occurred_on")

    description = _clean(description)
    if not description:
        raise MissingFieldError("Description is required.", field="description")
    if len(description) > DESCRIPTION_MAX:
        raise OutOfRangeError(
            f"Description must be at most {DESCRIPTION_MAX} characters.", field="description"
        )

    return EntryHeader(
        occurred_on=occurred_on,
        description=description,
        reference_no=_optional(reference_no, REFERENCE_MAX, "ReferenceNo", "reference_no"),
    )


def validate_batch_size(count: int, max_entries: Optional[int] = None) -> None:
    if max_entries is None:
        max_entries = getattr(settings, "JOURNAL_BULK_MAX_ENTRIES", BATCH_MAX)
    if count < BATCH_MIN:
        raise OutOfRangeError("At least one journal entry is required.", field="entries")
    if count > max_entries:
        raise OutOfRangeError(
            f"A batch may contain at most {max_entries} journal entries.", field="entries"
        )


# =============================================================================
# Accounts and transactions
# =============================================================================

def validate_account_fields(code, name) -> tuple[str, str]:
    """Returns the trimmed (code, name)."""
    code = _clean(code)
    name = _clean(name)

    if not code:
        raise MissingFieldError("Code is required.", field="code")
    if len(code) > ACCOUNT_CODE_MAX:
        raise OutOfRangeError(f"Code must be at most {ACCOUNT_CODE_MAX} characters.", field="code")
    if not name:
        raise MissingFieldError("Name is required.", field="name")
    if len(name) > ACCOUNT_NAME_MAX:
        raise OutOfRangeError(f"Name must be at most {ACCOUNT_NAME_MAX} characters.", field="name")
    return code, name


def validate_transaction_fields(occurred_on, description, amount, category=None, reference_no=None) -> dict:
    if not occurred_on:
        raise MissingFieldError("OccurredOn is required.", field="occurred_on")

    description = _clean(description)
    if not description:
        raise MissingFieldError("Description is required.", field="description")
    if len(description) > DESCRIPTION_MAX:
        raise OutOfRangeError(
            f"Description must be at most {DESCRIPTION_MAX} characters.", field="description"
        )

    amount = to_money(amount)
    if amount <= ZERO:
        raise OutOfRangeError("Amount must be greater than zero.", field="amount")

    return {
        "occurred_on": occurred_on,
        "description": description,
        "amount": amount,
        "category": _optional(category, CATEGORY_MAX, "Category", "category"),
        "reference_no": _optional(reference_no, REFERENCE_MAX, "ReferenceNo", "reference_no"),
    }
