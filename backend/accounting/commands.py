# accounting/commands.py
"""
Command layer for accounting operations.

Commands are the single point where business operations happen.
Views call commands; commands enforce rules and write the models.

Pattern:
1. Validate permissions (require)
2. Validate input (accounting.validators / aggregate)
3. Apply business policies (can_*)
4. Perform the operation inside a database transaction
5. Return CommandResult

Validation failures come back as CommandResult.fail() carrying the
error's machine-readable code; nothing is written in that case.
"""

import logging

from django.db import transaction, DatabaseError, IntegrityError
from django.utils import timezone

from accounts.authz import ActorContext, require
from accounting.aggregates import JournalEntryAggregate
from accounting.exceptions import (
    AccountingError,
    AccountInUseError,
    DuplicateKeyError,
    InsufficientLinesError,
    InvalidReferenceError,
    MissingFieldError,
    NotFoundError,
    OutOfRangeError,
    PersistenceError,
)
from accounting.models import Account, JournalEntry, JournalLine, Transaction
from accounting.policies import can_delete_account, can_modify_entry_header
from accounting.validators import (
    MIN_LINES,
    check_balance,
    resolve_account_ids,
    validate_account_fields,
    validate_batch_size,
    validate_header,
    validate_line,
    validate_transaction_fields,
)

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_CODE = "AccountCode already exists."


class CommandResult:
    """
    Wrapper for command results with success/failure info.

    Usage:
        result = create_account(actor, code="1000", ...)
        if result.success:
            account = result.data
        else:
            error_message = result.error
            error_code = result.error_code
    """

    def __init__(self, success: bool, data=None, error: str = None, error_code: str = None, index: int = None):
        self.success = success
        self.data = data
        self.error = error
        self.error_code = error_code
        self.index = index

    @classmethod
    def ok(cls, data=None):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error, error_code: str = None, index: int = None):
        if isinstance(error, AccountingError):
            return cls(
                success=False,
                error=str(error),
                error_code=error.code,
                index=error.index,
            )
        return cls(success=False, error=error, error_code=error_code, index=index)


# =============================================================================
# Account Commands
# =============================================================================

def _validate_account_type(account_type) -> str:
    account_type = (account_type or Account.AccountType.ASSET).strip().upper()
    if account_type not in Account.AccountType.values:
        raise OutOfRangeError(
            f"Invalid account type. Allowed: {', '.join(Account.AccountType.values)}",
            field="account_type",
        )
    return account_type


@transaction.atomic
def create_account(
    actor: ActorContext,
    code: str,
    name: str,
    account_type: str = Account.AccountType.ASSET,
) -> CommandResult:
    """
    Create a new account in the chart of accounts.

    Args:
        actor: The actor context
        code: Account code (trimmed, unique)
        name: Account name (trimmed)
        account_type: One of Account.AccountType choices

    Returns:
        CommandResult with the created Account or error
    """
    require(actor, "accounts.manage")

    try:
        code, name = validate_account_fields(code, name)
        account_type = _validate_account_type(account_type)
    except AccountingError as exc:
        return CommandResult.fail(exc)

    if Account.objects.filter(code=code).exists():
        return CommandResult.fail(DuplicateKeyError(DUPLICATE_ACCOUNT_CODE, field="code"))

    try:
        # Savepoint so a lost race on the unique constraint leaves the outer block usable.
        with transaction.atomic():
            account = Account.objects.create(code=code, name=name, account_type=account_type)
    except IntegrityError:
        return CommandResult.fail(DuplicateKeyError(DUPLICATE_ACCOUNT_CODE, field="code"))

    logger.info("Account created", extra={"account_id": account.pk, "code": code})
    return CommandResult.ok(account)


@transaction.atomic
def update_account(
    actor: ActorContext,
    account_id: int,
    code: str,
    name: str,
    account_type: str = Account.AccountType.ASSET,
) -> CommandResult:
    """Full replacement of code, name and type."""
    require(actor, "accounts.manage")

    try:
        account = Account.objects.select_for_update().get(pk=account_id)
    except Account.DoesNotExist:
        return CommandResult.fail(NotFoundError("Account not found."))

    try:
        code, name = validate_account_fields(code, name)
        account_type = _validate_account_type(account_type)
    except AccountingError as exc:
        return CommandResult.fail(exc)

    if Account.objects.filter(code=code).exclude(pk=account.pk).exists():
        return CommandResult.fail(DuplicateKeyError(DUPLICATE_ACCOUNT_CODE, field="code"))

    account.code = code
    account.name = name
    account.account_type = account_type
    account.updated_at = timezone.now()
    try:
        with transaction.atomic():
            account.save()
    except IntegrityError:
        return CommandResult.fail(DuplicateKeyError(DUPLICATE_ACCOUNT_CODE, field="code"))

    logger.info("Account updated", extra={"account_id": account.pk, "code": code})
    return CommandResult.ok(account)


@transaction.atomic
def delete_account(actor: ActorContext, account_id: int) -> CommandResult:
    require(actor, "accounts.manage")

    try:
        account = Account.objects.select_for_update().get(pk=account_id)
    except Account.DoesNotExist:
        return CommandResult.fail(NotFoundError("Account not found."))

    allowed, reason = can_delete_account(account)
    if not allowed:
        return CommandResult.fail(AccountInUseError(reason))

    account.delete()
    logger.info("Account deleted", extra={"account_id": account_id})
    return CommandResult.ok({"deleted": True})


# =============================================================================
# Journal Entry Commands
# =============================================================================

def _check_draft(draft: dict) -> set:
    """
    Header, line and balance rules for one draft, without touching the
    database. Returns the account ids the draft refers to.
    """
    validate_header(
        draft.get("occurred_on"),
        draft.get("description"),
        draft.get("reference_no"),
    )

    raw_lines = draft.get("lines") or []
    if len(raw_lines) < MIN_LINES:
        raise InsufficientLinesError("At least 2 lines are required.", field="lines")

    lines = [
        validate_line(
            line.get("account_id"),
            line.get("debit"),
            line.get("credit"),
            line.get("memo"),
            seq=seq,
        )
        for seq, line in enumerate(raw_lines, start=1)
    ]
    check_balance(lines)
    return {line.account_id for line in lines}


def _build_aggregate(draft: dict) -> JournalEntryAggregate:
    aggregate = JournalEntryAggregate.create(
        draft.get("occurred_on"),
        draft.get("description"),
        draft.get("reference_no"),
    )
    for line in draft.get("lines") or []:
        aggregate.add_line(
            line.get("account_id"),
            line.get("debit"),
            line.get("credit"),
            line.get("memo"),
        )
    aggregate.validate_balanced()
    return aggregate


def _persist_entry(aggregate: JournalEntryAggregate) -> JournalEntry:
    """Insert the header, then its lines. The header's id comes from its own insert."""
    entry = JournalEntry.objects.create(
        occurred_on=aggregate.occurred_on,
        created_at=aggregate.created_at,
        description=aggregate.description,
        reference_no=aggregate.reference_no,
    )
    JournalLine.objects.bulk_create([
        JournalLine(
            entry=entry,
            account_id=line.account_id,
            debit=line.debit,
            credit=line.credit,
            memo=line.memo,
        )
        for line in aggregate.lines
    ])
    aggregate.entry_id = entry.pk
    return entry


def create_journal_entry(
    actor: ActorContext,
    occurred_on,
    description: str,
    reference_no: str = None,
    lines: list = None,
) -> CommandResult:
    """
    Create one balanced journal entry.

    Args:
        actor: The actor context
        occurred_on: Entry date/time
        description: Required, up to 200 characters
        reference_no: Optional, up to 50 characters
        lines: List of dicts with account_id, debit, credit, memo

    Returns:
        CommandResult with the created JournalEntry or error
    """
    require(actor, "journal.create")

    draft = {
        "occurred_on": occurred_on,
        "description": description,
        "reference_no": reference_no,
        "lines": lines or [],
    }

    try:
        account_ids = _check_draft(draft)
        resolve_account_ids(account_ids)
    except AccountingError as exc:
        return CommandResult.fail(exc)

    try:
        with transaction.atomic():
            aggregate = _build_aggregate(draft)
            entry = _persist_entry(aggregate)
    except AccountingError as exc:
        return CommandResult.fail(exc)
    except DatabaseError:
        logger.exception("Journal entry write failed")
        return CommandResult.fail(PersistenceError("Failed to save journal entry."))

    logger.info(
        "Journal entry created",
        extra={"entry_id": entry.pk, "total": str(aggregate.total_debit)},
    )
    return CommandResult.ok(entry)


def bulk_create_journal_entries(actor: ActorContext, entries: list) -> CommandResult:
    """
    Import a batch of journal entries, all or nothing.

    1. Batch size must be 1..JOURNAL_BULK_MAX_ENTRIES.
    2. Every draft passes header, line and balance rules (errors carry
       the zero-based entry index).
    3. Every account id across the batch exists (one lookup).
    4. Aggregates are built and inserted inside a single transaction;
       any failure rolls the whole batch back.

    Returns:
        CommandResult with {"created_count", "created_ids"} in input order
    """
    require(actor, "journal.create")

    entries = list(entries or [])

    try:
        validate_batch_size(len(entries))

        account_ids = set()
        for index, draft in enumerate(entries):
            try:
                account_ids |= _check_draft(draft)
            except AccountingError as exc:
                raise exc.at(index)

        resolve_account_ids(account_ids)
    except AccountingError as exc:
        logger.warning(
            "Journal batch rejected",
            extra={"error_code": exc.code, "index": exc.index, "size": len(entries)},
        )
        return CommandResult.fail(exc)

    created_ids = []
    try:
        with transaction.atomic():
            for index, draft in enumerate(entries):
                try:
                    aggregate = _build_aggregate(draft)
                except AccountingError as exc:
                    raise exc.at(index)
                created_ids.append(_persist_entry(aggregate).pk)
    except AccountingError as exc:
        return CommandResult.fail(exc)
    except DatabaseError:
        logger.exception("Journal batch write failed", extra={"size": len(entries)})
        return CommandResult.fail(PersistenceError("Failed to save journal entries."))

    logger.info("Journal batch committed", extra={"created_count": len(created_ids)})
    return CommandResult.ok({
        "created_count": len(created_ids),
        "created_ids": created_ids,
    })


@transaction.atomic
def update_journal_entry_header(actor: ActorContext, entry_id: int, **changes) -> CommandResult:
    """
    Change occurred_on, description and/or reference_no.

    Fields not passed keep their current value. Lines are untouched.
    """
    require(actor, "journal.edit")

    allowed, reason = can_modify_entry_header(changes)
    if not allowed:
        return CommandResult.fail(OutOfRangeError(reason))

    try:
        entry = JournalEntry.objects.select_for_update().get(pk=entry_id)
    except JournalEntry.DoesNotExist:
        return CommandResult.fail(NotFoundError("Journal entry not found."))

    aggregate = JournalEntryAggregate.from_model(entry)
    try:
        aggregate.update_header(
            changes.get("occurred_on", aggregate.occurred_on),
            changes.get("description", aggregate.description),
            changes.get("reference_no", aggregate.reference_no),
        )
    except AccountingError as exc:
        return CommandResult.fail(exc)

    entry.occurred_on = aggregate.occurred_on
    entry.description = aggregate.description
    entry.reference_no = aggregate.reference_no
    entry.updated_at = aggregate.updated_at
    entry.save(update_fields=["occurred_on", "description", "reference_no", "updated_at"])

    logger.info("Journal entry header updated", extra={"entry_id": entry.pk})
    return CommandResult.ok(entry)


@transaction.atomic
def delete_journal_entry(actor: ActorContext, entry_id: int) -> CommandResult:
    """Delete an entry together with its lines."""
    require(actor, "journal.delete")

    try:
        entry = JournalEntry.objects.select_for_update().get(pk=entry_id)
    except JournalEntry.DoesNotExist:
        return CommandResult.fail(NotFoundError("Journal entry not found."))

    entry.delete()
    logger.info("Journal entry deleted", extra={"entry_id": entry_id})
    return CommandResult.ok({"deleted": True})


# =============================================================================
# Transaction Commands
# =============================================================================

def _parse_kind(transaction_type) -> str:
    value = (transaction_type or "").strip().lower()
    for kind in Transaction.Kind:
        if value == kind.label.lower():
            return kind.value
    raise OutOfRangeError("TransactionType must be Income or Expense.", field="transaction_type")


def _check_transaction_account(account_id) -> None:
    if not isinstance(account_id, int) or isinstance(account_id, bool) or account_id <= 0:
        raise MissingFieldError("AccountId is required.", field="account_id")
    if not Account.objects.filter(pk=account_id).exists():
        raise InvalidReferenceError("AccountId is invalid.", field="account_id")


@transaction.atomic
def create_transaction(
    actor: ActorContext,
    account_id: int,
    transaction_type: str,
    occurred_on,
    description: str,
    amount,
    category: str = None,
    reference_no: str = None,
) -> CommandResult:
    """Record an Income or Expense against one account."""
    require(actor, "transactions.manage")

    try:
        _check_transaction_account(account_id)
        kind = _parse_kind(transaction_type)
        fields = validate_transaction_fields(occurred_on, description, amount, category, reference_no)
    except AccountingError as exc:
        return CommandResult.fail(exc)

    txn = Transaction.objects.create(kind=kind, account_id=account_id, **fields)
    logger.info(
        "Transaction created",
        extra={"transaction_id": txn.pk, "kind": kind, "amount": str(txn.amount)},
    )
    return CommandResult.ok(txn)


@transaction.atomic
def update_transaction(
    actor: ActorContext,
    transaction_id: int,
    account_id: int,
    occurred_on,
    description: str,
    amount,
    category: str = None,
    reference_no: str = None,
) -> CommandResult:
    """Full replacement of the details. The Income/Expense kind stays fixed."""
    require(actor, "transactions.manage")

    try:
        txn = Transaction.objects.select_for_update().get(pk=transaction_id)
    except Transaction.DoesNotExist:
        return CommandResult.fail(NotFoundError("Transaction not found."))

    try:
        _check_transaction_account(account_id)
        fields = validate_transaction_fields(occurred_on, description, amount, category, reference_no)
    except AccountingError as exc:
        return CommandResult.fail(exc)

    txn.account_id = account_id
    for name, value in fields.items():
        setattr(txn, name, value)
    txn.updated_at = timezone.now()
    txn.save()

    logger.info("Transaction updated", extra={"transaction_id": txn.pk})
    return CommandResult.ok(txn)


@transaction.atomic
def delete_transaction(actor: ActorContext, transaction_id: int) -> CommandResult:
    require(actor, "transactions.manage")

    try:
        txn = Transaction.objects.select_for_update().get(pk=transaction_id)
    except Transaction.DoesNotExist:
        return CommandResult.fail(NotFoundError("Transaction not found."))

    txn.delete()
    logger.info("Transaction deleted", extra={"transaction_id": transaction_id})
    return CommandResult.ok({"deleted": True})
