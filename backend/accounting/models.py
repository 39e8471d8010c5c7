# accounting/models.py
"""
Accounting models for Bookwise.

Models:
- Account: Chart of accounts
- JournalEntry: Journal entry headers
- JournalLine: Journal entry lines (owned by an entry)
- Transaction: Single-sided income / expense records

Writes go through accounting.commands so that every rule in
accounting.validators runs before anything reaches the database. The
check constraints below back up the line and amount rules.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True


class Account(TimestampedModel):
    """Chart of Accounts entry."""

    class AccountType(models.TextChoices):
        ASSET = "ASSET", "Asset"
        LIABILITY = "LIABILITY", "Liability"
        EQUITY = "EQUITY", "Equity"
        REVENUE = "REVENUE", "Revenue"
        EXPENSE = "EXPENSE", "Expense"

    code = models.CharField(max_length=20)
    name = models.CharField(max_length=100)
    account_type = models.CharField(
        max_length=20,
        choices=AccountType.choices,
        default=AccountType.ASSET,
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                name="uniq_account_code",
            ),
        ]
        ordering = ["code", "name"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class JournalEntry(TimestampedModel):
    """
    Journal entry header.

    Debits equal credits across the entry's lines. Lines are created
    together with the entry and are never edited afterwards; only the
    header (date, description, reference) may change.
    """

    occurred_on = models.DateTimeField()
    description = models.CharField(max_length=200)
    reference_no = models.CharField(max_length=50, null=True, blank=True)

    class Meta:
        ordering = ["-occurred_on", "-id"]
        indexes = [
            models.Index(fields=["occurred_on"], name="je_occurred_on_idx"),
        ]
        verbose_name_plural = "journal entries"

    def __str__(self):
        return f"JE#{self.pk} {self.description}"

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines.all()), Decimal("0.00"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines.all()), Decimal("0.00"))


class JournalLine(models.Model):
    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )
    debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    memo = models.CharField(max_length=200, null=True, blank=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=~(Q(debit__gt=0) & Q(credit__gt=0)),
                name="chk_line_not_both_debit_credit",
            ),
            models.CheckConstraint(
                condition=~(Q(debit__exact=0) & Q(credit__exact=0)),
                name="chk_line_not_both_zero",
            ),
            models.CheckConstraint(
                condition=Q(debit__gte=0) & Q(credit__gte=0),
                name="chk_line_non_negative",
            ),
        ]

    def __str__(self):
        return f"JE#{self.entry_id} L{self.pk}"


class Transaction(TimestampedModel):
    """
    Income or expense recorded against one account.

    ``amount`` is always positive; the sign comes from ``kind``.
    """

    class Kind(models.TextChoices):
        INCOME = "INCOME", "Income"
        EXPENSE = "EXPENSE", "Expense"

    kind = models.CharField(max_length=10, choices=Kind.choices)
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    occurred_on = models.DateTimeField()
    description = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    category = models.CharField(max_length=100, null=True, blank=True)
    reference_no = models.CharField(max_length=50, null=True, blank=True)

    class Meta:
        ordering = ["-occurred_on", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_transaction_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} ({self.description})"

    @property
    def transaction_type(self) -> str:
        return self.Kind(self.kind).label

    @property
    def signed_amount(self) -> Decimal:
        if self.kind == self.Kind.EXPENSE:
            return -self.amount
        return self.amount
