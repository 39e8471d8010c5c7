"""
Journal entry aggregate.

The aggregate owns a header and an ordered list of JournalLineValue
objects. It is built in memory, checked, and only then persisted by the
command layer; lines are never edited once the entry has been saved.

Lifecycle:
    draft     create() + add_line()
    validated validate_balanced() passed
    persisted the command layer wrote it and recorded entry_id
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from django.utils import timezone

from accounting.validators import (
    ZERO,
    JournalLineValue,
    check_balance,
    validate_header,
    validate_line,
)


@dataclass
class JournalEntryAggregate:
    occurred_on: object
    description: str
    reference_no: Optional[str] = None
    lines: List[JournalLineValue] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    entry_id: Optional[int] = None

    @classmethod
    def create(cls, occurred_on, description, reference_no=None) -> "JournalEntryAggregate":
        header = validate_header(occurred_on, description, reference_no)
        return cls(
            occurred_on=header.occurred_on,
            description=header.description,
            reference_no=header.reference_no,
            created_at=timezone.now(),
        )

    @classmethod
    def from_model(cls, entry) -> "JournalEntryAggregate":
        """Rebuild from a persisted JournalEntry (lines in id order)."""
        lines = [
            JournalLineValue(
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
                memo=line.memo,
                seq=seq,
            )
            for seq, line in enumerate(entry.lines.order_by("id"), start=1)
        ]
        return cls(
            occurred_on=entry.occurred_on,
            description=entry.description,
            reference_no=entry.reference_no,
            lines=lines,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            entry_id=entry.pk,
        )

    def add_line(self, account_id, debit, credit, memo=None) -> JournalLineValue:
        if self.entry_id is not None:
            raise RuntimeError("Lines cannot be added to a persisted journal entry.")
        line = validate_line(account_id, debit, credit, memo, seq=len(self.lines) + 1)
        self.lines.append(line)
        return line

    def validate_balanced(self) -> None:
        check_balance(self.lines)

    def update_header(self, occurred_on, description, reference_no=None) -> None:
        header = validate_header(occurred_on, description, reference_no)
        self.occurred_on = header.occurred_on
        self.description = header.description
        self.reference_no = header.reference_no
        self.updated_at = timezone.now()

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def account_ids(self) -> set:
        return {line.account_id for line in self.lines}
