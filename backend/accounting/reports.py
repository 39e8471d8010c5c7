# accounting/reports.py
"""
Read-only reports computed from journal lines and transactions.

Amounts are returned as strings so Decimal precision survives JSON.
"""
from decimal import Decimal
from typing import Any, Dict

from django.db.models import Sum

from accounting.models import Account, JournalLine, Transaction

ZERO = Decimal("0.00")


def trial_balance(as_of=None) -> Dict[str, Any]:
    """
    Net debit/credit per account from every journal line.

    Returns:
        {
            "accounts": [
                {"id": 1, "code": "1000", "name": "Cash", "account_type": "ASSET",
                 "debit": "1000.00", "credit": "0.00", "balance": "1000.00"},
                ...
            ],
            "total_debit": "1000.00",
            "total_credit": "1000.00",
            "is_balanced": True,
        }
    """
    lines = JournalLine.objects.all()
    if as_of is not None:
        lines = lines.filter(entry__occurred_on__lte=as_of)

    sums = {
        row["account_id"]: (row["debit"], row["credit"])
        for row in lines.values("account_id").annotate(
            debit=Sum("debit"),
            credit=Sum("credit"),
        )
    }

    accounts = []
    total_debit = ZERO
    total_credit = ZERO

    for account in Account.objects.filter(pk__in=sums.keys()).order_by("code", "name"):
        debit_sum, credit_sum = sums[account.pk]
        balance = debit_sum - credit_sum

        # Net balance goes on whichever side it falls.
        debit = balance if balance > 0 else ZERO
        credit = -balance if balance < 0 else ZERO

        accounts.append({
            "id": account.pk,
            "code": account.code,
            "name": account.name,
            "account_type": account.account_type,
            "debit": str(debit),
            "credit": str(credit),
            "balance": str(balance),
        })
        total_debit += debit
        total_credit += credit

    return {
        "as_of": as_of.isoformat() if as_of is not None else None,
        "accounts": accounts,
        "total_debit": str(total_debit),
        "total_credit": str(total_credit),
        "is_balanced": total_debit == total_credit,
    }


def income_expense_summary(start=None, end=None) -> Dict[str, Any]:
    """Income, expense and net for transactions in [start, end], with a per-category breakdown."""
    qs = Transaction.objects.all()
    if start is not None:
        qs = qs.filter(occurred_on__gte=start)
    if end is not None:
        qs = qs.filter(occurred_on__lte=end)

    totals = {Transaction.Kind.INCOME: ZERO, Transaction.Kind.EXPENSE: ZERO}
    categories: Dict[tuple, Decimal] = {}

    rows = (
        qs.values("kind", "category")
        .annotate(total=Sum("amount"))
        .order_by("kind", "category")
    )
    for row in rows:
        totals[row["kind"]] += row["total"]
        key = (row["kind"], row["category"])
        categories[key] = categories.get(key, ZERO) + row["total"]

    income = totals[Transaction.Kind.INCOME]
    expense = totals[Transaction.Kind.EXPENSE]

    return {
        "start": start.isoformat() if start is not None else None,
        "end": end.isoformat() if end is not None else None,
        "income": str(income),
        "expense": str(expense),
        "net": str(income - expense),
        "by_category": [
            {
                "transaction_type": Transaction.Kind(kind).label,
                "category": category,
                "total": str(total),
            }
            for (kind, category), total in categories.items()
        ],
    }
