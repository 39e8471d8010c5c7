# accounting/policies.py
"""
Business policy functions for accounting operations.

Policies answer: "Is this action allowed given the current state?"
They do NOT perform the action; that's the command's job.

Usage:
    allowed, reason = can_delete_account(account)
    if not allowed:
        return error(reason)
"""


# =============================================================================
# Account Policies
# =============================================================================

def can_delete_account(account) -> tuple[bool, str]:
    """
    An account referenced by journal lines or transactions stays.

    Returns:
        (True, "") if allowed
        (False, reason) if not allowed
    """
    if account.journal_lines.exists():
        return False, "Account is used by journal entries and cannot be deleted."
    if account.transactions.exists():
        return False, "Account is used by transactions and cannot be deleted."
    return True, ""


# =============================================================================
# Journal Entry Policies
# =============================================================================

# Header fields that may change after an entry is saved. Lines never do.
EDITABLE_ENTRY_FIELDS = frozenset({"occurred_on", "description", "reference_no"})


def can_modify_entry_header(changes: dict) -> tuple[bool, str]:
    blocked = sorted(set(changes) - EDITABLE_ENTRY_FIELDS)
    if blocked:
        return False, f"Cannot modify {', '.join(blocked)} on a saved journal entry."
    return True, ""
