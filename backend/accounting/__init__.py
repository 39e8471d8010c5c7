# accounting/__init__.py
"""
Accounting app - Double-entry bookkeeping for Bookwise.

This app provides:
- Account: Chart of Accounts
- JournalEntry / JournalLine: Balanced double-entry records
- Transaction: Simple income and expense records
- Batch import of journal entries (all or nothing)

Commands handle all mutations so validation always runs first.
"""
