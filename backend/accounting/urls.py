# accounting/urls.py
"""
URL configuration for accounting API.

Endpoints:
- /accounts/ - Chart of Accounts CRUD
- /journal-entries/ - Journal entries (single, bulk, header edit, delete)
- /transactions/ - Income / expense CRUD
- /reports/ - Trial balance and income/expense summary
"""

from django.urls import path

from .views import (
    # Account views
    AccountListCreateView,
    AccountDetailView,
    # Journal entry views
    JournalEntryListCreateView,
    JournalEntryBulkCreateView,
    JournalEntryDetailView,
    # Transaction views
    TransactionListCreateView,
    TransactionDetailView,
    # Reports
    TrialBalanceView,
    IncomeExpenseView,
)

app_name = "accounting"

urlpatterns = [
    # ==========================================================================
    # Accounts (Chart of Accounts)
    # ==========================================================================
    path("accounts/", AccountListCreateView.as_view(), name="account-list-create"),
    path("accounts/<int:pk>/", AccountDetailView.as_view(), name="account-detail"),

    # ==========================================================================
    # Journal Entries
    # ==========================================================================
    path("journal-entries/", JournalEntryListCreateView.as_view(), name="journal-entry-list-create"),
    path("journal-entries/bulk/", JournalEntryBulkCreateView.as_view(), name="journal-entry-bulk"),
    path("journal-entries/<int:pk>/", JournalEntryDetailView.as_view(), name="journal-entry-detail"),

    # ==========================================================================
    # Transactions
    # ==========================================================================
    path("transactions/", TransactionListCreateView.as_view(), name="transaction-list-create"),
    path("transactions/<int:pk>/", TransactionDetailView.as_view(), name="transaction-detail"),

    # ==========================================================================
    # Reports
    # ==========================================================================
    path("reports/trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
    path("reports/income-expense/", IncomeExpenseView.as_view(), name="income-expense"),
]
