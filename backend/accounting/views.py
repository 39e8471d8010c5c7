# accounting/views.py
"""
Thin views that delegate to the commands layer.

Views handle: HTTP parsing, authentication, response formatting.
Commands handle: permissions, business rules, persistence.

All mutations (create, update, delete) go through commands so the
validation pipeline always runs. Views never call .save() on models.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from django.shortcuts import get_object_or_404

from accounts.authz import resolve_actor, require
from .exceptions import (
    AccountingError,
    AccountInUseError,
    DuplicateKeyError,
    NotFoundError,
    PersistenceError,
)
from .models import Account, JournalEntry, Transaction
from .reports import income_expense_summary, trial_balance
from .serializers import (
    AccountSerializer,
    AccountInputSerializer,
    BulkJournalEntriesSerializer,
    BulkJournalEntriesResultSerializer,
    JournalEntrySerializer,
    JournalEntryInputSerializer,
    JournalEntryHeaderSerializer,
    ReportRangeSerializer,
    TransactionSerializer,
    TransactionCreateSerializer,
    TransactionUpdateSerializer,
    parse_journal_drafts,
)
from .validators import validate_batch_size
from .commands import (
    CommandResult,
    # Account commands
    create_account,
    update_account,
    delete_account,
    # Journal entry commands
    create_journal_entry,
    bulk_create_journal_entries,
    update_journal_entry_header,
    delete_journal_entry,
    # Transaction commands
    create_transaction,
    update_transaction,
    delete_transaction,
)


# Failed commands map to HTTP by error code; anything else is a 400.
FAILURE_STATUS = {
    DuplicateKeyError.code: status.HTTP_409_CONFLICT,
    AccountInUseError.code: status.HTTP_409_CONFLICT,
    NotFoundError.code: status.HTTP_404_NOT_FOUND,
    PersistenceError.code: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def failure_response(result) -> Response:
    payload = {"detail": result.error, "code": result.error_code}
    if result.index is not None:
        payload["index"] = result.index
    return Response(
        payload,
        status=FAILURE_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


def _entries_with_lines():
    return JournalEntry.objects.prefetch_related("lines", "lines__account")


# =============================================================================
# Account Views
# =============================================================================

class AccountListCreateView(APIView):
    """
    GET /api/accounting/accounts/ -> list accounts (code, then name)
    POST /api/accounting/accounts/ -> create account
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "accounts.view")

        accounts = Account.objects.order_by("code", "name")
        serializer = AccountSerializer(accounts, many=True)
        return Response(serializer.data)

    def post(self, request):
        actor = resolve_actor(request)
        require(actor, "accounts.manage")

        input_serializer = AccountInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_account(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        output_serializer = AccountSerializer(result.data)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)


class AccountDetailView(APIView):
    """
    GET /api/accounting/accounts/<pk>/ -> retrieve account
    PUT /api/accounting/accounts/<pk>/ -> replace code, name and type
    DELETE /api/accounting/accounts/<pk>/ -> delete unused account
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "accounts.view")

        account = get_object_or_404(Account, pk=pk)
        return Response(AccountSerializer(account).data)

    def put(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "accounts.manage")

        input_serializer = AccountInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_account(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(AccountSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "accounts.manage")

        result = delete_account(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Journal Entry Views
# =============================================================================

class JournalEntryListCreateView(APIView):
    """
    GET /api/accounting/journal-entries/ -> list, newest occurred_on first
    POST /api/accounting/journal-entries/ -> create one balanced entry
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "journal.view")

        entries = _entries_with_lines().order_by("-occurred_on", "-id")
        serializer = JournalEntrySerializer(entries, many=True)
        return Response(serializer.data)

    def post(self, request):
        actor = resolve_actor(request)
        require(actor, "journal.create")

        input_serializer = JournalEntryInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        result = create_journal_entry(
            actor,
            occurred_on=data.get("occurred_on"),
            description=data.get("description", ""),
            reference_no=data.get("reference_no"),
            lines=[dict(line) for line in data.get("lines", [])],
        )
        if not result.success:
            return failure_response(result)

        entry = _entries_with_lines().get(pk=result.data.pk)
        return Response(JournalEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class JournalEntryBulkCreateView(APIView):
    """
    POST /api/accounting/journal-entries/bulk/ -> {"entries": [...]}

    All entries are stored or none are. On success returns
    {"created_count": n, "created_ids": [...]} in input order; on failure
    the payload carries the zero-based "index" of the offending entry
    when one is to blame.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)
        require(actor, "journal.create")

        input_serializer = BulkJournalEntriesSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        raw_entries = input_serializer.validated_data["entries"]

        # Size first, then shape entry by entry; both stop at the first problem.
        try:
            validate_batch_size(len(raw_entries))
            entries = parse_journal_drafts(raw_entries)
        except AccountingError as exc:
            return failure_response(CommandResult.fail(exc))

        result = bulk_create_journal_entries(actor, entries)
        if not result.success:
            return failure_response(result)

        output_serializer = BulkJournalEntriesResultSerializer(result.data)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)


class JournalEntryDetailView(APIView):
    """
    GET /api/accounting/journal-entries/<pk>/ -> retrieve
    PATCH /api/accounting/journal-entries/<pk>/ -> update header fields
    DELETE /api/accounting/journal-entries/<pk>/ -> delete with its lines
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "journal.view")

        entry = get_object_or_404(_entries_with_lines(), pk=pk)
        return Response(JournalEntrySerializer(entry).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "journal.edit")

        input_serializer = JournalEntryHeaderSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_journal_entry_header(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        entry = _entries_with_lines().get(pk=pk)
        return Response(JournalEntrySerializer(entry).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "journal.delete")

        result = delete_journal_entry(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Transaction Views
# =============================================================================

class TransactionListCreateView(APIView):
    """
    GET /api/accounting/transactions/ -> list, newest first
    POST /api/accounting/transactions/ -> record Income or Expense
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        transactions = Transaction.objects.order_by("-occurred_on", "-id")
        return Response(TransactionSerializer(transactions, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)
        require(actor, "transactions.manage")

        input_serializer = TransactionCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_transaction(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TransactionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(APIView):
    """
    GET /api/accounting/transactions/<pk>/ -> retrieve
    PUT /api/accounting/transactions/<pk>/ -> replace details (type is fixed)
    DELETE /api/accounting/transactions/<pk>/ -> delete
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        txn = get_object_or_404(Transaction, pk=pk)
        return Response(TransactionSerializer(txn).data)

    def put(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "transactions.manage")

        input_serializer = TransactionUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_transaction(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TransactionSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "transactions.manage")

        result = delete_transaction(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Report Views
# =============================================================================

class TrialBalanceView(APIView):
    """
    GET /api/accounting/reports/trial-balance/?end=<datetime>

    Net debit/credit per account from journal lines up to ``end``.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.view")

        params = ReportRangeSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        return Response(trial_balance(as_of=params.validated_data["end"]))


class IncomeExpenseView(APIView):
    """GET /api/accounting/reports/income-expense/?start=&end="""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.view")

        params = ReportRangeSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        return Response(income_expense_summary(**params.validated_data))
