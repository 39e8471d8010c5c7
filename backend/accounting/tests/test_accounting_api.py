# accounting/tests/test_accounting_api.py
"""
HTTP surface of the accounting app: role gating, status codes and
response shapes.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from accounting.models import Account, JournalEntry, Transaction

ACCOUNTS_URL = "/api/accounting/accounts/"
ENTRIES_URL = "/api/accounting/journal-entries/"
BULK_URL = "/api/accounting/journal-entries/bulk/"
TRANSACTIONS_URL = "/api/accounting/transactions/"


def entry_payload(cash, revenue, amount="100.00", **overrides):
    payload = {
        "occurred_on": "2026-01-15T10:00:00Z",
        "description": "Cash sale",
        "lines": [
            {"account_id": cash.pk, "debit": amount, "credit": "0"},
            {"account_id": revenue.pk, "debit": "0", "credit": amount},
        ],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Role gating
# =============================================================================

@pytest.mark.django_db
class TestRoleGating:
    def test_anonymous_gets_401(self, anon_client):
        assert anon_client.get(ACCOUNTS_URL).status_code == 401

    def test_registered_user_cannot_read(self, registered_client):
        assert registered_client.get(ACCOUNTS_URL).status_code == 403
        assert registered_client.get(ENTRIES_URL).status_code == 403

    def test_viewer_reads_but_cannot_write(self, viewer_client, cash, revenue):
        assert viewer_client.get(ACCOUNTS_URL).status_code == 200
        assert viewer_client.get(ENTRIES_URL).status_code == 200
        assert viewer_client.get(TRANSACTIONS_URL).status_code == 200

        response = viewer_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json")
        assert response.status_code == 403
        assert JournalEntry.objects.count() == 0

    def test_viewer_denied_before_body_is_checked(self, viewer_client):
        response = viewer_client.post(BULK_URL, {"entries": "nope"}, format="json")
        assert response.status_code == 403

    def test_bookkeeper_can_write(self, bookkeeper_client, cash, revenue):
        response = bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json")
        assert response.status_code == 201

    def test_admin_can_write(self, admin_client):
        response = admin_client.post(ACCOUNTS_URL, {"code": "1100", "name": "Bank"}, format="json")
        assert response.status_code == 201


# =============================================================================
# Accounts
# =============================================================================

@pytest.mark.django_db
class TestAccountEndpoints:
    def test_create_trims_and_defaults_type(self, bookkeeper_client):
        response = bookkeeper_client.post(
            ACCOUNTS_URL, {"code": " 1100 ", "name": " Bank "}, format="json"
        )

        assert response.status_code == 201
        assert response.data["code"] == "1100"
        assert response.data["name"] == "Bank"
        assert response.data["account_type"] == "ASSET"

    def test_list_is_ordered_by_code(self, viewer_client, rent, cash, revenue):
        codes = [row["code"] for row in viewer_client.get(ACCOUNTS_URL).data]
        assert codes == ["1000", "4000", "6000"]

    def test_duplicate_code_is_409(self, bookkeeper_client, cash):
        response = bookkeeper_client.post(
            ACCOUNTS_URL, {"code": "1000", "name": "Other"}, format="json"
        )

        assert response.status_code == 409
        assert response.data["code"] == "DUPLICATE_KEY"

    def test_missing_name_is_400(self, bookkeeper_client):
        response = bookkeeper_client.post(ACCOUNTS_URL, {"code": "1100"}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "MISSING_FIELD"
        assert response.data["detail"] == "Name is required."

    def test_update(self, bookkeeper_client, cash):
        response = bookkeeper_client.put(
            f"{ACCOUNTS_URL}{cash.pk}/",
            {"code": "1001", "name": "Petty cash", "account_type": "asset"},
            format="json",
        )

        assert response.status_code == 200
        cash.refresh_from_db()
        assert (cash.code, cash.name) == ("1001", "Petty cash")

    def test_unknown_account_is_404(self, viewer_client, bookkeeper_client):
        assert viewer_client.get(f"{ACCOUNTS_URL}999999/").status_code == 404
        response = bookkeeper_client.put(
            f"{ACCOUNTS_URL}999999/", {"code": "1", "name": "x"}, format="json"
        )
        assert response.status_code == 404
        assert response.data["code"] == "NOT_FOUND"

    def test_delete_account_in_use_is_409(self, bookkeeper_client, cash, revenue):
        bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json")

        response = bookkeeper_client.delete(f"{ACCOUNTS_URL}{cash.pk}/")

        assert response.status_code == 409
        assert response.data["code"] == "ACCOUNT_IN_USE"
        assert Account.objects.filter(pk=cash.pk).exists()

    def test_delete_unused_account(self, bookkeeper_client, rent):
        assert bookkeeper_client.delete(f"{ACCOUNTS_URL}{rent.pk}/").status_code == 204
        assert not Account.objects.filter(pk=rent.pk).exists()


# =============================================================================
# Journal entries
# =============================================================================

@pytest.mark.django_db
class TestJournalEntryEndpoints:
    def test_create_returns_entry_with_lines(self, bookkeeper_client, cash, revenue):
        response = bookkeeper_client.post(
            ENTRIES_URL, entry_payload(cash, revenue, reference_no="INV-1"), format="json"
        )

        assert response.status_code == 201
        body = response.data
        assert body["reference_no"] == "INV-1"
        assert Decimal(body["total_debit"]) == Decimal("100.00")
        assert Decimal(body["total_credit"]) == Decimal("100.00")
        assert [line["account_code"] for line in body["lines"]] == ["1000", "4000"]

    def test_unbalanced_entry_is_400(self, bookkeeper_client, cash, revenue):
        payload = entry_payload(cash, revenue)
        payload["lines"][1]["credit"] = "99.99"

        response = bookkeeper_client.post(ENTRIES_URL, payload, format="json")

        assert response.status_code == 400
        assert response.data == {
            "detail": "Journal entry is not balanced.",
            "code": "UNBALANCED_ENTRY",
        }

    def test_list_orders_newest_first_then_id(self, viewer_client, bookkeeper_client, cash, revenue):
        older = "2026-01-01T09:00:00Z"
        newer = "2026-02-01T09:00:00Z"
        for occurred_on in (older, newer, newer):
            bookkeeper_client.post(
                ENTRIES_URL, entry_payload(cash, revenue, occurred_on=occurred_on), format="json"
            )

        rows = viewer_client.get(ENTRIES_URL).data

        ids = [row["id"] for row in rows]
        first_new, second_new, old = ids
        assert first_new > second_new
        assert JournalEntry.objects.get(pk=old).occurred_on == datetime(2026, 1, 1, 9, tzinfo=timezone.utc)
        for row in rows:
            line_ids = [line["id"] for line in row["lines"]]
            assert line_ids == sorted(line_ids)

    def test_patch_updates_header_only(self, bookkeeper_client, cash, revenue):
        created = bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json").data

        response = bookkeeper_client.patch(
            f"{ENTRIES_URL}{created['id']}/", {"description": "Corrected"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["description"] == "Corrected"
        assert response.data["occurred_on"] == created["occurred_on"]
        assert response.data["updated_at"] is not None
        assert len(response.data["lines"]) == 2

    def test_patch_blank_description_is_400(self, bookkeeper_client, cash, revenue):
        created = bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json").data

        response = bookkeeper_client.patch(
            f"{ENTRIES_URL}{created['id']}/", {"description": "  "}, format="json"
        )

        assert response.status_code == 400
        assert response.data["code"] == "MISSING_FIELD"

    def test_delete(self, bookkeeper_client, cash, revenue):
        created = bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json").data

        assert bookkeeper_client.delete(f"{ENTRIES_URL}{created['id']}/").status_code == 204
        assert bookkeeper_client.get(f"{ENTRIES_URL}{created['id']}/").status_code == 404

    def test_viewer_cannot_delete(self, viewer_client, bookkeeper_client, cash, revenue):
        created = bookkeeper_client.post(ENTRIES_URL, entry_payload(cash, revenue), format="json").data
        assert viewer_client.delete(f"{ENTRIES_URL}{created['id']}/").status_code == 403


@pytest.mark.django_db
class TestBulkEndpoint:
    def test_bulk_success(self, bookkeeper_client, cash, revenue):
        entries = [entry_payload(cash, revenue, description=f"Sale {i}") for i in range(3)]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 201
        assert response.data["created_count"] == 3
        assert list(
            JournalEntry.objects.filter(pk__in=response.data["created_ids"])
            .order_by("id").values_list("description", flat=True)
        ) == ["Sale 0", "Sale 1", "Sale 2"]

    def test_bulk_failure_reports_index(self, bookkeeper_client, cash, revenue):
        bad = entry_payload(cash, revenue)
        bad["lines"][0]["credit"] = "100.00"
        entries = [entry_payload(cash, revenue), entry_payload(cash, revenue), bad]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "MUTUALLY_EXCLUSIVE_VIOLATION"
        assert response.data["index"] == 2
        assert response.data["detail"].startswith("Entry 2: ")
        assert JournalEntry.objects.count() == 0

    def test_empty_bulk_is_400(self, bookkeeper_client):
        response = bookkeeper_client.post(BULK_URL, {"entries": []}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "OUT_OF_RANGE"

    def test_only_first_malformed_entry_is_reported(self, bookkeeper_client, cash, revenue):
        not_a_number = entry_payload(cash, revenue)
        not_a_number["lines"][0]["debit"] = "abc"
        too_precise = entry_payload(cash, revenue)
        too_precise["lines"][0]["debit"] = "10.001"
        entries = [entry_payload(cash, revenue), not_a_number, too_precise]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert set(response.data) == {"detail", "code", "index"}
        assert response.data["code"] == "OUT_OF_RANGE"
        assert response.data["index"] == 1
        assert response.data["detail"].startswith("Entry 1: lines[0].debit: ")
        assert JournalEntry.objects.count() == 0

    def test_non_object_entry_is_reported_by_index(self, bookkeeper_client, cash, revenue):
        entries = [entry_payload(cash, revenue), "nope"]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert response.data["index"] == 1

    def test_sub_cent_amounts_are_rejected(self, bookkeeper_client, cash, revenue):
        entries = [entry_payload(cash, revenue, amount="10.005")]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert response.data["index"] == 0
        assert JournalEntry.objects.count() == 0

    def test_size_limit_follows_setting(self, settings, bookkeeper_client, cash, revenue):
        settings.JOURNAL_BULK_MAX_ENTRIES = 2
        malformed = entry_payload(cash, revenue)
        malformed["lines"] = "nope"
        entries = [entry_payload(cash, revenue), malformed, entry_payload(cash, revenue)]

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert response.data["detail"] == "A batch may contain at most 2 journal entries."
        assert "index" not in response.data

    def test_large_limit_is_not_capped_by_parser(self, settings, bookkeeper_client, cash, revenue):
        settings.JOURNAL_BULK_MAX_ENTRIES = 6000
        entries = [entry_payload(cash, revenue) for _ in range(5001)]
        entries[-1]["lines"][1]["credit"] = "1.00"

        response = bookkeeper_client.post(BULK_URL, {"entries": entries}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "UNBALANCED_ENTRY"
        assert response.data["index"] == 5000


# =============================================================================
# Transactions
# =============================================================================

@pytest.mark.django_db
class TestTransactionEndpoints:
    def _payload(self, account, transaction_type="Expense", amount="45.50", **overrides):
        payload = {
            "account_id": account.pk,
            "transaction_type": transaction_type,
            "occurred_on": "2026-03-01T08:30:00Z",
            "description": "Office rent",
            "amount": amount,
            "category": "Rent",
        }
        payload.update(overrides)
        return payload

    def test_create_expense_has_negative_signed_amount(self, bookkeeper_client, rent):
        response = bookkeeper_client.post(TRANSACTIONS_URL, self._payload(rent), format="json")

        assert response.status_code == 201
        assert response.data["transaction_type"] == "Expense"
        assert Decimal(response.data["amount"]) == Decimal("45.50")
        assert Decimal(response.data["signed_amount"]) == Decimal("-45.50")

    def test_invalid_type_is_400(self, bookkeeper_client, rent):
        response = bookkeeper_client.post(
            TRANSACTIONS_URL, self._payload(rent, transaction_type="Transfer"), format="json"
        )

        assert response.status_code == 400
        assert response.data["code"] == "OUT_OF_RANGE"

    def test_zero_amount_is_400(self, bookkeeper_client, rent):
        response = bookkeeper_client.post(
            TRANSACTIONS_URL, self._payload(rent, amount="0"), format="json"
        )
        assert response.status_code == 400
        assert Transaction.objects.count() == 0

    def test_update_keeps_type(self, bookkeeper_client, revenue):
        created = bookkeeper_client.post(
            TRANSACTIONS_URL, self._payload(revenue, "Income", description="Consulting"), format="json"
        ).data

        payload = self._payload(revenue, amount="80.00", description="Consulting fee")
        payload.pop("transaction_type")
        response = bookkeeper_client.put(f"{TRANSACTIONS_URL}{created['id']}/", payload, format="json")

        assert response.status_code == 200
        assert response.data["transaction_type"] == "Income"
        assert Decimal(response.data["signed_amount"]) == Decimal("80.00")

    def test_list_newest_first(self, viewer_client, bookkeeper_client, rent):
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for days in (0, 2, 1):
            bookkeeper_client.post(
                TRANSACTIONS_URL,
                self._payload(rent, occurred_on=(start + timedelta(days=days)).isoformat()),
                format="json",
            )

        rows = viewer_client.get(TRANSACTIONS_URL).data
        stamps = [row["occurred_on"] for row in rows]
        assert stamps == sorted(stamps, reverse=True)

    def test_delete(self, bookkeeper_client, rent):
        created = bookkeeper_client.post(TRANSACTIONS_URL, self._payload(rent), format="json").data

        assert bookkeeper_client.delete(f"{TRANSACTIONS_URL}{created['id']}/").status_code == 204
        assert bookkeeper_client.delete(f"{TRANSACTIONS_URL}{created['id']}/").status_code == 404
