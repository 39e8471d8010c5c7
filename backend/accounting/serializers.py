# accounting/serializers.py
"""
Serializers for accounting API.

Note: These serializers are used for:
1. Input shape (types, JSON structure)
2. Output formatting

Input serializers are deliberately lenient about presence and ranges:
those rules live in accounting.validators and run inside the commands,
so every API caller gets the same error messages and codes.
"""

from rest_framework import serializers
from rest_framework.settings import api_settings

from .exceptions import OutOfRangeError
from .models import Account, JournalEntry, JournalLine, Transaction


# =============================================================================
# Account Serializers
# =============================================================================

class AccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = ["id", "code", "name", "account_type", "created_at", "updated_at"]
        read_only_fields = fields


class AccountInputSerializer(serializers.Serializer):
    """Create and full update (PUT) share the same shape."""
    code = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    name = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    account_type = serializers.CharField(required=False, allow_blank=True, default=Account.AccountType.ASSET)


# =============================================================================
# Journal Entry Serializers
# =============================================================================

class JournalLineSerializer(serializers.ModelSerializer):
    """Serializer for individual journal lines."""
    account_id = serializers.IntegerField(read_only=True)
    account_code = serializers.CharField(source="account.code", read_only=True)

    class Meta:
        model = JournalLine
        fields = ["id", "account_id", "account_code", "debit", "credit", "memo"]
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    """
    Full journal entry serializer with nested lines.
    Used for retrieval and display.
    """
    lines = JournalLineSerializer(many=True, read_only=True)
    total_debit = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    total_credit = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = JournalEntry
        fields = [
            "id", "occurred_on", "description", "reference_no",
            "created_at", "updated_at",
            "lines", "total_debit", "total_credit",
        ]
        read_only_fields = fields


class JournalLineInputSerializer(serializers.Serializer):
    """
    Serializer for journal line input.

    Standardized contract: ALWAYS use account_id (integer).
    """
    account_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    debit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    credit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    memo = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class JournalEntryInputSerializer(serializers.Serializer):
    occurred_on = serializers.DateTimeField(required=False, allow_null=True, default=None)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    reference_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    lines = JournalLineInputSerializer(many=True, required=False, default=list)


class JournalEntryHeaderSerializer(serializers.Serializer):
    """PATCH body: any subset of the header fields."""
    occurred_on = serializers.DateTimeField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    reference_no = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BulkJournalEntriesSerializer(serializers.Serializer):
    # Items stay unparsed here; parse_journal_drafts checks them one by one
    # so only the first bad entry is reported.
    entries = serializers.ListField(allow_empty=True)


def describe_first_error(detail, path=()):
    """
    Flatten the first message out of a nested serializer error, e.g.
    "lines[0].debit: A valid number is required."
    """
    if isinstance(detail, list) and detail and all(isinstance(item, str) for item in detail):
        label = ""
        for part in path:
            if isinstance(part, int):
                label += f"[{part}]"
            elif part != api_settings.NON_FIELD_ERRORS_KEY:
                label += f".{part}" if label else part
        return f"{label}: {detail[0]}" if label else str(detail[0])

    items = detail.items() if isinstance(detail, dict) else enumerate(detail)
    for key, value in items:
        if value:
            return describe_first_error(value, path + (key,))
    return "Invalid input."


def parse_journal_drafts(raw_entries) -> list:
    """
    Shape-check each raw entry in input order.

    The first malformed entry raises OutOfRangeError tagged with its
    zero-based index; later entries are not looked at.
    """
    drafts = []
    for index, raw in enumerate(raw_entries):
        serializer = JournalEntryInputSerializer(data=raw)
        if not serializer.is_valid():
            raise OutOfRangeError(describe_first_error(serializer.errors)).at(index)
        data = serializer.validated_data
        drafts.append({**data, "lines": [dict(line) for line in data.get("lines", [])]})
    return drafts


class BulkJournalEntriesResultSerializer(serializers.Serializer):
    created_count = serializers.IntegerField()
    created_ids = serializers.ListField(child=serializers.IntegerField())


# =============================================================================
# Transaction Serializers
# =============================================================================

class TransactionSerializer(serializers.ModelSerializer):
    account_id = serializers.IntegerField(read_only=True)
    transaction_type = serializers.CharField(read_only=True)
    signed_amount = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id", "account_id", "transaction_type", "occurred_on", "description",
            "amount", "signed_amount", "category", "reference_no",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class TransactionUpdateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    occurred_on = serializers.DateTimeField(required=False, allow_null=True, default=None)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    amount = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, allow_null=True, default=None)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    reference_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class TransactionCreateSerializer(TransactionUpdateSerializer):
    transaction_type = serializers.CharField(required=False, allow_blank=True, default="")


# =============================================================================
# Report Serializers
# =============================================================================

class ReportRangeSerializer(serializers.Serializer):
    start = serializers.DateTimeField(required=False, allow_null=True, default=None)
    end = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        if attrs["start"] and attrs["end"] and attrs["start"] > attrs["end"]:
            raise serializers.ValidationError("start must not be after end.")
        return attrs
