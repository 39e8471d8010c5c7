# accounting/admin.py
"""
Django admin configuration for accounting models.

The admin is for viewing only. Mutations go through the command layer
(accounting/commands.py) so every validation rule runs first.
"""

from django.contrib import admin

from .models import Account, JournalEntry, JournalLine, Transaction


class ReadOnlyModelAdmin(admin.ModelAdmin):
    """Base admin class that blocks add, change and delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    readonly_fields = ["account", "debit", "credit", "memo"]
    fields = ["account", "debit", "credit", "memo"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Account)
class AccountAdmin(ReadOnlyModelAdmin):
    list_display = ["code", "name", "account_type", "created_at"]
    list_filter = ["account_type"]
    search_fields = ["code", "name"]
    ordering = ["code", "name"]


@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyModelAdmin):
    list_display = ["id", "occurred_on", "description", "reference_no", "created_at"]
    search_fields = ["description", "reference_no"]
    date_hierarchy = "occurred_on"
    inlines = [JournalLineInline]


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyModelAdmin):
    list_display = ["id", "occurred_on", "kind", "account", "amount", "category"]
    list_filter = ["kind", "category"]
    search_fields = ["description", "reference_no", "category"]
    date_hierarchy = "occurred_on"
