from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=100)),
                ("account_type", models.CharField(choices=[("ASSET", "Asset"), ("LIABILITY", "Liability"), ("EQUITY", "Equity"), ("REVENUE", "Revenue"), ("EXPENSE", "Expense")], default="ASSET", max_length=20)),
            ],
            options={
                "ordering": ["code", "name"],
                "constraints": [models.UniqueConstraint(fields=("code",), name="uniq_account_code")],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("occurred_on", models.DateTimeField()),
                ("description", models.CharField(max_length=200)),
                ("reference_no", models.CharField(blank=True, max_length=50, null=True)),
            ],
            options={
                "verbose_name_plural": "journal entries",
                "ordering": ["-occurred_on", "-id"],
                "indexes": [models.Index(fields=["occurred_on"], name="je_occurred_on_idx")],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("memo", models.CharField(blank=True, max_length=200, null=True)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="journal_lines", to="accounting.account")),
                ("entry", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="accounting.journalentry")),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("debit__gt", 0), ("credit__gt", 0), _negated=True), name="chk_line_not_both_debit_credit"),
                    models.CheckConstraint(condition=models.Q(("debit__exact", 0), ("credit__exact", 0), _negated=True), name="chk_line_not_both_zero"),
                    models.CheckConstraint(condition=models.Q(("debit__gte", 0), ("credit__gte", 0)), name="chk_line_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("kind", models.CharField(choices=[("INCOME", "Income"), ("EXPENSE", "Expense")], max_length=10)),
                ("occurred_on", models.DateTimeField()),
                ("description", models.CharField(max_length=200)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("category", models.CharField(blank=True, max_length=100, null=True)),
                ("reference_no", models.CharField(blank=True, max_length=50, null=True)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="accounting.account")),
            ],
            options={
                "ordering": ["-occurred_on", "-id"],
                "constraints": [models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="chk_transaction_amount_positive")],
            },
        ),
    ]
