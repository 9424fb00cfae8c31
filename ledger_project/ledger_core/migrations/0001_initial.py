import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


ACCOUNT_TYPES = [
    ("ASSET", "Asset"),
    ("LIABILITY", "Liability"),
    ("EQUITY", "Equity"),
    ("INCOME", "Income"),
    ("EXPENSE", "Expense"),
]
JOURNAL_TYPES = [
    ("GENERAL", "General"),
    ("SALES", "Sales"),
    ("PURCHASE", "Purchase"),
    ("BANK", "Bank"),
    ("CASH", "Cash"),
]
ENTRY_STATUS = [("DRAFT", "Draft"), ("POSTED", "Posted")]
INV_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("POSTED", "Posted"),
    ("PAID", "Paid"),
    ("CANCELLED", "Cancelled"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("base_currency", models.CharField(default="USD", max_length=3)),
                ("invoice_next_number", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "companies",
                "ordering": ("created_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=120)),
                ("type", models.CharField(choices=ACCOUNT_TYPES, max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="accounts", to="ledger_core.company")),
            ],
            options={
                "ordering": ("company", "code"),
                "indexes": [models.Index(fields=["company", "type"], name="account_company_type_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_account_code"),
                    models.CheckConstraint(condition=models.Q(("code", ""), _negated=True), name="chk_account_code_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Journal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=120)),
                ("type", models.CharField(choices=JOURNAL_TYPES, max_length=10)),
                ("next_number", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="journals", to="ledger_core.company")),
            ],
            options={
                "ordering": ("company", "code"),
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_journal_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Partner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=64, null=True)),
                ("is_customer", models.BooleanField(default=False)),
                ("is_vendor", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="partners", to="ledger_core.company")),
            ],
            options={
                "ordering": ("company", "name"),
                "indexes": [models.Index(fields=["company", "name"], name="partner_company_name_idx")],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("email__isnull", False)), fields=("company", "email"), name="uq_company_partner_email"),
                    models.CheckConstraint(condition=models.Q(("is_customer", True), ("is_vendor", True), _connector="OR"), name="partner_is_customer_or_vendor"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("number", models.CharField(blank=True, max_length=64, null=True)),
                ("status", models.CharField(choices=ENTRY_STATUS, default="DRAFT", max_length=10)),
                ("memo", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="journal_entries", to="ledger_core.company")),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="entries", to="ledger_core.journal")),
                ("posted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "journal entries",
                "indexes": [
                    models.Index(fields=["company", "date"], name="je_company_date_idx"),
                    models.Index(fields=["company", "status"], name="je_company_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("number__isnull", False)), fields=("company", "number"), name="uq_je_company_number"),
                    models.CheckConstraint(condition=models.Q(("status", "DRAFT"), ("number__isnull", False), _connector="OR"), name="je_posted_has_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("label", models.TextField(blank=True, null=True)),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name="journal_lines", to="ledger_core.account")),
                ("entry", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="ledger_core.journalentry")),
                ("partner", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="journal_lines", to="ledger_core.partner")),
            ],
            options={
                "ordering": ("id",),
                "indexes": [
                    models.Index(fields=["entry"], name="jl_entry_idx"),
                    models.Index(fields=["account"], name="jl_account_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("debit__gte", 0), ("credit__gte", 0)), name="jl_non_negative_amounts"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("debit__gt", 0), ("credit", 0)),
                            models.Q(("debit", 0), ("credit__gt", 0)),
                            _connector="OR",
                        ),
                        name="jl_debit_xor_credit",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CustomerInvoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_date", models.DateField()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("number", models.CharField(blank=True, max_length=64, null=True)),
                ("status", models.CharField(choices=INV_STATUS_CHOICES, default="DRAFT", max_length=10)),
                ("memo", models.TextField(blank=True, null=True)),
                ("currency", models.CharField(max_length=3)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="customer_invoices", to="ledger_core.company")),
                ("partner", models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name="customer_invoices", to="ledger_core.partner")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="customer_invoice", to="ledger_core.journalentry")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "invoice_date"], name="inv_company_date_idx"),
                    models.Index(fields=["company", "partner"], name="inv_company_partner_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("number__isnull", False)), fields=("company", "number"), name="uq_invoice_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.TextField()),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("1"), max_digits=18)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=18)),
                ("line_total", models.DecimalField(decimal_places=2, max_digits=18)),
                ("income_account", models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name="invoice_lines", to="ledger_core.account")),
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="ledger_core.customerinvoice")),
            ],
            options={
                "ordering": ("id",),
                "indexes": [
                    models.Index(fields=["invoice"], name="invl_invoice_idx"),
                    models.Index(fields=["income_account"], name="invl_income_account_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0), ("unit_price__gte", 0)), name="invl_positive_quantity_non_negative_price"),
                ],
            },
        ),
        migrations.CreateModel(
            name="FiscalPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("is_closed", models.BooleanField(default=False)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="fiscal_periods", to="ledger_core.company")),
            ],
            options={
                "ordering": ("company", "start_date"),
                "indexes": [
                    models.Index(fields=["company", "start_date"], name="period_company_start_idx"),
                    models.Index(fields=["company", "is_closed"], name="period_company_closed_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_period_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="audit_logs", to="ledger_core.company")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
                    models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
                ],
            },
        ),
    ]
