from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company
from .partner import Partner

JOURNAL_TYPES = [
    ("GENERAL", "General"),
    ("SALES", "Sales"),
    ("PURCHASE", "Purchase"),
    ("BANK", "Bank"),
    ("CASH", "Cash"),
]

ENTRY_STATUS = [
    ("DRAFT", "Draft"),    # still editable, no number
    ("POSTED", "Posted"),  # numbered, immutable
]


# ---------- Journal (posting book) ----------
class Journal(models.Model):
    """
    Named book of entries ("GEN", "SAL") with its own numbering sequence.
    Entries posted through it are numbered <code>/<year>/<next_number>.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journals"
    )
    code = models.CharField(max_length=20)
    name = models.CharField(max_length=120)
    type = models.CharField(max_length=10, choices=JOURNAL_TYPES)

    # Only the numbering allocator moves it, always by exactly 1
    next_number = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("company", "code")
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_journal_code"
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"


# ---------- JournalEntry (Header) & JournalLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    DRAFT = "DRAFT"
    POSTED = "POSTED"

    # Multi-tenant: every entry belongs to a company
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journal_entries"
    )
    journal = models.ForeignKey(
        Journal, on_delete=models.CASCADE, related_name="entries"
    )

    date = models.DateField()
    # NULL while DRAFT, assigned exactly once when posted
    number = models.CharField(max_length=64, null=True, blank=True)
    status = models.CharField(
        max_length=10, choices=ENTRY_STATUS, default=DRAFT
    )
    memo = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    posted_at = models.DateTimeField(null=True, blank=True)
    # Track user who posted it
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        verbose_name_plural = "journal entries"
        # Speed up listing & filtering
        # (e.g. show all posted entries this month)
        indexes = [
            models.Index(fields=["company", "date"], name="je_company_date_idx"),
            models.Index(fields=["company", "status"], name="je_company_status_idx"),
        ]

        constraints = [
            # Within one company, each posted number is unique
            # Drafts (NULL number) are not constrained
            models.UniqueConstraint(
                fields=["company", "number"],
                condition=models.Q(number__isnull=False),
                name="uq_je_company_number",
            ),
            # A posted entry always carries its number
            models.CheckConstraint(
                condition=models.Q(status="DRAFT") | models.Q(number__isnull=False),
                name="je_posted_has_number",
            ),
        ]

    def __str__(self):
        return f"JE {self.number or self.pk} {self.date} [{self.status}]"

    # Aggregate all debit and credit amounts across entry's lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit"),
            total_credit=models.Sum("credit"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = (
                JournalEntry.objects.filter(pk=self.pk)
                .values("status", "number")
                .first()
            )
            if orig and orig["status"] == self.POSTED:
                # disallow toggling posted flag
                if self.status != self.POSTED:
                    raise ValidationError("Cannot unpost a posted journal entry")
                # the number is permanent
                if self.number != orig["number"]:
                    raise ValidationError(
                        "Cannot change the number of a posted journal entry")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Posted entries are part of the ledger forever
        if self.pk and JournalEntry.objects.filter(
            pk=self.pk, status=self.POSTED
        ).exists():
            raise ValidationError("Cannot delete a posted journal entry")
        return super().delete(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to a journal entry and to a GL account.
    Exactly one of debit / credit is > 0.
    """

    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    # Can't delete an account lines point to, unless the whole company goes
    account = models.ForeignKey(
        Account, on_delete=models.RESTRICT, related_name="journal_lines"
    )
    # Counterparty carried by invoice postings
    partner = models.ForeignKey(
        Partner,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="journal_lines",
    )

    label = models.TextField(null=True, blank=True)

    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ("id",)
        indexes = [
            models.Index(fields=["entry"], name="jl_entry_idx"),
            models.Index(fields=["account"], name="jl_account_idx"),
        ]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(debit__gte=0) & models.Q(credit__gte=0),
                name="jl_non_negative_amounts",
            ),
            # exactly one side carries the amount
            models.CheckConstraint(
                condition=(
                    (models.Q(debit__gt=0) & models.Q(credit=0)) |
                    (models.Q(debit=0) & models.Q(credit__gt=0))
                ),
                name="jl_debit_xor_credit",
            ),
        ]

    def __str__(self):
        return f"{self.entry_id} | {self.account.code} | D:{self.debit} C:{self.credit}"

    # Business logic validation:
    # - Debit/credit should always be non-negative
    # - Exactly one side is non-zero
    # - Prevent "cross-company" contamination
    def clean(self):
        if self.debit is None or self.credit is None:
            raise ValidationError("Debit and credit are required")
        if self.debit < 0 or self.credit < 0:
            raise ValidationError("Debit and credit must be >= 0")
        if self.debit > 0 and self.credit > 0:
            raise ValidationError(
                "JournalLine cannot have both debit and credit > 0")
        if self.debit == 0 and self.credit == 0:
            raise ValidationError(
                "JournalLine requires a non-0 amount on either debit or credit")

        if self.entry_id and self.account_id:
            company_id = (
                JournalEntry.objects.filter(pk=self.entry_id)
                .values_list("company_id", flat=True)
                .first()
            )
            if self.account.company_id != company_id:
                raise ValidationError(
                    "JournalLine.account must belong to the same company.")
            if self.partner_id and self.partner.company_id != company_id:
                raise ValidationError(
                    "JournalLine.partner must belong to the same company.")

        # Lines of a posted entry are frozen
        if self.entry_id and JournalEntry.objects.filter(
            pk=self.entry_id, status=JournalEntry.POSTED
        ).exists():
            if self.pk:
                raise ValidationError(
                    "Cannot modify JournalLine: parent JournalEntry is posted.")
            raise ValidationError(
                "Cannot add JournalLine: parent JournalEntry is posted.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Prevent deletion if parent entry is posted
        if self.entry_id and JournalEntry.objects.filter(
            pk=self.entry_id, status=JournalEntry.POSTED
        ).exists():
            raise ValidationError(
                "Cannot delete JournalLine: parent JournalEntry is posted.")
        return super().delete(*args, **kwargs)
