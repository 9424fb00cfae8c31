from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company
from .journal import JournalEntry
from .partner import Partner

INV_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("POSTED", "Posted"),
    ("PAID", "Paid"),
    ("CANCELLED", "Cancelled"),
]


class CustomerInvoice(models.Model):  # Represents a customer invoice
    """
    Commercial document that, once posted, produces exactly one JournalEntry.

    Workflow:
        DRAFT = not yet finalized, no number.
        POSTED = numbered, linked to its journal entry.
        PAID / CANCELLED = reachable states, not driven by the posting engine.
    """

    DRAFT = "DRAFT"
    POSTED = "POSTED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    # Invoice belongs to one company (multi-tenant)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="customer_invoices"
    )
    # prevent deleting a partner who has an invoice (company cascade still works)
    partner = models.ForeignKey(
        Partner, on_delete=models.RESTRICT, related_name="customer_invoices"
    )

    invoice_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)

    # INV/<year>/<NNNN>, NULL until posted
    number = models.CharField(max_length=64, null=True, blank=True)
    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default=DRAFT
    )
    memo = models.TextField(null=True, blank=True)

    # Copied from company.base_currency at creation
    currency = models.CharField(max_length=3)
    # Sum of all line totals, computed once at creation
    total_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Set exactly once, when posted
    journal_entry = models.OneToOneField(
        JournalEntry,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="customer_invoice",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    posted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "invoice_date"], name="inv_company_date_idx"),
            models.Index(fields=["company", "partner"], name="inv_company_partner_idx"),
        ]

        constraints = [
            # Within one company, each invoice number must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "number"],
                condition=models.Q(number__isnull=False),
                name="uq_invoice_company_number",
            ),
        ]

    def __str__(self):
        # If no invoice number, fall back to database ID
        return f"Inv {self.number or self.pk}"

    def compute_lines_total(self):
        """Sum of persisted line totals (independent of total_amount)."""
        return sum(
            (line.line_total for line in self.lines.all()), Decimal("0.00"))

    def clean(self):
        # Ensure partner chosen belongs to the same company
        if self.partner_id and self.company_id:
            if self.partner.company_id != self.company_id:
                raise ValidationError(
                    "Partner must belong to the same company.")
        if self.due_date and self.invoice_date and self.due_date < self.invoice_date:
            raise ValidationError("due_date cannot be before invoice_date")

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = (
                CustomerInvoice.objects.filter(pk=self.pk)
                .values("status", "number", "journal_entry_id")
                .first()
            )
            if orig and orig["status"] != self.DRAFT:
                # PAID / CANCELLED are reachable, DRAFT is not
                if self.status == self.DRAFT:
                    raise ValidationError("Cannot revert a posted invoice to draft")
                if self.number != orig["number"]:
                    raise ValidationError(
                        "Cannot change the number of a posted invoice")
                if self.journal_entry_id != orig["journal_entry_id"]:
                    raise ValidationError(
                        "Cannot relink the journal entry of a posted invoice")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Only drafts can be thrown away
        if self.pk and CustomerInvoice.objects.filter(pk=self.pk).exclude(
            status=self.DRAFT
        ).exists():
            raise ValidationError("Only draft invoices can be deleted.")
        return super().delete(*args, **kwargs)


class InvoiceLine(
    models.Model
):  # Each line describes a product/service sold on the invoice

    invoice = models.ForeignKey(
        CustomerInvoice, on_delete=models.CASCADE, related_name="lines")

    description = models.TextField()

    # Core pricing logic: quantity × unit_price = line_total
    quantity = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("1")
    )
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=2
    )
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2
    )

    # Revenue GL account credited when the invoice is posted
    # You can't delete an account if lines still point to it
    income_account = models.ForeignKey(
        Account,
        on_delete=models.RESTRICT,
        related_name="invoice_lines",
    )

    class Meta:
        ordering = ("id",)
        indexes = [
            models.Index(fields=["invoice"], name="invl_invoice_idx"),
            models.Index(fields=["income_account"], name="invl_income_account_idx"),
        ]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0) &
                models.Q(unit_price__gte=0),
                name="invl_positive_quantity_non_negative_price",
            ),
        ]

    def __str__(self):
        return f"{self.description} × {self.quantity} = {self.line_total}"
