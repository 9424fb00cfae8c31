from django.core.exceptions import ValidationError
from django.db import models


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Tenant / Organization"""
    # Store company's full display name
    name = models.CharField(max_length=200)

    # All invoices copy this code at creation time
    base_currency = models.CharField(max_length=3, default="USD")

    # Numbering source for customer invoices (INV/<year>/<NNNN>)
    # Only the numbering allocator moves it, always by exactly 1
    invoice_next_number = models.PositiveIntegerField(default=1)

    # Store timestamp when the record is first created
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"
        # "first company" = oldest one
        ordering = ("created_at", "id")

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Company name is required")
        self.base_currency = (self.base_currency or "").strip().upper()
        if len(self.base_currency) != 3:
            raise ValidationError("base_currency must be a 3-letter ISO code")
