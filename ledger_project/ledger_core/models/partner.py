from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Partner ----------
# Counterparty: customer (AR side) and/or vendor (AP side)
class Partner(models.Model):
    # Multi-tenant: every partner belongs to a single company
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="partners"
    )

    # Legal or trade name
    name = models.CharField(max_length=255)

    # Optional contact details
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=64, null=True, blank=True)

    # A partner can be both
    is_customer = models.BooleanField(default=False)
    is_vendor = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("company", "name")
        indexes = [
            models.Index(fields=["company", "name"], name="partner_company_name_idx"),
        ]

        constraints = [
            # Within one company an email identifies one partner
            # Partners without email are not constrained
            models.UniqueConstraint(
                fields=["company", "email"],
                condition=models.Q(email__isnull=False),
                name="uq_company_partner_email",
            ),
            models.CheckConstraint(
                condition=models.Q(is_customer=True) | models.Q(is_vendor=True),
                name="partner_is_customer_or_vendor",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Partner name is required")

        # Blank contact fields are stored as NULL so the email
        # uniqueness rule only applies to real addresses
        self.email = (self.email or "").strip() or None
        self.phone = (self.phone or "").strip() or None

        if not (self.is_customer or self.is_vendor):
            raise ValidationError(
                "At least one of is_customer or is_vendor must be true")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
