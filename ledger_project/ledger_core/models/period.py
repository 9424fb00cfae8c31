from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- FiscalPeriod (accounting period) ----------
class FiscalPeriod(models.Model):  # Time bucket transactions are grouped into
    """
    Recorded per company. Posting does not consult it yet:
    a closed period does not block new entries.
    """

    # Every company has its own independent calendar of periods
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="fiscal_periods"
    )

    # Human-readable label for the period, e.g. "2025-Q3" or "FY2025-01"
    name = models.CharField(max_length=50)

    start_date = models.DateField()
    end_date = models.DateField()

    is_closed = models.BooleanField(default=False)
    closed_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # for filtering open periods
        indexes = [
            models.Index(fields=["company", "start_date"], name="period_company_start_idx"),
            models.Index(fields=["company", "is_closed"], name="period_company_closed_idx"),
        ]

        # Prevent duplicate period names inside the same company
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_period_name"
            ),
        ]

        ordering = ("company", "start_date")

    def __str__(self):
        return f"{self.company.name} {self.name}"

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError("start_date must be before end_date")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
