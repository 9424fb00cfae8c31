from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company

# Choice Lists
# Used in Account model to classify general ledger accounts
ACCOUNT_TYPES = [
    ("ASSET", "Asset"),
    ("LIABILITY", "Liability"),
    ("EQUITY", "Equity"),
    ("INCOME", "Income"),
    ("EXPENSE", "Expense"),
]

ACCOUNT_CODE_MAX_LENGTH = 20
ACCOUNT_NAME_MAX_LENGTH = 120


class Account(models.Model):
    """
    Ledger account entry in the Chart of Accounts.
    - code is unique per company
    - type determines reporting: BS vs P&L
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    # Each account belongs to one company
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="accounts",
    )
    # Human-entered code used to reference the account ("1000", "4000")
    code = models.CharField(max_length=ACCOUNT_CODE_MAX_LENGTH)
    name = models.CharField(max_length=ACCOUNT_NAME_MAX_LENGTH)

    # One of the 5 basic accounting types
    type = models.CharField(max_length=10, choices=ACCOUNT_TYPES)

    # "soft deactivate" accounts without deleting history
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("company", "code")
        indexes = [
            models.Index(fields=["company", "type"], name="account_company_type_idx"),
        ]

        """ Each company defines its own chart of accounts.
               Codes repeat across companies but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            ),
            models.CheckConstraint(
                condition=~models.Q(code=""),
                name="chk_account_code_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
