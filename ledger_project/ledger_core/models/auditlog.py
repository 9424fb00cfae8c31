from django.conf import settings
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Audit / Event log ----------
class AuditLog(models.Model):  # Trail of every create / post done by the engine
    # Nullable because some actions might not belong to a specific company
    company = models.ForeignKey(
        Company,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
    )
    # Nullable when the action was automated (celery task, seed command)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # create, post
    action = models.CharField(max_length=50)
    # "JournalEntry", "CustomerInvoice", "Account", "Partner"
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    # Assigned numbers, totals ... stored as JSON
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
            models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
        ]

    def __str__(self):
        time = self.created_at
        return (f"[{time:%Y-%m-%d %H:%M}] {self.user} {self.action} "
                f"{self.object_type}({self.object_id})")
