from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        return self.filter(company=company)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):

    def get_queryset(self):  # every model gets TenantQuerySet (so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company):
        return self.get_queryset().for_company(company)

    def get_by_code(self, company, code):
        """Company-scoped lookup by human-entered code (accounts, journals)."""
        return self.get_queryset().get(company=company, code=code)
