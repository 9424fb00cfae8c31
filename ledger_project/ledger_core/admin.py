from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from .exceptions import LedgerError
from .models import (Account, AuditLog, Company, CustomerInvoice, FiscalPeriod,
                     InvoiceLine, Journal, JournalEntry, JournalLine, Partner)
from .services.invoices import post_customer_invoice
from .services.journal_entries import post_journal_entry


def _error_text(exc):
    return "; ".join(getattr(exc, "messages", None) or [str(exc)])


# ---------- Read-only helpers ----------
class PostedReadOnlyMixin:
    """Posted documents are read-only and cannot be deleted from the admin."""

    def _is_locked(self, obj):
        return obj is not None and obj.status != "DRAFT"

    def get_readonly_fields(self, request, obj=None):
        if self._is_locked(obj):
            return [f.name for f in self.model._meta.fields]
        return super().get_readonly_fields(request, obj)

    def has_delete_permission(self, request, obj=None):
        if self._is_locked(obj):
            return False
        return super().has_delete_permission(request, obj)

    # bulk delete skips Model.delete(), so posted rows would slip through
    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop("delete_selected", None)
        return actions


class LockedInlineMixin:
    def _parent_locked(self, obj):
        return obj is not None and obj.status != "DRAFT"

    def has_add_permission(self, request, obj=None):
        return not self._parent_locked(obj) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return not self._parent_locked(obj) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return not self._parent_locked(obj) and super().has_delete_permission(request, obj)


# ---------- Actions ----------
@admin.action(description="Post selected journal entries")
def post_selected_entries(modeladmin, request, queryset):
    posted = 0
    for entry_id in queryset.filter(status=JournalEntry.DRAFT).values_list("pk", flat=True):
        try:
            post_journal_entry(entry_id, user=request.user)
            posted += 1
        except (ValidationError, LedgerError) as exc:
            modeladmin.message_user(
                request, f"Entry {entry_id}: {_error_text(exc)}", level=messages.ERROR)
    if posted:
        modeladmin.message_user(
            request, f"Posted {posted} journal entr{'y' if posted == 1 else 'ies'}.",
            level=messages.SUCCESS)


@admin.action(description="Post selected invoices")
def post_selected_invoices(modeladmin, request, queryset):
    posted = 0
    for invoice_id in queryset.filter(status=CustomerInvoice.DRAFT).values_list("pk", flat=True):
        try:
            post_customer_invoice(invoice_id, user=request.user)
            posted += 1
        except (ValidationError, LedgerError) as exc:
            modeladmin.message_user(
                request, f"Invoice {invoice_id}: {_error_text(exc)}", level=messages.ERROR)
    if posted:
        modeladmin.message_user(
            request, f"Posted {posted} invoice(s).", level=messages.SUCCESS)


# ---------- Company / chart ----------
@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "base_currency", "invoice_next_number", "created_at")
    search_fields = ("name",)
    # moved only by the numbering allocator
    readonly_fields = ("invoice_next_number",)


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "type", "company", "is_active")
    list_filter = ("company", "type", "is_active")
    search_fields = ("code", "name")
    ordering = ("company", "code")


@admin.register(Journal)
class JournalAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "type", "company", "next_number")
    list_filter = ("company", "type")
    readonly_fields = ("next_number",)


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "is_customer", "is_vendor", "company")
    list_filter = ("company", "is_customer", "is_vendor")
    search_fields = ("name", "email")


@admin.register(FiscalPeriod)
class FiscalPeriodAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "start_date", "end_date", "is_closed")
    list_filter = ("company", "is_closed")


# ---------- Journal entries ----------
class JournalLineInline(LockedInlineMixin, admin.TabularInline):
    model = JournalLine
    extra = 0
    fields = ("account", "partner", "label", "debit", "credit")


@admin.register(JournalEntry)
class JournalEntryAdmin(PostedReadOnlyMixin, admin.ModelAdmin):
    list_display = ("id", "number", "journal", "date", "status", "company")
    list_filter = ("company", "journal", "status")
    search_fields = ("number", "memo")
    inlines = [JournalLineInline]
    actions = [post_selected_entries]
    # the state machine owns these
    readonly_fields = ("number", "status", "posted_at", "posted_by")


# ---------- Customer invoices ----------
class InvoiceLineInline(LockedInlineMixin, admin.TabularInline):
    model = InvoiceLine
    extra = 0
    fields = ("description", "quantity", "unit_price", "line_total", "income_account")


@admin.register(CustomerInvoice)
class CustomerInvoiceAdmin(PostedReadOnlyMixin, admin.ModelAdmin):
    list_display = ("id", "number", "partner", "invoice_date", "total_amount",
                    "status", "company")
    list_filter = ("company", "status")
    search_fields = ("number", "partner__name")
    inlines = [InvoiceLineInline]
    actions = [post_selected_invoices]
    readonly_fields = ("number", "status", "currency", "total_amount",
                       "posted_at", "journal_entry")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "company", "user", "action", "object_type", "object_id")
    list_filter = ("company", "action", "object_type")

    # the trail is append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
