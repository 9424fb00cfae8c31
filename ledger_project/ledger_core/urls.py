from django.urls import path
from . import views

app_name = "ledger_core"

urlpatterns = [
    path("health/", views.health_view, name="health"),
    path("accounts/", views.accounts_view, name="accounts"),
    path("partners/", views.partners_view, name="partners"),
    path("journal-entries/", views.journal_entries_view, name="journal-entries"),
    path("journal-entries/<int:entry_id>/",
         views.journal_entry_detail_view, name="journal-entry-detail"),
    path("journal-entries/<int:entry_id>/post/",
         views.journal_entry_post_view, name="journal-entry-post"),
    path("customer-invoices/", views.customer_invoices_view, name="customer-invoices"),
    path("customer-invoices/<int:invoice_id>/",
         views.customer_invoice_detail_view, name="customer-invoice-detail"),
    path("customer-invoices/<int:invoice_id>/post/",
         views.customer_invoice_post_view, name="customer-invoice-post"),
]
