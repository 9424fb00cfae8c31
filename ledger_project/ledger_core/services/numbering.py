"""
Sequential document numbers: <PREFIX>/<YEAR>/<NNNN>.

The counter row (a Journal for entries, the Company for invoices) is
re-read with SELECT ... FOR UPDATE, so the caller must already be inside
transaction.atomic(). Concurrent posters of the same scope serialize on
that row lock and see the incremented counter; an aborted transaction
rolls the counter back with everything else.
"""

from django.db.models import F
from ..models import Company, Journal

INVOICE_PREFIX = "INV"


def format_document_number(prefix, year, sequence):
    # never reset per year, the year only decorates the number
    return f"{prefix}/{year}/{sequence:04d}"


def allocate_journal_entry_number(journal_id, on_date):
    """Reserve the next entry number of a journal. Returns (journal, number)."""
    journal = Journal.objects.select_for_update().get(pk=journal_id)
    number = format_document_number(journal.code, on_date.year, journal.next_number)

    Journal.objects.filter(pk=journal.pk).update(next_number=F("next_number") + 1)
    journal.next_number += 1
    return journal, number


def allocate_invoice_number(company_id, on_date):
    """Reserve the next customer invoice number of a company. Returns (company, number)."""
    company = Company.objects.select_for_update().get(pk=company_id)
    number = format_document_number(
        INVOICE_PREFIX, on_date.year, company.invoice_next_number)

    Company.objects.filter(pk=company.pk).update(
        invoice_next_number=F("invoice_next_number") + 1)
    company.invoice_next_number += 1
    return company, number
