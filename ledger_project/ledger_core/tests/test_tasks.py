import datetime

import pytest

from ledger_core.exceptions import ConflictError
from ledger_core.models import JournalEntry
from ledger_core.services.invoices import create_customer_invoice
from ledger_core.services.journal_entries import create_journal_entry
from ledger_core.tasks import (post_customer_invoice_task, post_draft_entries,
                               post_journal_entry_task)

from .helpers import balanced_lines, customer_of, make_company

DAY = datetime.date(2024, 3, 15)


@pytest.mark.django_db
def test_post_journal_entry_task_returns_number():
    company = make_company()
    entry = create_journal_entry(company, "GEN", DAY, balanced_lines())

    assert post_journal_entry_task(entry.pk) == "GEN/2024/0001"


@pytest.mark.django_db
def test_post_journal_entry_task_propagates_conflict():
    company = make_company()
    entry = create_journal_entry(company, "GEN", DAY, balanced_lines())
    post_journal_entry_task(entry.pk)

    with pytest.raises(ConflictError):
        post_journal_entry_task(entry.pk)


@pytest.mark.django_db
def test_post_customer_invoice_task_returns_both_numbers():
    company = make_company()
    invoice = create_customer_invoice(
        company, customer_of(company).pk, DAY,
        [{"description": "Work", "quantity": "1", "unit_price": "10",
          "income_account_code": "4000"}],
    )

    result = post_customer_invoice_task.apply(args=(invoice.pk,)).get()

    assert result == {"invoice": "INV/2024/0001", "journal_entry": "SAL/2024/0001"}


@pytest.mark.django_db
def test_post_draft_entries_keeps_going_past_failures():
    company = make_company()
    good = create_journal_entry(company, "GEN", DAY, balanced_lines())
    bad_lines = balanced_lines()
    bad_lines[1]["credit"] = "1"
    bad = create_journal_entry(company, "GEN", DAY, bad_lines)
    later = create_journal_entry(company, "GEN", DAY, balanced_lines("5"))

    result = post_draft_entries(company.pk, "GEN")

    assert result["posted"] == ["GEN/2024/0001", "GEN/2024/0002"]
    assert [f["id"] for f in result["failed"]] == [bad.pk]
    assert "unbalanced" in result["failed"][0]["error"]
    assert JournalEntry.objects.get(pk=good.pk).status == JournalEntry.POSTED
    assert JournalEntry.objects.get(pk=later.pk).status == JournalEntry.POSTED
    assert JournalEntry.objects.get(pk=bad.pk).status == JournalEntry.DRAFT
