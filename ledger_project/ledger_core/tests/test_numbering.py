import datetime

import pytest
from django.db import connection, transaction
from django.db.transaction import TransactionManagementError
from django.test import TestCase

from ledger_core.models import Journal
from ledger_core.services.numbering import (allocate_invoice_number,
                                            allocate_journal_entry_number,
                                            format_document_number)

from .helpers import make_company


def test_format_pads_to_four_digits():
    assert format_document_number("GEN", 2024, 1) == "GEN/2024/0001"
    assert format_document_number("INV", 2025, 42) == "INV/2025/0042"
    # past 9999 the number simply grows
    assert format_document_number("SAL", 2025, 12345) == "SAL/2025/12345"


class NumberingAllocatorTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.gen = Journal.objects.get_by_code(self.company, "GEN")
        self.day = datetime.date(2024, 3, 15)

    def test_journal_numbers_are_sequential(self):
        with transaction.atomic():
            _, first = allocate_journal_entry_number(self.gen.pk, self.day)
            _, second = allocate_journal_entry_number(self.gen.pk, self.day)

        self.assertEqual(first, "GEN/2024/0001")
        self.assertEqual(second, "GEN/2024/0002")
        self.gen.refresh_from_db()
        self.assertEqual(self.gen.next_number, 3)

    def test_year_comes_from_document_date_and_counter_is_not_reset(self):
        with transaction.atomic():
            _, a = allocate_journal_entry_number(self.gen.pk, datetime.date(2024, 12, 31))
            _, b = allocate_journal_entry_number(self.gen.pk, datetime.date(2025, 1, 1))

        self.assertEqual(a, "GEN/2024/0001")
        self.assertEqual(b, "GEN/2025/0002")

    def test_invoice_numbers_use_company_counter(self):
        with transaction.atomic():
            _, number = allocate_invoice_number(self.company.pk, self.day)

        self.assertEqual(number, "INV/2024/0001")
        self.company.refresh_from_db()
        self.assertEqual(self.company.invoice_next_number, 2)

    def test_rollback_releases_the_number(self):
        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                allocate_journal_entry_number(self.gen.pk, self.day)
                raise RuntimeError("abort")

        self.gen.refresh_from_db()
        self.assertEqual(self.gen.next_number, 1)


@pytest.mark.django_db(transaction=True)
def test_allocating_outside_a_transaction_is_refused():
    if not connection.features.has_select_for_update:
        pytest.skip("backend has no SELECT ... FOR UPDATE")
    company = make_company()
    gen = Journal.objects.get_by_code(company, "GEN")

    with pytest.raises(TransactionManagementError):
        allocate_journal_entry_number(gen.pk, datetime.date(2024, 1, 1))
