import datetime

from django.test import TestCase

from ledger_core.exceptions import NotFoundError
from ledger_core.models import Account, JournalEntry
from ledger_core.services.invoices import create_customer_invoice
from ledger_core.services.journal_entries import (create_journal_entry,
                                                  get_journal_entry,
                                                  post_journal_entry)

from .helpers import balanced_lines, customer_of, make_company

DAY = datetime.date(2024, 3, 15)


class TenantIsolationTests(TestCase):

    def setUp(self):
        self.company_a = make_company(name="Company A")
        self.company_b = make_company(name="Company B")

    def test_for_company_returns_only_that_company_objects(self):
        self.assertListEqual(
            list(Account.objects.for_company(self.company_a)
                 .order_by().values_list("company_id", flat=True).distinct()),
            [self.company_a.pk],
        )

    def test_account_codes_resolve_inside_the_company_only(self):
        Account.objects.create(
            company=self.company_b, code="7777", name="B only", type=Account.EXPENSE)
        lines = balanced_lines()
        lines[0]["account_code"] = "7777"
        with self.assertRaises(NotFoundError):
            create_journal_entry(self.company_a, "GEN", DAY, lines)

    def test_numbering_is_per_company(self):
        a = create_journal_entry(self.company_a, "GEN", DAY, balanced_lines())
        b = create_journal_entry(self.company_b, "GEN", DAY, balanced_lines())
        # same number in two companies is allowed
        self.assertEqual(post_journal_entry(a.pk).number, "GEN/2024/0001")
        self.assertEqual(post_journal_entry(b.pk).number, "GEN/2024/0001")

    def test_scoped_get_hides_other_company_entry(self):
        entry = create_journal_entry(self.company_b, "GEN", DAY, balanced_lines())
        with self.assertRaises(NotFoundError):
            get_journal_entry(entry.pk, company=self.company_a)
        with self.assertRaises(JournalEntry.DoesNotExist):
            JournalEntry.objects.for_company(self.company_a).get(pk=entry.pk)

    def test_invoice_cannot_bill_other_company_partner(self):
        with self.assertRaises(NotFoundError):
            create_customer_invoice(
                self.company_a, customer_of(self.company_b).pk, DAY,
                [{"description": "x", "quantity": "1", "unit_price": "1",
                  "income_account_code": "4000"}],
            )
