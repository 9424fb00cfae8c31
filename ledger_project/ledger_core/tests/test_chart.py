from django.core.exceptions import ValidationError
from django.test import TestCase

from ledger_core.exceptions import ConflictError
from ledger_core.models import Company, Partner
from ledger_core.services.chart import (create_account, create_partner,
                                        list_accounts, list_partners)


class AccountSetupTests(TestCase):

    def setUp(self):
        self.company = Company.objects.create(name="Chart Co")

    def test_code_and_name_are_trimmed(self):
        account = create_account(self.company, "  1000 ", " Cash ", "ASSET")
        self.assertEqual((account.code, account.name), ("1000", "Cash"))

    def test_duplicate_code_is_a_conflict(self):
        create_account(self.company, "1000", "Cash", "ASSET")
        with self.assertRaises(ConflictError):
            create_account(self.company, "1000", "Petty cash", "ASSET")

    def test_same_code_is_fine_in_another_company(self):
        other = Company.objects.create(name="Other Co")
        create_account(self.company, "1000", "Cash", "ASSET")
        create_account(other, "1000", "Cash", "ASSET")

    def test_field_problems_are_aggregated(self):
        with self.assertRaises(ValidationError) as ctx:
            create_account(self.company, "x" * 21, "", "REVENUE")
        self.assertEqual(len(ctx.exception.messages), 3)

    def test_list_is_ordered_by_code(self):
        create_account(self.company, "4000", "Sales", "INCOME")
        create_account(self.company, "1000", "Cash", "ASSET")
        self.assertEqual([a.code for a in list_accounts(self.company)], ["1000", "4000"])


class PartnerSetupTests(TestCase):

    def setUp(self):
        self.company = Company.objects.create(name="Chart Co")

    def test_partner_without_flags_is_a_customer(self):
        partner = create_partner(self.company, "Acme")
        self.assertTrue(partner.is_customer)
        self.assertFalse(partner.is_vendor)

    def test_vendor_only(self):
        partner = create_partner(self.company, "Supplier", is_vendor=True)
        self.assertFalse(partner.is_customer)
        self.assertTrue(partner.is_vendor)

    def test_both_flags_false_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_partner(self.company, "Nobody", is_customer=False, is_vendor=False)

    def test_blank_contact_details_become_null(self):
        partner = create_partner(self.company, "Acme", email="  ", phone="")
        partner.refresh_from_db()
        self.assertIsNone(partner.email)
        self.assertIsNone(partner.phone)

    def test_duplicate_email_is_a_conflict(self):
        create_partner(self.company, "Acme", email="billing@acme.test")
        with self.assertRaises(ConflictError):
            create_partner(self.company, "Acme Again", email="billing@acme.test")

    def test_partners_without_email_do_not_clash(self):
        create_partner(self.company, "A")
        create_partner(self.company, "B")
        self.assertEqual(Partner.objects.for_company(self.company).count(), 2)

    def test_list_is_ordered_by_name(self):
        create_partner(self.company, "Zed")
        create_partner(self.company, "Alpha")
        self.assertEqual([p.name for p in list_partners(self.company)], ["Alpha", "Zed"])
