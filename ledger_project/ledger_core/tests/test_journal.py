import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db.models.deletion import RestrictedError
from django.test import TestCase

from ledger_core.exceptions import (ConflictError, NotFoundError,
                                    UnbalancedJournalError)
from ledger_core.models import Account, AuditLog, Journal, JournalEntry, JournalLine
from ledger_core.services.journal_entries import (create_journal_entry,
                                                  get_journal_entry,
                                                  post_journal_entry)

from .helpers import balanced_lines, make_company

DAY = datetime.date(2024, 3, 15)


""" Success tests """
class JournalEntryPostingTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = get_user_model().objects.create_user(username="clerk", password="pw")

    def test_create_persists_a_numberless_draft(self):
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines(), memo="Sale")

        entry.refresh_from_db()
        self.assertEqual(entry.status, JournalEntry.DRAFT)
        self.assertIsNone(entry.number)
        self.assertEqual(entry.memo, "Sale")
        self.assertEqual(entry.lines.count(), 2)
        self.assertEqual(entry.compute_totals(), (Decimal("100.00"), Decimal("100.00")))

    def test_label_length_is_not_limited(self):
        lines = balanced_lines()
        lines[0]["label"] = "x" * 1000
        entry = create_journal_entry(self.company, "GEN", DAY, lines)

        post_journal_entry(entry.pk)
        self.assertEqual(len(entry.lines.first().label), 1000)

    def test_drafts_may_be_unbalanced(self):
        lines = balanced_lines()
        lines[1]["credit"] = "90"
        entry = create_journal_entry(self.company, "GEN", DAY, lines)
        self.assertFalse(entry.is_balanced())

    def test_post_assigns_first_number_of_the_journal(self):
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines())

        posted = post_journal_entry(entry.pk, user=self.user)

        self.assertEqual(posted.number, "GEN/2024/0001")
        self.assertEqual(posted.status, JournalEntry.POSTED)
        self.assertIsNotNone(posted.posted_at)
        self.assertEqual(posted.posted_by, self.user)
        self.assertTrue(
            AuditLog.objects.filter(
                object_type="JournalEntry", object_id=str(entry.pk), action="post"
            ).exists()
        )

    def test_two_posts_get_distinct_sequential_numbers(self):
        first = create_journal_entry(self.company, "GEN", DAY, balanced_lines())
        second = create_journal_entry(self.company, "GEN", DAY, balanced_lines("25.50"))

        self.assertEqual(post_journal_entry(first.pk).number, "GEN/2024/0001")
        self.assertEqual(post_journal_entry(second.pk).number, "GEN/2024/0002")

    def test_get_returns_entry_with_lines(self):
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines())
        fetched = get_journal_entry(entry.pk, company=self.company)
        self.assertEqual(fetched.journal.code, "GEN")
        self.assertEqual([line.account.code for line in fetched.lines.all()], ["1000", "4000"])


""" Failure tests """
class JournalEntryRejectionTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.gen = Journal.objects.get_by_code(self.company, "GEN")

    def test_unbalanced_post_names_both_totals_and_changes_nothing(self):
        lines = balanced_lines()
        lines[1]["credit"] = "90"
        entry = create_journal_entry(self.company, "GEN", DAY, lines)

        with self.assertRaises(UnbalancedJournalError) as ctx:
            post_journal_entry(entry.pk)

        self.assertIn("100.00", ctx.exception.messages[0])
        self.assertIn("90.00", ctx.exception.messages[0])
        entry.refresh_from_db()
        self.gen.refresh_from_db()
        self.assertEqual(entry.status, JournalEntry.DRAFT)
        self.assertIsNone(entry.number)
        self.assertEqual(self.gen.next_number, 1)

    def test_posting_twice_is_a_conflict(self):
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines())
        post_journal_entry(entry.pk)

        with self.assertRaises(ConflictError) as ctx:
            post_journal_entry(entry.pk)

        self.assertIn("status: POSTED", str(ctx.exception))
        entry.refresh_from_db()
        self.gen.refresh_from_db()
        self.assertEqual(entry.number, "GEN/2024/0001")
        self.assertEqual(self.gen.next_number, 2)

    def test_missing_entry_is_not_found(self):
        with self.assertRaises(NotFoundError):
            post_journal_entry(999999)
        with self.assertRaises(NotFoundError):
            get_journal_entry(999999)

    def test_create_requires_two_lines(self):
        with self.assertRaises(ValidationError) as ctx:
            create_journal_entry(self.company, "GEN", DAY, balanced_lines()[:1])
        self.assertIn("Journal entry must have at least 2 lines", ctx.exception.messages)

    def test_line_errors_are_aggregated(self):
        lines = [
            {"account_code": "", "debit": "10", "credit": "0"},
            {"account_code": "1000", "debit": "-5", "credit": "0"},
            {"account_code": "4000", "debit": "10", "credit": "10"},
            {"account_code": "4000", "debit": "0", "credit": "0"},
        ]
        with self.assertRaises(ValidationError) as ctx:
            create_journal_entry(self.company, "GEN", DAY, lines)

        messages = ctx.exception.messages
        self.assertEqual(len(messages), 4)
        self.assertIn("lines[0].account_code is required", messages)
        self.assertIn("lines[1].debit must be >= 0", messages)
        self.assertIn("lines[2] cannot have both debit and credit > 0", messages)
        self.assertIn("lines[3] must have a non-zero debit or credit", messages)

    def test_unknown_journal_is_not_found(self):
        with self.assertRaises(NotFoundError):
            create_journal_entry(self.company, "XXX", DAY, balanced_lines())

    def test_every_missing_account_code_is_reported(self):
        lines = balanced_lines()
        lines[0]["account_code"] = "9998"
        lines[1]["account_code"] = "9999"

        with self.assertRaises(NotFoundError) as ctx:
            create_journal_entry(self.company, "GEN", DAY, lines)

        self.assertEqual(ctx.exception.missing, ["9998", "9999"])
        self.assertEqual(str(ctx.exception), "Account(s) not found: 9998, 9999")
        self.assertFalse(JournalEntry.objects.exists())

    def test_post_rejects_entry_that_lost_a_line(self):
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines())
        entry.lines.last().delete()

        with self.assertRaises(ValidationError) as ctx:
            post_journal_entry(entry.pk)
        self.assertIn("Journal entry must have at least 2 lines", ctx.exception.messages)


""" Immutability tests """
class PostedEntryImmutabilityTests(TestCase):

    def setUp(self):
        self.company = make_company()
        entry = create_journal_entry(self.company, "GEN", DAY, balanced_lines())
        self.entry = post_journal_entry(entry.pk)

    def test_posted_entry_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.entry.delete()

    def test_posted_entry_cannot_be_unposted(self):
        self.entry.status = JournalEntry.DRAFT
        with self.assertRaises(ValidationError):
            self.entry.save()

    def test_posted_number_is_permanent(self):
        self.entry.number = "GEN/2024/9999"
        with self.assertRaises(ValidationError):
            self.entry.save()

    def test_lines_of_posted_entry_are_frozen(self):
        line = self.entry.lines.first()
        line.label = "changed"
        with self.assertRaises(ValidationError):
            line.save()
        with self.assertRaises(ValidationError):
            line.delete()
        with self.assertRaises(ValidationError):
            JournalLine.objects.create(
                entry=self.entry,
                account=Account.objects.get_by_code(self.company, "1000"),
                debit=Decimal("1.00"),
            )

    def test_account_with_lines_cannot_be_deleted(self):
        with self.assertRaises(RestrictedError):
            Account.objects.get_by_code(self.company, "1000").delete()


class JournalLineValidationTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.other = make_company(name="Other Co")
        self.entry = JournalEntry.objects.create(
            company=self.company,
            journal=Journal.objects.get_by_code(self.company, "GEN"),
            date=DAY,
        )

    def test_line_cannot_carry_both_sides(self):
        with self.assertRaises(ValidationError):
            JournalLine.objects.create(
                entry=self.entry,
                account=Account.objects.get_by_code(self.company, "1000"),
                debit=Decimal("5.00"),
                credit=Decimal("5.00"),
            )

    def test_line_cannot_use_another_company_account(self):
        with self.assertRaises(ValidationError):
            JournalLine.objects.create(
                entry=self.entry,
                account=Account.objects.get_by_code(self.other, "1000"),
                debit=Decimal("5.00"),
            )
