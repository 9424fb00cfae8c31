from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from ledger_core.models import Account, Company, Journal, Partner

DEFAULT_JOURNALS = [
    ("GEN", "General Journal", "GENERAL"),
    ("SAL", "Sales Journal", "SALES"),
    ("PUR", "Purchase Journal", "PURCHASE"),
    ("BNK", "Bank Journal", "BANK"),
]

DEFAULT_ACCOUNTS = [
    ("1000", "Cash", Account.ASSET),
    ("1100", "Bank", Account.ASSET),
    ("1200", "Accounts Receivable", Account.ASSET),
    ("2000", "Accounts Payable", Account.LIABILITY),
    ("4000", "Sales Revenue", Account.INCOME),
    ("5000", "Office Expense", Account.EXPENSE),
]

# (name, is_customer, is_vendor)
DEFAULT_PARTNERS = [
    ("Walk-in Customer", True, False),
    ("Default Vendor", False, True),
]


class Command(BaseCommand):
    help = (
        "Create (or complete) a company with the default journals, "
        "chart of accounts and partners. Safe to run more than once."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",
            default="Demo Company",
            help="Name of the company to create or complete.",
        )
        parser.add_argument(
            "--currency",
            default="USD",
            help="Base currency (ISO code) for a newly created company.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        company_name = options["company_name"].strip()
        currency = options["currency"].strip().upper()

        company = Company.objects.filter(name=company_name).first()
        created = company is None
        if created:
            company = Company(name=company_name, base_currency=currency)
            try:
                company.full_clean()
            except ValidationError as e:
                raise CommandError("; ".join(e.messages))
            company.save()
        self.stdout.write(
            f"{'Created' if created else 'Found'} company {company.name} (id={company.pk})")

        for code, name, journal_type in DEFAULT_JOURNALS:
            Journal.objects.get_or_create(
                company=company, code=code,
                defaults={"name": name, "type": journal_type},
            )

        for code, name, account_type in DEFAULT_ACCOUNTS:
            # Account.save() runs full_clean, get_or_create goes through it
            Account.objects.get_or_create(
                company=company, code=code,
                defaults={"name": name, "type": account_type},
            )

        for name, is_customer, is_vendor in DEFAULT_PARTNERS:
            Partner.objects.get_or_create(
                company=company, name=name,
                defaults={"is_customer": is_customer, "is_vendor": is_vendor},
            )

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(DEFAULT_JOURNALS)} journals, {len(DEFAULT_ACCOUNTS)} accounts "
            f"and {len(DEFAULT_PARTNERS)} partners for {company.name}"
        ))
