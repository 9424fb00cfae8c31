from ledger_core.models import Account, Company, Journal, Partner


def make_company(name="Test Co", currency="USD", with_sales=True, with_ar=True):
    """Company with GEN (and SAL) journals, a small chart and one customer."""
    company = Company.objects.create(name=name, base_currency=currency)

    Journal.objects.create(company=company, code="GEN", name="General Journal", type="GENERAL")
    if with_sales:
        Journal.objects.create(company=company, code="SAL", name="Sales Journal", type="SALES")

    Account.objects.create(company=company, code="1000", name="Cash", type=Account.ASSET)
    if with_ar:
        Account.objects.create(
            company=company, code="1200", name="Accounts Receivable", type=Account.ASSET)
    Account.objects.create(company=company, code="4000", name="Sales Revenue", type=Account.INCOME)
    Account.objects.create(company=company, code="5000", name="Office Expense", type=Account.EXPENSE)

    Partner.objects.create(company=company, name="Walk-in Customer", is_customer=True)
    return company


def customer_of(company):
    return Partner.objects.for_company(company).get(name="Walk-in Customer")


def balanced_lines(amount="100.00"):
    return [
        {"account_code": "1000", "label": "cash in", "debit": amount, "credit": "0"},
        {"account_code": "4000", "label": "revenue", "debit": "0", "credit": amount},
    ]
