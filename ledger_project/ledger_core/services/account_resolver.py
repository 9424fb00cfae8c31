"""
Which account / journal an invoice posting uses.

There is no configured AR field on Company: the receivable account is found
by well-known codes first, then by name. Resolution hard-fails when the
chart is not set up, so nothing is ever posted to a guessed account.
"""

import logging
from ..exceptions import NotFoundError
from ..models import Account, Journal

logger = logging.getLogger(__name__)

SALES_JOURNAL_CODE = "SAL"

# Tried in this order; only ASSET accounts qualify
AR_ACCOUNT_CODES = ("1200", "110000", "12000", "1100")
AR_NAME_HINT = "receivable"


def get_sales_journal(company):
    journal = Journal.objects.for_company(company).filter(
        code=SALES_JOURNAL_CODE).first()
    if journal is None:
        raise NotFoundError(
            f"Sales Journal (code: {SALES_JOURNAL_CODE}) not found for this "
            f"company. Please create it first."
        )
    return journal


def get_accounts_receivable_account(company):
    assets = Account.objects.for_company(company).filter(type=Account.ASSET)

    by_code = {a.code: a for a in assets.filter(code__in=AR_ACCOUNT_CODES)}
    for code in AR_ACCOUNT_CODES:
        if code in by_code:
            return by_code[code]

    account = assets.filter(name__icontains=AR_NAME_HINT).order_by("code").first()
    if account is not None:
        logger.debug("AR account resolved by name for company=%s: %s",
                     company.pk, account.code)
        return account

    raise NotFoundError(
        "Accounts Receivable account not found. Please create an ASSET "
        "account with code 1200 or a name containing 'Receivable'."
    )


def resolve_account_codes(company, codes):
    """
    Map each code to its Account inside company.
    Raises one NotFoundError listing every code that does not resolve.
    """
    wanted = list(dict.fromkeys(c for c in codes if c))
    found = {
        a.code: a
        for a in Account.objects.for_company(company).filter(code__in=wanted)
    }
    missing = [c for c in wanted if c not in found]
    if missing:
        raise NotFoundError(
            f"Account(s) not found: {', '.join(missing)}", missing=missing)
    return found
