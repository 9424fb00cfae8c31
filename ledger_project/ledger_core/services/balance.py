from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from ..exceptions import UnbalancedJournalError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int / str / Decimal to a 2-place Decimal. Floats go through str()."""
    if value is None or value == "":
        return ZERO
    try:
        return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


def compute_totals(pairs):
    """Sum an iterable of (debit, credit) pairs. Returns (total_debit, total_credit)."""
    total_debit = ZERO
    total_credit = ZERO
    for debit, credit in pairs:
        total_debit += to_money(debit)
        total_credit += to_money(credit)
    return total_debit, total_credit


def assert_balanced(pairs):
    """Raise UnbalancedJournalError unless debits equal credits exactly."""
    total_debit, total_credit = compute_totals(pairs)
    if total_debit != total_credit:
        raise UnbalancedJournalError(total_debit, total_credit)
    return total_debit, total_credit
