from django.core.exceptions import ValidationError


class LedgerError(Exception):
    """Base class for ledger failures that are not input validation."""
    pass


class NotFoundError(LedgerError):
    """Raised when a referenced entity does not exist or is out of scope."""

    def __init__(self, message, missing=None):
        super().__init__(message)
        # codes that could not be resolved (all of them, not just the first)
        self.missing = list(missing or [])


class ConflictError(LedgerError):
    """Raised on a state-machine violation or a uniqueness clash in the store."""
    pass


class UnbalancedJournalError(ValidationError):
    """Raised when a set of lines fails the double-entry balance check."""

    def __init__(self, total_debit, total_credit, message=None):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            message
            or f"Journal entry is unbalanced. Debit total: {total_debit}, "
               f"Credit total: {total_credit}"
        )
