import logging
from celery import shared_task
from django.core.exceptions import ValidationError
from .exceptions import LedgerError

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def post_journal_entry_task(entry_id):
    # import services lazily to avoid circular imports at module import time
    from .services.journal_entries import post_journal_entry

    entry = post_journal_entry(entry_id)
    return entry.number


@shared_task
def post_customer_invoice_task(invoice_id):
    from .services.invoices import post_customer_invoice

    invoice, entry = post_customer_invoice(invoice_id)
    return {"invoice": invoice.number, "journal_entry": entry.number}


@shared_task
def post_draft_entries(company_id, journal_code):
    """
    Post every DRAFT entry of one journal, oldest first.
    Each entry gets its own transaction: one bad draft does not stop the batch.
    """
    from .models import JournalEntry
    from .services.journal_entries import post_journal_entry

    draft_ids = list(
        JournalEntry.objects.filter(
            company_id=company_id,
            journal__code=journal_code,
            status=JournalEntry.DRAFT,
        )
        .order_by("date", "id")
        .values_list("pk", flat=True)
    )

    posted, failed = [], []
    for entry_id in draft_ids:
        try:
            entry = post_journal_entry(entry_id)
        except (ValidationError, LedgerError) as exc:
            failed.append({"id": entry_id, "error": "; ".join(getattr(exc, "messages", [str(exc)]))})
            continue
        posted.append(entry.number)

    logger.info("Batch post %s company=%s: %d posted, %d failed",
                journal_code, company_id, len(posted), len(failed))
    return {"posted": posted, "failed": failed}
