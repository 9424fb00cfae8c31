"""
Journal entry state machine: DRAFT -> POSTED, nothing else.

Drafts may be unbalanced; the double-entry rule is enforced when the entry
is posted, under the journal's numbering lock.
"""

import logging
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from ..exceptions import ConflictError, NotFoundError
from ..models import Journal, JournalEntry, JournalLine
from .account_resolver import resolve_account_codes
from .audit_helper import log_action
from .balance import assert_balanced, to_money
from .numbering import allocate_journal_entry_number

logger = logging.getLogger(__name__)

MIN_ENTRY_LINES = 2


def _real_user(user):
    return user if user is not None and getattr(user, "pk", None) else None


def _entry_line_errors(lines):
    """Every problem found in the raw line dicts, in one list."""
    if not isinstance(lines, (list, tuple)) or len(lines) < MIN_ENTRY_LINES:
        return [f"Journal entry must have at least {MIN_ENTRY_LINES} lines"]

    errors = []
    for index, line in enumerate(lines):
        if not (str(line.get("account_code") or "")).strip():
            errors.append(f"lines[{index}].account_code is required")

        amounts = {}
        for side in ("debit", "credit"):
            raw = line.get(side)
            if raw is None:
                errors.append(f"lines[{index}].{side} is required and must be a number")
                continue
            try:
                amounts[side] = to_money(raw)
            except ValueError:
                errors.append(f"lines[{index}].{side} is required and must be a number")
                continue
            if amounts[side] < 0:
                errors.append(f"lines[{index}].{side} must be >= 0")

        if len(amounts) == 2:
            debit, credit = amounts["debit"], amounts["credit"]
            if debit > 0 and credit > 0:
                errors.append(f"lines[{index}] cannot have both debit and credit > 0")
            elif debit == 0 and credit == 0:
                errors.append(f"lines[{index}] must have a non-zero debit or credit")
    return errors


def create_journal_entry(company, journal_code, date, lines, memo=None, user=None):
    """
    Persist a DRAFT entry (number stays NULL) with its lines.
    lines: [{"account_code", "label"?, "debit", "credit"}, ...]
    """
    errors = _entry_line_errors(lines)
    if errors:
        raise ValidationError(errors)

    journal_code = (journal_code or "").strip()
    journal = Journal.objects.for_company(company).filter(code=journal_code).first()
    if journal is None:
        raise NotFoundError(f'Journal with code "{journal_code}" not found for company')

    codes = [str(line["account_code"]).strip() for line in lines]
    accounts = resolve_account_codes(company, codes)

    with transaction.atomic():
        entry = JournalEntry.objects.create(
            company=company,
            journal=journal,
            date=date,
            memo=memo or None,
            status=JournalEntry.DRAFT,
        )
        for code, line in zip(codes, lines):
            JournalLine.objects.create(
                entry=entry,
                account=accounts[code],
                label=line.get("label") or None,
                debit=to_money(line["debit"]),
                credit=to_money(line["credit"]),
            )
        log_action(
            action="create",
            instance=entry,
            user=_real_user(user),
            changes={"journal": journal.code, "lines": len(lines)},
        )

    logger.info("Created draft journal entry id=%s journal=%s company=%s",
                entry.pk, journal.code, company.pk)
    return entry


def post_journal_entry(entry_id, user=None):
    """
    DRAFT -> POSTED. Allocates the journal number and stamps posted_at.
    Raises NotFoundError, ConflictError, ValidationError or
    UnbalancedJournalError; on any of them nothing is written.
    """
    journal_id = (
        JournalEntry.objects.filter(pk=entry_id)
        .values_list("journal_id", flat=True)
        .first()
    )
    if journal_id is None:
        raise NotFoundError(f"Journal entry with id {entry_id} not found")

    try:
        with transaction.atomic():
            # The numbering scope is locked before anything else
            Journal.objects.select_for_update().get(pk=journal_id)
            entry = JournalEntry.objects.select_for_update().get(pk=entry_id)

            if entry.status != JournalEntry.DRAFT:
                raise ConflictError(
                    f"Journal entry is already posted (status: {entry.status})")

            pairs = list(entry.lines.values_list("debit", "credit"))
            if len(pairs) < MIN_ENTRY_LINES:
                raise ValidationError(
                    f"Journal entry must have at least {MIN_ENTRY_LINES} lines")
            total_debit, _ = assert_balanced(pairs)

            _, number = allocate_journal_entry_number(entry.journal_id, entry.date)

            entry.number = number
            entry.status = JournalEntry.POSTED
            entry.posted_at = timezone.now()
            entry.posted_by = _real_user(user)
            entry.save(update_fields=["number", "status", "posted_at", "posted_by"])

            log_action(
                action="post",
                instance=entry,
                user=entry.posted_by,
                changes={"number": number, "total": str(total_debit)},
            )
    except IntegrityError as exc:
        logger.error("Duplicate number while posting journal entry id=%s", entry_id)
        raise ConflictError(
            "Failed to post journal entry: duplicate entry number detected") from exc
    except (ValidationError, ConflictError) as exc:
        logger.warning("Journal entry id=%s not posted: %s", entry_id, exc)
        raise

    logger.info("Posted journal entry id=%s as %s", entry.pk, entry.number)
    return entry


def get_journal_entry(entry_id, company=None):
    qs = JournalEntry.objects.select_related("journal", "company").prefetch_related(
        "lines__account", "lines__partner")
    if company is not None:
        qs = qs.for_company(company)
    entry = qs.filter(pk=entry_id).first()
    if entry is None:
        raise NotFoundError(f"Journal entry with id {entry_id} not found")
    return entry
