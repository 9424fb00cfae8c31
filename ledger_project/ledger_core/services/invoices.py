"""
Customer invoice workflow.

Posting an invoice is one transaction: company counter, invoice row and
Sales journal counter are locked in that order, then the invoice number is
allocated, a born-POSTED journal entry is written (AR debit, one revenue
credit per line) and linked back to the invoice.
"""

import logging
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from ..exceptions import ConflictError, NotFoundError
from ..models import (Account, Company, CustomerInvoice, InvoiceLine,
                      JournalEntry, JournalLine, Partner)
from .account_resolver import get_accounts_receivable_account, get_sales_journal
from .audit_helper import log_action
from .balance import ZERO, assert_balanced, to_money
from .numbering import allocate_invoice_number, allocate_journal_entry_number

logger = logging.getLogger(__name__)


def _real_user(user):
    return user if user is not None and getattr(user, "pk", None) else None


def _invoice_line_errors(index, line):
    errors = []
    if not str(line.get("description") or "").strip():
        errors.append(f"lines[{index}].description is required")

    try:
        quantity = Decimal(str(line.get("quantity")))
        if not quantity.is_finite():
            raise ValueError
        if quantity <= 0:
            errors.append(f"lines[{index}].quantity must be greater than 0")
    except (ArithmeticError, ValueError):
        errors.append(f"lines[{index}].quantity must be a number")

    try:
        unit_price = Decimal(str(line.get("unit_price")))
        if not unit_price.is_finite():
            raise ValueError
        if unit_price < 0:
            errors.append(f"lines[{index}].unit_price must be non-negative")
    except (ArithmeticError, ValueError):
        errors.append(f"lines[{index}].unit_price must be a number")

    if not str(line.get("income_account_code") or "").strip():
        errors.append(f"lines[{index}].income_account_code is required")
    return errors


def create_customer_invoice(company, partner_id, invoice_date, lines,
                            due_date=None, memo=None, user=None):
    """
    Persist a DRAFT invoice in the company's base currency.
    lines: [{"description", "quantity", "unit_price", "income_account_code"}, ...]
    line_total and total_amount are computed here, once.
    """
    if not lines:
        raise ValidationError(
            "lines is required and must contain at least one line item")
    if due_date and due_date < invoice_date:
        raise ValidationError("due_date cannot be before invoice_date")

    partner = Partner.objects.for_company(company).filter(pk=partner_id).first()
    if partner is None:
        raise NotFoundError(f"Partner with id {partner_id} not found for this company")

    prepared = []
    for index, line in enumerate(lines):
        errors = _invoice_line_errors(index, line)
        if errors:
            raise ValidationError(
                f"Validation error for line {index + 1}: {'; '.join(errors)}")

        code = str(line["income_account_code"]).strip()
        account = Account.objects.for_company(company).filter(code=code).first()
        if account is None:
            raise NotFoundError(
                f'Account with code "{code}" not found for this company (line {index + 1})',
                missing=[code],
            )

        try:
            quantity = to_money(line["quantity"])
            unit_price = to_money(line["unit_price"])
            line_total = to_money(quantity * unit_price)
        except ValueError:
            raise ValidationError(
                f"Validation error for line {index + 1}: amount is out of range")
        if quantity <= 0:
            raise ValidationError(
                f"Validation error for line {index + 1}: "
                f"lines[{index}].quantity must be greater than 0")
        invoice_line = InvoiceLine(
            description=str(line["description"]).strip(),
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total,
            income_account=account,
        )
        # amounts must fit the stored precision; bulk_create skips full_clean
        try:
            invoice_line.full_clean(exclude=["invoice"])
        except ValidationError as e:
            raise ValidationError(
                f"Validation error for line {index + 1}: {'; '.join(e.messages)}")
        prepared.append(invoice_line)

    total_amount = sum((p.line_total for p in prepared), ZERO)

    invoice = CustomerInvoice(
        company=company,
        partner=partner,
        invoice_date=invoice_date,
        due_date=due_date,
        memo=memo or None,
        currency=company.base_currency,
        total_amount=total_amount,
        status=CustomerInvoice.DRAFT,
    )
    try:
        invoice.full_clean()
    except ValidationError as e:
        raise ValidationError(f"Invalid invoice: {'; '.join(e.messages)}")

    with transaction.atomic():
        invoice.save()
        for invoice_line in prepared:
            invoice_line.invoice = invoice
        InvoiceLine.objects.bulk_create(prepared)
        log_action(
            action="create",
            instance=invoice,
            user=_real_user(user),
            changes={"total_amount": str(total_amount), "lines": len(prepared)},
        )

    logger.info("Created draft invoice id=%s total=%s company=%s",
                invoice.pk, total_amount, company.pk)
    return invoice


def _check_postable(invoice):
    if invoice.status != CustomerInvoice.DRAFT:
        raise ConflictError(
            f"Invoice cannot be posted. Current status: {invoice.status}. "
            f"Only DRAFT invoices can be posted."
        )
    lines = list(invoice.lines.all())
    if not lines:
        raise ValidationError("Invoice must have at least one line item to be posted")
    if invoice.total_amount <= 0:
        raise ValidationError("Invoice total amount must be greater than 0")
    return lines


def post_customer_invoice(invoice_id, user=None):
    """
    DRAFT -> POSTED. Returns (invoice, journal_entry).
    Any failure leaves invoice, entry and both counters untouched.
    """
    company_id = (
        CustomerInvoice.objects.filter(pk=invoice_id)
        .values_list("company_id", flat=True)
        .first()
    )
    if company_id is None:
        raise NotFoundError(f"Customer invoice with id {invoice_id} not found")

    user = _real_user(user)
    try:
        with transaction.atomic():
            # Fixed lock order: company, invoice, then the Sales journal
            company = Company.objects.select_for_update().get(pk=company_id)
            invoice = (
                CustomerInvoice.objects.select_for_update()
                .get(pk=invoice_id)
            )
            lines = _check_postable(invoice)

            sales_journal = get_sales_journal(company)
            ar_account = get_accounts_receivable_account(company)

            # AR debit must equal the revenue credits, from persisted line totals
            assert_balanced(
                [(invoice.total_amount, ZERO), (ZERO, invoice.compute_lines_total())])

            _, invoice_number = allocate_invoice_number(company.pk, invoice.invoice_date)
            _, entry_number = allocate_journal_entry_number(
                sales_journal.pk, invoice.invoice_date)

            now = timezone.now()
            entry = JournalEntry.objects.create(
                company=company,
                journal=sales_journal,
                date=invoice.invoice_date,
                number=entry_number,
                status=JournalEntry.POSTED,
                memo=invoice.memo or f"Invoice {invoice_number}",
                posted_at=now,
                posted_by=user,
            )

            # Born posted: rows go in directly, JournalLine.save() refuses
            # to add lines to a posted entry
            journal_lines = [
                JournalLine(
                    entry=entry,
                    account=ar_account,
                    partner_id=invoice.partner_id,
                    label=f"Invoice {invoice_number}",
                    debit=invoice.total_amount,
                    credit=ZERO,
                )
            ]
            journal_lines += [
                JournalLine(
                    entry=entry,
                    account_id=line.income_account_id,
                    partner_id=invoice.partner_id,
                    label=line.description,
                    debit=ZERO,
                    credit=line.line_total,
                )
                # free lines carry no amount to credit
                for line in lines if line.line_total > 0
            ]
            JournalLine.objects.bulk_create(journal_lines)

            invoice.status = CustomerInvoice.POSTED
            invoice.number = invoice_number
            invoice.posted_at = now
            invoice.journal_entry = entry
            invoice.save(update_fields=["status", "number", "posted_at", "journal_entry"])

            log_action(
                action="post",
                instance=entry,
                user=user,
                changes={"number": entry_number, "source": f"CustomerInvoice:{invoice.pk}"},
            )
            log_action(
                action="post",
                instance=invoice,
                user=user,
                changes={"number": invoice_number, "journal_entry": entry_number,
                         "total_amount": str(invoice.total_amount)},
            )
    except IntegrityError as exc:
        logger.error("Duplicate number while posting invoice id=%s", invoice_id)
        raise ConflictError(
            "Failed to post customer invoice: duplicate document number detected"
        ) from exc
    except (ValidationError, ConflictError, NotFoundError) as exc:
        logger.warning("Invoice id=%s not posted: %s", invoice_id, exc)
        raise

    logger.info("Posted invoice id=%s as %s (journal entry %s)",
                invoice.pk, invoice.number, entry.number)
    return invoice, entry


def _invoice_queryset():
    return CustomerInvoice.objects.select_related(
        "company", "partner", "journal_entry").prefetch_related("lines__income_account")


def get_customer_invoice(invoice_id, company=None):
    qs = _invoice_queryset()
    if company is not None:
        qs = qs.for_company(company)
    invoice = qs.filter(pk=invoice_id).first()
    if invoice is None:
        raise NotFoundError(f"Customer invoice with id {invoice_id} not found")
    return invoice


def list_customer_invoices(company):
    return _invoice_queryset().for_company(company).order_by("-invoice_date", "-id")
