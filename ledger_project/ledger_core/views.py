import json
import logging
from functools import wraps
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from .exceptions import ConflictError, NotFoundError
from .models import Company
from .serializers import (account_to_dict, customer_invoice_to_dict,
                          journal_entry_to_dict, partner_to_dict)
from .services import chart, invoices, journal_entries
from .services.validation import (parse_account_payload, parse_company_id,
                                  parse_customer_invoice_payload,
                                  parse_journal_entry_payload,
                                  parse_partner_payload)

logger = logging.getLogger(__name__)


def _error(message, status):
    return JsonResponse({"error": message}, status=status)


def _validation_message(exc):
    return "; ".join(exc.messages)


def api_view(view):
    """Map ledger exceptions to HTTP statuses and log anything unexpected."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except NotFoundError as e:
            return _error(str(e), 404)
        except ValidationError as e:  # includes UnbalancedJournalError
            return _error(_validation_message(e), 400)
        except ConflictError as e:
            return _error(str(e), 409)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return _error("Internal server error", 500)

    return csrf_exempt(wrapper)


def _json_body(request):
    if not request.body:
        return {}
    try:
        return json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")


def _resolve_company(company_id):
    """
    Explicit companyId, else the first company ever created.
    Core services always take an explicit company; this fallback is API-only.
    """
    if company_id is not None:
        company = Company.objects.filter(pk=company_id).first()
        if company is None:
            raise NotFoundError(f"Company with id {company_id} not found")
        return company
    company = Company.objects.order_by("created_at", "id").first()
    if company is None:
        raise NotFoundError("No company found. Please seed the database first.")
    return company


def _company_from_query(request):
    return _resolve_company(parse_company_id(request.GET))


def _user(request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


@require_GET
def health_view(request):
    return JsonResponse({"status": "ok"})


# ----------------------------
# Chart of accounts / partners
# ----------------------------
@api_view
@require_http_methods(["GET", "POST"])
def accounts_view(request):
    if request.method == "GET":
        company = _company_from_query(request)
        return JsonResponse(
            {"data": [account_to_dict(a) for a in chart.list_accounts(company)]})

    body = _json_body(request)
    data = parse_account_payload(body)
    company = _resolve_company(parse_company_id(body))
    account = chart.create_account(company, user=_user(request), **data)
    return JsonResponse({"data": account_to_dict(account)}, status=201)


@api_view
@require_http_methods(["GET", "POST"])
def partners_view(request):
    if request.method == "GET":
        company = _company_from_query(request)
        return JsonResponse(
            {"data": [partner_to_dict(p) for p in chart.list_partners(company)]})

    body = _json_body(request)
    data = parse_partner_payload(body)
    company = _resolve_company(parse_company_id(body))
    partner = chart.create_partner(company, user=_user(request), **data)
    return JsonResponse({"data": partner_to_dict(partner)}, status=201)


# ----------------------------
# Journal entries
# ----------------------------
@api_view
@require_POST
def journal_entries_view(request):
    body = _json_body(request)
    data = parse_journal_entry_payload(body)
    company = _resolve_company(parse_company_id(body))
    entry = journal_entries.create_journal_entry(company, user=_user(request), **data)
    entry = journal_entries.get_journal_entry(entry.pk)
    return JsonResponse({"data": journal_entry_to_dict(entry)}, status=201)


@api_view
@require_GET
def journal_entry_detail_view(request, entry_id):
    entry = journal_entries.get_journal_entry(entry_id)
    return JsonResponse({"data": journal_entry_to_dict(entry)})


@api_view
@require_POST
def journal_entry_post_view(request, entry_id):
    journal_entries.post_journal_entry(entry_id, user=_user(request))
    entry = journal_entries.get_journal_entry(entry_id)
    return JsonResponse({"data": journal_entry_to_dict(entry)})


# ----------------------------
# Customer invoices
# ----------------------------
@api_view
@require_http_methods(["GET", "POST"])
def customer_invoices_view(request):
    if request.method == "GET":
        company = _company_from_query(request)
        rows = invoices.list_customer_invoices(company)
        return JsonResponse({"data": [customer_invoice_to_dict(i) for i in rows]})

    body = _json_body(request)
    data = parse_customer_invoice_payload(body)
    company = _resolve_company(parse_company_id(body))
    invoice = invoices.create_customer_invoice(company, user=_user(request), **data)
    invoice = invoices.get_customer_invoice(invoice.pk)
    return JsonResponse({"data": customer_invoice_to_dict(invoice)}, status=201)


@api_view
@require_GET
def customer_invoice_detail_view(request, invoice_id):
    invoice = invoices.get_customer_invoice(invoice_id)
    return JsonResponse({"data": customer_invoice_to_dict(invoice)})


@api_view
@require_POST
def customer_invoice_post_view(request, invoice_id):
    invoice, entry = invoices.post_customer_invoice(invoice_id, user=_user(request))
    invoice = invoices.get_customer_invoice(invoice.pk)
    return JsonResponse({
        "data": customer_invoice_to_dict(invoice),
        "journalEntry": {"id": entry.pk, "number": entry.number},
    })
