# Plain dict renderers for the JSON views (camelCase keys on the wire)
from .services.balance import to_money


def _money(value):
    # Sum() over SQLite comes back unquantized ("100" instead of "100.00")
    return None if value is None else str(to_money(value))


def _iso(value):
    return value.isoformat() if value else None


def account_to_dict(account):
    return {
        "id": account.pk,
        "companyId": account.company_id,
        "code": account.code,
        "name": account.name,
        "type": account.type,
        "isActive": account.is_active,
        "createdAt": _iso(account.created_at),
    }


def partner_to_dict(partner):
    return {
        "id": partner.pk,
        "companyId": partner.company_id,
        "name": partner.name,
        "email": partner.email,
        "phone": partner.phone,
        "isCustomer": partner.is_customer,
        "isVendor": partner.is_vendor,
        "createdAt": _iso(partner.created_at),
    }


def journal_line_to_dict(line):
    return {
        "id": line.pk,
        "accountId": line.account_id,
        "accountCode": line.account.code,
        "accountName": line.account.name,
        "partnerId": line.partner_id,
        "label": line.label,
        "debit": _money(line.debit),
        "credit": _money(line.credit),
    }


def journal_entry_to_dict(entry):
    total_debit, total_credit = entry.compute_totals()
    return {
        "id": entry.pk,
        "companyId": entry.company_id,
        "journal": {
            "id": entry.journal_id,
            "code": entry.journal.code,
            "name": entry.journal.name,
        },
        "date": _iso(entry.date),
        "number": entry.number,
        "status": entry.status,
        "memo": entry.memo,
        "createdAt": _iso(entry.created_at),
        "postedAt": _iso(entry.posted_at),
        "totalDebit": _money(total_debit),
        "totalCredit": _money(total_credit),
        "lines": [journal_line_to_dict(line) for line in entry.lines.all()],
    }


def invoice_line_to_dict(line):
    return {
        "id": line.pk,
        "description": line.description,
        "quantity": _money(line.quantity),
        "unitPrice": _money(line.unit_price),
        "lineTotal": _money(line.line_total),
        "incomeAccount": {
            "id": line.income_account_id,
            "code": line.income_account.code,
            "name": line.income_account.name,
        },
    }


def customer_invoice_to_dict(invoice):
    entry = invoice.journal_entry
    return {
        "id": invoice.pk,
        "companyId": invoice.company_id,
        "partner": {
            "id": invoice.partner_id,
            "name": invoice.partner.name,
            "email": invoice.partner.email,
        },
        "invoiceDate": _iso(invoice.invoice_date),
        "dueDate": _iso(invoice.due_date),
        "number": invoice.number,
        "status": invoice.status,
        "memo": invoice.memo,
        "currency": invoice.currency,
        "totalAmount": _money(invoice.total_amount),
        "createdAt": _iso(invoice.created_at),
        "postedAt": _iso(invoice.posted_at),
        "journalEntry": (
            {"id": entry.pk, "number": entry.number, "date": _iso(entry.date),
             "status": entry.status}
            if entry else None
        ),
        "lines": [invoice_line_to_dict(line) for line in invoice.lines.all()],
    }
