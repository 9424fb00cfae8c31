"""
Request payload parsing.

Each parser returns plain Python values (date, Decimal, int) ready for the
services, or raises one ValidationError carrying every field problem found.
Business rules (line counts, signs, balance) stay in the services.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from django.core.exceptions import ValidationError

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _parse_date(value, field, errors, required=True):
    if value is None or value == "":
        if required:
            errors.append(f"{field} is required (format: YYYY-MM-DD)")
        return None
    if not isinstance(value, str) or not DATE_RE.match(value):
        errors.append(f"{field} must be in YYYY-MM-DD format")
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        errors.append(f"{field} is not a valid date")
        return None


def _parse_number(value, field, errors):
    # bool is an int subclass, and never an amount
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        errors.append(f"{field} is required and must be a number")
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        errors.append(f"{field} is required and must be a number")
        return None
    if not number.is_finite():
        errors.append(f"{field} is required and must be a number")
        return None
    return number


def _parse_id(value, field, errors, required=True):
    if value is None or value == "":
        if required:
            errors.append(f"{field} is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f"{field} must be an integer")
        return None


def _require_dict(payload):
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")


def parse_company_id(payload):
    errors = []
    company_id = _parse_id(payload.get("companyId"), "companyId", errors, required=False)
    if errors:
        raise ValidationError(errors)
    return company_id


def parse_journal_entry_payload(payload):
    _require_dict(payload)
    errors = []

    journal_code = payload.get("journalCode")
    if not isinstance(journal_code, str) or not journal_code.strip():
        errors.append("journalCode is required")
        journal_code = None
    entry_date = _parse_date(payload.get("date"), "date", errors)

    raw_lines = payload.get("lines")
    lines = []
    if not isinstance(raw_lines, list):
        errors.append("lines is required and must be an array")
    else:
        for index, line in enumerate(raw_lines):
            if not isinstance(line, dict):
                errors.append(f"lines[{index}] must be an object")
                continue
            code = line.get("accountCode")
            if not isinstance(code, str) or not code.strip():
                errors.append(f"lines[{index}].accountCode is required")
            debit = _parse_number(line.get("debit"), f"lines[{index}].debit", errors)
            credit = _parse_number(line.get("credit"), f"lines[{index}].credit", errors)
            lines.append({
                "account_code": code.strip() if isinstance(code, str) else None,
                "label": line.get("label") or None,
                "debit": debit,
                "credit": credit,
            })

    memo = payload.get("memo")
    if memo is not None and not isinstance(memo, str):
        errors.append("memo must be a string")

    if errors:
        raise ValidationError(errors)
    return {
        "journal_code": journal_code.strip(),
        "date": entry_date,
        "lines": lines,
        "memo": memo or None,
    }


def parse_customer_invoice_payload(payload):
    _require_dict(payload)
    errors = []

    partner_id = _parse_id(payload.get("partnerId"), "partnerId", errors)
    invoice_date = _parse_date(payload.get("invoiceDate"), "invoiceDate", errors)
    due_date = _parse_date(payload.get("dueDate"), "dueDate", errors, required=False)

    raw_lines = payload.get("lines")
    lines = []
    if not isinstance(raw_lines, list) or not raw_lines:
        errors.append("lines is required and must contain at least one line item")
    else:
        for index, line in enumerate(raw_lines):
            if not isinstance(line, dict):
                errors.append(f"lines[{index}] must be an object")
                continue
            quantity = _parse_number(line.get("quantity"), f"lines[{index}].quantity", errors)
            unit_price = _parse_number(line.get("unitPrice"), f"lines[{index}].unitPrice", errors)
            lines.append({
                "description": line.get("description"),
                "quantity": quantity,
                "unit_price": unit_price,
                "income_account_code": line.get("incomeAccountCode"),
            })

    memo = payload.get("memo")
    if memo is not None and not isinstance(memo, str):
        errors.append("memo must be a string")

    if errors:
        raise ValidationError(errors)
    return {
        "partner_id": partner_id,
        "invoice_date": invoice_date,
        "due_date": due_date,
        "lines": lines,
        "memo": memo or None,
    }


def parse_account_payload(payload):
    _require_dict(payload)
    errors = []
    for field in ("code", "name", "type"):
        if not isinstance(payload.get(field), str) or not payload[field].strip():
            errors.append(f"{field} is required")
    if errors:
        raise ValidationError(errors)
    return {
        "code": payload["code"],
        "name": payload["name"],
        "type": payload["type"].strip().upper(),
    }


def parse_partner_payload(payload):
    _require_dict(payload)
    errors = []

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("name is required")

    email = payload.get("email")
    if email is not None and not isinstance(email, str):
        errors.append("email must be a string")
    elif email and email.strip() and not EMAIL_RE.match(email.strip()):
        errors.append("email must be a valid email address")

    phone = payload.get("phone")
    if phone is not None and not isinstance(phone, str):
        errors.append("phone must be a string")

    flags = {}
    for field, key in (("isCustomer", "is_customer"), ("isVendor", "is_vendor")):
        value = payload.get(field)
        if value is not None and not isinstance(value, bool):
            errors.append(f"{field} must be a boolean")
        flags[key] = value

    if errors:
        raise ValidationError(errors)
    return {"name": name, "email": email, "phone": phone, **flags}
