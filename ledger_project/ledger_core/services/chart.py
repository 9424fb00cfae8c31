import logging
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from ..exceptions import ConflictError
from ..models import Account, Partner
from ..models.account import (ACCOUNT_CODE_MAX_LENGTH, ACCOUNT_NAME_MAX_LENGTH,
                              ACCOUNT_TYPES)
from .audit_helper import log_action

logger = logging.getLogger(__name__)

ACCOUNT_TYPE_CODES = [value for value, _ in ACCOUNT_TYPES]


# ----------------------------
# Chart of accounts
# ----------------------------
def create_account(company, code, name, type, user=None):
    code = (code or "").strip()
    name = (name or "").strip()

    errors = []
    if not code:
        errors.append("code is required")
    elif len(code) > ACCOUNT_CODE_MAX_LENGTH:
        errors.append(f"code must be at most {ACCOUNT_CODE_MAX_LENGTH} characters")
    if not name:
        errors.append("name is required")
    elif len(name) > ACCOUNT_NAME_MAX_LENGTH:
        errors.append(f"name must be at most {ACCOUNT_NAME_MAX_LENGTH} characters")
    if type not in ACCOUNT_TYPE_CODES:
        errors.append(f"type must be one of: {', '.join(ACCOUNT_TYPE_CODES)}")
    if errors:
        raise ValidationError(errors)

    if Account.objects.for_company(company).filter(code=code).exists():
        raise ConflictError(f'Account with code "{code}" already exists for this company')

    try:
        with transaction.atomic():
            account = Account.objects.create(
                company=company, code=code, name=name, type=type)
            log_action(action="create", instance=account, user=user,
                       changes={"code": code, "type": type})
    except IntegrityError as exc:
        # lost a race against another insert of the same code
        raise ConflictError(
            f'Account with code "{code}" already exists for this company') from exc

    logger.info("Created account %s (%s) company=%s", code, type, company.pk)
    return account


def list_accounts(company):
    return Account.objects.for_company(company).order_by("code")


# ----------------------------
# Partners
# ----------------------------
def create_partner(company, name, email=None, phone=None,
                   is_customer=None, is_vendor=None, user=None):
    name = (name or "").strip()
    email = (email or "").strip() or None
    phone = (phone or "").strip() or None

    # A partner created without flags is a customer
    if is_customer is None and is_vendor is None:
        is_customer, is_vendor = True, False
    is_customer = bool(is_customer)
    is_vendor = bool(is_vendor)

    errors = []
    if not name:
        errors.append("name is required")
    elif len(name) > 255:
        errors.append("name must be at most 255 characters")
    if not (is_customer or is_vendor):
        errors.append("At least one of is_customer or is_vendor must be true")
    if errors:
        raise ValidationError(errors)

    if email and Partner.objects.for_company(company).filter(email=email).exists():
        raise ConflictError(f'Partner with email "{email}" already exists for this company')

    try:
        with transaction.atomic():
            partner = Partner.objects.create(
                company=company,
                name=name,
                email=email,
                phone=phone,
                is_customer=is_customer,
                is_vendor=is_vendor,
            )
            log_action(action="create", instance=partner, user=user,
                       changes={"is_customer": is_customer, "is_vendor": is_vendor})
    except IntegrityError as exc:
        raise ConflictError(
            f'Partner with email "{email}" already exists for this company') from exc

    logger.info("Created partner id=%s company=%s", partner.pk, company.pk)
    return partner


def list_partners(company):
    return Partner.objects.for_company(company).order_by("name", "id")
