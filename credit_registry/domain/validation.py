"""Pre-persistence checks for bank and credit payloads.

Every function is pure: it either returns the normalized value or raises
ValidationError carrying the message returned to the caller. Handlers run
these before touching the database.

Status handling is deliberately asymmetric. On create an empty status is
normalized to PENDING; on update the caller must send a valid status and
an empty one is rejected.
"""

import math
from typing import Optional, Protocol

from credit_registry.domain.exceptions import ValidationError
from credit_registry.domain.models import BankType, CreditStatus, CreditType

INVALID_BANK_TYPE = "Invalid bank type. Must be PRIVATE or GOVERNMENT"
INVALID_CREDIT_TYPE = "Invalid credit type. Must be AUTO, MORTGAGE, or COMMERCIAL"
INVALID_CREDIT_STATUS = "Invalid status. Must be PENDING, APPROVED, or REJECTED"
INVALID_PAYMENT_AMOUNTS = "Invalid payment amounts. Min and max must be positive, and min must be <= max"
INVALID_TERM_MONTHS = "Term months must be positive"


class BankCandidate(Protocol):
    type: str


class CreditCandidate(Protocol):
    min_payment: float
    max_payment: float
    term_months: int
    credit_type: str
    status: Optional[str]


def validate_bank_type(bank_type: str) -> BankType:
    try:
        return BankType(bank_type)
    except ValueError:
        raise ValidationError(INVALID_BANK_TYPE)


def validate_credit_type(credit_type: str) -> CreditType:
    try:
        return CreditType(credit_type)
    except ValueError:
        raise ValidationError(INVALID_CREDIT_TYPE)


def validate_credit_status(status: Optional[str], is_create: bool) -> CreditStatus:
    """Resolve a credit status, defaulting empty to PENDING only on create"""
    if not status and is_create:
        return CreditStatus.PENDING
    try:
        return CreditStatus(status)
    except ValueError:
        raise ValidationError(INVALID_CREDIT_STATUS)


def validate_credit_amounts(min_payment: float, max_payment: float) -> None:
    if not (0 < min_payment <= max_payment) or not math.isfinite(max_payment):
        raise ValidationError(INVALID_PAYMENT_AMOUNTS)


def validate_term_months(term_months: int) -> None:
    if term_months <= 0:
        raise ValidationError(INVALID_TERM_MONTHS)


def validate_bank(payload: BankCandidate) -> BankType:
    return validate_bank_type(payload.type)


def validate_credit(payload: CreditCandidate, is_create: bool) -> tuple[CreditType, CreditStatus]:
    """
    Run all credit rules in order; the first failing rule wins.

    Returns:
        The resolved (credit_type, status) pair
    """
    credit_type = validate_credit_type(payload.credit_type)
    status = validate_credit_status(payload.status, is_create)
    validate_credit_amounts(payload.min_payment, payload.max_payment)
    validate_term_months(payload.term_months)
    return credit_type, status
