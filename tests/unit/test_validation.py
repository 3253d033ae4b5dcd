"""Unit tests for bank and credit validation rules"""

import pytest
from types import SimpleNamespace
from credit_registry.domain.exceptions import ValidationError
from credit_registry.domain.models import BankType, CreditStatus, CreditType
from credit_registry.domain.validation import (
    INVALID_CREDIT_STATUS,
    INVALID_CREDIT_TYPE,
    INVALID_PAYMENT_AMOUNTS,
    INVALID_TERM_MONTHS,
    validate_bank_type,
    validate_credit,
    validate_credit_amounts,
    validate_credit_status,
    validate_credit_type,
    validate_term_months,
)


def _credit(**overrides):
    fields = {
        "min_payment": 100.0,
        "max_payment": 500.0,
        "term_months": 12,
        "credit_type": "MORTGAGE",
        "status": "",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.mark.parametrize("value", ["PRIVATE", "GOVERNMENT"])
def test_bank_type_accepts_enum_values(value):
    assert validate_bank_type(value) == BankType(value)


@pytest.mark.parametrize("value", ["", "COOP", "Private"])
def test_bank_type_rejects_others(value):
    with pytest.raises(ValidationError):
        validate_bank_type(value)


def test_credit_type():
    assert validate_credit_type("COMMERCIAL") is CreditType.COMMERCIAL
    with pytest.raises(ValidationError, match="Invalid credit type"):
        validate_credit_type("PAYDAY")


def test_empty_status_defaults_to_pending_on_create_only():
    assert validate_credit_status("", is_create=True) is CreditStatus.PENDING
    with pytest.raises(ValidationError) as exc_info:
        validate_credit_status("", is_create=False)
    assert str(exc_info.value) == INVALID_CREDIT_STATUS


def test_null_status_treated_as_empty():
    assert validate_credit_status(None, is_create=True) is CreditStatus.PENDING
    with pytest.raises(ValidationError, match=INVALID_CREDIT_STATUS):
        validate_credit_status(None, is_create=False)


@pytest.mark.parametrize("is_create", [True, False])
def test_explicit_status_must_be_valid(is_create):
    assert validate_credit_status("APPROVED", is_create) is CreditStatus.APPROVED
    with pytest.raises(ValidationError):
        validate_credit_status("CANCELLED", is_create)


@pytest.mark.parametrize(
    "min_payment, max_payment",
    [
        (0, 10),
        (10, 0),
        (-1, 10),
        (11, 10),
        (float("nan"), 100.0),
        (100.0, float("nan")),
        (float("nan"), float("nan")),
        (10.0, float("inf")),
    ],
)
def test_credit_amounts_rejected(min_payment, max_payment):
    with pytest.raises(ValidationError) as exc_info:
        validate_credit_amounts(min_payment, max_payment)
    assert str(exc_info.value) == INVALID_PAYMENT_AMOUNTS


def test_credit_amounts_equal_bounds_allowed():
    validate_credit_amounts(50.0, 50.0)


def test_term_months():
    validate_term_months(1)
    with pytest.raises(ValidationError, match=INVALID_TERM_MONTHS):
        validate_term_months(0)


def test_validate_credit_resolves_type_and_status():
    assert validate_credit(_credit(), is_create=True) == (CreditType.MORTGAGE, CreditStatus.PENDING)


def test_validate_credit_first_failure_wins():
    # Bad type and bad amounts: the type rule runs first
    with pytest.raises(ValidationError) as exc_info:
        validate_credit(_credit(credit_type="X", min_payment=900), is_create=True)
    assert str(exc_info.value) == INVALID_CREDIT_TYPE

    with pytest.raises(ValidationError) as exc_info:
        validate_credit(_credit(min_payment=900, term_months=0), is_create=True)
    assert str(exc_info.value) == INVALID_PAYMENT_AMOUNTS
