"""Tests for the request rule table."""

from __future__ import annotations

import pytest

from hpp_contract.errors import HppValidationError
from hpp_contract.models import HppRequest
from hpp_contract.validation import REQUEST_RULES, check_request, validate_request


@pytest.fixture
def signed_request(plain_request: HppRequest, secret: str) -> HppRequest:
    return plain_request.sign(secret)


def test_signed_request_passes(signed_request: HppRequest) -> None:
    validate_request(signed_request)


def test_rule_table_covers_every_request_field() -> None:
    fixed = {name for name, _, _ in HppRequest().iter_wire_fields()}

    assert set(REQUEST_RULES) == fixed


def test_absent_fields_are_not_checked() -> None:
    assert check_request(HppRequest()) == []


def test_violations_are_collected(signed_request: HppRequest) -> None:
    signed_request.merchant_id = "merchant id"
    signed_request.currency = "EURO"
    signed_request.timestamp = "2019"

    with pytest.raises(HppValidationError) as excinfo:
        validate_request(signed_request)

    keys = [violation.wire_key for violation in excinfo.value.violations]
    assert keys == ["MERCHANT_ID", "CURRENCY", "TIMESTAMP"]
    assert "CURRENCY" in str(excinfo.value)


def test_hash_must_be_lower_case_hex(signed_request: HppRequest) -> None:
    signed_request.hash = signed_request.hash.upper()  # type: ignore[union-attr]

    assert [v.field for v in check_request(signed_request)] == ["hash"]


@pytest.mark.parametrize("amount, valid", [("0", True), ("100", False)])
def test_open_to_buy_requires_zero_amount(
    signed_request: HppRequest, amount: str, valid: bool
) -> None:
    signed_request.validate_card_only = "1"
    signed_request.amount = amount

    assert (check_request(signed_request) == []) is valid


@pytest.mark.parametrize("value", ["0", "1", "on", "OFF", "Multi", ""])
def test_auto_settle_accepted_values(value: str) -> None:
    assert check_request(HppRequest(auto_settle_flag=value)) == []


@pytest.mark.parametrize("value", ["maybe", "onn", "2", "*"])
def test_auto_settle_rejected_values(value: str) -> None:
    violations = check_request(HppRequest(auto_settle_flag=value))

    assert [v.wire_key for v in violations] == ["AUTO_SETTLE_FLAG"]


@pytest.mark.parametrize(
    "field, value, valid",
    [
        ("comment_one", "Paid in full, thanks €", True),
        ("comment_one", "<script>", False),
        ("comment_two", "x" * 256, False),
        ("language", "en_GB", True),
        ("language", "EN", True),
        ("language", "english", False),
        ("order_id", "abc_123-XYZ", True),
        ("order_id", "abc 123", False),
        ("hpp_fraud_filter_mode", "PASSIVE", True),
        ("hpp_fraud_filter_mode", "STRICT", False),
        ("display_cvn", "false", True),
        ("display_cvn", "no", False),
        ("payer_exists", "2", True),
        ("hpp_version", "3", False),
        ("card_payment_button_text", "Pay £10 now!", True),
        ("card_payment_button_text", "Pay now <b>", False),
        ("billing_code", "D02|X285*", True),
        ("payer_reference", "payer\\ref 1", True),
        ("payment_reference", "pmt ref", False),
    ],
)
def test_field_patterns(field: str, value: str, valid: bool) -> None:
    violations = check_request(HppRequest(**{field: value}))

    assert (violations == []) is valid
