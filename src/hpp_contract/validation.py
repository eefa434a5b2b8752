"""Declarative pattern/length rules checked before a request is sent.

The gate is independent of the signer: it runs once at pre-send time and
reports every violation together. Absent (``None``) fields are not checked;
length bounds apply only to values that are present.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hpp_contract.errors import FieldViolation, HppValidationError

if TYPE_CHECKING:
    from hpp_contract.models import HppRequest

__all__ = ["FieldRule", "REQUEST_RULES", "check_request", "validate_request"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Length bounds and allowed-character pattern for one field."""

    pattern: re.Pattern[str]
    min_length: int = 0
    max_length: int | None = None

    def check(self, value: str) -> str | None:
        """Return a violation message for ``value`` or ``None`` when valid."""

        if len(value) < self.min_length or (
            self.max_length is not None and len(value) > self.max_length
        ):
            upper = "" if self.max_length is None else str(self.max_length)
            return f"length must be between {self.min_length} and {upper}"
        if self.pattern.fullmatch(value) is None:
            return "contains characters outside the allowed pattern"
        return None


def _rule(pattern: str, min_length: int = 0, max_length: int | None = None) -> FieldRule:
    return FieldRule(re.compile(pattern), min_length, max_length)


_FREE_TEXT = (
    r"[\s -;=?-~¡-ÿ€‚ƒ„"
    r"…†‡ˆ‰Š‹ŒŽ‘’“"
    r"”•–—˜™š›œžŸ]*"
)
_BUTTON_TEXT = (
    r"[ÀÁÂÃÄÅÆÇÈÉÊËÌÍÎÏÐÑÒÓÔÕÖ×ØÙÚÛÜÝÞßàáâãäåæçèéêëìíîïðñòóôõö÷ø¤ùúûüýþÿ"
    r"ŒŽšœžŸ¥a-zA-Z0-9'\",+._\-&/@!?%()*:£$"
    r"€#\[\]|=\\“” ]*"
)
_REFERENCE_TEXT = r"[a-zA-Z0-9._\-,+@\s]*"
_DIGITS = r"[0-9]*"
_BINARY = r"[01]*"

# Accepted auto-settle values: 0, 1, on, off, multi (any case) or empty.
_AUTO_SETTLE = r"(?i:on|off|multi|1|0)?"

REQUEST_RULES: Mapping[str, FieldRule] = {
    "merchant_id": _rule(r"[a-zA-Z0-9.]*", 1, 50),
    "account": _rule(r"[a-zA-Z0-9\s]*", 0, 30),
    "order_id": _rule(r"[a-zA-Z0-9_\-]*", 0, 50),
    "amount": _rule(_DIGITS, 1, 11),
    "currency": _rule(r"[a-zA-Z]*", 3, 3),
    "timestamp": _rule(_DIGITS, 14, 14),
    "hash": _rule(r"[a-f0-9]*", 40, 40),
    "auto_settle_flag": _rule(_AUTO_SETTLE),
    "comment_one": _rule(_FREE_TEXT, 0, 255),
    "comment_two": _rule(_FREE_TEXT, 0, 255),
    "return_tss": _rule(_BINARY, 0, 1),
    "shipping_code": _rule(r"[A-Za-z0-9,.\-/| ]*", 0, 30),
    "shipping_country": _rule(r"[A-Za-z0-9,.\- ]*", 0, 50),
    "billing_code": _rule(r"[A-Za-z0-9,.\-/|* ]*", 0, 60),
    "billing_country": _rule(r"[A-Za-z0-9,.\- ]*", 0, 50),
    "customer_number": _rule(_REFERENCE_TEXT, 0, 50),
    "variable_reference": _rule(_REFERENCE_TEXT, 0, 50),
    "product_id": _rule(_REFERENCE_TEXT, 0, 50),
    "language": _rule(r"(?:[a-zA-Z]{2}(?:_[a-zA-Z]{2})?)?"),
    "card_payment_button_text": _rule(_BUTTON_TEXT, 0, 25),
    "card_storage_enable": _rule(_BINARY, 0, 1),
    "offer_save_card": _rule(_BINARY, 0, 1),
    "payer_reference": _rule(r"[A-Za-z0-9_\-\\ ]*", 0, 50),
    "payment_reference": _rule(r"[A-Za-z0-9_\-]*", 0, 50),
    "payer_exists": _rule(r"[012]*", 0, 1),
    "validate_card_only": _rule(_BINARY, 0, 1),
    "dcc_enable": _rule(_BINARY, 0, 1),
    "hpp_fraud_filter_mode": _rule(r"(?:ACTIVE|PASSIVE|OFF)*", 0, 7),
    "hpp_version": _rule(r"[12]*", 0, 1),
    "hpp_select_stored_card": _rule(r"[a-zA-Z0-9_\-.\s]*", 0, 50),
    "display_cvn": _rule(r"(?:TRUE|FALSE|true|false)*"),
    "amount_debit": _rule(_DIGITS, 0, 11),
    "amount_credit": _rule(_DIGITS, 0, 11),
    "amount_commercial": _rule(_DIGITS, 0, 11),
}


def check_request(request: HppRequest) -> list[FieldViolation]:
    """Return every rule violation found on ``request``."""

    violations: list[FieldViolation] = []
    for name, key, value in request.iter_wire_fields():
        rule = REQUEST_RULES.get(name)
        if rule is None or value is None:
            continue
        message = rule.check(value)
        if message is not None:
            violations.append(FieldViolation(name, key, message))

    # Open-to-buy requests validate the card only and must not carry an amount.
    if request.validate_card_only == "1" and request.amount != "0":
        violations.append(
            FieldViolation(
                "amount", "AMOUNT", "must be 0 when VALIDATE_CARD_ONLY is set"
            )
        )
    return violations


def validate_request(request: HppRequest) -> None:
    """Raise :class:`HppValidationError` if ``request`` breaks any rule."""

    violations = check_request(request)
    if violations:
        LOGGER.info(
            "HPP request failed validation",
            extra={
                "order_id": request.order_id,
                "fields": [violation.wire_key for violation in violations],
            },
        )
        raise HppValidationError(violations)
