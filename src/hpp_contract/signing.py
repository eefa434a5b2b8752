"""Canonical signer for outbound requests and inbound responses.

Canonical strings are built from plain (untranscoded) values only. Every
field is read through :meth:`FieldSet.effective`, so absent optional fields
contribute an empty segment instead of failing.
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from hpp_contract.errors import ConfigurationError
from hpp_contract.generation import HASH_SEPARATOR, generate_hash

if TYPE_CHECKING:
    from hpp_contract.models import HppRequest, HppResponse

__all__ = [
    "apply_stored_card_override",
    "check_secret",
    "request_canonical_string",
    "response_canonical_string",
    "sign_request",
    "sign_response",
    "verify_response",
]

LOGGER = logging.getLogger(__name__)

_CARD_STORAGE_ENABLED = "1"


def check_secret(secret: str | None, allow_empty_secret: bool) -> str:
    """Return ``secret`` or raise :class:`ConfigurationError` if it is unusable.

    ``""`` is accepted only with ``allow_empty_secret``.
    """

    if secret is None:
        raise ConfigurationError("A shared secret is required for signing")
    if not isinstance(secret, str):
        raise ConfigurationError("The shared secret must be a string")
    if secret == "" and not allow_empty_secret:
        raise ConfigurationError(
            "Refusing to sign with an empty shared secret without explicit opt-in"
        )
    return secret


def apply_stored_card_override(request: HppRequest) -> None:
    """Replace the payer reference with the stored-card selector when set.

    The override mutates ``request`` so the transmitted payer reference
    matches the signed one.
    """

    selector = request.hpp_select_stored_card
    if selector:
        request.payer_reference = selector


def request_canonical_string(request: HppRequest) -> str:
    """Return the dot-joined string hashed to sign ``request``.

    The stored-card override must already have been applied.
    """

    value = request.effective
    segments = [
        value("timestamp"),
        value("merchant_id"),
        value("order_id"),
        value("amount"),
    ]
    for name in ("amount_debit", "amount_credit", "amount_commercial"):
        if value(name):
            segments.append(value(name))
    segments.append(value("currency"))

    if value("card_storage_enable") == _CARD_STORAGE_ENABLED or value(
        "hpp_select_stored_card"
    ):
        segments.append(value("payer_reference"))
        segments.append(value("payment_reference"))

    if value("hpp_fraud_filter_mode"):
        segments.append(value("hpp_fraud_filter_mode"))
    if value("display_cvn"):
        segments.append(value("display_cvn"))

    return HASH_SEPARATOR.join(segments)


def sign_request(
    request: HppRequest, secret: str, *, allow_empty_secret: bool = False
) -> str:
    """Sign ``request`` and store the signature in its ``hash`` field.

    Args:
        request: Plain request with identity fields already finalised.
        secret: Shared secret agreed with the payment service.
        allow_empty_secret: Explicit opt-in to sign with ``""``.

    Returns:
        Lower-case hex signature.

    Raises:
        ConfigurationError: If the secret is missing or the digest algorithm
            is unavailable.
    """

    checked = check_secret(secret, allow_empty_secret)
    apply_stored_card_override(request)
    signature = generate_hash(request_canonical_string(request), checked)
    request.hash = signature
    LOGGER.debug(
        "Signed HPP request",
        extra={"order_id": request.order_id, "merchant_id": request.merchant_id},
    )
    return signature


def response_canonical_string(response: HppResponse) -> str:
    """Return the dot-joined string hashed to sign or verify ``response``."""

    value = response.effective
    segments = [
        value("timestamp"),
        value("merchant_id"),
        value("order_id"),
        value("result"),
        value("message"),
        value("pas_ref"),
        value("auth_code"),
    ]
    if value("payer_reference") and value("payment_reference"):
        segments.append(value("payer_reference"))
        segments.append(value("payment_reference"))
    return HASH_SEPARATOR.join(segments)


def sign_response(
    response: HppResponse, secret: str, *, allow_empty_secret: bool = False
) -> str:
    """Sign ``response`` the way the payment service does and store the hash."""

    checked = check_secret(secret, allow_empty_secret)
    signature = generate_hash(response_canonical_string(response), checked)
    response.hash = signature
    return signature


def verify_response(
    response: HppResponse, secret: str, *, allow_empty_secret: bool = False
) -> bool:
    """Return ``True`` only when the carried signature matches the fields.

    A missing signature is a mismatch. Configuration problems (missing secret,
    unavailable digest) still raise :class:`ConfigurationError`.
    """

    checked = check_secret(secret, allow_empty_secret)
    received = response.effective("hash").lower()
    expected = generate_hash(response_canonical_string(response), checked)
    valid = bool(received) and hmac.compare_digest(
        expected.encode("utf-8"), received.encode("utf-8")
    )
    if not valid:
        LOGGER.warning(
            "HPP response signature mismatch",
            extra={"order_id": response.order_id, "result": response.result},
        )
    return valid
