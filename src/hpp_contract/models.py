"""Signable field sets exchanged with the hosted payment page.

Both variants are plain mutable dataclasses: every fixed field is an optional
string carrying its wire key in the field metadata, followed by an open-ended
``supplementary_data`` mapping. Field declaration order is the traversal order
used by the transcoder and the codec.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from hpp_contract import generation, signing, transcoding

__all__ = [
    "FLAG_FIELDS",
    "Flag",
    "HppRequest",
    "HppResponse",
    "to_flag",
    "wire_keys",
]

WIRE_KEY = "wire"
SUPPLEMENTARY = "supplementary"


class Flag(str, Enum):
    """String values used on the wire for boolean switches."""

    TRUE = "1"
    FALSE = "0"


FLAG_FIELDS: frozenset[str] = frozenset(
    {
        "auto_settle_flag",
        "return_tss",
        "card_storage_enable",
        "offer_save_card",
        "payer_exists",
        "validate_card_only",
        "dcc_enable",
    }
)

_AMOUNT_FIELDS: frozenset[str] = frozenset(
    {"amount", "amount_debit", "amount_credit", "amount_commercial"}
)


def to_flag(value: bool) -> str:
    """Return the wire representation of a boolean switch."""

    return Flag.TRUE.value if value else Flag.FALSE.value


def _wire(key: str) -> Any:
    return field(default=None, metadata={WIRE_KEY: key})


def _supplementary() -> Any:
    return field(default_factory=dict, metadata={SUPPLEMENTARY: True})


def wire_keys(cls: type[FieldSet]) -> dict[str, str]:
    """Return the attribute name to wire key mapping for a field set class."""

    return {
        item.name: item.metadata[WIRE_KEY]
        for item in dataclasses.fields(cls)
        if WIRE_KEY in item.metadata
    }


class FieldSet:
    """Behaviour shared by the outbound and inbound field sets."""

    __slots__ = ()

    kind: ClassVar[str]
    supplementary_data: dict[str, str]

    def effective(self, name: str) -> str:
        """Return the value of ``name`` with absence represented as ``""``."""

        value = getattr(self, name)
        return "" if value is None else value

    def iter_wire_fields(self) -> Iterator[tuple[str, str, str | None]]:
        """Yield ``(attribute, wire_key, value)`` for every fixed field."""

        for item in dataclasses.fields(self):  # type: ignore[arg-type]
            key = item.metadata.get(WIRE_KEY)
            if key is not None:
                yield item.name, key, getattr(self, item.name)

    def add_supplementary_data(self, name: str, value: str) -> FieldSet:
        """Store an extension value under a caller-defined key."""

        self.supplementary_data[name] = value
        return self

    def __setattr__(self, name: str, value: object) -> None:
        if isinstance(value, bool) and name in FLAG_FIELDS:
            value = to_flag(value)
        elif (
            isinstance(value, int)
            and not isinstance(value, bool)
            and name in _AMOUNT_FIELDS
        ):
            value = str(value)
        object.__setattr__(self, name, value)


@dataclass(slots=True)
class HppRequest(FieldSet):
    """Outbound request posted to the hosted payment page.

    Flag fields accept ``bool`` on construction or assignment and are normalised to
    ``"1"``/``"0"``; amount fields accept ``int`` and are normalised to their
    decimal string.
    """

    merchant_id: str | None = _wire("MERCHANT_ID")
    account: str | None = _wire("ACCOUNT")
    order_id: str | None = _wire("ORDER_ID")
    amount: str | None = _wire("AMOUNT")
    currency: str | None = _wire("CURRENCY")
    timestamp: str | None = _wire("TIMESTAMP")
    hash: str | None = _wire("SHA1HASH")
    auto_settle_flag: str | None = _wire("AUTO_SETTLE_FLAG")
    comment_one: str | None = _wire("COMMENT1")
    comment_two: str | None = _wire("COMMENT2")
    return_tss: str | None = _wire("RETURN_TSS")
    shipping_code: str | None = _wire("SHIPPING_CODE")
    shipping_country: str | None = _wire("SHIPPING_CO")
    billing_code: str | None = _wire("BILLING_CODE")
    billing_country: str | None = _wire("BILLING_CO")
    customer_number: str | None = _wire("CUST_NUM")
    variable_reference: str | None = _wire("VAR_REF")
    product_id: str | None = _wire("PROD_ID")
    language: str | None = _wire("HPP_LANG")
    card_payment_button_text: str | None = _wire("CARD_PAYMENT_BUTTON")
    card_storage_enable: str | None = _wire("CARD_STORAGE_ENABLE")
    offer_save_card: str | None = _wire("OFFER_SAVE_CARD")
    payer_reference: str | None = _wire("PAYER_REF")
    payment_reference: str | None = _wire("PMT_REF")
    payer_exists: str | None = _wire("PAYER_EXIST")
    validate_card_only: str | None = _wire("VALIDATE_CARD_ONLY")
    dcc_enable: str | None = _wire("DCC_ENABLE")
    hpp_fraud_filter_mode: str | None = _wire("HPP_FRAUDFILTER_MODE")
    hpp_version: str | None = _wire("HPP_VERSION")
    hpp_select_stored_card: str | None = _wire("HPP_SELECT_STORED_CARD")
    display_cvn: str | None = _wire("HPP_DISPLAY_CVN")
    amount_debit: str | None = _wire("HPP_AMOUNT_DEBIT")
    amount_credit: str | None = _wire("HPP_AMOUNT_CREDIT")
    amount_commercial: str | None = _wire("HPP_AMOUNT_COMMERCIAL")
    supplementary_data: dict[str, str] = _supplementary()

    kind: ClassVar[str] = "request"

    def sign(self, secret: str) -> HppRequest:
        """Compute and store the request signature."""

        signing.sign_request(self, secret)
        return self

    def generate_defaults(self, secret: str) -> HppRequest:
        """Fill unset identity fields, then sign."""

        generation.apply_defaults(self)
        return self.sign(secret)

    def encode(self, charset: str) -> HppRequest:
        """Return a transport-encoded copy of this request."""

        return transcoding.transcode(self, transcoding.Direction.TO_TRANSPORT, charset)

    def decode(self, charset: str) -> HppRequest:
        """Return a plain copy of this transport-encoded request."""

        return transcoding.transcode(
            self, transcoding.Direction.FROM_TRANSPORT, charset
        )


@dataclass(slots=True)
class HppResponse(FieldSet):
    """Inbound response returned by the hosted payment page."""

    merchant_id: str | None = _wire("MERCHANT_ID")
    account: str | None = _wire("ACCOUNT")
    order_id: str | None = _wire("ORDER_ID")
    amount: str | None = _wire("AMOUNT")
    auth_code: str | None = _wire("AUTHCODE")
    timestamp: str | None = _wire("TIMESTAMP")
    hash: str | None = _wire("SHA1HASH")
    result: str | None = _wire("RESULT")
    message: str | None = _wire("MESSAGE")
    cvn_result: str | None = _wire("CVNRESULT")
    pas_ref: str | None = _wire("PASREF")
    batch_id: str | None = _wire("BATCHID")
    eci: str | None = _wire("ECI")
    cavv: str | None = _wire("CAVV")
    xid: str | None = _wire("XID")
    comment_one: str | None = _wire("COMMENT1")
    comment_two: str | None = _wire("COMMENT2")
    avs_address_result: str | None = _wire("AVSADDRESSRESULT")
    avs_postcode_result: str | None = _wire("AVSPOSTCODERESULT")
    payer_reference: str | None = _wire("SAVED_PAYER_REF")
    payment_reference: str | None = _wire("SAVED_PMT_REF")
    supplementary_data: dict[str, str] = _supplementary()

    kind: ClassVar[str] = "response"

    def sign(self, secret: str) -> HppResponse:
        """Compute and store the response signature."""

        signing.sign_response(self, secret)
        return self

    def is_hash_valid(self, secret: str) -> bool:
        """Return ``True`` when the carried signature matches the fields."""

        return signing.verify_response(self, secret)

    def encode(self, charset: str) -> HppResponse:
        """Return a transport-encoded copy of this response."""

        return transcoding.transcode(self, transcoding.Direction.TO_TRANSPORT, charset)

    def decode(self, charset: str) -> HppResponse:
        """Return a plain copy of this transport-encoded response."""

        return transcoding.transcode(
            self, transcoding.Direction.FROM_TRANSPORT, charset
        )
