"""Tests for per-field base64 transcoding."""

from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given, settings, strategies as st

from hpp_contract.errors import ConfigurationError, TranscodingError
from hpp_contract.models import HppRequest, HppResponse
from hpp_contract.transcoding import Direction, decode_value, encode_value, transcode


def test_encode_known_values() -> None:
    assert encode_value("merchantId", "UTF-8") == "bWVyY2hhbnRJZA=="
    assert encode_value("Café €", "utf-8") == "Q2Fmw6kg4oKs"
    assert decode_value("Q2Fmw6kg4oKs", "utf-8") == "Café €"


def test_transcode_encodes_each_populated_field(plain_request: HppRequest) -> None:
    plain_request.add_supplementary_data("CUSTOM_FIELD", "merchantId")

    encoded = transcode(plain_request, Direction.TO_TRANSPORT, "UTF-8")

    assert encoded.merchant_id == "bWVyY2hhbnRJZA=="
    assert encoded.supplementary_data == {"CUSTOM_FIELD": "bWVyY2hhbnRJZA=="}
    assert encoded.account is None
    assert encoded.hash is None


def test_transcode_leaves_input_untouched(plain_request: HppRequest) -> None:
    snapshot = dataclasses.replace(
        plain_request, supplementary_data=dict(plain_request.supplementary_data)
    )

    encoded = plain_request.encode("UTF-8")

    assert encoded is not plain_request
    assert plain_request == snapshot


def test_transcode_accepts_direction_value(plain_request: HppRequest) -> None:
    encoded = transcode(plain_request, "to_transport", "UTF-8")  # type: ignore[arg-type]

    assert transcode(encoded, "from_transport", "UTF-8") == plain_request  # type: ignore[arg-type]


def test_partial_field_set_round_trips() -> None:
    """Sparse field sets are expected and must not fail."""

    request = HppRequest(comment_one="only this")

    assert request.encode("UTF-8").decode("UTF-8") == request
    assert HppRequest().encode("UTF-8") == HppRequest()


def test_empty_string_is_transcoded_not_dropped() -> None:
    request = HppRequest(account="")

    encoded = request.encode("UTF-8")

    assert encoded.account == ""
    assert encoded.decode("UTF-8").account == ""


def test_latin1_round_trip() -> None:
    response = HppResponse(message="Café", supplementary_data={"NOTE": "naïve"})

    encoded = response.encode("ISO-8859-1")

    assert encoded.message == "Q2Fm6Q=="
    assert encoded.decode("ISO-8859-1") == response


@settings(max_examples=75)
@given(
    merchant_id=st.none() | st.text(max_size=50),
    comment_one=st.none() | st.text(max_size=255),
    amount=st.none() | st.text(alphabet="0123456789", max_size=11),
    supplementary=st.dictionaries(st.text(min_size=1, max_size=20), st.text(), max_size=5),
)
def test_round_trip_law(
    merchant_id: str | None,
    comment_one: str | None,
    amount: str | None,
    supplementary: dict[str, str],
) -> None:
    """Decoding an encoded field set yields the original values and keys."""

    request = HppRequest(
        merchant_id=merchant_id,
        comment_one=comment_one,
        amount=amount,
        supplementary_data=supplementary,
    )

    encoded = transcode(request, Direction.TO_TRANSPORT, "UTF-8")
    decoded = transcode(encoded, Direction.FROM_TRANSPORT, "UTF-8")

    assert decoded == request
    assert set(encoded.supplementary_data) == set(supplementary)


def test_unknown_charset_is_configuration_error(plain_request: HppRequest) -> None:
    with pytest.raises(ConfigurationError, match="Unknown charset"):
        plain_request.encode("no-such-charset")


def test_invalid_base64_names_field() -> None:
    request = HppRequest(merchant_id="bWVyY2hhbnRJZA==", order_id="not base64!")

    with pytest.raises(TranscodingError) as excinfo:
        request.decode("UTF-8")

    assert excinfo.value.field == "ORDER_ID"
    assert excinfo.value.direction == "from_transport"
    assert request.merchant_id == "bWVyY2hhbnRJZA=="


def test_bytes_invalid_under_charset() -> None:
    response = HppResponse(supplementary_data={"BLOB": "/w=="})

    with pytest.raises(TranscodingError) as excinfo:
        response.decode("UTF-8")

    assert excinfo.value.field == "BLOB"


def test_unencodable_value_names_field() -> None:
    request = HppRequest(comment_two="price in €")

    with pytest.raises(TranscodingError) as excinfo:
        request.encode("ascii")

    assert excinfo.value.field == "COMMENT2"
    assert excinfo.value.direction == "to_transport"


def test_signature_survives_transport(plain_request: HppRequest, secret: str) -> None:
    """Signing on plain values then transcoding preserves the signature."""

    plain_request.sign(secret)

    received = plain_request.encode("UTF-8").decode("UTF-8")

    assert received.hash == plain_request.hash
