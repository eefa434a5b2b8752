"""Tests for digest construction and default generation."""

from __future__ import annotations

import hashlib
import hmac
import re
from datetime import datetime

import pytest

from hpp_contract import generation
from hpp_contract.errors import ConfigurationError
from hpp_contract.generation import (
    apply_defaults,
    generate_hash,
    generate_order_id,
    generate_timestamp,
)
from hpp_contract.models import HppRequest

CANONICAL = "20191125120000.merchantId.ord1.100.EUR"


def test_generate_hash_known_vector() -> None:
    """Two-stage SHA-1 matches an independently computed vector."""

    assert generate_hash(CANONICAL, "mysecret") == (
        "1c75c66c457fa633619ac75124b941b6889f8564"
    )


def test_generate_hash_two_stage_construction() -> None:
    """The digest is sha1(sha1(message) + '.' + secret), not an HMAC."""

    first = hashlib.sha1(CANONICAL.encode("utf-8")).hexdigest()
    assert first == "f36235d67c475dde612792ebe5b3a44858b22f83"
    expected = hashlib.sha1(f"{first}.mysecret".encode("utf-8")).hexdigest()

    result = generate_hash(CANONICAL, "mysecret")

    assert result == expected
    assert result != hmac.new(b"mysecret", CANONICAL.encode(), hashlib.sha1).hexdigest()
    assert re.fullmatch(r"[0-9a-f]{40}", result)


def test_generate_hash_missing_algorithm(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unavailable digest algorithm is a fatal configuration error."""

    monkeypatch.setattr(generation, "DIGEST_ALGORITHM", "no-such-digest")
    with pytest.raises(ConfigurationError, match="no-such-digest"):
        generate_hash(CANONICAL, "mysecret")


def test_generate_timestamp_format() -> None:
    assert generate_timestamp(datetime(2019, 11, 25, 12, 0, 0)) == "20191125120000"
    assert re.fullmatch(r"\d{14}", generate_timestamp())


def test_generate_order_id_pattern() -> None:
    """Generated order ids satisfy the ORDER_ID pattern and length limit."""

    first = generate_order_id()
    second = generate_order_id()

    assert re.fullmatch(r"[a-zA-Z0-9_\-]{1,50}", first)
    assert len(first) == 48
    assert first != second


@pytest.mark.parametrize("missing", [None, ""])
def test_apply_defaults_populates_missing(missing: str | None) -> None:
    request = HppRequest(timestamp=missing, order_id=missing)

    apply_defaults(request)

    assert request.timestamp and re.fullmatch(r"\d{14}", request.timestamp)
    assert request.order_id and re.fullmatch(r"[a-zA-Z0-9_\-]+", request.order_id)


def test_apply_defaults_keeps_caller_values() -> None:
    """Caller-supplied identity fields are never overwritten."""

    request = HppRequest(timestamp="20200101000000", order_id="my-order")

    apply_defaults(request)
    apply_defaults(request)

    assert request.timestamp == "20200101000000"
    assert request.order_id == "my-order"


def test_generate_defaults_signs_after_defaulting(secret: str) -> None:
    """Defaults are finalised before the signature is computed."""

    request = HppRequest(merchant_id="merchantId", amount="100", currency="EUR")

    request.generate_defaults(secret)

    expected = generate_hash(
        f"{request.timestamp}.merchantId.{request.order_id}.100.EUR", secret
    )
    assert request.hash == expected
