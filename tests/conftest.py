"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from hpp_contract.models import HppRequest, HppResponse  # noqa: E402

SECRET = "mysecret"

_HPP_ENV_VARS = (
    "HPP_SHARED_SECRET",
    "HPP_CHARSET",
    "HPP_ALLOW_EMPTY_SECRET",
    "HPP_CONFIG_PATH",
    "HPP_VALIDATE_REQUESTS",
)


@pytest.fixture(autouse=True)
def _isolate_hpp_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep developer environment variables out of the tests."""

    for name in _HPP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def secret() -> str:
    """Shared secret used by the reference vectors."""

    return SECRET


@pytest.fixture
def plain_request() -> HppRequest:
    """Minimal request matching the reference signing vector."""

    return HppRequest(
        timestamp="20191125120000",
        merchant_id="merchantId",
        order_id="ord1",
        amount="100",
        currency="EUR",
    )


@pytest.fixture
def plain_response() -> HppResponse:
    """Minimal response matching the reference verification vector."""

    return HppResponse(
        timestamp="20191125120000",
        merchant_id="merchantId",
        order_id="ord1",
        result="00",
        message="Authorised",
        pas_ref="pasref123",
        auth_code="authcode1",
    )
