"""Digest construction and default value generation.

The signature scheme is fixed by the payment service::

    sha1_hex(sha1_hex(canonical) + "." + secret)

It is not an HMAC and must not be replaced by one.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from hpp_contract.errors import ConfigurationError

if TYPE_CHECKING:
    from hpp_contract.models import HppRequest

__all__ = [
    "DIGEST_ALGORITHM",
    "HASH_SEPARATOR",
    "TIMESTAMP_FORMAT",
    "apply_defaults",
    "generate_hash",
    "generate_order_id",
    "generate_timestamp",
]

LOGGER = logging.getLogger(__name__)

DIGEST_ALGORITHM = "sha1"
HASH_SEPARATOR = "."
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def _hex_digest(data: str) -> str:
    try:
        digest = hashlib.new(DIGEST_ALGORITHM)
    except ValueError as exc:
        raise ConfigurationError(
            f"Digest algorithm {DIGEST_ALGORITHM!r} is unavailable in this runtime"
        ) from exc
    digest.update(data.encode("utf-8"))
    return digest.hexdigest()


def generate_hash(to_hash: str, secret: str) -> str:
    """Return the two-stage digest of ``to_hash`` keyed with ``secret``.

    Args:
        to_hash: Canonical, dot-joined field string.
        secret: Shared secret. Never logged.

    Returns:
        Lower-case hex digest, 40 characters long.
    """

    first = _hex_digest(to_hash)
    return _hex_digest(f"{first}{HASH_SEPARATOR}{secret}")


def generate_timestamp(now: datetime | None = None) -> str:
    """Return ``now`` (default: the current local time) as ``YYYYMMDDHHMMSS``."""

    moment = now if now is not None else datetime.now()
    return moment.strftime(TIMESTAMP_FORMAT)


def generate_order_id() -> str:
    """Return a unique order identifier restricted to ``[A-Za-z0-9_-]``.

    The value is the URL-safe base64 form of a random UUID string with the
    padding removed, which keeps it inside the 50 character limit.
    """

    token = str(uuid.uuid4()).encode("ascii")
    return base64.urlsafe_b64encode(token).decode("ascii").rstrip("=")


def apply_defaults(request: HppRequest) -> HppRequest:
    """Populate an unset timestamp and order id on ``request`` in place.

    Caller-supplied values are never overwritten. Must run before signing.
    """

    generated: list[str] = []
    if not request.timestamp:
        request.timestamp = generate_timestamp()
        generated.append("timestamp")
    if not request.order_id:
        request.order_id = generate_order_id()
        generated.append("order_id")
    if generated:
        LOGGER.debug(
            "Generated request defaults",
            extra={"generated_fields": generated, "order_id": request.order_id},
        )
    return request
