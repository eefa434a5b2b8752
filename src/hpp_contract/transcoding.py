"""Per-field base64 transcoding applied before transport and after receipt.

Each populated fixed field and each supplementary value is transcoded on its
own, so partially populated field sets are expected. Absent fields stay
absent.

Failure policy is fail-fast: the first field that cannot be transcoded raises
:class:`~hpp_contract.errors.TranscodingError` naming its wire key. Because a
new field set is returned and the input is never mutated, the caller never
observes a partially transcoded instance.
"""

from __future__ import annotations

import base64
import dataclasses
import logging
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from hpp_contract.config import resolve_charset
from hpp_contract.errors import TranscodingError

if TYPE_CHECKING:
    from hpp_contract.models import FieldSet

__all__ = ["Direction", "decode_value", "encode_value", "transcode"]

LOGGER = logging.getLogger(__name__)

FieldSetT = TypeVar("FieldSetT", bound="FieldSet")


class Direction(str, Enum):
    """Which way a transcoding pass runs."""

    TO_TRANSPORT = "to_transport"
    FROM_TRANSPORT = "from_transport"


def encode_value(value: str, charset: str) -> str:
    """Return the base64 text form of ``value`` encoded with ``charset``."""

    return base64.b64encode(value.encode(charset)).decode("ascii")


def decode_value(value: str, charset: str) -> str:
    """Reverse :func:`encode_value`.

    Raises:
        ValueError: If ``value`` is not valid base64 or the decoded bytes are
            not valid under ``charset``.
    """

    raw = base64.b64decode(value.encode("ascii"), validate=True)
    return raw.decode(charset)


def _transcode_value(key: str, value: str, direction: Direction, charset: str) -> str:
    try:
        if direction is Direction.TO_TRANSPORT:
            return encode_value(value, charset)
        return decode_value(value, charset)
    except ValueError as exc:
        raise TranscodingError(key, direction.value, str(exc)) from exc


def transcode(fields: FieldSetT, direction: Direction, charset: str) -> FieldSetT:
    """Return a copy of ``fields`` with every populated value transcoded.

    Args:
        fields: Request or response field set. Left untouched.
        direction: :attr:`Direction.TO_TRANSPORT` to encode,
            :attr:`Direction.FROM_TRANSPORT` to decode.
        charset: Encoding name; must be the same on both passes.

    Returns:
        A new field set of the same type.

    Raises:
        ConfigurationError: If ``charset`` is unknown to the runtime.
        TranscodingError: If a value cannot be transcoded.
    """

    direction = Direction(direction)
    codec = resolve_charset(charset)

    changes: dict[str, str] = {}
    for name, key, value in fields.iter_wire_fields():
        if value is None:
            continue
        changes[name] = _transcode_value(key, value, direction, codec)

    supplementary: dict[str, str] = {}
    for key, value in fields.supplementary_data.items():
        supplementary[key] = (
            value if value is None else _transcode_value(key, value, direction, codec)
        )

    LOGGER.debug(
        "Transcoded HPP %s",
        fields.kind,
        extra={
            "direction": direction.value,
            "charset": codec,
            "field_count": len(changes),
            "supplementary_count": len(supplementary),
        },
    )
    return dataclasses.replace(fields, supplementary_data=supplementary, **changes)  # type: ignore[type-var]
