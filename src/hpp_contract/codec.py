"""Wire JSON mapping for request and response field sets.

Known fields travel under their fixed upper-case keys; supplementary entries
are merged into the same flat object at encode time and split back out at
decode time by recognising the fixed key set.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TypeVar

from hpp_contract.errors import CodecError
from hpp_contract.models import FieldSet, HppRequest, HppResponse, wire_keys

__all__ = [
    "field_set_from_dict",
    "field_set_to_dict",
    "request_from_json",
    "request_to_json",
    "response_from_json",
    "response_to_json",
]

FieldSetT = TypeVar("FieldSetT", bound=FieldSet)


def field_set_to_dict(fields: FieldSet) -> dict[str, str]:
    """Return the flat wire mapping for ``fields`` with absent fields omitted."""

    payload: dict[str, str] = {
        key: value for _, key, value in fields.iter_wire_fields() if value is not None
    }
    for key, value in fields.supplementary_data.items():
        if key in payload:
            raise CodecError(f"Supplementary key {key!r} collides with a fixed field")
        if value is not None:
            payload[key] = value
    return payload


def _coerce_wire_value(key: str, value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    raise CodecError(f"Field {key!r} must be a scalar, got {type(value).__name__}")


def field_set_from_dict(cls: type[FieldSetT], data: Mapping[str, object]) -> FieldSetT:
    """Build a ``cls`` instance from a flat wire mapping.

    Every key outside the fixed set becomes supplementary data.
    """

    by_wire_key = {key: name for name, key in wire_keys(cls).items()}
    known: dict[str, str | None] = {}
    supplementary: dict[str, str] = {}
    for key, raw in data.items():
        value = _coerce_wire_value(key, raw)
        name = by_wire_key.get(key)
        if name is not None:
            known[name] = value
        elif value is not None:
            supplementary[key] = value
    return cls(**known, supplementary_data=supplementary)


def _loads(payload: str | bytes) -> Mapping[str, object]:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CodecError(f"Invalid HPP JSON payload: {exc}") from exc
    if not isinstance(data, dict):
        raise CodecError("HPP JSON payload must be an object at the top level")
    return {str(key): value for key, value in data.items()}


def _dumps(fields: FieldSet) -> str:
    return json.dumps(field_set_to_dict(fields), ensure_ascii=False)


def request_to_json(request: HppRequest) -> str:
    """Serialise ``request`` to its wire JSON form."""

    return _dumps(request)


def request_from_json(payload: str | bytes) -> HppRequest:
    """Parse a wire JSON object into an :class:`HppRequest`."""

    return field_set_from_dict(HppRequest, _loads(payload))


def response_to_json(response: HppResponse) -> str:
    """Serialise ``response`` to its wire JSON form."""

    return _dumps(response)


def response_from_json(payload: str | bytes) -> HppResponse:
    """Parse a wire JSON object into an :class:`HppResponse`."""

    return field_set_from_dict(HppResponse, _loads(payload))
