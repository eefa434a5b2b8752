"""Exception hierarchy for :mod:`hpp_contract`."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CodecError",
    "ConfigurationError",
    "FieldViolation",
    "HppError",
    "HppValidationError",
    "SignatureMismatchError",
    "TranscodingError",
]


class HppError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(HppError):
    """Raised for unusable configuration (secret, charset, digest algorithm).

    These errors are fatal for the current exchange and must not be retried.
    """


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single rule violation reported by the validation gate."""

    field: str
    wire_key: str
    message: str

    def __str__(self) -> str:
        return f"{self.wire_key}: {self.message}"


class HppValidationError(HppError):
    """Raised when a field set fails the pattern/length rule table."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        summary = "; ".join(str(violation) for violation in self.violations)
        super().__init__(f"HPP field validation failed: {summary}")


class TranscodingError(HppError):
    """Raised when a single field cannot be transcoded with the given charset."""

    def __init__(self, field: str, direction: str, reason: str) -> None:
        self.field = field
        self.direction = direction
        self.reason = reason
        super().__init__(f"Unable to transcode {field} ({direction}): {reason}")


class CodecError(HppError):
    """Raised when a wire JSON payload cannot be mapped onto a field set."""


class SignatureMismatchError(HppError):
    """Raised by the service facade when a response signature does not verify."""

    def __init__(self, order_id: str | None) -> None:
        self.order_id = order_id
        super().__init__("HPP response signature is invalid; do not honour it")
