"""Signing, transcoding and wire contract for hosted payment page integrations."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "ConfigurationError",
    "Direction",
    "HppConfig",
    "HppError",
    "HppRequest",
    "HppResponse",
    "HppService",
    "HppValidationError",
    "SignatureMismatchError",
    "TranscodingError",
    "apply_defaults",
    "load_config",
    "sign_request",
    "transcode",
    "validate_request",
    "verify_response",
]

if TYPE_CHECKING:
    from .config import HppConfig, load_config
    from .errors import (
        ConfigurationError,
        HppError,
        HppValidationError,
        SignatureMismatchError,
        TranscodingError,
    )
    from .generation import apply_defaults
    from .models import HppRequest, HppResponse
    from .service import HppService
    from .signing import sign_request, verify_response
    from .transcoding import Direction, transcode
    from .validation import validate_request


def __getattr__(name: str) -> Any:
    """Lazily import submodules so importing the package stays cheap."""

    module_map = {
        "ConfigurationError": "errors",
        "Direction": "transcoding",
        "HppConfig": "config",
        "HppError": "errors",
        "HppRequest": "models",
        "HppResponse": "models",
        "HppService": "service",
        "HppValidationError": "errors",
        "SignatureMismatchError": "errors",
        "TranscodingError": "errors",
        "apply_defaults": "generation",
        "load_config": "config",
        "sign_request": "signing",
        "transcode": "transcoding",
        "validate_request": "validation",
        "verify_response": "signing",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
