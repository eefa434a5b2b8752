"""Configuration loading for :mod:`hpp_contract`.

Environment settings are applied first, then an optional structured file
(JSON or YAML) whose ``hpp`` section overrides individual keys::

    hpp:
      shared_secret: "..."
      charset: "UTF-8"
      allow_empty_secret: false
      validate_requests: true
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import cast

import yaml

from hpp_contract.errors import ConfigurationError
from hpp_contract.settings import DEFAULT_CHARSET, HppSettings, get_settings

__all__ = ["HppConfig", "load_config", "resolve_charset"]

LOGGER = logging.getLogger(__name__)

_DEFAULT_CANDIDATES: tuple[Path, ...] = (
    Path("config/hpp.yml"),
    Path("configs/hpp.yml"),
    Path("config/hpp.json"),
    Path("configs/hpp.json"),
)


@dataclass(frozen=True, slots=True)
class HppConfig:
    """Strongly typed configuration for one HPP integration.

    Attributes:
        shared_secret: Secret used as digest input. Excluded from ``repr``.
        charset: Encoding threaded through both transcoding passes.
        allow_empty_secret: Explicit opt-in to accept an empty secret.
        validate_requests: Run the rule table before sending requests.
    """

    shared_secret: str | None = field(default=None, repr=False)
    charset: str = DEFAULT_CHARSET
    allow_empty_secret: bool = False
    validate_requests: bool = True

    def require_secret(self) -> str:
        """Return the shared secret or raise when it is missing.

        Raises:
            ConfigurationError: If the secret is unset or empty and
                ``allow_empty_secret`` is not enabled.
        """

        if self.shared_secret:
            return self.shared_secret
        if self.allow_empty_secret:
            return ""
        raise ConfigurationError(
            "HPP shared secret is not configured. Set HPP_SHARED_SECRET or "
            "enable allow_empty_secret explicitly."
        )


def resolve_charset(charset: str) -> str:
    """Return the canonical codec name for ``charset``.

    Raises:
        ConfigurationError: If the host runtime does not know the encoding.
    """

    if not isinstance(charset, str) or not charset.strip():
        raise ConfigurationError("A charset name is required for transcoding")
    try:
        return codecs.lookup(charset.strip()).name
    except LookupError as exc:
        raise ConfigurationError(f"Unknown charset: {charset!r}") from exc


def load_config(
    path: str | None = None, *, settings: HppSettings | None = None
) -> HppConfig:
    """Load configuration from environment and optional file sources.

    Args:
        path: Optional explicit path to a configuration file. When omitted the
            loader inspects ``HPP_CONFIG_PATH`` and the default locations.
        settings: Optional pre-instantiated environment settings.

    Returns:
        Fully populated :class:`HppConfig` instance with a validated charset.
    """

    env_settings = settings or get_settings()
    config = HppConfig(
        shared_secret=env_settings.secret_value,
        charset=env_settings.charset,
        allow_empty_secret=env_settings.allow_empty_secret,
        validate_requests=env_settings.validate_requests,
    )
    structured = _load_structured_config(path, env_settings)
    if structured is not None:
        section = _expect_mapping(structured.get("hpp"))
        if section is not None:
            config = _apply_section(config, section)

    resolve_charset(config.charset)
    return config


def _apply_section(config: HppConfig, section: Mapping[str, object]) -> HppConfig:
    """Apply overrides from the ``hpp`` section of a structured file."""

    updated = config

    secret = section.get("shared_secret")
    if isinstance(secret, str):
        updated = replace(updated, shared_secret=secret)

    charset = _coerce_str(section.get("charset"))
    if charset is not None:
        updated = replace(updated, charset=charset)

    allow_empty = _coerce_bool(section.get("allow_empty_secret"))
    if allow_empty is not None:
        updated = replace(updated, allow_empty_secret=allow_empty)

    validate = _coerce_bool(section.get("validate_requests"))
    if validate is not None:
        updated = replace(updated, validate_requests=validate)

    return updated


def _load_structured_config(
    path: str | None, settings: HppSettings
) -> dict[str, object] | None:
    """Load configuration data from the first candidate file that exists."""

    candidates: Iterable[Path]
    if path is not None:
        candidates = (Path(path),)
    elif settings.config_path:
        candidates = (Path(settings.config_path),)
    else:
        candidates = _DEFAULT_CANDIDATES

    for candidate in candidates:
        data = _load_config_file(candidate)
        if data is not None:
            LOGGER.debug("Loaded HPP configuration", extra={"path": str(candidate)})
            return data
    return None


def _load_config_file(path: Path) -> dict[str, object] | None:
    if not path.exists():
        return None
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _load_json(path)
    if suffix in {".yml", ".yaml"}:
        return _load_yaml(path)
    return None


def _load_json(path: Path) -> dict[str, object] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        LOGGER.warning("Ignoring unreadable HPP config", extra={"path": str(path)})
        return None
    return _normalize_mapping(data)


def _load_yaml(path: Path) -> dict[str, object] | None:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        LOGGER.warning("Ignoring unreadable HPP config", extra={"path": str(path)})
        return None
    return _normalize_mapping(data)


def _normalize_mapping(value: object) -> dict[str, object] | None:
    """Restrict parsed data to a mapping with string keys."""

    if not isinstance(value, dict):
        return None
    value_dict = cast(dict[object, object], value)
    return {key: item for key, item in value_dict.items() if isinstance(key, str)}


def _expect_mapping(value: object) -> Mapping[str, object] | None:
    if not isinstance(value, Mapping):
        return None
    if not all(isinstance(key, str) for key in value.keys()):
        return None
    return value


def _coerce_str(value: object) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _coerce_bool(value: object) -> bool | None:
    """Parse a boolean from configuration input."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes"}:
            return True
        if lowered in {"false", "0", "no"}:
            return False
    if isinstance(value, int):
        if value == 0:
            return False
        if value == 1:
            return True
    return None
