"""Environment-backed settings primitives for :mod:`hpp_contract`."""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["DEFAULT_CHARSET", "HppSettings", "get_settings"]

DEFAULT_CHARSET = "UTF-8"


class HppSettings(BaseSettings):
    """Expose environment-derived configuration knobs for HPP integrations.

    All environment lookups go through this class. The shared secret is held
    as a :class:`~pydantic.SecretStr` so it never appears in ``repr`` output
    or log records.

    Attributes:
        shared_secret: Secret agreed with the payment service, used only as
            digest input.
        charset: Character encoding applied on both transcoding passes.
        allow_empty_secret: Explicit opt-in to sign with an empty secret.
        config_path: Explicit path to a structured configuration file.
        validate_requests: Whether the service facade runs the rule table
            before sending a request.
    """

    shared_secret: SecretStr | None = Field(default=None, alias="HPP_SHARED_SECRET")
    charset: str = Field(default=DEFAULT_CHARSET, alias="HPP_CHARSET")
    allow_empty_secret: bool = Field(default=False, alias="HPP_ALLOW_EMPTY_SECRET")
    config_path: str | None = Field(default=None, alias="HPP_CONFIG_PATH")
    validate_requests: bool = Field(default=True, alias="HPP_VALIDATE_REQUESTS")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("charset", mode="before")
    @classmethod
    def _normalise_charset(cls, value: object) -> str:
        """Strip whitespace and fall back to the default for blank values."""

        if value is None:
            return DEFAULT_CHARSET
        text = str(value).strip()
        return text or DEFAULT_CHARSET

    @field_validator("config_path", mode="before")
    @classmethod
    def _blank_path_is_none(cls, value: object) -> str | None:
        if value in (None, ""):
            return None
        return str(value)

    @property
    def secret_value(self) -> str | None:
        """Return the plain shared secret, or ``None`` when unset."""

        if self.shared_secret is None:
            return None
        return self.shared_secret.get_secret_value()


def get_settings() -> HppSettings:
    """Return a :class:`HppSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return HppSettings()
