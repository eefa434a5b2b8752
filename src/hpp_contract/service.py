"""Service facade that runs the full outbound and inbound pipelines."""

from __future__ import annotations

import logging

from hpp_contract import codec, generation, signing, validation
from hpp_contract.config import HppConfig, resolve_charset
from hpp_contract.errors import SignatureMismatchError
from hpp_contract.models import HppRequest, HppResponse
from hpp_contract.settings import DEFAULT_CHARSET
from hpp_contract.transcoding import Direction, transcode

__all__ = ["HppService"]

LOGGER = logging.getLogger(__name__)


class HppService:
    """Bind one shared secret and one charset to the request/response pipelines.

    Outbound: defaults, sign, validate, encode, serialise. Inbound: parse,
    decode, verify. Signing and verification always see plain values.

    Args:
        secret: Shared secret agreed with the payment service.
        charset: Encoding used for both transcoding directions.
        allow_empty_secret: Explicit opt-in to accept an empty secret.
        validate_requests: Run the rule table before encoding requests.
    """

    def __init__(
        self,
        secret: str,
        charset: str = DEFAULT_CHARSET,
        *,
        allow_empty_secret: bool = False,
        validate_requests: bool = True,
    ) -> None:
        self._secret = signing.check_secret(secret, allow_empty_secret)
        self._allow_empty_secret = allow_empty_secret
        self.charset = resolve_charset(charset)
        self.validate_requests = validate_requests

    def __repr__(self) -> str:
        return f"{type(self).__name__}(charset={self.charset!r})"

    @classmethod
    def from_config(cls, config: HppConfig) -> HppService:
        """Build a service from a loaded :class:`HppConfig`."""

        return cls(
            config.require_secret(),
            config.charset,
            allow_empty_secret=config.allow_empty_secret,
            validate_requests=config.validate_requests,
        )

    def request_to_json(self, request: HppRequest) -> str:
        """Finalise, sign and encode ``request`` and return its wire JSON.

        ``request`` itself receives the generated defaults, the stored-card
        override and the signature; the encoded copy is what gets serialised.
        """

        generation.apply_defaults(request)
        signing.sign_request(
            request, self._secret, allow_empty_secret=self._allow_empty_secret
        )
        if self.validate_requests:
            validation.validate_request(request)
        encoded = transcode(request, Direction.TO_TRANSPORT, self.charset)
        LOGGER.debug(
            "Prepared HPP request",
            extra={"order_id": request.order_id, "merchant_id": request.merchant_id},
        )
        return codec.request_to_json(encoded)

    def request_from_json(self, payload: str | bytes, *, encoded: bool = True) -> HppRequest:
        """Parse a request payload, decoding it first when ``encoded``."""

        request = codec.request_from_json(payload)
        if encoded:
            request = transcode(request, Direction.FROM_TRANSPORT, self.charset)
        if self.validate_requests:
            validation.validate_request(request)
        return request

    def response_to_json(self, response: HppResponse) -> str:
        """Sign and encode ``response`` and return its wire JSON."""

        signing.sign_response(
            response, self._secret, allow_empty_secret=self._allow_empty_secret
        )
        return codec.response_to_json(
            transcode(response, Direction.TO_TRANSPORT, self.charset)
        )

    def response_from_json(
        self, payload: str | bytes, *, encoded: bool = True
    ) -> HppResponse:
        """Parse, decode and verify a response payload.

        Raises:
            SignatureMismatchError: If the response signature does not match.
        """

        response = codec.response_from_json(payload)
        if encoded:
            response = transcode(response, Direction.FROM_TRANSPORT, self.charset)
        if not signing.verify_response(
            response, self._secret, allow_empty_secret=self._allow_empty_secret
        ):
            raise SignatureMismatchError(response.order_id)
        return response
