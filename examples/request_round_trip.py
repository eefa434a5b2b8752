"""Build, sign and encode an HPP request, then verify a simulated response."""

from __future__ import annotations

import logging

from hpp_contract.models import HppRequest, HppResponse
from hpp_contract.service import HppService


def main() -> None:
    """Run a request/response exchange against an in-memory response."""
    logging.basicConfig(level=logging.DEBUG)

    service = HppService("secret", "UTF-8")

    request = HppRequest(
        merchant_id="merchantId",
        account="internet",
        amount=1001,
        currency="EUR",
        auto_settle_flag=True,
        card_storage_enable=True,
        payer_reference="payer-1",
        payment_reference="card-1",
    )
    request.add_supplementary_data("RETURN_URL", "https://shop.example/done")
    print("Request JSON:", service.request_to_json(request))

    # The payment page echoes identity fields back in its signed response.
    response = HppResponse(
        merchant_id=request.merchant_id,
        order_id=request.order_id,
        timestamp=request.timestamp,
        amount=request.amount,
        result="00",
        message="[ test system ] Authorised",
        pas_ref="14631546336115597",
        auth_code="12345",
    )
    wire = service.response_to_json(response)
    verified = service.response_from_json(wire)
    print("Verified response:", verified.result, verified.message)


if __name__ == "__main__":
    main()
