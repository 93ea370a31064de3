"""
Creation of the PaymentContext from a BOLT11 payment request.

Decoding is delegated to pyln-proto. Values configured in the 'payment'
section of the config file take precedence over the decoded ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pyln.proto import Invoice
from pyln.proto.invoice import trim_to_bytes

from .config import PaymentConf
from .errors import InvalidBlockHeight, PaymentRequestError
from .log import getLogger, log_func_call
from .route.models import PaymentContext
from .utils import bytes_to_str, first_some

# BOLT #11: if the c field is not provided, a min_final_cltv_expiry_delta of
# 18 is used.
DEFAULT_MIN_FINAL_CLTV_DELTA = 18

MSAT_PER_BTC = 10**11

logger = getLogger(__name__)


@dataclass
class DecodedRequest:
    amount_msat: int | None
    min_final_cltv_delta: int
    payment_secret: bytes | None


def btc_to_msat(amount: Decimal) -> int:
    msat = amount * MSAT_PER_BTC
    if msat != msat.to_integral_value():
        raise PaymentRequestError(f"amount {amount} BTC is not a multiple of 1 msat")
    return int(msat)


@log_func_call
def decode_payment_request(payment_request: str) -> DecodedRequest:
    try:
        inv = Invoice.decode(payment_request.strip())
    except Exception as e:
        raise PaymentRequestError(f"Cannot decode payment request: {e}")

    amount_msat = None
    if inv.amount is not None:
        amount_msat = btc_to_msat(Decimal(inv.amount))

    # pyln-proto keeps the payment secret (tag 's') as unknown tag.
    payment_secret = None
    for tag, tagdata in inv.unknown_tags:
        if tag == "s":
            payment_secret = trim_to_bytes(tagdata)

    return DecodedRequest(
        amount_msat=amount_msat,
        min_final_cltv_delta=first_some(
            inv.min_final_cltv_expiry, DEFAULT_MIN_FINAL_CLTV_DELTA
        ),
        payment_secret=payment_secret,
    )


def payment_context(
    payment_request: str, current_height: int, overrides: PaymentConf
) -> PaymentContext:
    """
    Creates the PaymentContext for the payment request. The request is only
    decoded if the overrides don't provide all values.
    """

    if current_height < 0:
        raise InvalidBlockHeight(f"current block height {current_height} is negative")

    if overrides.is_complete():
        logger.info("Using payment values from config; payment request not decoded")
        decoded = DecodedRequest(None, DEFAULT_MIN_FINAL_CLTV_DELTA, None)
    else:
        decoded = decode_payment_request(payment_request)

    amount_msat = first_some(overrides.amount_msat, decoded.amount_msat)
    if amount_msat is None:
        raise PaymentRequestError("Payment request has no amount")

    # The secret is only needed for multipath payments, encode_payment_data
    # rejects the empty secret then.
    payment_secret = first_some(
        overrides.payment_secret_bytes(), decoded.payment_secret
    )
    if payment_secret is None:
        logger.warning("Payment request has no payment secret")
        payment_secret = b""

    min_final_cltv_delta = first_some(
        overrides.min_final_cltv_delta, decoded.min_final_cltv_delta
    )

    logger.info(f"Payment: {amount_msat=}, {min_final_cltv_delta=}, {current_height=}")
    logger.debug(f"payment_secret={bytes_to_str(payment_secret)}")

    try:
        return PaymentContext(
            amount_msat=amount_msat,
            min_final_cltv_delta=min_final_cltv_delta,
            current_height=current_height,
            payment_secret=payment_secret,
        )
    except ValueError as e:
        raise PaymentRequestError(f"Invalid payment values: {e}")
