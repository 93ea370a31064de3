"""
Encoding of the payment data record attached to the final hop of every path
of a multi-part payment.

Layout (56 bytes, all integers big-endian):

    type (u64) = 8 | length (u64) = 40 | payment_secret (32) | total_msat (u64)
"""

from __future__ import annotations

import binascii
import struct

from routebuilder.errors import SecretLengthMismatch, TlvDecodeError
from routebuilder.utils import bytes_to_str, str_to_bytes

from .models import MAX_AMOUNT_MSAT, PAYMENT_SECRET_LEN, check_bounds

PAYMENT_DATA_TYPE = 8
PAYMENT_DATA_LENGTH = PAYMENT_SECRET_LEN + 8

_RECORD = struct.Struct(f">QQ{PAYMENT_SECRET_LEN}sQ")


def encode_payment_data(payment_secret: bytes, total_msat: int) -> str:
    """
    Returns the payment data record as lowercase hex string. total_msat is the
    amount of the whole payment, not the amount of a single path.
    """

    if len(payment_secret) != PAYMENT_SECRET_LEN:
        raise SecretLengthMismatch(
            f"payment secret has {len(payment_secret)} bytes, "
            f"expected {PAYMENT_SECRET_LEN}"
        )
    check_bounds(total_msat, MAX_AMOUNT_MSAT, "total_msat")

    record = _RECORD.pack(
        PAYMENT_DATA_TYPE, PAYMENT_DATA_LENGTH, bytes(payment_secret), total_msat
    )
    return bytes_to_str(record)


def decode_payment_data(record_hex: str) -> tuple[bytes, int]:
    """Returns payment_secret and total_msat of an encoded record."""

    try:
        record = str_to_bytes(record_hex)
    except binascii.Error as e:
        raise TlvDecodeError(f"record is not a hex string: {e}")

    if len(record) != _RECORD.size:
        raise TlvDecodeError(
            f"record has {len(record)} bytes, expected {_RECORD.size}"
        )

    tlv_type, length, payment_secret, total_msat = _RECORD.unpack(record)
    if tlv_type != PAYMENT_DATA_TYPE:
        raise TlvDecodeError(f"unexpected record {tlv_type=}")
    if length != PAYMENT_DATA_LENGTH:
        raise TlvDecodeError(f"unexpected record {length=}")

    return payment_secret, total_msat
