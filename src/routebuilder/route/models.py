from __future__ import annotations

from dataclasses import dataclass

from routebuilder.errors import ArithmeticOverflow, InvalidHopError

# Amounts are u64 values, expiries are u32 block heights.
MAX_AMOUNT_MSAT = 2**64 - 1
MAX_EXPIRY = 2**32 - 1

PAYMENT_SECRET_LEN = 32

# Value of the tlv column for hops without a payment data record.
TLV_NULL = "NULL"


def check_bounds(value: int, max_value: int, name: str) -> int:
    """
    Returns the value if it fits into [0, max_value]. Otherwise an
    ArithmeticOverflow is raised instead of wrapping around.
    """

    if value < 0 or value > max_value:
        raise ArithmeticOverflow(f"{name}={value} out of range [0, {max_value}]")
    return value


@dataclass(frozen=True)
class Hop:
    """
    One forwarding hop of a path as read from the input. The fee parameters
    and the cltv_delta are the ones of the hop's outgoing channel.
    """

    path_id: int
    channel_name: str
    cltv_delta: int
    base_fee_msat: int
    proportional_fee_ppm: int

    def __post_init__(self) -> None:
        for name in ("cltv_delta", "base_fee_msat", "proportional_fee_ppm"):
            if (value := getattr(self, name)) < 0:
                raise InvalidHopError(
                    f"{name}={value} of channel {self.channel_name!r} is negative"
                )

    def fee_msat(self, amount_msat: int) -> int:
        """Fee the hop charges for forwarding amount_msat on its channel."""

        return self.base_fee_msat + (
            amount_msat * self.proportional_fee_ppm
        ) // 1_000_000


@dataclass(frozen=True)
class Path:
    path_id: int

    # hops in forwarding order, i.e. from the sender to the recipient
    hops: tuple[Hop, ...] = ()

    def __len__(self) -> int:
        return len(self.hops)

    def is_empty(self) -> bool:
        return len(self.hops) == 0


@dataclass(frozen=True)
class PaymentContext:
    """
    Payment wide parameters, created once from the payment request and shared
    read-only by all paths.
    """

    amount_msat: int
    min_final_cltv_delta: int
    current_height: int
    payment_secret: bytes = b""

    def __post_init__(self) -> None:
        if self.amount_msat <= 0:
            raise ValueError(f"amount_msat must be positive: {self.amount_msat=}")
        check_bounds(self.amount_msat, MAX_AMOUNT_MSAT, "amount_msat")

        if self.min_final_cltv_delta < 0:
            raise ValueError(
                f"min_final_cltv_delta must not be negative: "
                f"{self.min_final_cltv_delta=}"
            )
        if self.current_height < 0:
            raise ValueError(
                f"current_height must not be negative: {self.current_height=}"
            )

    @property
    def final_expiry(self) -> int:
        """Absolute expiry the recipient expects for the incoming htlc."""

        return check_bounds(
            self.current_height + self.min_final_cltv_delta, MAX_EXPIRY, "htlc_expiry"
        )


@dataclass(frozen=True)
class HtlcInstruction:
    path_id: int
    channel_name: str
    htlc_amount_msat: int
    htlc_expiry: int
    tlv: str = TLV_NULL

    def sort_key(self) -> tuple[int, str]:
        return (self.path_id, self.channel_name)
