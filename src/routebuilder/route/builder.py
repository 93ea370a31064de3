from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from routebuilder.log import getLogger

from .models import (
    MAX_AMOUNT_MSAT,
    MAX_EXPIRY,
    TLV_NULL,
    Hop,
    HtlcInstruction,
    Path,
    PaymentContext,
    check_bounds,
)
from .paths import group_by_path
from .tlv import encode_payment_data

logger = getLogger(__name__)


def per_path_amount(amount_msat: int, num_paths: int) -> int:
    """
    Amount delivered to the recipient by each path. The remainder of the
    division is not distributed, hence the sum over all paths can be smaller
    than amount_msat.
    """

    if num_paths > 1:
        return amount_msat // num_paths
    return amount_msat


def propagate(
    path: Path,
    context: PaymentContext,
    is_multipath: bool,
    amount_msat: int | None = None,
) -> list[HtlcInstruction]:
    """
    Calculates the htlc amount and expiry every hop of the path has to use for
    its outgoing htlc, starting at the recipient and walking back to the sender.

    amount_msat is the amount the path delivers to the recipient and defaults
    to the amount of the payment. If is_multipath is set, the hop next to the
    recipient carries the payment data record.

    The instructions are returned in the hop order of the path.
    """

    amount = amount_msat if amount_msat is not None else context.amount_msat
    expiry = context.final_expiry

    tlv_final = TLV_NULL
    if is_multipath and not path.is_empty():
        tlv_final = encode_payment_data(context.payment_secret, context.amount_msat)

    res: list[HtlcInstruction] = []
    num_hops = len(path)

    # distance 0 is the hop next to the recipient, distance num_hops - 1 the
    # first hop of the sender.
    for distance, hop in enumerate(reversed(path.hops)):
        res.append(
            HtlcInstruction(
                path_id=path.path_id,
                channel_name=hop.channel_name,
                htlc_amount_msat=amount,
                htlc_expiry=expiry,
                tlv=tlv_final if distance == 0 else TLV_NULL,
            )
        )

        if distance == num_hops - 1:
            break

        # The previous hop forwards through this hop's channel, hence this
        # hop's fee and cltv_delta are added for the previous hop.
        amount, expiry = _add_hop(hop, amount, expiry)

        logger.trace_lazy(
            lambda: f"path {path.path_id}: {hop.channel_name=} added fee; "
            f"next {amount=}, {expiry=}"
        )

    res.reverse()
    return res


def _add_hop(hop: Hop, amount: int, expiry: int) -> tuple[int, int]:
    amount = check_bounds(amount + hop.fee_msat(amount), MAX_AMOUNT_MSAT, "htlc_amount")
    expiry = check_bounds(expiry + hop.cltv_delta, MAX_EXPIRY, "htlc_expiry")
    return amount, expiry


def _run_concurrent(tasks: list[Callable[[], list[HtlcInstruction]]]) -> list:
    """
    Runs the tasks concurrently and returns their results. The first error
    raised by a task cancels the remaining tasks and is raised again.
    """

    res: list[list[HtlcInstruction]] = []
    with ThreadPoolExecutor() as executor:
        futures = [executor.submit(t) for t in tasks]

        for future in as_completed(futures):
            try:
                res.append(future.result())
            except Exception as e:
                executor.shutdown(wait=True, cancel_futures=True)
                raise e

    return res


def _run_sync(tasks: list[Callable[[], list[HtlcInstruction]]]) -> list:
    """Runs the tasks synchronously."""

    return [task() for task in tasks]


def build_routes(
    hops: Sequence[Hop], context: PaymentContext, parallel: bool = False
) -> list[HtlcInstruction]:
    """
    Groups the hops by path, propagates amounts and expiries for all non empty
    paths and returns the instructions sorted by path_id and channel_name.
    """

    paths = [p for p in group_by_path(hops) if not p.is_empty()]
    num_paths = len(paths)
    if num_paths == 0:
        logger.info("No hops given; nothing to do")
        return []

    is_multipath = num_paths > 1
    amount = per_path_amount(context.amount_msat, num_paths)
    logger.info(
        f"Building {num_paths} paths with {amount=} msat each; {is_multipath=}"
    )

    if is_multipath and (rest := context.amount_msat - amount * num_paths) > 0:
        logger.warning(
            f"amount_msat={context.amount_msat} is not divisible by "
            f"{num_paths=}; {rest} msat are not delivered"
        )

    def task(path: Path) -> Callable[[], list[HtlcInstruction]]:
        return lambda: propagate(path, context, is_multipath, amount)

    tasks = [task(p) for p in paths]
    results = _run_concurrent(tasks) if parallel else _run_sync(tasks)

    res = [instr for instructions in results for instr in instructions]
    res.sort(key=HtlcInstruction.sort_key)
    return res
