from __future__ import annotations

import csv
from collections.abc import Generator, Iterable
from dataclasses import astuple

from .errors import InputFormatError, InvalidHopError
from .log import getLogger, stream_logger
from .route.models import Hop, HtlcInstruction

HOP_COLUMNS = (
    "path_id",
    "channel_name",
    "cltv_delta",
    "base_fee_msat",
    "proportional_fee_ppm",
)

INSTRUCTION_COLUMNS = (
    "path_id",
    "channel_name",
    "htlc_amount_msat",
    "htlc_expiry",
    "tlv",
)

LOG_INTERVAL = 10_000

logger = getLogger(__name__)


def _parse_int(row: dict, column: str, line: int) -> int:
    value = row[column]
    if value is None or not (value.isascii() and value.isdigit()):
        raise InputFormatError(
            f"line {line}: {column}={value!r} is not a non-negative integer"
        )
    return int(value)


def _parse_hop(row: dict, line: int) -> Hop:
    # The channel name is kept as is, it is part of the output sort key.
    if not (channel_name := row["channel_name"]):
        raise InputFormatError(f"line {line}: channel_name is missing")

    try:
        return Hop(
            path_id=_parse_int(row, "path_id", line),
            channel_name=channel_name,
            cltv_delta=_parse_int(row, "cltv_delta", line),
            base_fee_msat=_parse_int(row, "base_fee_msat", line),
            proportional_fee_ppm=_parse_int(row, "proportional_fee_ppm", line),
        )
    except InvalidHopError as e:
        raise InputFormatError(f"line {line}: {e}")


@stream_logger(interval=LOG_INTERVAL, items_name="hops")
def _hops_gen(file_name: str) -> Generator[Hop]:
    with open(file_name, newline="") as csv_file:
        reader = csv.DictReader(csv_file)

        fieldnames = [f.strip() for f in reader.fieldnames or []]
        if missing := [c for c in HOP_COLUMNS if c not in fieldnames]:
            raise InputFormatError(f"'{file_name}' misses columns {missing}")
        reader.fieldnames = fieldnames

        for row in reader:
            yield _parse_hop(row, reader.line_num)


def read_hops(file_name: str) -> list[Hop]:
    """Reads the hops from a csv file with a header line."""

    logger.debug(f"Reading hops from '{file_name}'")
    return list(_hops_gen(file_name))


def write_instructions(file_name: str, instructions: Iterable[HtlcInstruction]):
    """Writes the instructions with a header line to a csv file."""

    count = 0
    with open(file_name, "w", newline="") as csv_file:
        writer = csv.writer(csv_file, lineterminator="\n")
        writer.writerow(INSTRUCTION_COLUMNS)
        for instr in instructions:
            writer.writerow(astuple(instr))
            count += 1

    logger.debug(f"Written {count} instructions to '{file_name}'")
