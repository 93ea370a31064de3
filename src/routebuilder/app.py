from __future__ import annotations

import argparse
import logging
import os
import sys

from . import __version__
from .config import RouteBuilderConfig
from .csvio import read_hops, write_instructions
from .invoice import payment_context
from .log import set_logger
from .route.builder import build_routes

logger = logging.getLogger(__name__)


def _block_height(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise argparse.ArgumentTypeError(
            f"{value!r} is not a non-negative block height"
        )
    return int(value)


def _get_args(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="routebuilder",
        description=(
            "Calculates htlc amounts and expiries for the hops of one or more "
            "payment paths"
        ),
    )
    parser.add_argument("output_dir", type=str, help="Directory for output.csv")
    parser.add_argument("input_csv", type=str, help="CSV file with the hops")
    parser.add_argument("payment_request", type=str, help="BOLT11 payment request")
    parser.add_argument(
        "current_block_height",
        type=_block_height,
        help="Current height of the blockchain",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Optional toml config file (default: None)",
        default=None,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Version: {__version__}",
        help="Show the version",
    )
    return parser.parse_args(argv)


def run(
    config: RouteBuilderConfig,
    output_dir: str,
    input_csv: str,
    payment_request: str,
    current_height: int,
) -> str:
    """
    Builds the routes for the hops in input_csv and writes the result to the
    output_dir. Returns the path of the written file.
    """

    context = payment_context(payment_request, current_height, config.payment)
    hops = read_hops(input_csv)
    logger.info(f"Read {len(hops)} hops from '{input_csv}'")

    instructions = build_routes(hops, context, config.builder.parallel)

    os.makedirs(output_dir, exist_ok=True)
    output_file = os.path.join(output_dir, config.builder.output_file)
    write_instructions(output_file, instructions)
    logger.info(f"Written {len(instructions)} instructions to '{output_file}'")

    return output_file


def app(argv: list[str] | None = None) -> int:

    args = _get_args(argv)

    try:
        config = RouteBuilderConfig.from_config_file(args.config)
        set_logger(config.log_file, config.log_level)
        logger.info(f"Routebuilder {__version__=} starting...")

        output_file = run(
            config,
            args.output_dir,
            args.input_csv,
            args.payment_request,
            args.current_block_height,
        )

    except Exception as e:
        logger.exception("An unexpected error occurred.")
        print(f"Error: {e}", file=sys.stderr)
        logging.shutdown()
        return 1

    print(f"Successfully wrote output to {output_file}")
    logging.shutdown()
    return 0


def main() -> None:
    sys.exit(app())


if __name__ == "__main__":
    main()
