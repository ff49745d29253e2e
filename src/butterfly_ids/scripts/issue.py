# src/butterfly_ids/scripts/issue.py
"""Command line tool to issue ids or inspect an existing one.

Examples:
    butterfly-ids --count 5 --machine 8
    butterfly-ids --decompose 7512389452808765441 --machine 8
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from butterfly_ids.core import layout
from butterfly_ids.core.settings import Settings, settings
from butterfly_ids.services.issuer import Issuer, IssuerError

logger = logging.getLogger(__name__)


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} is negative")
    return number


def build_parser(config: Settings) -> argparse.ArgumentParser:
    """Return the argument parser, with defaults taken from ``config``."""
    parser = argparse.ArgumentParser(prog="butterfly-ids", description=__doc__.splitlines()[0])
    parser.add_argument(
        "-n",
        "--count",
        type=_non_negative,
        default=config.batch_size,
        help="number of ids to issue (default: %(default)s)",
    )
    parser.add_argument(
        "-m",
        "--machine",
        type=int,
        default=None,
        help=f"machine id of the issuer (default when issuing: {config.machine_id})",
    )
    parser.add_argument(
        "-t",
        "--timestamp",
        type=int,
        default=config.seed_timestamp,
        help="seed timestamp in milliseconds (default: wall clock)",
    )
    parser.add_argument(
        "--decompose",
        type=int,
        metavar="ID",
        help="print the fields of ID instead of issuing",
    )
    return parser


def _make_issuer(args: argparse.Namespace, config: Settings) -> Issuer:
    machine = config.machine_id if args.machine is None else args.machine
    if args.timestamp is None:
        return Issuer.create_now(machine)
    return Issuer.create_with_machine(args.timestamp, machine)


def main(argv: Sequence[str] | None = None, config: Settings | None = None) -> int:
    """Run the command line tool and return its exit status."""
    config = config or settings
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser(config).parse_args(argv)

    if args.decompose is not None:
        try:
            fields = layout.decompose(args.decompose, machine=args.machine)
        except ValueError as exc:
            logger.error("Cannot decompose %s: %s", args.decompose, exc)
            return 1
        for name, value in fields._asdict().items():
            print(f"{name}={value}")
        return 0

    try:
        issuer = _make_issuer(args, config)
        ids = issuer.generate_batch(args.count)
    except IssuerError as exc:
        logger.error("Failed to issue ids: %s", exc)
        return 1

    for issued in ids:
        print(issued)
    return 0


if __name__ == "__main__":
    sys.exit(main())
