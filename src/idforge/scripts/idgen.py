#!/usr/bin/env python3
"""
Local identifier tool.

Generates and inspects identifiers using the layout from the environment
(IDFORGE_* variables or .env), without starting the HTTP service.

Exit code:
  0 = success
  2 = invalid configuration or identifier

Typical usage:
  idforge-idgen generate -n 5 --worker-id 3
  idforge-idgen decode 434392874329473024
  idforge-idgen bounds 1700000000000
  idforge-idgen layout
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from idforge.core.errors import IdGeneratorError
from idforge.core.settings import settings
from idforge.schemas.ids import DecodedIdOut, LayoutOut
from idforge.services.generator import IdGenerator
from idforge.services.registry import build_layout

logger = logging.getLogger("idforge.idgen")

EXIT_OK = 0
EXIT_INVALID = 2


def _fail(msg: str) -> None:
    print(f"[idgen][FAIL] {msg}", file=sys.stderr)


def cmd_generate(args: argparse.Namespace) -> int:
    datacenter_id = settings.datacenter_id if args.datacenter_id is None else args.datacenter_id
    worker_id = settings.worker_id if args.worker_id is None else args.worker_id
    logger.debug(
        "Generating %d identifiers for datacenter=%d worker=%d", args.count, datacenter_id, worker_id
    )
    generator = IdGenerator(
        datacenter_id,
        worker_id,
        build_layout(settings),
        wait_timeout_ms=settings.sequence_wait_timeout_ms,
        spin_sleep_seconds=settings.spin_sleep_seconds,
    )
    for identifier in generator.generate_many(args.count):
        print(identifier)
    return EXIT_OK


def cmd_decode(args: argparse.Namespace) -> int:
    layout = build_layout(settings)
    for identifier in args.ids:
        decoded = layout.decode(identifier)
        print(DecodedIdOut.from_decoded(identifier, decoded).model_dump_json())
    return EXIT_OK


def cmd_bounds(args: argparse.Namespace) -> int:
    layout = build_layout(settings)
    print(
        json.dumps(
            {
                "timestamp_ms": args.timestamp_ms,
                "lower": layout.lower_bound(args.timestamp_ms),
                "upper": layout.upper_bound(args.timestamp_ms),
            }
        )
    )
    return EXIT_OK


def cmd_layout(args: argparse.Namespace) -> int:
    print(LayoutOut.from_layout(build_layout(settings)).model_dump_json(indent=2))
    return EXIT_OK


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate and inspect 64-bit identifiers")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Issue identifiers from a local generator")
    gen.add_argument("-n", "--count", type=int, default=1, help="Number of identifiers")
    gen.add_argument("--datacenter-id", type=int, default=None,
                     help="Override IDFORGE_DATACENTER_ID")
    gen.add_argument("--worker-id", type=int, default=None, help="Override IDFORGE_WORKER_ID")
    gen.set_defaults(func=cmd_generate)

    dec = sub.add_parser("decode", help="Split identifiers into their components")
    dec.add_argument("ids", type=int, nargs="+", metavar="ID")
    dec.set_defaults(func=cmd_decode)

    bounds = sub.add_parser("bounds", help="Identifier range for one millisecond")
    bounds.add_argument("timestamp_ms", type=int)
    bounds.set_defaults(func=cmd_bounds)

    layout = sub.add_parser("layout", help="Show the configured bit layout")
    layout.set_defaults(func=cmd_layout)

    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if getattr(args, "count", 1) < 1:
        _fail("count must be at least 1")
        return EXIT_INVALID
    try:
        return args.func(args)
    except IdGeneratorError as exc:
        _fail(str(exc))
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
