"""Command line tool for inspecting flows between levels.

Usage Examples:
    # Can data labeled Alice be written to a sink shared by Alice and Bob?
    lio check Alice Alice,Bob

    # Check against a declared set of principals:
    lio --principals principals.json check Alice Bob

    # List every level of the declared principals:
    lio --principals principals.json levels
"""

import argparse
import logging
import sys
from typing import List, Optional

from .error import UnknownPrincipalError
from .lattice import glb, lub
from .principals import Principals


def _universe(path: Optional[str]) -> Principals:
    if path is None:
        return Principals(closed=False)
    return Principals.load(path)


def _check(principals: Principals, args: argparse.Namespace) -> int:
    data = principals.parse(args.data)
    sink = principals.parse(args.sink)
    if data.can_flow_to(sink):
        print(f"allowed: {data!r} can flow to {sink!r}")
        return 0
    print(f"denied: {data!r} cannot flow to {sink!r}")
    return 1


def _join(principals: Principals, args: argparse.Namespace) -> int:
    print(repr(lub(*(principals.parse(text) for text in args.levels))))
    return 0


def _meet(principals: Principals, args: argparse.Namespace) -> int:
    print(repr(glb(*(principals.parse(text) for text in args.levels))))
    return 0


def _levels(principals: Principals, args: argparse.Namespace) -> int:
    for level in principals.levels():
        print(repr(level))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lio",
        description="Inspect information flows between security levels.",
    )
    parser.add_argument(
        "--principals",
        help="JSON file declaring the principals, e.g. {\"principals\": [\"Alice\"]}.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser(
        "check", help="Exit 0 if DATA can flow to SINK, 1 otherwise."
    )
    check.add_argument("data", help="Level of the data, e.g. 'Alice' or 'bot'.")
    check.add_argument("sink", help="Level of the sink, e.g. 'Alice,Bob' or 'top'.")
    check.set_defaults(handler=_check)

    join = subparsers.add_parser("join", help="Print the least upper bound.")
    join.add_argument("levels", nargs="+")
    join.set_defaults(handler=_join)

    meet = subparsers.add_parser("meet", help="Print the greatest lower bound.")
    meet.add_argument("levels", nargs="+")
    meet.set_defaults(handler=_meet)

    levels = subparsers.add_parser(
        "levels", help="List every level over the declared principals."
    )
    levels.set_defaults(handler=_levels)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        principals = _universe(args.principals)
        return args.handler(principals, args)
    except (OSError, ValueError, UnknownPrincipalError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
