"""Command line front end: resolve a JSON vote setting and print the results."""

import argparse
import json
import sys

from .core import ITERATIONS
from .dynamics import SOLVERS
from .errors import LiquidVoteError
from .models import DelegationModel
from .models.delegation_matrix import UNRESOLVED_POLICIES


def build_parser():
    parser = argparse.ArgumentParser(
        prog="liquidvote",
        description="Resolve delegated (liquid democracy) votes into policy "
                    "totals and voter influence."
    )
    parser.add_argument("settings", help="JSON file with title, voters, policies and votes")
    parser.add_argument("--solver", choices=SOLVERS, default="power_series")
    parser.add_argument("--iterations", type=int, default=ITERATIONS,
                        help=f"delegation steps for power_series (default {ITERATIONS})")
    parser.add_argument("--vote-columns", type=int, default=None,
                        help="sum only the first K columns into vote totals (default: all voters)")
    parser.add_argument("--on-unresolved", choices=UNRESOLVED_POLICIES, default="warn",
                        help="handling of votes for unknown targets")
    parser.add_argument("--strict", action="store_true",
                        help="fail on Inf/NaN influence instead of warning")
    parser.add_argument("--output", "-o", default=None, help="write JSON here instead of stdout")
    parser.add_argument("--indent", type=int, default=2)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        model = DelegationModel.from_file(args.settings, on_unresolved=args.on_unresolved)
        model.analyze(
            solver=args.solver,
            iterations=args.iterations,
            vote_columns=args.vote_columns,
            strict=args.strict
        )
    except (LiquidVoteError, ValueError, RuntimeError, OSError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    try:
        text = json.dumps(model.summarize(), indent=args.indent,
                          ensure_ascii=False, allow_nan=False)
    except ValueError:
        print("error: influence or vote totals are not finite (NaN or Infinity); "
              "no valid JSON to write", file=sys.stderr)
        return 1
    if args.output is None:
        print(text)
    else:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    return 0
