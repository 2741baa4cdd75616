"""
MDE — Entry point.

Classify equations or a two-column data file from the command line and
print the feature bag as XML (default) or JSON.
"""

import argparse
import json
import logging
import sys

import numpy as np

from mde.engine import classify_data, classify_equation


def _read_columns(path: str) -> list:
    table = np.loadtxt(path, delimiter="," if path.endswith(".csv") else None, ndmin=2)
    if table.shape[1] < 2:
        raise ValueError(f"{path}: expected at least two columns (x, y).")
    return [(row[0], list(row[1:])) for row in table]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mde",
        description="Describe the shape of equations such as 'x^2 + y^2 = 1'.",
    )
    parser.add_argument("equations", nargs="*", help="equations to classify")
    parser.add_argument("--data", metavar="FILE", help="classify x/y columns read from FILE")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="log debug output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.equations and not args.data:
        print("Nothing to classify: give an equation or --data FILE.", file=sys.stderr)
        return 1

    results = []
    try:
        for equation in args.equations:
            results.append(classify_equation(equation))
        if args.data:
            results.append(classify_data(_read_columns(args.data), name=args.data))
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(results if len(results) > 1 else results[0], indent=2))
    else:
        for result in results:
            print(f"{result['equation']}: {result['identity']}")
            print(result["xml"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
