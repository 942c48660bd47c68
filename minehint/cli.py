"""Command-line entry point: read a board, print the recommendation."""

import argparse
import logging
import sys
from typing import List, Optional

from .analysis import (
    describe_recommendation,
    format_recommendation,
    plot_probability_heatmap,
)
from .board import Board
from .probability import SolverError
from .solver import HintSolver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minehint",
        description=(
            "Suggest certain moves or the lowest-risk guess for a Minesweeper board. "
            "Board rows use '.' for unknown, 'M' for mine and 0-8 for revealed counts."
        ),
    )
    parser.add_argument(
        "board",
        nargs="?",
        default="-",
        help="Path to a board text file ('-' or omitted reads stdin).",
    )
    parser.add_argument(
        "--max-component-size",
        type=int,
        default=None,
        help="Skip frontier components with more cells than this.",
    )
    parser.add_argument(
        "--node-budget",
        type=int,
        default=None,
        help="Per-component search node limit (results become inexact).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Time budget in seconds for the probability phase.",
    )
    parser.add_argument(
        "--jobs", type=int, default=1, help="Parallel workers for components."
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on inconsistent or oversized components instead of skipping them.",
    )
    parser.add_argument(
        "--probabilities",
        action="store_true",
        help="Also list every computed frontier probability.",
    )
    parser.add_argument(
        "--heatmap", default=None, help="Save a probability heatmap image to this path."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.board == "-":
            text = sys.stdin.read()
        else:
            with open(args.board, encoding="utf-8") as f:
                text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: cannot read board: {e}", file=sys.stderr)
        return 2

    try:
        board = Board.from_text(text)
        solver = HintSolver(
            max_component_size=(
                float("inf") if args.max_component_size is None else args.max_component_size
            ),
            node_budget=args.node_budget,
            time_limit=args.time_limit,
            n_jobs=args.jobs,
            strict=args.strict,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        recommendation = solver.solve(board)
    except SolverError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_recommendation(board, recommendation, color=sys.stdout.isatty()))
    print()
    print(describe_recommendation(recommendation))

    if recommendation.inconsistent_cells:
        print(f"Inconsistent cells: {recommendation.inconsistent_cells}")
    if recommendation.skipped_cells:
        print(f"Skipped (component too large): {recommendation.skipped_cells}")

    if args.probabilities:
        for (r, c), p in sorted(recommendation.probabilities.items()):
            print(f"({r}, {c}): {p:.4f}")

    if args.heatmap:
        ax = plot_probability_heatmap(board, recommendation)
        ax.figure.savefig(args.heatmap, bbox_inches="tight")

    return 0


if __name__ == "__main__":
    sys.exit(main())
