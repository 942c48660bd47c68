"""Rendering, verification and benchmarking tools for the hint solver."""

import itertools
import random
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .board import MINE, Board, Coord
from .deduction import extract_constraints
from .solver import HintSolver, Outcome, Recommendation

# Largest frontier brute_force_probabilities will enumerate (2**n worlds).
MAX_BRUTE_FORCE_CELLS = 20


def format_recommendation(
    board: Board,
    recommendation: Recommendation,
    *,
    show_coords: bool = True,
    color: bool = False,
) -> str:
    """
    Format the board with the recommendation overlaid as a text grid.

    Deduced safe cells are shown as 'S', deduced mines as 'F', best-guess
    cells as '?'; everything else uses the board's own symbols.

    Args:
        board: Board the recommendation was computed for.
        recommendation: Solver output to overlay.
        show_coords: If True, include coordinate labels and a header.
        color: If True, highlight hints with ANSI codes.

    Returns:
        A multi-line string.
    """
    overlay: Dict[Coord, str] = {}
    for cell, _ in recommendation.guess_cells:
        overlay[cell] = "?"
    for cell in recommendation.mine_cells:
        overlay[cell] = "F"
    for cell in recommendation.safe_cells:
        overlay[cell] = "S"

    return board.format_board(color=color, overlay=overlay, show_coords=show_coords)


def describe_recommendation(recommendation: Recommendation) -> str:
    """One-line status text for a recommendation."""
    guess_msg = ""
    if recommendation.has_guess and recommendation.min_probability is not None:
        pct = recommendation.min_probability * 100
        qualifier = "" if recommendation.exact else ", inexact"
        guess_msg = (
            f" Best guess: {len(recommendation.guess_cells)} cell(s) "
            f"with lowest mine probability (~{pct:.1f}%{qualifier})."
        )

    if recommendation.outcome is Outcome.CERTAIN_MOVES:
        return (
            f"Found {len(recommendation.safe_cells)} safe cells and "
            f"{len(recommendation.mine_cells)} mines.{guess_msg}"
        )
    if recommendation.outcome is Outcome.GUESS:
        return f"No certain move.{guess_msg}"
    return "No certain move found and not enough information to guess."


def probability_grid(board: Board, recommendation: Recommendation) -> np.ndarray:
    """
    Build a rows x cols array of mine probabilities.

    Deduced safe cells are 0.0, deduced mines and marked mines 1.0, frontier
    cells carry their computed probability and everything else is NaN.
    """
    grid = np.full((board.rows, board.cols), np.nan, dtype=float)

    for r, c in board.coords():
        if board.get(r, c) == MINE:
            grid[r, c] = 1.0

    for (r, c), p in recommendation.probabilities.items():
        grid[r, c] = p
    for r, c in recommendation.safe_cells:
        grid[r, c] = 0.0
    for r, c in recommendation.mine_cells:
        grid[r, c] = 1.0

    return grid


def plot_probability_heatmap(
    board: Board,
    recommendation: Recommendation,
    ax: Optional[plt.Axes] = None,
    *,
    title: Optional[str] = None,
) -> plt.Axes:
    """
    Draw the probability grid as a heatmap with per-cell annotations.

    Revealed counts are printed on their cells, probabilities as percentages,
    and best-guess cells are outlined.

    Returns:
        The matplotlib Axes drawn on.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(board.cols * 0.6 + 1, board.rows * 0.6 + 1))

    grid = probability_grid(board, recommendation)
    image = ax.imshow(
        np.ma.masked_invalid(grid), cmap="RdYlGn_r", vmin=0.0, vmax=1.0
    )

    for r, c in board.coords():
        value = board.revealed_value(r, c)
        if value is not None:
            text = str(value) if value > 0 else ""
        elif board.is_mine(r, c):
            text = "M"
        elif not np.isnan(grid[r, c]):
            text = f"{grid[r, c] * 100:.0f}"
        else:
            text = ""
        if text:
            ax.text(c, r, text, ha="center", va="center", fontsize=8)

    for (r, c), _ in recommendation.guess_cells:
        ax.add_patch(
            plt.Rectangle((c - 0.5, r - 0.5), 1, 1, fill=False, edgecolor="blue", lw=2)
        )

    ax.set_xticks(range(board.cols))
    ax.set_yticks(range(board.rows))
    ax.set_title(title or "Mine probability (%)")
    ax.figure.colorbar(image, ax=ax, fraction=0.046, pad=0.04)
    return ax


def brute_force_probabilities(board: Board) -> Dict[Coord, float]:
    """
    Compute frontier mine probabilities by enumerating every assignment.

    No partitioning and no pruning: each of the 2**n assignments of the n
    frontier cells is checked against every board constraint. Intended as an
    independent cross-check on small boards.

    Returns:
        Mapping frontier cell -> probability; empty if no assignment is valid.

    Raises:
        ValueError: If the frontier has more than MAX_BRUTE_FORCE_CELLS cells.
    """
    constraints = extract_constraints(board)
    frontier: List[Coord] = []
    for constraint in constraints:
        for cell in constraint.cells:
            if cell not in frontier:
                frontier.append(cell)

    if len(frontier) > MAX_BRUTE_FORCE_CELLS:
        raise ValueError(
            f"Frontier of {len(frontier)} cells is too large for brute force."
        )

    index_of = {cell: i for i, cell in enumerate(frontier)}
    indexed = [
        (constraint.needed, [index_of[cell] for cell in constraint.cells])
        for constraint in constraints
    ]

    solutions = 0
    mine_counts = [0] * len(frontier)
    for assignment in itertools.product((0, 1), repeat=len(frontier)):
        if all(sum(assignment[i] for i in idxs) == needed for needed, idxs in indexed):
            solutions += 1
            for i, v in enumerate(assignment):
                mine_counts[i] += v

    if solutions == 0:
        return {}
    return {cell: mine_counts[i] / solutions for i, cell in enumerate(frontier)}


def generate_board(
    rows: int,
    cols: int,
    mines_count: int,
    reveal_count: int,
    *,
    flag_count: int = 0,
    seed: Optional[int] = None,
) -> Tuple[Board, FrozenSet[Coord]]:
    """
    Build a consistent partially revealed board from a random hidden layout.

    Args:
        rows: Board rows.
        cols: Board columns.
        mines_count: Number of hidden mines.
        reveal_count: Number of safe cells revealed with their true counts.
        flag_count: Number of hidden mines marked as mines on the board.
        seed: Optional seed for reproducible boards.

    Returns:
        Tuple of (board, hidden mine coordinates).

    Raises:
        ValueError: If the counts do not fit on the board.
    """
    total = rows * cols
    if not 0 <= mines_count <= total:
        raise ValueError("mines_count must be between 0 and the number of cells.")
    if not 0 <= reveal_count <= total - mines_count:
        raise ValueError("reveal_count must not exceed the number of safe cells.")
    if not 0 <= flag_count <= mines_count:
        raise ValueError("flag_count must not exceed mines_count.")

    rng = random.Random(seed)
    board = Board(rows, cols)
    all_cells = list(board.coords())

    mines = frozenset(rng.sample(all_cells, mines_count))
    safe_cells = [cell for cell in all_cells if cell not in mines]

    for r, c in rng.sample(safe_cells, reveal_count):
        count = sum(1 for nbr in board.neighbors(r, c) if nbr in mines)
        board.set_cell(r, c, count)

    for r, c in rng.sample(sorted(mines), flag_count):
        board.set_cell(r, c, MINE)

    return board, mines


def run_solver_many_tests(
    rows: int,
    cols: int,
    mines_count: int,
    reveal_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
    solver: Optional[HintSolver] = None,
) -> Dict[str, float]:
    """
    Solve many random boards and return averaged metrics.

    Args:
        rows: Board rows.
        cols: Board columns.
        mines_count: Hidden mines per board.
        reveal_count: Revealed cells per board.
        runs: Number of boards.
        seed: Optional base seed; board i uses ``seed + i``.
        solver: Optional configured solver (defaults to HintSolver()).

    Returns:
        Dict with:
        - certain_rate: fraction of boards with certain moves
        - guess_rate: fraction of boards answered with a guess
        - no_information_rate: fraction of boards with no advice
        - avg_safe_cells, avg_mine_cells, avg_nodes, avg_passes
        - avg_min_probability: mean minimum probability over guessed boards
          (NaN if no board needed a guess)
        - guess_failure_rate: fraction of guess cells that were hidden mines
        - unsound_deductions: total deduced-safe cells that were hidden mines
          plus deduced mines that were not
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    solver = solver or HintSolver()
    outcome_counts: Dict[Outcome, int] = defaultdict(int)
    safe_counts: List[int] = []
    mine_counts: List[int] = []
    nodes: List[int] = []
    passes: List[int] = []
    min_probabilities: List[float] = []
    guesses_total = 0
    guesses_failed = 0
    unsound = 0

    for i in range(runs):
        board, hidden = generate_board(
            rows,
            cols,
            mines_count,
            reveal_count,
            seed=None if seed is None else seed + i,
        )
        rec = solver.solve(board)

        outcome_counts[rec.outcome] += 1
        safe_counts.append(len(rec.safe_cells))
        mine_counts.append(len(rec.mine_cells))
        nodes.append(int(rec.stats.get("nodes", 0)))
        passes.append(int(rec.stats.get("passes", 0)))

        unsound += sum(1 for cell in rec.safe_cells if cell in hidden)
        unsound += sum(1 for cell in rec.mine_cells if cell not in hidden)

        if rec.has_guess and rec.min_probability is not None:
            min_probabilities.append(rec.min_probability)
            guesses_total += len(rec.guess_cells)
            guesses_failed += sum(1 for cell, _ in rec.guess_cells if cell in hidden)

    return {
        "certain_rate": outcome_counts[Outcome.CERTAIN_MOVES] / runs,
        "guess_rate": outcome_counts[Outcome.GUESS] / runs,
        "no_information_rate": outcome_counts[Outcome.NO_INFORMATION] / runs,
        "avg_safe_cells": float(np.mean(safe_counts)),
        "avg_mine_cells": float(np.mean(mine_counts)),
        "avg_nodes": float(np.mean(nodes)),
        "avg_passes": float(np.mean(passes)),
        "avg_min_probability": (
            float(np.mean(min_probabilities)) if min_probabilities else float("nan")
        ),
        "guess_failure_rate": (
            guesses_failed / guesses_total if guesses_total > 0 else 0.0
        ),
        "unsound_deductions": float(unsound),
    }
