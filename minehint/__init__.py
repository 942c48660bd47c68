"""
Minesweeper Hint Solver

A decision-support solver for partially revealed Minesweeper boards:
- Direct inference: satisfaction and necessity rules per revealed cell
- Subset inference: difference between nested constraint neighborhoods
- Exact probabilities: pruned backtracking over independent frontier components
- Best guess: every frontier cell tied for the lowest mine probability
"""

from .board import DEFAULT_COLS, DEFAULT_ROWS, MINE, UNKNOWN, Board
from .deduction import Constraint, DeductionResult, extract_constraints, run_fixed_point
from .probability import (
    Component,
    ComponentResult,
    ComponentTooLargeError,
    InconsistentComponentError,
    SolverError,
    aggregate_probabilities,
    partition_frontier,
    solve_component,
)
from .solver import HintSolver, Outcome, Recommendation, solve
from .analysis import (
    brute_force_probabilities,
    describe_recommendation,
    format_recommendation,
    generate_board,
    plot_probability_heatmap,
    probability_grid,
    run_solver_many_tests,
)

__version__ = "1.0.0"

__all__ = [
    # Board model
    "Board",
    "UNKNOWN",
    "MINE",
    "DEFAULT_ROWS",
    "DEFAULT_COLS",
    # Engine
    "Constraint",
    "DeductionResult",
    "extract_constraints",
    "run_fixed_point",
    "Component",
    "ComponentResult",
    "partition_frontier",
    "solve_component",
    "aggregate_probabilities",
    "HintSolver",
    "Outcome",
    "Recommendation",
    "solve",
    # Errors
    "SolverError",
    "InconsistentComponentError",
    "ComponentTooLargeError",
    # Analysis functions
    "format_recommendation",
    "describe_recommendation",
    "probability_grid",
    "plot_probability_heatmap",
    "brute_force_probabilities",
    "generate_board",
    "run_solver_many_tests",
]
