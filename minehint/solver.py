"""Hint solver: certain-move deduction first, exact probabilities when stuck."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from joblib import Parallel, delayed

from .board import Board, Coord
from .deduction import DeductionResult, extract_constraints, run_fixed_point
from .probability import (
    DEFAULT_TOLERANCE,
    Component,
    ComponentResult,
    aggregate_probabilities,
    evaluate_component,
    partition_frontier,
)

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What kind of advice a Recommendation carries."""

    CERTAIN_MOVES = "certain_moves"
    GUESS = "guess"
    NO_INFORMATION = "no_information"


@dataclass
class Recommendation:
    """Advice for one board snapshot."""

    outcome: Outcome
    safe_cells: List[Coord] = field(default_factory=list)
    mine_cells: List[Coord] = field(default_factory=list)
    guess_cells: List[Tuple[Coord, float]] = field(default_factory=list)
    min_probability: Optional[float] = None
    probabilities: Dict[Coord, float] = field(default_factory=dict)
    exact: bool = True
    inconsistent_cells: List[Coord] = field(default_factory=list)
    skipped_cells: List[Coord] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_certain_moves(self) -> bool:
        return bool(self.safe_cells or self.mine_cells)

    @property
    def has_guess(self) -> bool:
        return bool(self.guess_cells)


class HintSolver:
    """
    Decision-support solver for a partially revealed Minesweeper board.

    The solver works in two phases:
    1. Deduction: direct satisfaction/necessity rules and the subset-difference
       rule, repeated until nothing new is found.
    2. Probability: only when no safe cell was deduced, exact marginal mine
       probabilities for every frontier cell, computed per connected component.
    """

    def __init__(
        self,
        max_component_size: Union[int, float] = float("inf"),
        node_budget: Optional[int] = None,
        time_limit: Optional[float] = None,
        tolerance: float = DEFAULT_TOLERANCE,
        n_jobs: int = 1,
        strict: bool = False,
    ) -> None:
        """
        Configure a solver.

        Args:
            max_component_size: Largest component (in cells) solved exactly;
                larger components are reported in ``skipped_cells``.
            node_budget: Optional per-component cap on search nodes. Components
                that hit it contribute best-effort counts and the recommendation
                is tagged inexact.
            time_limit: Optional wall-clock budget in seconds for the whole
                probability phase, with the same best-effort behavior.
            tolerance: Probabilities within this distance of the minimum are
                treated as tied for the best guess.
            n_jobs: Number of joblib workers for solving components; 1 solves
                them sequentially in-process, -1 uses all cores.
            strict: If True, inconsistent or oversized components raise instead
                of being reported in the recommendation.

        Raises:
            ValueError: If any option is out of range.
        """
        if max_component_size <= 0:
            raise ValueError("max_component_size must be positive.")
        if node_budget is not None and node_budget <= 0:
            raise ValueError("node_budget must be positive.")
        if time_limit is not None and time_limit < 0:
            raise ValueError("time_limit must be non-negative.")
        if not 0 <= tolerance < 1:
            raise ValueError("tolerance must be in [0, 1).")
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero.")

        self.max_component_size = max_component_size
        self.node_budget = node_budget
        self.time_limit = time_limit
        self.tolerance = tolerance
        self.n_jobs = n_jobs
        self.strict = strict

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def deduce(self, board: Board, max_passes: Optional[int] = None) -> DeductionResult:
        """Run the propagation rules on ``board`` to a fixed point."""
        return run_fixed_point(board, max_passes=max_passes)

    def frontier_components(self, board: Board) -> List[Component]:
        """Partition the board-only constraint system into independent components."""
        return partition_frontier(extract_constraints(board))

    def solve_components(
        self, components: List[Component], deadline: Optional[float] = None
    ) -> List[ComponentResult]:
        """Solve every component independently, in parallel when n_jobs != 1."""
        kwargs: Dict[str, Any] = {
            "max_cells": self.max_component_size,
            "node_budget": self.node_budget,
            "deadline": deadline,
            "strict": self.strict,
        }

        if self.n_jobs == 1 or len(components) <= 1:
            return [evaluate_component(comp, **kwargs) for comp in components]

        return Parallel(n_jobs=self.n_jobs)(
            delayed(evaluate_component)(comp, **kwargs) for comp in components
        )

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def solve(self, board: Board) -> Recommendation:
        """
        Produce a recommendation for the current board.

        Certain safe cells take priority: when any exist they are returned
        together with the deduced mines and no probabilities are computed.
        Otherwise the lowest-probability frontier cells are returned as the
        best guess.
        """
        snapshot = board.snapshot()

        deduction = self.deduce(snapshot)
        safe_cells = sorted(deduction.safe)
        mine_cells = sorted(c for c in deduction.mine if not snapshot.is_mine(*c))

        stats: Dict[str, Any] = {
            "passes": deduction.passes,
            "constraints": len(deduction.constraints),
            "components": 0,
            "nodes": 0,
            "inferred_direct_count": deduction.inferred_direct_count,
            "inferred_subset_count": deduction.inferred_subset_count,
            "attempted_subset_count": deduction.attempted_subset_count,
        }

        if safe_cells:
            logger.info(
                "Found %d safe cells and %d mines in %d passes",
                len(safe_cells),
                len(mine_cells),
                deduction.passes,
            )
            return Recommendation(
                outcome=Outcome.CERTAIN_MOVES,
                safe_cells=safe_cells,
                mine_cells=mine_cells,
                stats=stats,
            )

        components = self.frontier_components(snapshot)
        deadline = (
            time.monotonic() + self.time_limit if self.time_limit is not None else None
        )
        results = self.solve_components(components, deadline)

        guesses, min_probability, probabilities = aggregate_probabilities(
            results, self.tolerance
        )

        inconsistent_cells: List[Coord] = []
        skipped_cells: List[Coord] = []
        for result in results:
            if result.status == "inconsistent":
                inconsistent_cells.extend(result.cells)
            elif result.status == "too_large":
                skipped_cells.extend(result.cells)

        stats["components"] = len(components)
        stats["nodes"] = sum(r.nodes for r in results)

        if mine_cells:
            outcome = Outcome.CERTAIN_MOVES
        elif guesses:
            outcome = Outcome.GUESS
        else:
            outcome = Outcome.NO_INFORMATION

        logger.info(
            "No safe deduction; %d components, %d guess cells at p=%s",
            len(components),
            len(guesses),
            "n/a" if min_probability is None else f"{min_probability:.4f}",
        )

        return Recommendation(
            outcome=outcome,
            mine_cells=mine_cells,
            guess_cells=guesses,
            min_probability=min_probability,
            probabilities=probabilities,
            exact=all(r.exact for r in results),
            inconsistent_cells=sorted(inconsistent_cells),
            skipped_cells=sorted(skipped_cells),
            stats=stats,
        )


def solve(board: Board, **options: Any) -> Recommendation:
    """Solve ``board`` with a HintSolver configured by ``options``."""
    return HintSolver(**options).solve(board)
