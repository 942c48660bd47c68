"""Certain-move deduction: constraint extraction, propagation rules and the fixed-point driver."""

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, List, Optional, Set, Tuple

from .board import Board, Coord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Constraint:
    """
    "Exactly ``needed`` of ``cells`` are mines", derived from one revealed cell.

    ``anchor`` is the revealed cell the constraint came from; it is kept for
    tracing only and plays no role in the rules.
    """

    anchor: Coord
    needed: int
    cells: Tuple[Coord, ...]

    @property
    def cell_set(self) -> Set[Coord]:
        return set(self.cells)


@dataclass
class DeductionResult:
    """Outcome of running the propagation rules to a fixed point."""

    safe: Set[Coord]
    mine: Set[Coord]
    passes: int = 0
    constraints: List[Constraint] = field(default_factory=list)
    reached_fixed_point: bool = True

    # Metrics / counters (for analysis)
    inferred_direct_count: int = 0
    inferred_subset_count: int = 0
    attempted_subset_count: int = 0


def extract_constraint(
    board: Board,
    r: int,
    c: int,
    safe: AbstractSet[Coord] = frozenset(),
    mine: AbstractSet[Coord] = frozenset(),
) -> Optional[Constraint]:
    """
    Build the constraint anchored at a revealed cell.

    Neighbors marked as mines on the board or already deduced as mines count
    as known mines; unknown neighbors not yet deduced safe are the undetermined
    cells.

    Returns:
        The constraint, or None when the cell is not revealed or has no
        undetermined neighbors.
    """
    n = board.revealed_value(r, c)
    if n is None:
        return None

    known_mines = 0
    cells: List[Coord] = []
    for nbr in board.neighbors(r, c):
        nr, nc = nbr
        if board.is_mine(nr, nc) or nbr in mine:
            known_mines += 1
        elif board.is_unknown(nr, nc) and nbr not in safe:
            cells.append(nbr)

    if not cells:
        return None

    return Constraint(anchor=(r, c), needed=n - known_mines, cells=tuple(cells))


def extract_constraints(
    board: Board,
    safe: AbstractSet[Coord] = frozenset(),
    mine: AbstractSet[Coord] = frozenset(),
) -> List[Constraint]:
    """
    Build constraints for every revealed cell, in row-major order.

    With empty deduction sets this yields the board-only constraint system.
    """
    constraints: List[Constraint] = []
    for (r, c), _ in board.revealed_cells():
        constraint = extract_constraint(board, r, c, safe, mine)
        if constraint is not None:
            constraints.append(constraint)
    return constraints


def apply_direct_rules(
    constraint: Constraint, safe: Set[Coord], mine: Set[Coord]
) -> int:
    """
    Apply the satisfaction and necessity rules to one constraint.

    Satisfaction: no mines still needed -> every cell is safe.
    Necessity: mines needed equals cell count -> every cell is a mine.

    Returns:
        Number of coordinates newly added to either set.
    """
    if not constraint.cells:
        return 0

    added = 0
    if constraint.needed == 0:
        for cell in constraint.cells:
            if cell not in safe:
                safe.add(cell)
                added += 1

    if constraint.needed == len(constraint.cells):
        for cell in constraint.cells:
            if cell not in mine:
                mine.add(cell)
                added += 1

    return added


def apply_subset_rule(
    constraints: List[Constraint],
    safe: Set[Coord],
    mine: Set[Coord],
    result: Optional[DeductionResult] = None,
) -> int:
    """
    Apply the subset-difference rule to every ordered pair of constraints.

    When A's cells are a subset of B's, the cells only in B hold exactly
    ``B.needed - A.needed`` mines: all safe if that is zero, all mines if it
    equals their count.

    Returns:
        Number of coordinates newly added to either set.
    """
    cell_sets = [c.cell_set for c in constraints]
    added = 0

    for i, a in enumerate(constraints):
        set_a = cell_sets[i]
        for j, b in enumerate(constraints):
            if i == j:
                continue
            if not set_a <= cell_sets[j]:
                continue

            if result is not None:
                result.attempted_subset_count += 1

            diff = [cell for cell in b.cells if cell not in set_a]
            if not diff:
                continue

            mines_in_diff = b.needed - a.needed
            if mines_in_diff == 0:
                for cell in diff:
                    if cell not in safe:
                        safe.add(cell)
                        added += 1

            if mines_in_diff == len(diff):
                for cell in diff:
                    if cell not in mine:
                        mine.add(cell)
                        added += 1

    return added


def run_pass(
    board: Board, safe: Set[Coord], mine: Set[Coord], result: DeductionResult
) -> List[Constraint]:
    """
    Run one outer propagation pass, mutating ``safe`` and ``mine`` in place.

    Each revealed cell's constraint is extracted and the direct rules are
    applied to it before the next cell is extracted, so deductions are seen
    by the rest of the pass immediately. The subset rule then runs over the
    constraints collected during the pass.

    Returns:
        The constraints extracted in this pass.
    """
    constraints: List[Constraint] = []
    for (r, c), _ in board.revealed_cells():
        constraint = extract_constraint(board, r, c, safe, mine)
        if constraint is None:
            continue
        result.inferred_direct_count += apply_direct_rules(constraint, safe, mine)
        constraints.append(constraint)

    result.inferred_subset_count += apply_subset_rule(constraints, safe, mine, result)
    return constraints


def run_fixed_point(
    board: Board,
    safe: Optional[AbstractSet[Coord]] = None,
    mine: Optional[AbstractSet[Coord]] = None,
    max_passes: Optional[int] = None,
) -> DeductionResult:
    """
    Repeat propagation passes until a full pass adds no new deduction.

    Args:
        board: Board snapshot to reason about. It is never modified.
        safe: Optional seed of cells already known safe.
        mine: Optional seed of cells already known to be mines.
        max_passes: Optional cap on the number of passes; when reached before
            the fixed point, ``reached_fixed_point`` is False.

    Returns:
        DeductionResult with the accumulated sets and counters.

    Raises:
        ValueError: If max_passes is not positive.
    """
    if max_passes is not None and max_passes <= 0:
        raise ValueError("max_passes must be positive.")

    result = DeductionResult(
        safe=set(safe) if safe else set(),
        mine=set(mine) if mine else set(),
    )

    while True:
        before = (len(result.safe), len(result.mine))
        result.constraints = run_pass(board, result.safe, result.mine, result)
        result.passes += 1

        logger.debug(
            "Pass %d: %d constraints, %d safe, %d mines",
            result.passes,
            len(result.constraints),
            len(result.safe),
            len(result.mine),
        )

        if (len(result.safe), len(result.mine)) == before:
            result.reached_fixed_point = True
            break

        if max_passes is not None and result.passes >= max_passes:
            result.reached_fixed_point = False
            break

    return result
