"""Exact mine probabilities over independent frontier components."""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional, Set, Tuple, Union

from .board import Coord
from .deduction import Constraint

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-4

# How many search nodes between two deadline checks.
_DEADLINE_CHECK_INTERVAL = 1024


class SolverError(RuntimeError):
    """Base class for conditions that prevent an exact probability computation."""

    def __init__(self, message: str, cells: Iterable[Coord] = ()) -> None:
        super().__init__(message)
        self.cells: List[Coord] = list(cells)


class InconsistentComponentError(SolverError):
    """No mine assignment satisfies every constraint of a component."""


class ComponentTooLargeError(SolverError):
    """A component has more cells than the configured cap."""


@dataclass
class Component:
    """Connected group of frontier cells and the constraints over them."""

    cells: List[Coord]
    constraints: List[Constraint]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass
class ComponentResult:
    """
    Enumeration counts for one component.

    ``mine_counts[i]`` is the number of valid worlds in which ``cells[i]`` is a
    mine, out of ``solutions`` valid worlds in total.
    """

    cells: List[Coord]
    mine_counts: List[int]
    solutions: int
    nodes: int = 0
    exact: bool = True
    status: str = "exact"  # "exact", "partial", "inconsistent" or "too_large"
    message: str = ""

    def probabilities(self) -> Dict[Coord, float]:
        """Return each cell's marginal mine probability (empty when no world was found)."""
        if self.solutions == 0:
            return {}
        return {
            cell: count / self.solutions
            for cell, count in zip(self.cells, self.mine_counts)
        }


@dataclass
class _SearchState:
    assignment: List[int]
    mine_counts: List[int]
    solutions: int = 0
    nodes: int = 0
    stopped: bool = False
    stop_reason: str = ""


def build_incidence(constraints: List[Constraint]) -> Dict[Coord, List[int]]:
    """
    Map every frontier cell to the indices of the constraints that reference it.

    Cells appear in order of first reference, which keeps partitioning
    deterministic.
    """
    incidence: Dict[Coord, List[int]] = {}
    for idx, constraint in enumerate(constraints):
        for cell in constraint.cells:
            incidence.setdefault(cell, []).append(idx)
    return incidence


def partition_frontier(constraints: List[Constraint]) -> List[Component]:
    """
    Partition the frontier into components connected through shared constraints.

    Breadth-first traversal from each unvisited frontier cell; a cell is marked
    visited before it is enqueued, so every cell lands in exactly one component.
    """
    incidence = build_incidence(constraints)
    visited: Set[Coord] = set()
    components: List[Component] = []

    for start in incidence:
        if start in visited:
            continue

        cells: List[Coord] = []
        constraint_idx: List[int] = []
        seen_constraints: Set[int] = set()
        queue: Deque[Coord] = deque([start])
        visited.add(start)

        while queue:
            cell = queue.popleft()
            cells.append(cell)

            for idx in incidence[cell]:
                if idx in seen_constraints:
                    continue
                seen_constraints.add(idx)
                constraint_idx.append(idx)

                for other in constraints[idx].cells:
                    if other not in visited:
                        visited.add(other)
                        queue.append(other)

        components.append(
            Component(
                cells=cells,
                constraints=[constraints[i] for i in sorted(constraint_idx)],
            )
        )

    return components


def _index_constraints(
    component: Component,
) -> Tuple[List[Tuple[int, Tuple[int, ...]]], List[List[int]]]:
    """
    Rewrite constraints to cell indices.

    Returns:
        Tuple of:
        - indexed: (needed, sorted cell indices) per constraint
        - by_cell: cell index -> indices into ``indexed`` touching that cell
    """
    index_of = {cell: i for i, cell in enumerate(component.cells)}
    indexed: List[Tuple[int, Tuple[int, ...]]] = []
    by_cell: List[List[int]] = [[] for _ in component.cells]

    for constraint in component.constraints:
        idxs = tuple(sorted(index_of[cell] for cell in constraint.cells))
        k = len(indexed)
        indexed.append((constraint.needed, idxs))
        for i in idxs:
            by_cell[i].append(k)

    return indexed, by_cell


def _is_valid(
    idx: int,
    assignment: List[int],
    indexed: List[Tuple[int, Tuple[int, ...]]],
    touching: List[int],
) -> bool:
    """Check every constraint touching cell ``idx`` against the partial assignment."""
    for k in touching:
        needed, idxs = indexed[k]
        placed_mines = 0
        remaining = 0
        for i in idxs:
            if i <= idx:
                placed_mines += assignment[i]
            else:
                remaining += 1

        if placed_mines > needed:
            return False
        if placed_mines + remaining < needed:
            return False
    return True


def solve_component(
    component: Component,
    max_cells: Union[int, float] = float("inf"),
    node_budget: Optional[int] = None,
    deadline: Optional[float] = None,
) -> ComponentResult:
    """
    Count valid mine assignments of one component by pruned backtracking.

    Cells are assigned in order, safe (0) before mine (1). After each assignment
    the constraints touching that cell are checked: a constraint fails when it
    already holds more mines than needed, or when the cells still unassigned
    cannot make up the shortfall.

    Args:
        component: Component to enumerate.
        max_cells: Components with more cells raise ComponentTooLargeError.
        node_budget: Optional maximum number of search nodes; when exhausted the
            search stops and a partial result is returned.
        deadline: Optional ``time.monotonic()`` value after which the search
            stops and a partial result is returned.

    Returns:
        ComponentResult with exact counts, or best-effort counts tagged
        ``exact=False`` when the budget or deadline ran out.

    Raises:
        ComponentTooLargeError: If the component exceeds ``max_cells``.
        InconsistentComponentError: If the exhaustive search finds no valid world.
    """
    n = len(component.cells)
    if n > max_cells:
        raise ComponentTooLargeError(
            f"Component with {n} cells exceeds the limit of {max_cells} cells "
            "for exact computation.",
            component.cells,
        )

    indexed, by_cell = _index_constraints(component)
    state = _SearchState(assignment=[0] * n, mine_counts=[0] * n)

    def out_of_budget() -> bool:
        if node_budget is not None and state.nodes > node_budget:
            state.stop_reason = f"node budget of {node_budget} exhausted"
            return True
        if (
            deadline is not None
            and (state.nodes - 1) % _DEADLINE_CHECK_INTERVAL == 0
            and time.monotonic() > deadline
        ):
            state.stop_reason = "deadline exceeded"
            return True
        return False

    # Iterative depth-first search. next_value[idx] is the value to try next
    # at depth idx; 2 means both branches are done.
    next_value = [0] * n
    idx = 0
    while idx >= 0:
        if idx == n:
            state.solutions += 1
            for i in range(n):
                if state.assignment[i] == 1:
                    state.mine_counts[i] += 1
            idx -= 1
            continue

        value = next_value[idx]
        if value > 1:
            next_value[idx] = 0
            state.assignment[idx] = 0
            idx -= 1
            continue

        next_value[idx] = value + 1
        state.nodes += 1
        if out_of_budget():
            state.stopped = True
            break

        state.assignment[idx] = value
        if _is_valid(idx, state.assignment, indexed, by_cell[idx]):
            idx += 1

    if state.stopped:
        logger.warning(
            "Component of %d cells stopped early (%s) after %d nodes, %d worlds",
            n,
            state.stop_reason,
            state.nodes,
            state.solutions,
        )
        return ComponentResult(
            cells=list(component.cells),
            mine_counts=state.mine_counts,
            solutions=state.solutions,
            nodes=state.nodes,
            exact=False,
            status="partial",
            message=state.stop_reason,
        )

    if state.solutions == 0:
        raise InconsistentComponentError(
            f"No valid mine assignment for component of {n} cells.",
            component.cells,
        )

    logger.debug(
        "Component of %d cells: %d worlds in %d nodes", n, state.solutions, state.nodes
    )
    return ComponentResult(
        cells=list(component.cells),
        mine_counts=state.mine_counts,
        solutions=state.solutions,
        nodes=state.nodes,
    )


def evaluate_component(
    component: Component,
    max_cells: Union[int, float] = float("inf"),
    node_budget: Optional[int] = None,
    deadline: Optional[float] = None,
    strict: bool = False,
) -> ComponentResult:
    """
    Solve a component, turning degraded outcomes into tagged results.

    Inconsistent and oversized components come back with zero solutions and a
    ``status`` naming the condition, unless ``strict`` is set, in which case the
    error propagates.
    """
    try:
        return solve_component(component, max_cells, node_budget, deadline)
    except InconsistentComponentError as e:
        if strict:
            raise
        logger.warning("%s", e)
        status = "inconsistent"
        message = str(e)
    except ComponentTooLargeError as e:
        if strict:
            raise
        logger.warning("%s", e)
        status = "too_large"
        message = str(e)

    return ComponentResult(
        cells=list(component.cells),
        mine_counts=[0] * len(component.cells),
        solutions=0,
        exact=False,
        status=status,
        message=message,
    )


def aggregate_probabilities(
    results: Iterable[ComponentResult], tolerance: float = DEFAULT_TOLERANCE
) -> Tuple[List[Tuple[Coord, float]], Optional[float], Dict[Coord, float]]:
    """
    Merge per-component probabilities and pick the lowest-risk cells.

    Returns:
        Tuple of:
        - guesses: (cell, probability) pairs within ``tolerance`` of the minimum,
          in ascending probability order
        - min_probability: the global minimum, or None when nothing was computed
        - probabilities: every computed cell -> probability
    """
    probabilities: Dict[Coord, float] = {}
    for result in results:
        probabilities.update(result.probabilities())

    if not probabilities:
        return [], None, {}

    ranked = sorted(probabilities.items(), key=lambda t: t[1])
    min_probability = ranked[0][1]
    guesses = [(cell, p) for cell, p in ranked if abs(p - min_probability) < tolerance]

    return guesses, min_probability, probabilities
