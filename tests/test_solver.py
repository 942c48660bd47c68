import pytest

from minehint import (
    Board,
    HintSolver,
    InconsistentComponentError,
    Outcome,
    generate_board,
    solve,
)


class TestCertainMoves:
    def test_one_two_one(self, one_two_one_board):
        rec = HintSolver().solve(one_two_one_board)
        assert rec.outcome is Outcome.CERTAIN_MOVES
        assert rec.safe_cells == [(0, 1)]
        assert rec.mine_cells == [(0, 0), (0, 2)]
        assert rec.has_certain_moves
        assert not rec.has_guess
        # Probability phase is skipped when a safe cell is known.
        assert rec.probabilities == {}
        assert rec.stats["components"] == 0
        assert rec.stats["passes"] == 3

    def test_trivial_zero(self):
        board = Board.from_text(
            """
            0 .
            . .
            """
        )
        rec = solve(board)
        assert rec.safe_cells == [(0, 1), (1, 0), (1, 1)]
        assert rec.mine_cells == []

    def test_mines_only_still_computes_guess(self):
        board = Board.from_text(
            """
            3 M
            . .
            """
        )
        rec = solve(board)
        assert rec.outcome is Outcome.CERTAIN_MOVES
        assert rec.safe_cells == []
        assert rec.mine_cells == [(1, 0), (1, 1)]
        assert (0, 1) not in rec.mine_cells
        # Deduced mines are certain in the probability phase too.
        assert rec.probabilities == {(1, 0): 1.0, (1, 1): 1.0}


class TestGuess:
    def test_corner_one_three_way_tie(self, corner_one_board):
        rec = HintSolver().solve(corner_one_board)
        assert rec.outcome is Outcome.GUESS
        assert rec.safe_cells == []
        assert rec.mine_cells == []
        assert sorted(cell for cell, _ in rec.guess_cells) == [(0, 1), (1, 0), (1, 1)]
        assert rec.min_probability == pytest.approx(1 / 3)
        assert all(p == pytest.approx(1 / 3) for _, p in rec.guess_cells)
        assert rec.exact
        assert rec.stats["components"] == 1
        assert rec.stats["nodes"] > 0

    def test_lowest_probability_component_wins(self):
        # Left clue: one mine among five cells. Right clue: two among five.
        board = Board.from_text(
            """
            . . . . . . .
            1 . . . . . 2
            . . . . . . .
            """
        )
        rec = solve(board)
        assert rec.outcome is Outcome.GUESS
        assert rec.min_probability == pytest.approx(0.2)
        assert sorted(cell for cell, _ in rec.guess_cells) == [
            (0, 0), (0, 1), (1, 1), (2, 0), (2, 1)
        ]
        assert rec.probabilities[(1, 5)] == pytest.approx(0.4)

    def test_long_chain_board(self):
        board = Board.from_rows([".1" * 1200 + "."])
        rec = HintSolver().solve(board)
        assert rec.outcome is Outcome.GUESS
        assert rec.exact
        assert len(rec.guess_cells) == 1201
        assert rec.min_probability == pytest.approx(0.5)

    def test_parallel_matches_sequential(self):
        board = Board.from_text(
            """
            . . . . . . .
            1 . . . . . 2
            . . . . . . .
            """
        )
        sequential = HintSolver().solve(board)
        parallel = HintSolver(n_jobs=2).solve(board)
        assert sequential.stats["components"] == 2
        assert parallel.probabilities == sequential.probabilities
        assert parallel.guess_cells == sequential.guess_cells


class TestDegraded:
    def test_no_information_on_blank_board(self):
        rec = solve(Board())
        assert rec.outcome is Outcome.NO_INFORMATION
        assert not rec.has_certain_moves
        assert not rec.has_guess
        assert rec.min_probability is None

    def test_no_information_on_fully_revealed_board(self):
        rec = solve(Board.from_rows(["00", "00"]))
        assert rec.outcome is Outcome.NO_INFORMATION

    def test_inconsistent_component_reported(self):
        rec = solve(Board.from_rows(["2."]))
        assert rec.outcome is Outcome.NO_INFORMATION
        assert rec.inconsistent_cells == [(0, 1)]
        assert not rec.exact

    def test_inconsistent_component_strict(self):
        with pytest.raises(InconsistentComponentError):
            solve(Board.from_rows(["2."]), strict=True)

    def test_oversized_component_skipped(self, corner_one_board):
        rec = solve(corner_one_board, max_component_size=2)
        assert rec.outcome is Outcome.NO_INFORMATION
        assert rec.skipped_cells == [(0, 1), (1, 0), (1, 1)]

    def test_node_budget_marks_result_inexact(self, corner_one_board):
        rec = solve(corner_one_board, node_budget=2)
        assert not rec.exact


class TestConfiguration:
    @pytest.mark.parametrize(
        "options",
        [
            {"max_component_size": 0},
            {"node_budget": 0},
            {"time_limit": -1},
            {"tolerance": 1.5},
            {"tolerance": -0.1},
            {"n_jobs": 0},
        ],
    )
    def test_invalid_options(self, options):
        with pytest.raises(ValueError):
            HintSolver(**options)

    def test_solve_does_not_modify_board(self, one_two_one_board):
        before = one_two_one_board.to_rows()
        solve(one_two_one_board)
        assert one_two_one_board.to_rows() == before

    def test_repeated_solves_are_identical(self):
        board, _ = generate_board(7, 10, mines_count=12, reveal_count=25, seed=3)
        solver = HintSolver()
        first = solver.solve(board)
        second = solver.solve(board)
        assert first == second


@pytest.mark.parametrize("seed", range(20))
def test_recommendations_are_sound(seed):
    board, hidden = generate_board(5, 6, mines_count=7, reveal_count=12, seed=seed)
    rec = solve(board)
    assert not set(rec.safe_cells) & hidden
    assert set(rec.mine_cells) <= hidden
    if rec.has_guess:
        assert 0.0 <= rec.min_probability <= 1.0
