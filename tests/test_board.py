import pytest

from minehint import MINE, UNKNOWN, Board
from minehint.board import neighborhood_map


class TestNeighborhoods:
    def test_corner_edge_and_center_are_clipped(self):
        nbrs = neighborhood_map(3, 4)
        assert len(nbrs[(0, 0)]) == 3
        assert len(nbrs[(0, 1)]) == 5
        assert len(nbrs[(1, 1)]) == 8
        assert set(nbrs[(2, 3)]) == {(1, 2), (1, 3), (2, 2)}

    def test_single_cell_board_has_no_neighbors(self):
        assert neighborhood_map(1, 1) == {(0, 0): ()}

    def test_results_are_cached(self):
        assert neighborhood_map(5, 6) is neighborhood_map(5, 6)

    @pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2)])
    def test_non_positive_size_rejected(self, rows, cols):
        with pytest.raises(ValueError):
            neighborhood_map(rows, cols)


class TestBoard:
    def test_default_size_is_seven_by_ten(self):
        board = Board()
        assert (board.rows, board.cols) == (7, 10)
        assert all(board.is_unknown(r, c) for r, c in board.coords())

    def test_from_text_parses_all_symbols(self):
        board = Board.from_text(
            """
            . ? _ 0
            M * F 8
            """
        )
        assert (board.rows, board.cols) == (2, 4)
        assert board.get(0, 0) is UNKNOWN
        assert board.get(0, 2) is UNKNOWN
        assert board.get(0, 3) == 0
        assert board.get(1, 0) == MINE
        assert board.get(1, 2) == MINE
        assert board.revealed_value(1, 3) == 8
        assert board.to_rows() == ["...0", "MMM8"]

    def test_compact_rows_without_spaces(self):
        board = Board.from_rows(["1.", "M2"])
        assert board.to_rows() == ["1.", "M2"]

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValueError):
            Board.from_rows(["...", ".."])

    @pytest.mark.parametrize("text", ["9 .", "x .", "", "   \n  "])
    def test_bad_text_rejected(self, text):
        with pytest.raises(ValueError):
            Board.from_text(text)

    def test_set_cell_validates(self):
        board = Board(2, 2)
        board.set_cell(0, 0, 3)
        board.set_cell(0, 1, MINE)
        assert board.to_rows() == ["3M", ".."]

        with pytest.raises(ValueError):
            board.set_cell(2, 0, 1)
        with pytest.raises(ValueError):
            board.set_cell(0, 0, 9)
        with pytest.raises(ValueError):
            board.set_cell(0, 0, "x")
        with pytest.raises(ValueError):
            board.set_cell(0, 0, True)

    def test_grid_size_must_match(self):
        with pytest.raises(ValueError):
            Board(2, 2, [[None, None]])

    def test_snapshot_is_independent(self):
        board = Board.from_rows(["1.", ".."])
        copy = board.snapshot()
        board.set_cell(1, 1, MINE)
        assert copy.to_rows() == ["1.", ".."]
        assert copy != board

    def test_with_mines_marks_only_unknown_cells(self):
        board = Board.from_rows(["1.", ".."])
        marked = board.with_mines([(0, 0), (0, 1)])
        assert marked.to_rows() == ["1M", ".."]
        assert board.to_rows() == ["1.", ".."]

    def test_reset(self):
        board = Board.from_rows(["1M", "2."])
        board.reset()
        assert board.to_rows() == ["..", ".."]

    def test_format_board_without_color(self):
        board = Board.from_rows(["1.", "M0"])
        text = board.format_board(color=False)
        lines = text.splitlines()
        assert len(lines) == 4
        assert lines[2] == " 0 | 1  ."
        assert lines[3] == " 1 | M  0"


class TestFormatBoard:
    def test_overlay_replaces_cell_symbols(self):
        board = Board.from_rows(["...", "121"])
        text = board.format_board(
            color=False, overlay={(0, 0): "F", (0, 1): "S", (0, 2): "F"}
        )
        assert text.splitlines()[2:] == [" 0 | F  S  F", " 1 | 1  2  1"]

    def test_without_coordinates(self):
        board = Board.from_rows(["1.", "M0"])
        assert board.format_board(color=False, show_coords=False).splitlines() == [
            " 1  .",
            " M  0",
        ]

    def test_color_marks_hints(self):
        board = Board.from_rows(["1."])
        text = board.format_board(color=True, overlay={(0, 1): "?"})
        assert "\033[93m?\033[0m" in text
