import matplotlib

matplotlib.use("Agg")

import pytest

from minehint import Board


@pytest.fixture
def one_two_one_board() -> Board:
    """1-2-1 against the top wall: mines at both ends, middle safe."""
    return Board.from_text(
        """
        . . .
        1 2 1
        """
    )


@pytest.fixture
def corner_one_board() -> Board:
    """3x3 board with a single 1 in the corner and nothing else known."""
    return Board.from_text(
        """
        1 . .
        . . .
        . . .
        """
    )
