"""Board snapshot model: cell states, neighborhoods, parsing and formatting."""

import copy
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

Coord = Tuple[int, int]

# Cell states stored in Board.cells[row][col]:
#   None     -> unknown
#   "M"      -> marked mine
#   0..8     -> revealed count (int)
UNKNOWN = None
MINE = "M"

CellValue = Union[None, str, int]

DEFAULT_ROWS = 7
DEFAULT_COLS = 10

_UNKNOWN_SYMBOLS = {".", "?", "_"}
_MINE_SYMBOLS = {"M", "m", "*", "F", "f"}

_OFFSETS: Tuple[Coord, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

# (rows, cols) -> neighborhood map, shared by every board of that size
_NEIGHBORHOOD_MAPS: Dict[Coord, Dict[Coord, Tuple[Coord, ...]]] = {}


def neighborhood_map(rows: int, cols: int) -> Dict[Coord, Tuple[Coord, ...]]:
    """
    Return the 8-connected neighbors of every cell of a rows x cols grid.

    Edge and corner cells get fewer neighbors; neighbors are listed in
    row-major order. Maps are built once per grid size and then reused.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("Rows and cols must be positive.")

    nmap = _NEIGHBORHOOD_MAPS.get((rows, cols))
    if nmap is None:
        nmap = {
            (r, c): tuple(
                (r + dr, c + dc)
                for dr, dc in _OFFSETS
                if 0 <= r + dr < rows and 0 <= c + dc < cols
            )
            for r in range(rows)
            for c in range(cols)
        }
        _NEIGHBORHOOD_MAPS[(rows, cols)] = nmap
    return nmap


def validate_cell_value(value: object) -> CellValue:
    """
    Check that a value is a legal cell state and return it.

    Raises:
        ValueError: If the value is not None, "M" or an int in [0, 8].
    """
    if value is UNKNOWN or value == MINE:
        return value  # type: ignore[return-value]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid cell value: {value!r}")
    if not 0 <= value <= 8:
        raise ValueError(f"Revealed count must be in [0, 8], got {value}.")
    return value


def parse_symbol(symbol: str) -> CellValue:
    """Convert one text symbol into a cell state."""
    if symbol in _UNKNOWN_SYMBOLS:
        return UNKNOWN
    if symbol in _MINE_SYMBOLS:
        return MINE
    if symbol.isdigit() and len(symbol) == 1 and int(symbol) <= 8:
        return int(symbol)
    raise ValueError(f"Unrecognized cell symbol: {symbol!r}")


def cell_symbol(value: CellValue) -> str:
    """Convert a cell state into its canonical text symbol."""
    if value is UNKNOWN:
        return "."
    if value == MINE:
        return "M"
    return str(value)


class Board:
    """Rectangular grid of Unknown / Mine / Revealed(n) cells."""

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        cells: Optional[Sequence[Sequence[CellValue]]] = None,
    ) -> None:
        """
        Initialize a board.

        Args:
            rows: Number of rows, must be > 0.
            cols: Number of columns, must be > 0.
            cells: Optional initial grid (rows x cols). Defaults to all unknown.

        Raises:
            ValueError: If dimensions are invalid or the grid does not match them.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("Rows and cols must be positive.")

        self.rows: int = rows
        self.cols: int = cols

        if cells is None:
            self.cells: List[List[CellValue]] = [
                [UNKNOWN for _ in range(cols)] for _ in range(rows)
            ]
        else:
            if len(cells) != rows or any(len(row) != cols for row in cells):
                raise ValueError(f"Grid must be {rows}x{cols}.")
            self.cells = [[validate_cell_value(v) for v in row] for row in cells]

        self._neighborhoods: Dict[Coord, Tuple[Coord, ...]] = neighborhood_map(
            rows, cols
        )

    @classmethod
    def from_rows(cls, lines: Iterable[str]) -> "Board":
        """
        Parse a board from text rows.

        Each non-blank line is one row. Symbols may be separated by whitespace
        or written back to back: ``.``/``?``/``_`` unknown, ``M``/``*``/``F``
        mine, ``0``-``8`` revealed count.

        Raises:
            ValueError: On unknown symbols, ragged rows or an empty board.
        """
        grid: List[List[CellValue]] = []
        for line in lines:
            symbols = [ch for ch in line.strip() if not ch.isspace()]
            if not symbols:
                continue
            grid.append([parse_symbol(ch) for ch in symbols])

        if not grid:
            raise ValueError("Board text contains no rows.")

        cols = len(grid[0])
        if any(len(row) != cols for row in grid):
            raise ValueError("All board rows must have the same length.")

        return cls(len(grid), cols, grid)

    @classmethod
    def from_text(cls, text: str) -> "Board":
        """Parse a board from a multi-line string (see from_rows)."""
        return cls.from_rows(text.splitlines())

    def to_rows(self) -> List[str]:
        """Return the board as compact text rows, one symbol per cell."""
        return ["".join(cell_symbol(v) for v in row) for row in self.cells]

    def __repr__(self) -> str:
        return f"Board({self.rows}x{self.cols})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.rows, self.cols, self.cells) == (other.rows, other.cols, other.cells)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def neighbors(self, r: int, c: int) -> Tuple[Coord, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(r, c)]

    def get(self, r: int, c: int) -> CellValue:
        return self.cells[r][c]

    def is_unknown(self, r: int, c: int) -> bool:
        return self.cells[r][c] is UNKNOWN

    def is_mine(self, r: int, c: int) -> bool:
        return self.cells[r][c] == MINE

    def revealed_value(self, r: int, c: int) -> Optional[int]:
        """Return the revealed count of a cell, or None if it is not revealed."""
        v = self.cells[r][c]
        if isinstance(v, int):
            return v
        return None

    def coords(self) -> Iterator[Coord]:
        """Iterate over all coordinates in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def revealed_cells(self) -> Iterator[Tuple[Coord, int]]:
        """Iterate over ((r, c), n) for every revealed cell in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                v = self.cells[r][c]
                if isinstance(v, int):
                    yield (r, c), v

    # -------------------------------------------------------------------------
    # Editing (board editor operations; the solver never calls these)
    # -------------------------------------------------------------------------

    def set_cell(self, r: int, c: int, value: CellValue) -> None:
        """
        Set the state of one cell.

        Raises:
            ValueError: If the coordinate is outside the board or the value is invalid.
        """
        if not self.in_bounds(r, c):
            raise ValueError("Cell coordinates are outside the board.")
        self.cells[r][c] = validate_cell_value(value)

    def reset(self) -> None:
        """Set every cell back to unknown."""
        self.cells = [[UNKNOWN for _ in range(self.cols)] for _ in range(self.rows)]

    def snapshot(self) -> "Board":
        """Return an independent copy of the board."""
        return Board(self.rows, self.cols, copy.deepcopy(self.cells))

    def with_mines(self, mines: Iterable[Coord]) -> "Board":
        """Return a copy of the board with the given unknown cells marked as mines."""
        board = self.snapshot()
        for r, c in mines:
            if board.is_unknown(r, c):
                board.cells[r][c] = MINE
        return board

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"
    _ANSI_SAFE = "\033[92m"
    _ANSI_GUESS = "\033[93m"

    def format_board(
        self,
        color: bool = True,
        overlay: Optional[Dict[Coord, str]] = None,
        show_coords: bool = True,
    ) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            color: If True, color coordinate labels and marked cells with ANSI codes.
            overlay: Optional symbols drawn over individual cells, e.g. solver
                hints ('S' safe, 'F' mine, '?' guess).
            show_coords: If True, include a column header and row labels.

        Returns:
            A formatted multi-line string with the board grid.
        """
        overlay = overlay or {}
        symbol_colors = {
            "M": self._ANSI_MINE,
            "F": self._ANSI_MINE,
            "S": self._ANSI_SAFE,
            "?": self._ANSI_GUESS,
        }

        def paint(s: str, code: str) -> str:
            return f"{code}{s}{self._ANSI_RESET}" if color else s

        def cell_str(r: int, c: int) -> str:
            s = overlay.get((r, c), cell_symbol(self.cells[r][c]))
            code = symbol_colors.get(s)
            return paint(s, code) if code else s

        out: List[str] = []
        if show_coords:
            header_cells = " ".join(f"{c:2d}" for c in range(self.cols))
            out.append(paint("   " + header_cells, self._ANSI_COORD))
            out.append(paint("   " + "-" * (3 * self.cols - 1), self._ANSI_COORD))

        for r in range(self.rows):
            row_cells = " ".join(f" {cell_str(r, c)}" for c in range(self.cols))
            if show_coords:
                row_cells = paint(f"{r:2d} |", self._ANSI_COORD) + row_cells
            out.append(row_cells)

        return "\n".join(out)
