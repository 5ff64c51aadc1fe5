"""Board with collision detection and line clearing."""

from typing import List, Optional, Sequence, Tuple

from blockfall_core.errors import ConfigurationError
from blockfall_core.shapes import PieceKind, get_shape

# A cell is empty (None) or tagged with the kind that filled it
Cell = Optional[PieceKind]
Grid = List[List[Cell]]


class Board:
    """Fixed-size grid of cells, 20 rows by 10 columns unless told otherwise."""

    HEIGHT = 20
    WIDTH = 10

    def __init__(self, rows: int = HEIGHT, cols: int = WIDTH):
        """Initialize an empty board.

        Args:
            rows: Number of rows (y=0 is the top row)
            cols: Number of columns

        Raises:
            ConfigurationError: If either dimension is not positive
        """
        if rows <= 0 or cols <= 0:
            raise ConfigurationError(f"Board size must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.cells: Grid = self._empty_grid(rows, cols)

    @staticmethod
    def _empty_grid(rows: int, cols: int) -> Grid:
        return [[None] * cols for _ in range(rows)]

    def get(self, x: int, y: int) -> Cell:
        """Get the cell at (x, y).

        Args:
            x: Column
            y: Row

        Returns:
            Kind occupying the cell, or None when empty or off the board
        """
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def set(self, x: int, y: int, value: Cell) -> None:
        """Set the cell at (x, y); out of bounds writes are ignored."""
        if self.in_bounds(x, y):
            self.cells[y][x] = value

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def is_valid(self, kind: PieceKind, x: int, y: int, rotation: int) -> bool:
        """Check whether a shape fits at the given anchor and rotation.

        Cells above the top row (y < 0) are allowed and never checked
        against occupancy, so pieces can spawn partly above the board.

        Args:
            kind: Piece kind
            x: Anchor column
            y: Anchor row (may be negative)
            rotation: Rotation state

        Returns:
            True if every cell is inside the walls, above the floor and free
        """
        for dx, dy in get_shape(kind, rotation):
            cx, cy = x + dx, y + dy
            if cx < 0 or cx >= self.cols or cy >= self.rows:
                return False
            if cy >= 0 and self.cells[cy][cx] is not None:
                return False
        return True

    def place(self, kind: PieceKind, x: int, y: int, rotation: int) -> List[Tuple[int, int]]:
        """Write a shape into the grid.

        Cells above the top row are dropped.

        Returns:
            The (x, y) cells actually written
        """
        written = []
        for dx, dy in get_shape(kind, rotation):
            cx, cy = x + dx, y + dy
            if self.in_bounds(cx, cy):
                self.cells[cy][cx] = kind
                written.append((cx, cy))
        return written

    def is_row_full(self, y: int) -> bool:
        return all(cell is not None for cell in self.cells[y])

    def clear_full_rows(self) -> Tuple[Grid, List[int]]:
        """Remove every full row and compact the rest downward.

        The same number of empty rows is prepended at the top, so the grid
        keeps its size. The board adopts the compacted grid; the returned grid
        is a copy, so editing it does not touch the board.

        Returns:
            Tuple of (new grid, indices of the cleared rows in the old grid)
        """
        cleared = [y for y in range(self.rows) if self.is_row_full(y)]
        if not cleared:
            return [row.copy() for row in self.cells], []

        kept = [row for y, row in enumerate(self.cells) if y not in cleared]
        self.cells = self._empty_grid(len(cleared), self.cols) + kept
        return [row.copy() for row in self.cells], cleared

    def ghost_row(self, kind: PieceKind, x: int, y: int, rotation: int) -> int:
        """Find the lowest row a shape can drop to from its current row.

        Returns:
            Largest y' >= y reachable by moving straight down
        """
        ghost_y = y
        while self.is_valid(kind, x, ghost_y + 1, rotation):
            ghost_y += 1
        return ghost_y

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        new_board = Board(self.rows, self.cols)
        new_board.cells = [row.copy() for row in self.cells]
        return new_board

    def to_rows(self) -> Tuple[Tuple[Optional[str], ...], ...]:
        """Export the grid as nested tuples of kind letters (None for empty)."""
        return tuple(
            tuple(cell.value if cell is not None else None for cell in row)
            for row in self.cells
        )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]]) -> "Board":
        """Create a board from nested rows of kind letters.

        Args:
            rows: Rows top to bottom; each cell is a kind letter or None

        Returns:
            New board

        Raises:
            ConfigurationError: If the rows are empty or ragged
        """
        if not rows or not rows[0]:
            raise ConfigurationError("Board rows must not be empty")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ConfigurationError("Board rows must all have the same width")
        board = cls(len(rows), width)
        board.cells = [
            [PieceKind(cell) if cell is not None else None for cell in row]
            for row in rows
        ]
        return board
