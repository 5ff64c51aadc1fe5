"""Active piece: kind, anchor and rotation state."""

from dataclasses import dataclass
from typing import List, Tuple

from blockfall_core.shapes import BOX_WIDTH, ROTATION_STATES, PieceKind, get_shape

# Spawn row; the top row of most shapes starts one row above the board
SPAWN_Y = -1


@dataclass(frozen=True)
class ActivePiece:
    """A piece at a specific anchor and rotation.

    Pieces are frozen values: move() and with_rotation() return new pieces.

    Attributes:
        kind: Piece kind (a PieceKind or its letter)
        x: Anchor column
        y: Anchor row (0 is the top row, negative is above the board)
        rot: Rotation state, normalized to 0-3
    """

    kind: PieceKind
    x: int = 0
    y: int = 0
    rot: int = 0

    def __post_init__(self):
        object.__setattr__(self, "kind", PieceKind(self.kind))
        object.__setattr__(self, "rot", self.rot % ROTATION_STATES)

    def get_cells(self) -> List[Tuple[int, int]]:
        """Get absolute board coordinates of all 4 cells."""
        return [(self.x + dx, self.y + dy) for dx, dy in get_shape(self.kind, self.rot)]

    def move(self, dx: int, dy: int) -> "ActivePiece":
        """Return a new piece moved by the given delta."""
        return ActivePiece(self.kind, self.x + dx, self.y + dy, self.rot)

    def with_rotation(self, rot: int, dx: int = 0, dy: int = 0) -> "ActivePiece":
        """Return a new piece in rotation state rot, shifted by (dx, dy)."""
        return ActivePiece(self.kind, self.x + dx, self.y + dy, rot)

    def __repr__(self) -> str:
        return f"ActivePiece({self.kind.value}, x={self.x}, y={self.y}, rot={self.rot})"


def get_spawn_position(kind: PieceKind, cols: int = 10) -> Tuple[int, int]:
    """Get the spawn anchor for a kind.

    The bounding box is centered horizontally and starts one row above
    the board.

    Args:
        kind: Piece kind
        cols: Board width

    Returns:
        (x, y) spawn anchor
    """
    return ((cols - BOX_WIDTH[PieceKind(kind)]) // 2, SPAWN_Y)


def spawn_piece(kind: PieceKind, cols: int = 10) -> ActivePiece:
    """Create a piece at its spawn anchor with rotation 0."""
    x, y = get_spawn_position(kind, cols)
    return ActivePiece(kind, x, y, rot=0)
