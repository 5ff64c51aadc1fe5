"""Piece kinds and their rotation states.

Each kind is defined by its shape in 4 rotation states.
Coordinates are relative to the piece anchor (top-left of bounding box).
"""

from enum import Enum
from typing import Dict, List, Tuple

# Type alias for piece coordinates
Coords = List[Tuple[int, int]]


class PieceKind(str, Enum):
    """The seven falling-block kinds."""
    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


# Shapes in 4 rotation states (0=spawn, 1=R, 2=2, 3=L)
# Each rotation is a list of (x, y) offsets relative to the anchor, y grows downward
SHAPES: Dict[PieceKind, List[Coords]] = {
    PieceKind.I: [
        [(0, 1), (1, 1), (2, 1), (3, 1)],  # 0: horizontal
        [(2, 0), (2, 1), (2, 2), (2, 3)],  # R: vertical
        [(0, 2), (1, 2), (2, 2), (3, 2)],  # 2: horizontal (shifted)
        [(1, 0), (1, 1), (1, 2), (1, 3)],  # L: vertical (shifted)
    ],
    PieceKind.O: [
        [(1, 0), (2, 0), (1, 1), (2, 1)],  # All rotations identical
        [(1, 0), (2, 0), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (2, 1)],
    ],
    PieceKind.T: [
        [(1, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (1, 1), (2, 1), (1, 2)],
        [(0, 1), (1, 1), (2, 1), (1, 2)],
        [(1, 0), (0, 1), (1, 1), (1, 2)],
    ],
    PieceKind.S: [
        [(1, 0), (2, 0), (0, 1), (1, 1)],
        [(1, 0), (1, 1), (2, 1), (2, 2)],
        [(1, 1), (2, 1), (0, 2), (1, 2)],
        [(0, 0), (0, 1), (1, 1), (1, 2)],
    ],
    PieceKind.Z: [
        [(0, 0), (1, 0), (1, 1), (2, 1)],
        [(2, 0), (1, 1), (2, 1), (1, 2)],
        [(0, 1), (1, 1), (1, 2), (2, 2)],
        [(1, 0), (0, 1), (1, 1), (0, 2)],
    ],
    PieceKind.J: [
        [(0, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (2, 0), (1, 1), (1, 2)],
        [(0, 1), (1, 1), (2, 1), (2, 2)],
        [(1, 0), (1, 1), (0, 2), (1, 2)],
    ],
    PieceKind.L: [
        [(2, 0), (0, 1), (1, 1), (2, 1)],
        [(1, 0), (1, 1), (1, 2), (2, 2)],
        [(0, 1), (1, 1), (2, 1), (0, 2)],
        [(0, 0), (1, 0), (1, 1), (1, 2)],
    ],
}

# Side length of the square bounding box each kind rotates in
BOX_WIDTH: Dict[PieceKind, int] = {
    PieceKind.I: 4,
    PieceKind.O: 4,
    PieceKind.T: 3,
    PieceKind.S: 3,
    PieceKind.Z: 3,
    PieceKind.J: 3,
    PieceKind.L: 3,
}

# Render metadata only, no gameplay meaning
COLORS: Dict[PieceKind, str] = {
    PieceKind.I: "#06b6d4",
    PieceKind.O: "#eab308",
    PieceKind.T: "#a855f7",
    PieceKind.S: "#22c55e",
    PieceKind.Z: "#ef4444",
    PieceKind.J: "#3b82f6",
    PieceKind.L: "#f97316",
}

ROTATION_STATES = 4


def get_shape(kind: PieceKind, rotation: int) -> Coords:
    """Get the cell offsets of a kind in a rotation state.

    Args:
        kind: Piece kind
        rotation: Rotation state (taken modulo 4)

    Returns:
        List of (x, y) offsets relative to the anchor
    """
    return SHAPES[kind][rotation % ROTATION_STATES]
