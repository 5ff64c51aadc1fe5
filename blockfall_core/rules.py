"""Wall kicks, scoring and leveling rules.

Kick offsets are tried in order when a piece rotates; the first offset
that fits wins.
"""

from typing import Dict, List, Optional, Tuple

from blockfall_core.board import Board
from blockfall_core.piece import ActivePiece
from blockfall_core.shapes import ROTATION_STATES, PieceKind

Offset = Tuple[int, int]
KickTable = Dict[Tuple[int, int], List[Offset]]

# Wall kick data: (from_rot, to_rot) -> list of (dx, dy) offsets to try
# Offsets use y-up notation: a (dx, dy) kick moves the anchor to (x + dx, y - dy)
# Reference: https://tetris.wiki/Super_Rotation_System

# Wall kick data for J, L, S, T, Z pieces
WALL_KICKS_JLSTZ: KickTable = {
    (0, 1): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],  # 0->R
    (1, 0): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],      # R->0
    (1, 2): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],      # R->2
    (2, 1): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],  # 2->R
    (2, 3): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],     # 2->L
    (3, 2): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],   # L->2
    (3, 0): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],   # L->0
    (0, 3): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],     # 0->L
}

# Wall kick data for I piece (different from JLSTZ)
WALL_KICKS_I: KickTable = {
    (0, 1): [(0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)],   # 0->R
    (1, 0): [(0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)],   # R->0
    (1, 2): [(0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)],   # R->2
    (2, 1): [(0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)],   # 2->R
    (2, 3): [(0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)],   # 2->L
    (3, 2): [(0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)],   # L->2
    (3, 0): [(0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)],   # L->0
    (0, 3): [(0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)],   # 0->L
}

# O piece only ever tries staying in place (rotations are identical)
WALL_KICKS_O: KickTable = {
    (from_rot, (from_rot + step) % ROTATION_STATES): [(0, 0)]
    for from_rot in range(ROTATION_STATES)
    for step in (1, -1)
}

KICK_TABLES: Dict[PieceKind, KickTable] = {
    PieceKind.I: WALL_KICKS_I,
    PieceKind.O: WALL_KICKS_O,
    PieceKind.T: WALL_KICKS_JLSTZ,
    PieceKind.S: WALL_KICKS_JLSTZ,
    PieceKind.Z: WALL_KICKS_JLSTZ,
    PieceKind.J: WALL_KICKS_JLSTZ,
    PieceKind.L: WALL_KICKS_JLSTZ,
}

# Lines cleared at once -> base points (multiplied by level)
SCORE_TABLE: Dict[int, int] = {
    0: 0,
    1: 100,   # Single
    2: 300,   # Double
    3: 500,   # Triple
    4: 800,   # Four lines
}

SOFT_DROP_POINTS = 1  # per row moved by player input
HARD_DROP_POINTS = 2  # per row traversed
LINES_PER_LEVEL = 10


def kick_candidates(kind: PieceKind, from_rot: int, to_rot: int) -> List[Offset]:
    """Get the ordered kick offsets for a rotation transition.

    Args:
        kind: Piece kind
        from_rot: Current rotation state
        to_rot: Target rotation state

    Returns:
        Offsets to try, in order (empty if the transition is unknown)
    """
    return KICK_TABLES[kind].get((from_rot, to_rot), [])


def try_rotate(board: Board, piece: ActivePiece, direction: int) -> Optional[ActivePiece]:
    """Attempt to rotate a piece with wall kicks.

    Args:
        board: Current board state
        piece: Piece to rotate
        direction: +1 for clockwise, -1 for counter-clockwise

    Returns:
        Rotated piece if some kick fits, None if rotation impossible
    """
    to_rot = (piece.rot + direction) % ROTATION_STATES
    for dx, dy in kick_candidates(piece.kind, piece.rot, to_rot):
        # Kick offsets are y-up, the board is y-down
        rotated = piece.with_rotation(to_rot, dx, -dy)
        if board.is_valid(rotated.kind, rotated.x, rotated.y, rotated.rot):
            return rotated
    return None


def calculate_score(lines_cleared: int, level: int = 1) -> int:
    """Calculate score from lines cleared.

    Args:
        lines_cleared: Number of lines cleared simultaneously
        level: Current level multiplier

    Returns:
        Score points
    """
    return SCORE_TABLE.get(lines_cleared, 0) * level


def level_for_lines(lines_total: int) -> int:
    """Level reached after clearing lines_total lines in total."""
    return lines_total // LINES_PER_LEVEL + 1
