"""Falling-block game engine driven by ticks and commands.

A driver calls tick(elapsed_ms) and command(cmd); every call does a bounded
amount of work, fires events synchronously and returns an immutable
snapshot of the game.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from blockfall_core.board import Board
from blockfall_core.commands import Command, PIECE_COMMANDS
from blockfall_core.config import EngineConfig
from blockfall_core.events import (
    EVENT_GAME_OVER,
    EVENT_LINES_CLEARED,
    EVENT_PIECE_LOCKED,
    EngineEvents,
)
from blockfall_core.piece import ActivePiece, spawn_piece
from blockfall_core.rng import PieceBag
from blockfall_core.rules import (
    HARD_DROP_POINTS,
    SOFT_DROP_POINTS,
    calculate_score,
    level_for_lines,
    try_rotate,
)
from blockfall_core.shapes import COLORS, PieceKind

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Session phases."""
    IDLE = "IDLE"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"
    GAME_OVER = "GAME_OVER"


@dataclass(frozen=True)
class PieceView:
    """Read-only view of the falling piece."""
    kind: PieceKind
    x: int
    y: int
    rot: int
    cells: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class GameSnapshot:
    """Complete read-only game state for renderers and scorers."""
    phase: Phase
    rows: int
    cols: int
    board: Tuple[Tuple[Optional[str], ...], ...]
    current: Optional[PieceView]
    ghost_y: Optional[int]
    hold_kind: Optional[PieceKind]
    hold_used: bool
    next_queue: Tuple[PieceKind, ...]
    score: int
    level: int
    lines: int
    pieces_locked: int
    soft_drop: bool
    ticks: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        current = None
        if self.current is not None:
            current = {
                "kind": self.current.kind.value,
                "x": self.current.x,
                "y": self.current.y,
                "rot": self.current.rot,
                "cells": [list(cell) for cell in self.current.cells],
                "color": COLORS[self.current.kind],
            }
        return {
            "phase": self.phase.value,
            "board": {
                "rows": self.rows,
                "cols": self.cols,
                "cells": [list(row) for row in self.board],
            },
            "current": current,
            "ghost_y": self.ghost_y,
            "hold": {
                "kind": self.hold_kind.value if self.hold_kind else None,
                "used": self.hold_used,
            },
            "next_queue": [kind.value for kind in self.next_queue],
            "session": {
                "score": self.score,
                "level": self.level,
                "lines": self.lines,
                "pieces_locked": self.pieces_locked,
                "ticks": self.ticks,
            },
            "soft_drop": self.soft_drop,
        }


@dataclass
class StepResult:
    """Result of a tick() or command() call."""
    snapshot: GameSnapshot
    accepted: bool
    events: List[str] = field(default_factory=list)
    lines_cleared: int = 0


class GameEngine:
    """Single-threaded falling-block state machine."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the engine in the IDLE phase.

        Args:
            config: Board size, preview size and timing (defaults if None)
            seed: Seed for the piece shuffle (ignored when rng is given)
            rng: Injected random source for the piece shuffle

        Raises:
            ConfigurationError: If the config is invalid
        """
        self.config = config or EngineConfig()
        self.config.validate()
        self.timing = self.config.timing
        self.seed = seed
        self.random = rng if rng is not None else random.Random(seed)
        self.events = EngineEvents()

        self.board = Board(self.config.rows, self.config.cols)
        self.bag: Optional[PieceBag] = None
        self.phase = Phase.IDLE

        self.current_piece: Optional[ActivePiece] = None
        self.hold_kind: Optional[PieceKind] = None
        self.hold_used = False
        self.soft_drop = False

        self.score = 0
        self.level = 1
        self.lines = 0
        self.pieces_locked = 0
        self.ticks = 0
        self.fall_elapsed = 0.0

        # Event names fired during the current call
        self._fired: List[str] = []
        self._lines_this_call = 0

    # ------------------------------------------------------------------
    # Driver interface
    # ------------------------------------------------------------------

    def start(self, seed: Optional[int] = None) -> StepResult:
        """Start (or restart) a game.

        Args:
            seed: Reseed the piece shuffle before starting

        Returns:
            Step result for the START command
        """
        if seed is not None and self.phase != Phase.PLAYING:
            self.seed = seed
            self.random = random.Random(seed)
        return self.command(Command.START)

    def tick(self, elapsed_ms: float) -> StepResult:
        """Advance gravity by elapsed_ms of driver time.

        At most one row of gravity is applied per call. Ticks outside the
        PLAYING phase, and negative or non-finite elapsed times, are ignored.

        Args:
            elapsed_ms: Milliseconds since the previous tick

        Returns:
            Step result with the new snapshot
        """
        self._begin_call()
        if (
            self.phase != Phase.PLAYING
            or self.current_piece is None
            or not math.isfinite(elapsed_ms)
            or elapsed_ms < 0
        ):
            return self._result(False)

        self.ticks += 1
        self.fall_elapsed += elapsed_ms
        interval = self.timing.effective_interval(self.level, self.soft_drop)
        if self.fall_elapsed > interval:
            self.fall_elapsed = 0.0
            if not self.move(0, 1):
                self._lock_piece()
        return self._result(True)

    def command(self, cmd: Command) -> StepResult:
        """Apply one player command.

        Commands that do not apply in the current phase are no-ops.

        Args:
            cmd: Command (or its name)

        Returns:
            Step result; accepted is False for a no-op
        """
        self._begin_call()
        if not isinstance(cmd, Command):
            cmd = Command.parse(cmd)

        if cmd == Command.START:
            accepted = self._start_game() if self.phase != Phase.PLAYING else False
        elif cmd == Command.PAUSE:
            accepted = self._pause()
        elif cmd == Command.RESUME:
            accepted = self._resume()
        elif cmd in PIECE_COMMANDS:
            if self.phase != Phase.PLAYING or self.current_piece is None:
                accepted = False
            else:
                accepted = self._apply_piece_command(cmd)
        else:
            accepted = False

        if not accepted:
            logger.debug("Ignored %s in phase %s", cmd.value, self.phase.value)
        return self._result(accepted)

    def snapshot(self) -> GameSnapshot:
        """Build an immutable snapshot of the current state."""
        piece = self.current_piece
        current = None
        ghost_y = None
        if piece is not None:
            current = PieceView(piece.kind, piece.x, piece.y, piece.rot, tuple(piece.get_cells()))
            ghost_y = self.board.ghost_row(piece.kind, piece.x, piece.y, piece.rot)

        return GameSnapshot(
            phase=self.phase,
            rows=self.board.rows,
            cols=self.board.cols,
            board=self.board.to_rows(),
            current=current,
            ghost_y=ghost_y,
            hold_kind=self.hold_kind,
            hold_used=self.hold_used,
            next_queue=tuple(self.bag.preview()) if self.bag else (),
            score=self.score,
            level=self.level,
            lines=self.lines,
            pieces_locked=self.pieces_locked,
            soft_drop=self.soft_drop,
            ticks=self.ticks,
        )

    # ------------------------------------------------------------------
    # Piece controller
    # ------------------------------------------------------------------

    def move(self, dx: int, dy: int) -> bool:
        """Try to move the current piece.

        Args:
            dx: Change in x
            dy: Change in y (positive is down)

        Returns:
            True if move succeeded
        """
        piece = self.current_piece
        if piece is None or self.phase != Phase.PLAYING:
            return False
        if not self.board.is_valid(piece.kind, piece.x + dx, piece.y + dy, piece.rot):
            return False
        self.current_piece = piece.move(dx, dy)
        return True

    def rotate(self, direction: int) -> bool:
        """Try to rotate the current piece with wall kicks.

        Args:
            direction: +1 for clockwise, -1 for counter-clockwise

        Returns:
            True if rotation succeeded
        """
        if self.current_piece is None or self.phase != Phase.PLAYING:
            return False
        rotated = try_rotate(self.board, self.current_piece, direction)
        if rotated is None:
            return False
        self.current_piece = rotated
        return True

    def hard_drop(self) -> bool:
        """Drop the current piece to its ghost row and lock it."""
        piece = self.current_piece
        if piece is None or self.phase != Phase.PLAYING:
            return False
        ghost_y = self.board.ghost_row(piece.kind, piece.x, piece.y, piece.rot)
        self.score += (ghost_y - piece.y) * HARD_DROP_POINTS
        self.current_piece = piece.move(0, ghost_y - piece.y)
        self._lock_piece()
        return True

    def hold(self) -> bool:
        """Swap the current piece with the hold slot, once per piece."""
        if self.hold_used or self.current_piece is None or self.phase != Phase.PLAYING:
            return False

        previous = self.hold_kind
        self.hold_kind = self.current_piece.kind
        self.hold_used = True
        next_kind = previous if previous is not None else self.bag.dequeue()
        self._spawn(next_kind)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_piece_command(self, cmd: Command) -> bool:
        if cmd == Command.MOVE_LEFT:
            return self.move(-1, 0)
        elif cmd == Command.MOVE_RIGHT:
            return self.move(1, 0)
        elif cmd == Command.ROTATE_CW:
            return self.rotate(1)
        elif cmd == Command.ROTATE_CCW:
            return self.rotate(-1)
        elif cmd == Command.SOFT_DROP_ON:
            self.soft_drop = True
            if self.move(0, 1):
                self.score += SOFT_DROP_POINTS
            return True
        elif cmd == Command.SOFT_DROP_OFF:
            was_on = self.soft_drop
            self.soft_drop = False
            return was_on
        elif cmd == Command.HARD_DROP:
            return self.hard_drop()
        elif cmd == Command.HOLD:
            return self.hold()
        return False

    def _start_game(self) -> bool:
        self.board = Board(self.config.rows, self.config.cols)
        self.bag = PieceBag(preview_size=self.config.preview_size, rng=self.random)
        self.current_piece = None
        self.hold_kind = None
        self.hold_used = False
        self.soft_drop = False
        self.score = 0
        self.level = 1
        self.lines = 0
        self.pieces_locked = 0
        self.ticks = 0
        self.fall_elapsed = 0.0
        self.phase = Phase.PLAYING
        logger.info("Game started (seed=%s)", self.seed)
        self._spawn(self.bag.dequeue())
        return True

    def _pause(self) -> bool:
        if self.phase != Phase.PLAYING:
            return False
        self.phase = Phase.PAUSED
        self.soft_drop = False
        logger.debug("Paused at tick %d", self.ticks)
        return True

    def _resume(self) -> bool:
        if self.phase != Phase.PAUSED:
            return False
        self.phase = Phase.PLAYING
        self.fall_elapsed = 0.0
        logger.debug("Resumed at tick %d", self.ticks)
        return True

    def _spawn(self, kind: PieceKind) -> bool:
        """Put a new piece at its spawn anchor, or end the game if blocked."""
        piece = spawn_piece(kind, self.board.cols)
        self.fall_elapsed = 0.0
        if not self.board.is_valid(piece.kind, piece.x, piece.y, piece.rot):
            self.current_piece = None
            self._game_over()
            return False
        self.current_piece = piece
        return True

    def _lock_piece(self) -> None:
        piece = self.current_piece
        cells = self.board.place(piece.kind, piece.x, piece.y, piece.rot)
        _, cleared_rows = self.board.clear_full_rows()
        count = len(cleared_rows)

        self.pieces_locked += 1
        self.hold_used = False
        self.current_piece = None
        self._emit(EVENT_PIECE_LOCKED, kind=piece.kind, cells=cells)

        if count > 0:
            self.score += calculate_score(count, self.level)
            self.lines += count
            self.level = max(self.level, level_for_lines(self.lines))
            self._lines_this_call += count
            logger.debug("Cleared %d rows %s, level %d", count, cleared_rows, self.level)
            self._emit(EVENT_LINES_CLEARED, count=count, rows=cleared_rows)

        self._spawn(self.bag.dequeue())

    def _game_over(self) -> None:
        self.phase = Phase.GAME_OVER
        self.soft_drop = False
        logger.info(
            "Game over: score=%d lines=%d level=%d pieces=%d",
            self.score, self.lines, self.level, self.pieces_locked,
        )
        self._emit(EVENT_GAME_OVER, final_score=self.score)

    def _emit(self, name: str, **payload) -> None:
        self._fired.append(name)
        self.events.emit(self, name, **payload)

    def _begin_call(self) -> None:
        self._fired = []
        self._lines_this_call = 0

    def _result(self, accepted: bool) -> StepResult:
        return StepResult(
            snapshot=self.snapshot(),
            accepted=accepted,
            events=list(self._fired),
            lines_cleared=self._lines_this_call,
        )
