"""Recording and replaying input logs.

The engine is deterministic for a given seed and input sequence, so a
recorded log of (elapsed_ms, commands) frames reproduces a game exactly.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from blockfall_core.commands import Command
from blockfall_core.config import EngineConfig
from blockfall_core.engine import GameEngine, GameSnapshot, Phase, StepResult


@dataclass
class Frame:
    """Commands issued before one tick, then the tick itself."""

    elapsed_ms: Optional[float]  # None for trailing commands with no tick
    commands: List[Command] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"elapsed_ms": self.elapsed_ms, "commands": [c.value for c in self.commands]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Frame":
        return cls(
            elapsed_ms=data.get("elapsed_ms"),
            commands=[Command.parse(name) for name in data.get("commands", [])],
        )


@dataclass
class InputLog:
    """Everything needed to reproduce a game."""

    seed: int
    config: EngineConfig = field(default_factory=EngineConfig)
    frames: List[Frame] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "seed": self.seed,
            "config": self.config.to_dict(),
            "frames": [frame.to_dict() for frame in self.frames],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputLog":
        return cls(
            seed=data["seed"],
            config=EngineConfig.from_dict(data.get("config", {})),
            frames=[Frame.from_dict(frame) for frame in data.get("frames", [])],
        )


@dataclass
class ReplayResult:
    """Outcome of replaying one log."""

    seed: int
    score: int
    level: int
    lines: int
    pieces_locked: int
    ticks: int
    phase: Phase
    final_board: Tuple[Tuple[Optional[str], ...], ...]
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "seed": self.seed,
            "score": self.score,
            "level": self.level,
            "lines": self.lines,
            "pieces_locked": self.pieces_locked,
            "ticks": self.ticks,
            "phase": self.phase.value,
            "duration_seconds": self.duration_seconds,
        }

    @classmethod
    def from_snapshot(cls, seed: int, snapshot: GameSnapshot, duration_seconds: float = 0.0) -> "ReplayResult":
        return cls(
            seed=seed,
            score=snapshot.score,
            level=snapshot.level,
            lines=snapshot.lines,
            pieces_locked=snapshot.pieces_locked,
            ticks=snapshot.ticks,
            phase=snapshot.phase,
            final_board=snapshot.board,
            duration_seconds=duration_seconds,
        )

    def same_outcome(self, other: "ReplayResult") -> bool:
        """Compare everything except wall-clock duration."""
        return (
            self.seed == other.seed
            and self.score == other.score
            and self.level == other.level
            and self.lines == other.lines
            and self.pieces_locked == other.pieces_locked
            and self.ticks == other.ticks
            and self.phase == other.phase
            and self.final_board == other.final_board
        )


class Recorder:
    """Drives an engine and records every call into an InputLog.

    Commands are buffered into the frame closed by the next tick().
    """

    def __init__(self, seed: int, config: Optional[EngineConfig] = None):
        self.engine = GameEngine(config=config, seed=seed)
        self.log = InputLog(seed=seed, config=self.engine.config)
        self._pending: List[Command] = []

    def command(self, cmd: Command) -> StepResult:
        if not isinstance(cmd, Command):
            cmd = Command.parse(cmd)
        self._pending.append(cmd)
        return self.engine.command(cmd)

    def tick(self, elapsed_ms: float) -> StepResult:
        self.log.frames.append(Frame(elapsed_ms, self._pending))
        self._pending = []
        return self.engine.tick(elapsed_ms)

    def finish(self) -> InputLog:
        """Flush buffered commands into a tickless frame and return the log."""
        if self._pending:
            self.log.frames.append(Frame(None, self._pending))
            self._pending = []
        return self.log


class Replayer:
    """Replays input logs on fresh engines."""

    def __init__(self, verbose: bool = False):
        """Initialize replayer.

        Args:
            verbose: Print a summary line per replay
        """
        self.verbose = verbose

    def run(self, log: InputLog) -> ReplayResult:
        """Replay a log from the start.

        Args:
            log: Recorded input log

        Returns:
            Final state of the replayed game
        """
        engine = GameEngine(config=log.config, seed=log.seed)
        start_time = time.time()

        for frame in log.frames:
            for cmd in frame.commands:
                engine.command(cmd)
            if frame.elapsed_ms is not None:
                engine.tick(frame.elapsed_ms)

        duration = time.time() - start_time
        result = ReplayResult.from_snapshot(log.seed, engine.snapshot(), duration)

        if self.verbose:
            print(
                f"Replay {log.seed}: {result.pieces_locked} pieces, "
                f"{result.lines} lines, score {result.score} "
                f"({duration:.2f}s)"
            )

        return result

    def verify(self, log: InputLog, expected: ReplayResult) -> bool:
        """Check that replaying a log reproduces an expected outcome."""
        return self.run(log).same_outcome(expected)
