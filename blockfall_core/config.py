"""Engine configuration."""

from dataclasses import dataclass, field

from blockfall_core.board import Board
from blockfall_core.errors import ConfigurationError
from blockfall_core.rng import PieceBag
from blockfall_core.shapes import BOX_WIDTH
from blockfall_core.timing import TimingPolicy


@dataclass(frozen=True)
class EngineConfig:
    """Board size, preview window and timing for one engine."""

    rows: int = Board.HEIGHT
    cols: int = Board.WIDTH
    preview_size: int = PieceBag.DEFAULT_PREVIEW
    timing: TimingPolicy = field(default_factory=TimingPolicy)

    def validate(self) -> None:
        """Fail fast on values no game can be played with.

        Raises:
            ConfigurationError: If any value is out of range
        """
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"Board size must be positive, got {self.rows}x{self.cols}")
        widest = max(BOX_WIDTH.values())
        if self.cols < widest:
            raise ConfigurationError(f"Board needs at least {widest} columns, got {self.cols}")
        if self.preview_size <= 0:
            raise ConfigurationError(f"Preview size must be positive, got {self.preview_size}")
        self.timing.validate()

    def to_dict(self) -> dict:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "preview_size": self.preview_size,
            "timing": {
                "base_interval": self.timing.base_interval,
                "level_step": self.timing.level_step,
                "min_interval": self.timing.min_interval,
                "soft_drop_interval": self.timing.soft_drop_interval,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EngineConfig":
        timing = TimingPolicy(**data.get("timing", {}))
        return cls(
            rows=data.get("rows", Board.HEIGHT),
            cols=data.get("cols", Board.WIDTH),
            preview_size=data.get("preview_size", PieceBag.DEFAULT_PREVIEW),
            timing=timing,
        )
