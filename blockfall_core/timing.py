"""Gravity timing: level to fall interval, soft-drop acceleration."""

from dataclasses import dataclass

from blockfall_core.errors import ConfigurationError


@dataclass(frozen=True)
class TimingPolicy:
    """Maps level to fall interval in milliseconds."""

    base_interval: int = 1000
    level_step: int = 80
    min_interval: int = 100
    soft_drop_interval: int = 50

    def validate(self) -> None:
        """Check the values are usable.

        Raises:
            ConfigurationError: On non-positive intervals or a negative step
        """
        if self.base_interval <= 0 or self.min_interval <= 0 or self.soft_drop_interval <= 0:
            raise ConfigurationError(f"Timing intervals must be positive: {self}")
        if self.level_step < 0:
            raise ConfigurationError(f"Level step must not be negative: {self.level_step}")
        if self.min_interval > self.base_interval:
            raise ConfigurationError(
                f"Minimum interval {self.min_interval} exceeds base interval {self.base_interval}"
            )

    def fall_interval(self, level: int) -> int:
        """Milliseconds between gravity steps at a level.

        Args:
            level: Current level (1 and up)

        Returns:
            Interval, never below min_interval
        """
        return max(self.min_interval, self.base_interval - (level - 1) * self.level_step)

    def effective_interval(self, level: int, soft_drop: bool = False) -> int:
        """Interval in force, clamped while soft drop is held."""
        interval = self.fall_interval(level)
        if soft_drop:
            return min(self.soft_drop_interval, interval)
        return interval
