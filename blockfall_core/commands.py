"""Abstract player commands consumed from an input adapter."""

from enum import Enum


class Command(str, Enum):
    """Discrete commands fed to the engine between ticks."""
    MOVE_LEFT = "MOVE_LEFT"
    MOVE_RIGHT = "MOVE_RIGHT"
    ROTATE_CW = "ROTATE_CW"
    ROTATE_CCW = "ROTATE_CCW"
    SOFT_DROP_ON = "SOFT_DROP_ON"    # Step down now and fall faster while held
    SOFT_DROP_OFF = "SOFT_DROP_OFF"
    HARD_DROP = "HARD_DROP"          # Drop to the ghost row and lock
    HOLD = "HOLD"
    PAUSE = "PAUSE"
    RESUME = "RESUME"
    START = "START"                  # Start, or restart from any phase

    @classmethod
    def parse(cls, name: str) -> "Command":
        """Parse a command name, case-insensitively.

        Raises:
            ValueError: If the name is not a command
        """
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid command: {name}") from None


# Commands that act on the falling piece
PIECE_COMMANDS = frozenset({
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.ROTATE_CCW,
    Command.SOFT_DROP_ON,
    Command.SOFT_DROP_OFF,
    Command.HARD_DROP,
    Command.HOLD,
})
