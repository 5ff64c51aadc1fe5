"""Engine event notifications built on blinker signals.

Each engine owns its own signals so listeners of one game never hear
another. Handlers are called synchronously inside tick()/command() with
the engine as sender.
"""

from typing import Callable, Dict

from blinker import Signal

EVENT_LINES_CLEARED = "lines_cleared"  # payload: count=int, rows=list[int]
EVENT_PIECE_LOCKED = "piece_locked"    # payload: kind=PieceKind, cells=list[(x, y)]
EVENT_GAME_OVER = "game_over"          # payload: final_score=int

EVENT_NAMES = (EVENT_LINES_CLEARED, EVENT_PIECE_LOCKED, EVENT_GAME_OVER)


class EngineEvents:
    """Per-engine signal registry."""

    def __init__(self):
        self._signals: Dict[str, Signal] = {name: Signal(name) for name in EVENT_NAMES}

    def subscribe(self, name: str, fn: Callable) -> None:
        """Connect a handler called as fn(sender, **payload).

        Raises:
            ValueError: If name is not an engine event
        """
        if name not in self._signals:
            raise ValueError(f"Unknown event: {name}")
        # Strong reference so lambdas and bound methods stay connected
        self._signals[name].connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable) -> None:
        if name in self._signals:
            self._signals[name].disconnect(fn)

    def emit(self, sender, name: str, **payload) -> None:
        self._signals[name].send(sender, **payload)

