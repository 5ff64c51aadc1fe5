"""7-bag piece generator.

All 7 kinds are shuffled into a batch; batches are concatenated into a
queue that is topped up whenever it runs short of the preview window.
"""

import random
from collections import deque
from typing import Deque, List, Optional

from blockfall_core.errors import ConfigurationError
from blockfall_core.shapes import PieceKind


class PieceBag:
    """Deterministic 7-bag queue with a preview window."""

    PIECES: List[PieceKind] = list(PieceKind)
    DEFAULT_PREVIEW = 3

    def __init__(
        self,
        seed: Optional[int] = None,
        preview_size: int = DEFAULT_PREVIEW,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the bag.

        Args:
            seed: Random seed for reproducibility (ignored when rng is given)
            preview_size: Number of kinds the preview window shows
            rng: Injected random source used for every shuffle

        Raises:
            ConfigurationError: If preview_size is not positive
        """
        if preview_size <= 0:
            raise ConfigurationError(f"Preview size must be positive, got {preview_size}")
        self.seed = seed
        self.preview_size = preview_size
        self.rng = rng if rng is not None else random.Random(seed)
        self.queue: Deque[PieceKind] = deque()
        self._fill_initial()

    def _fill_initial(self) -> None:
        self._append_batch()
        self._append_batch()

    def _append_batch(self) -> None:
        """Shuffle all 7 kinds onto the end of the queue."""
        batch = self.PIECES.copy()
        self.rng.shuffle(batch)
        self.queue.extend(batch)

    def _refill(self) -> None:
        while len(self.queue) < self.preview_size + 1:
            self._append_batch()

    def dequeue(self) -> PieceKind:
        """Pop the next kind, topping the queue up afterwards.

        Returns:
            The next piece kind
        """
        if not self.queue:
            self._append_batch()
        kind = self.queue.popleft()
        self._refill()
        return kind

    def peek(self, count: int) -> List[PieceKind]:
        """Peek at the next N kinds without consuming them.

        Whole batches are appended when count exceeds the queue, which
        leaves the upcoming sequence unchanged.

        Args:
            count: Number of kinds to peek ahead

        Returns:
            List of kinds in dequeue order
        """
        while len(self.queue) < count:
            self._append_batch()
        return [self.queue[i] for i in range(count)]

    def preview(self) -> List[PieceKind]:
        """The kinds shown in the preview window."""
        return self.peek(self.preview_size)

    def reset(self, seed: int) -> None:
        """Reset the bag with a new seed.

        Args:
            seed: New random seed
        """
        self.seed = seed
        self.rng = random.Random(seed)
        self.queue = deque()
        self._fill_initial()

    def __len__(self) -> int:
        return len(self.queue)
