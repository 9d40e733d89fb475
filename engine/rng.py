import numpy as np
from typing import Optional

class DRNG:
    """Deterministic Random Number Generator wrapper."""

    def __init__(self, seed: Optional[int] = None):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def roll(self, low: int, high: int) -> int:
        """Return a random integer in [low, high], both ends included."""
        return int(self.g.integers(low, high, endpoint=True))
