"""
Bounded exponential backoff for consecutive poll failures.
"""


class ExponentialBackoff:
    """Delay that grows on each consecutive failure and resets on success"""

    def __init__(self, initial: float = 0.5, maximum: float = 30.0, multiplier: float = 2.0):
        self.initial = initial
        self.maximum = maximum
        self.multiplier = multiplier
        self.failures = 0
        self._current = min(initial, maximum)

    def next_delay(self) -> float:
        """Record a failure and return how long to wait before retrying"""
        delay = self._current
        self._current = min(self.maximum, self._current * self.multiplier)
        self.failures += 1
        return delay

    def reset(self) -> None:
        self.failures = 0
        self._current = min(self.initial, self.maximum)
