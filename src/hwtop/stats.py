"""Running min/max frequency statistics."""

import threading


def lower(current: float, observed: float) -> float:
    """Keep the smaller value; 0 means no observation yet."""
    if current == 0:
        return observed
    if observed == 0:
        return current
    return min(current, observed)


def higher(current: float, observed: float) -> float:
    """Keep the larger value; 0 means no observation yet."""
    if current == 0:
        return observed
    if observed == 0:
        return current
    return max(current, observed)


class FrequencyStats:
    """
    Min/max frequency per physical core over the lifetime of the process.

    Shared between the sampling loop, which updates it on every scan, and the
    UI, which resets it on request. Every access goes through one lock.
    Entries are created on first observation and never removed; a reset sets
    both bounds back to 0.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._min: dict[int, float] = {}
        self._max: dict[int, float] = {}

    def update(self, core_id: int, mhz: float) -> tuple[float, float]:
        """Fold an observation into the bounds and return the new (min, max)."""
        with self._lock:
            low = self._min[core_id] = lower(self._min.get(core_id, 0.0), mhz)
            high = self._max[core_id] = higher(self._max.get(core_id, 0.0), mhz)
        return low, high

    def get(self, core_id: int) -> tuple[float, float]:
        """Get the (min, max) of a core, (0, 0) if it was never observed."""
        with self._lock:
            return self._min.get(core_id, 0.0), self._max.get(core_id, 0.0)

    def snapshot(self) -> dict[int, tuple[float, float]]:
        """Copy of all bounds, keyed by core id."""
        with self._lock:
            return {core_id: (self._min[core_id], self._max[core_id]) for core_id in self._min}

    def reset(self) -> None:
        """Forget all observations while keeping the known cores."""
        with self._lock:
            for core_id in self._min:
                self._min[core_id] = 0.0
            for core_id in self._max:
                self._max[core_id] = 0.0
