"""Single-pass accumulator shared by the store primitive and the streaming engine."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class RunningStatistics:
    """Count, sum, extremes and Welford variance over a stream of values.

    The mean is ``total / count`` with ``total`` summed left to right, so two
    accumulators fed the same values in the same order report bit-identical
    means and deviations.
    """

    count: int = 0
    total: float = 0.0
    m2: float = 0.0
    minimum: float | None = None
    maximum: float | None = None
    _running_mean: float = 0.0

    def push(self, value: float) -> None:
        self.count += 1
        self.total += value

        delta = value - self._running_mean
        self._running_mean += delta / self.count
        self.m2 += delta * (value - self._running_mean)

        if self.minimum is None or value < self.minimum:
            self.minimum = value
        if self.maximum is None or value > self.maximum:
            self.maximum = value

    @property
    def mean(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total / self.count

    @property
    def std_dev(self) -> float:
        # Population deviation: divide by n, and n <= 1 has no spread.
        if self.count < 2:
            return 0.0
        return math.sqrt(max(self.m2, 0.0) / self.count)
