"""Descriptive statistics over function lengths and complexities."""

import statistics as stdlib_stats

import numpy as np


class Statistics:
    """Statistical helpers used by the function summary."""

    @staticmethod
    def mean(values: list[float]) -> float:
        """Compute arithmetic mean."""
        if not values:
            return 0.0
        return stdlib_stats.mean(values)

    @staticmethod
    def median(values: list[float]) -> float:
        if not values:
            return 0.0
        return float(stdlib_stats.median(values))

    @staticmethod
    def stdev(values: list[float]) -> float:
        """Compute sample standard deviation."""
        if len(values) < 2:
            return 0.0
        return stdlib_stats.stdev(values)

    @staticmethod
    def percentile(values: list[float], q: float) -> float:
        """
        Linear-interpolated percentile.

        Args:
            values: Sample values
            q: Percentile in [0, 100]

        Returns:
            The q-th percentile, 0.0 for an empty sample
        """
        if not values:
            return 0.0
        return float(np.percentile(np.asarray(values, dtype=float), q))

    @staticmethod
    def mad_z_score(values: list[float]) -> list[float]:
        """Compute MAD-based robust z-scores.

        z_MAD = 0.6745 * (x - median) / MAD

        MAD = median(|x_i - median|)
        The 0.6745 factor makes MAD consistent with std for normal distributions.

        Args:
            values: List of values

        Returns:
            List of robust z-scores
        """
        if not values or len(values) < 2:
            return [0.0] * len(values)

        arr = np.asarray(values, dtype=float)
        med = float(np.median(arr))
        mad = float(np.median(np.abs(arr - med)))

        if mad == 0:
            return [0.0] * len(values)

        return [float(z) for z in 0.6745 * (arr - med) / mad]
