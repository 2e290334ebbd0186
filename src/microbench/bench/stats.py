"""Statistical functions over benchmark samples.

Provides central tendency, dispersion, coefficient of variation,
reliability classification and IQR outlier detection.  Everything is
pure Python on top of the standard ``statistics`` module.

The median is the primary comparison metric.  Timing samples are
right-skewed by infrequent long pauses (preemption, garbage
collection, page faults); a minority of arbitrarily large outliers
moves the mean but not the median.

Degenerate inputs (empty sequence, zero mean) fall back to zero
wherever a zero cannot be confused with a real measurement.  Only
``minimum`` and ``maximum`` refuse empty input.
"""

from __future__ import annotations

import enum
import math
import statistics
from dataclasses import dataclass
from typing import Sequence

from microbench.bench.percentage import Percentage


class EmptyInputError(ValueError):
    """Raised when a statistic needs at least one sample."""


# ---------------------------------------------------------------------------
# Reliability tiers
# ---------------------------------------------------------------------------


class Reliability(enum.Enum):
    """Measurement reliability derived from the coefficient of variation.

    Ordered from most to least trustworthy.
    """

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"

    @property
    def severity(self) -> int:
        """Numeric severity for ordering (higher = worse)."""
        order = {
            Reliability.EXCELLENT: 0,
            Reliability.GOOD: 1,
            Reliability.MODERATE: 2,
            Reliability.POOR: 3,
        }
        return order[self]


# Lower bounds (in percent) of the GOOD, MODERATE and POOR bands.
GOOD_CV_PERCENT = 10.0
MODERATE_CV_PERCENT = 20.0
POOR_CV_PERCENT = 50.0

# The same bounds as ratios.  Classification compares ratios so that
# ``ratio * 100`` rounding cannot move a value across a band edge.
GOOD_CV = Percentage.from_percent(GOOD_CV_PERCENT)
MODERATE_CV = Percentage.from_percent(MODERATE_CV_PERCENT)
POOR_CV = Percentage.from_percent(POOR_CV_PERCENT)


def reliability_from_cv(cv: Percentage) -> Reliability:
    """Classify a coefficient of variation.

    Bands are half-open, inclusive at the lower end::

        [0, 10)   excellent
        [10, 20)  good
        [20, 50)  moderate
        [50, inf) poor
    """
    if cv < GOOD_CV:
        return Reliability.EXCELLENT
    if cv < MODERATE_CV:
        return Reliability.GOOD
    if cv < POOR_CV:
        return Reliability.MODERATE
    return Reliability.POOR


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean.  Returns 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return float(statistics.mean(values))


def median(values: Sequence[float]) -> float:
    """Median of a sorted copy of *values*.

    The input is never reordered.  Even-length input averages the two
    central elements.  Returns 0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    return float(statistics.median(values))


def stdev(values: Sequence[float]) -> float:
    """Sample standard deviation (Bessel's correction, divides by n-1).

    Returns 0.0 when fewer than two values are given.
    """
    if len(values) < 2:
        return 0.0
    return float(statistics.stdev(values))


def cv(values: Sequence[float]) -> Percentage:
    """Coefficient of variation, ``stdev / mean``.

    Returns ``Percentage.ZERO`` for empty input or a zero mean.
    """
    m = mean(values)
    if m == 0:
        return Percentage.ZERO
    return Percentage.from_ratio(stdev(values), m)


def minimum(values: Sequence[float]) -> float:
    """Smallest value.

    Raises:
        EmptyInputError: If *values* is empty.
    """
    if not values:
        raise EmptyInputError("Cannot compute the minimum of zero samples.")
    return min(values)


def maximum(values: Sequence[float]) -> float:
    """Largest value.

    Raises:
        EmptyInputError: If *values* is empty.
    """
    if not values:
        raise EmptyInputError("Cannot compute the maximum of zero samples.")
    return max(values)


@dataclass(frozen=True)
class DescriptiveStats:
    """Summary statistics for a sample sequence."""

    n: int
    mean: float
    median: float
    stdev: float
    min: float
    max: float
    cv: Percentage

    def to_dict(self) -> dict[str, float | int]:
        """Serialize to a dict with rounded values."""
        return {
            "n": self.n,
            "mean": round(self.mean, 6),
            "median": round(self.median, 6),
            "stdev": round(self.stdev, 6),
            "min": round(self.min, 6),
            "max": round(self.max, 6),
            "cv_pct": round(self.cv.as_percent, 6),
        }


def describe(values: Sequence[float]) -> DescriptiveStats:
    """Compute all descriptive statistics in one pass.

    For an empty sequence, min and max are NaN and every other field
    takes its zero fallback.
    """
    if not values:
        return DescriptiveStats(
            n=0,
            mean=0.0,
            median=0.0,
            stdev=0.0,
            min=float("nan"),
            max=float("nan"),
            cv=Percentage.ZERO,
        )
    return DescriptiveStats(
        n=len(values),
        mean=mean(values),
        median=median(values),
        stdev=stdev(values),
        min=minimum(values),
        max=maximum(values),
        cv=cv(values),
    )


# ---------------------------------------------------------------------------
# Outlier detection
# ---------------------------------------------------------------------------


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation.

    Equivalent to numpy.percentile with interpolation='linear'.
    Assumes sorted_values is already sorted in ascending order.
    """
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    if n == 1:
        return sorted_values[0]

    k = (n - 1) * p
    f = math.floor(k)
    c = math.ceil(k)
    if f == c:
        return sorted_values[int(k)]
    d = k - f
    return sorted_values[int(f)] * (1 - d) + sorted_values[int(c)] * d


def detect_outliers(
    values: Sequence[float],
    *,
    factor: float = 1.5,
) -> list[bool]:
    """Flag outliers using the IQR method.

    A value is an outlier if it falls below Q1 - factor*IQR or above
    Q3 + factor*IQR.  Fewer than four values are never flagged.

    Args:
        values: The samples, in any order.
        factor: IQR multiplier (1.5 for standard outliers, 3.0 for
            extreme ones).

    Returns:
        One boolean per input position, True for outliers.
    """
    if len(values) < 4:
        return [False] * len(values)

    sorted_v = sorted(values)
    q1 = percentile(sorted_v, 0.25)
    q3 = percentile(sorted_v, 0.75)
    iqr = q3 - q1

    lower = q1 - factor * iqr
    upper = q3 + factor * iqr

    return [v < lower or v > upper for v in values]
