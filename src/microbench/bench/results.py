"""Benchmark results and pairwise comparisons.

Hierarchy::

    BenchmarkResult (one variant)
      → name
      → samples: tuple[float, ...]   µs per operation, collection order
      → mean / median / stdev / cv / min / max / reliability (derived)

    BenchmarkComparison (baseline vs test)
      → speedup, improvement, is_reliable, reliability

Derived statistics are recomputed from the immutable sample tuple on
every access, so repeated reads are bit-identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from microbench.bench import stats
from microbench.bench.percentage import Percentage
from microbench.bench.stats import DescriptiveStats, Reliability

# A comparison is trustworthy only when both sides are strictly below
# this coefficient of variation.
RELIABLE_CV = stats.MODERATE_CV


# ---------------------------------------------------------------------------
# Variant-level result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkResult:
    """Samples collected for one variant, in microseconds per operation."""

    name: str
    samples: tuple[float, ...]

    def __post_init__(self) -> None:
        # Own a private copy so callers cannot mutate our samples.
        object.__setattr__(self, "samples", tuple(float(s) for s in self.samples))

    @property
    def n_samples(self) -> int:
        return len(self.samples)

    @property
    def mean(self) -> float:
        return stats.mean(self.samples)

    @property
    def median(self) -> float:
        return stats.median(self.samples)

    @property
    def stdev(self) -> float:
        return stats.stdev(self.samples)

    @property
    def cv(self) -> Percentage:
        return stats.cv(self.samples)

    @property
    def min(self) -> float:
        return stats.minimum(self.samples)

    @property
    def max(self) -> float:
        return stats.maximum(self.samples)

    @property
    def reliability(self) -> Reliability:
        return stats.reliability_from_cv(self.cv)

    @property
    def n_outliers(self) -> int:
        """Number of samples flagged by the IQR method."""
        return sum(stats.detect_outliers(self.samples))

    def describe(self) -> DescriptiveStats:
        return stats.describe(self.samples)

    def speedup_vs(self, baseline: BenchmarkResult) -> float:
        """How many times faster this result is than *baseline*.

        Computed as ``baseline.median / self.median``; values above 1
        mean this variant is faster.

        Raises:
            ZeroDivisionError: If this result's median is zero.
        """
        own = self.median
        if own == 0:
            raise ZeroDivisionError(f"Cannot compute speedup: median of '{self.name}' is zero.")
        return baseline.median / own

    def improvement_vs(self, baseline: BenchmarkResult) -> Percentage:
        """Relative time saved versus *baseline*.

        Positive means faster; a 20% improvement is ``Percentage(0.2)``.

        Raises:
            ZeroDivisionError: If the baseline median is zero.
        """
        base = baseline.median
        if base == 0:
            raise ZeroDivisionError(
                f"Cannot compute improvement: median of baseline '{baseline.name}' is zero."
            )
        return Percentage((base - self.median) / base)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "samples": list(self.samples),
            "stats": self.describe().to_dict(),
            "reliability": self.reliability.value,
        }

    def __str__(self) -> str:
        return f"BenchmarkResult({self.name}: median={self.median:.2f}us, cv={self.cv})"


def find_result(
    results: Sequence[BenchmarkResult],
    name: str,
) -> BenchmarkResult:
    """Return the first result named *name*.

    Raises:
        KeyError: If no result has that name.
    """
    for r in results:
        if r.name == name:
            return r
    available = ", ".join(r.name for r in results)
    raise KeyError(f"No result named '{name}'. Available: {available}")


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkComparison:
    """Comparison of a test result against a baseline."""

    baseline: BenchmarkResult
    test: BenchmarkResult

    @property
    def speedup(self) -> float:
        """``baseline.median / test.median``; above 1 means test is faster."""
        return self.test.speedup_vs(self.baseline)

    @property
    def improvement(self) -> Percentage:
        return self.test.improvement_vs(self.baseline)

    @property
    def is_reliable(self) -> bool:
        """True if both sides have a CV strictly below 20%."""
        return self.baseline.cv < RELIABLE_CV and self.test.cv < RELIABLE_CV

    @property
    def reliability(self) -> Reliability:
        """The worse of the two sides' reliability tiers."""
        base_rel = self.baseline.reliability
        test_rel = self.test.reliability
        if base_rel.severity > test_rel.severity:
            return base_rel
        return test_rel

    def __str__(self) -> str:
        speedup = self.speedup
        direction = "faster" if speedup >= 1 else "slower"
        ratio = speedup if speedup >= 1 else 1 / speedup
        return f"{self.test.name} is {ratio:.2f}x {direction} than {self.baseline.name}"
